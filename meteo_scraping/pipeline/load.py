"""Input workbook reading.

Every cell comes back as a string: date cells are rendered with the
configured input timestamp format so that parsing happens in one place.
"""

from __future__ import annotations

import zipfile
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterable

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from meteo_scraping.common.errors import InputError
from meteo_scraping.common.models import InputRow
from meteo_scraping.common.time_utils import format_timestamp


def cell_to_text(value: object, timestamp_format: str) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return format_timestamp(value, timestamp_format)
    if isinstance(value, date):
        return format_timestamp(datetime.combine(value, time()), timestamp_format)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def read_input_rows(
    path: Path,
    sheet_name: str,
    start_row: int,
    *,
    timestamp_format: str,
    required_columns: Iterable[str] = (),
) -> list[InputRow]:
    """Read rows below the header found at 0-based sheet row ``start_row``."""
    if not path.exists():
        raise InputError(f"Missing input workbook: {path}")
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as exc:
        raise InputError(f"Unreadable input workbook {path}: {exc}") from exc

    try:
        if sheet_name not in workbook.sheetnames:
            raise InputError(f"Sheet {sheet_name!r} not found in {path}")
        sheet = workbook[sheet_name]
        header: list[str] | None = None
        rows: list[InputRow] = []
        first_row = start_row + 1
        for offset, values in enumerate(sheet.iter_rows(min_row=first_row, values_only=True)):
            texts = [cell_to_text(value, timestamp_format) for value in values]
            if header is None:
                header = texts
                missing = [column for column in required_columns if column not in header]
                if missing:
                    raise InputError(f"Columns {missing!r} not in header row {first_row} of sheet {sheet_name!r}")
                continue
            if not any(texts):
                continue
            record = {name: text for name, text in zip(header, texts) if name}
            rows.append(InputRow(row_number=first_row + offset, values=record))
    finally:
        workbook.close()

    if header is None:
        raise InputError(f"No header row at index {start_row} in sheet {sheet_name!r}")
    return rows
