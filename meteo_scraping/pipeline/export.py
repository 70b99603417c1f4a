"""Output workbook export."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from openpyxl import Workbook

from meteo_scraping.common.constants import OUTPUT_HEADERS
from meteo_scraping.common.fs import ensure_dir
from meteo_scraping.common.models import AggregateResult
from meteo_scraping.common.numbers import format_decimal


def _serialize_row(result: AggregateResult, decimal_separator: str) -> list[str]:
    return [
        result.location_id,
        result.end_text,
        format_decimal(result.temperature_min, decimal_separator),
        format_decimal(result.temperature_max, decimal_separator),
    ]


def write_results_workbook(
    path: Path,
    results: Iterable[AggregateResult],
    *,
    sheet_name: str = "Temperatures",
    decimal_separator: str = ",",
) -> Path:
    """Write results in the order given; callers sort them beforehand."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name
    sheet.append(OUTPUT_HEADERS)
    for result in results:
        sheet.append(_serialize_row(result, decimal_separator))
    ensure_dir(path.parent)
    workbook.save(path)
    return path
