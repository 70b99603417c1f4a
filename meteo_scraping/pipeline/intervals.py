"""Interval building from adjacent input rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from meteo_scraping.common.errors import MalformedTimestampError
from meteo_scraping.common.logging import log_warning
from meteo_scraping.common.models import DateInterval, InputRow
from meteo_scraping.common.time_utils import parse_timestamp


@dataclass(frozen=True)
class SkippedPair:
    begin_text: str
    end_text: str
    row_number: int
    error_code: str
    message: str


@dataclass
class IntervalBuild:
    intervals: list[DateInterval] = field(default_factory=list)
    skipped: list[SkippedPair] = field(default_factory=list)


def _parse_row(
    row: InputRow,
    date_column: str,
    timestamp_format: str,
    logger: logging.Logger,
) -> datetime | MalformedTimestampError:
    try:
        return parse_timestamp(row.get(date_column), timestamp_format)
    except MalformedTimestampError as exc:
        log_warning(
            logger,
            f"skipping intervals around row {row.row_number}: {exc}",
            stage="intervals",
            event="ROW_SKIPPED",
            status="warning",
            error_code=exc.error_code,
        )
        return exc


def build_intervals(
    rows: Iterable[InputRow],
    *,
    date_column: str,
    timestamp_format: str,
    logger: logging.Logger | None = None,
) -> IntervalBuild:
    """Build one interval per pair of adjacent rows, in row order.

    Pairs whose timestamps are equal once parsed are dropped silently. A row
    whose date cannot be parsed removes both pairs it would bound; those
    pairs are reported in ``skipped``.
    """
    logger = logger or logging.getLogger(__name__)
    build = IntervalBuild()
    previous: tuple[InputRow, datetime | MalformedTimestampError] | None = None
    for row in rows:
        parsed = _parse_row(row, date_column, timestamp_format, logger)
        if previous is not None:
            prev_row, prev_parsed = previous
            begin_text = prev_row.get(date_column).strip()
            end_text = row.get(date_column).strip()
            if isinstance(prev_parsed, MalformedTimestampError) or isinstance(parsed, MalformedTimestampError):
                error = prev_parsed if isinstance(prev_parsed, MalformedTimestampError) else parsed
                build.skipped.append(
                    SkippedPair(
                        begin_text=begin_text,
                        end_text=end_text,
                        row_number=row.row_number,
                        error_code=error.error_code,
                        message=str(error),
                    )
                )
            elif prev_parsed != parsed:
                build.intervals.append(
                    DateInterval(
                        begin=prev_parsed,
                        end=parsed,
                        begin_text=begin_text,
                        end_text=end_text,
                        row_number=row.row_number,
                    )
                )
        previous = (row, parsed)
    return build
