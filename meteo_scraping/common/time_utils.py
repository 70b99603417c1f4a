"""Timestamp parsing, formatting and day iteration.

Observation and input timestamps are naive station-local times. Formats are
always passed in explicitly from configuration; nothing here guesses a
format from the text.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from meteo_scraping.common.errors import MalformedTimestampError


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_timestamp(value: str, timestamp_format: str) -> datetime:
    text = (value or "").strip()
    if not text:
        raise MalformedTimestampError("Empty timestamp")
    try:
        return datetime.strptime(text, timestamp_format)
    except ValueError as exc:
        raise MalformedTimestampError(f"Timestamp {text!r} does not match {timestamp_format!r}") from exc


def format_timestamp(value: datetime, timestamp_format: str) -> str:
    return value.strftime(timestamp_format)


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise MalformedTimestampError(f"Day {value!r} is not an ISO date") from exc


def iter_days(begin: datetime, end: datetime) -> Iterator[date]:
    """Yield every calendar day from ``begin``'s day to ``end``'s day, inclusive."""
    cursor = begin.date()
    stop = end.date() + timedelta(days=1)
    while cursor < stop:
        yield cursor
        cursor += timedelta(days=1)
