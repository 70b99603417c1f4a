"""Raw observation rows to typed records."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Iterable

from meteo_scraping.common.errors import MalformedTimestampError
from meteo_scraping.common.logging import log_warning
from meteo_scraping.common.models import ObservationRecord, RawObservationRow
from meteo_scraping.common.numbers import parse_decimal

# "14 h", "14h", "14h30", "14:30"
_HOUR_RE = re.compile(r"^(?P<hour>\d{1,2})\s*[hH:]\s*(?P<minute>\d{2})?$")


def parse_hour(hour_text: str) -> time:
    match = _HOUR_RE.match((hour_text or "").strip())
    if not match:
        raise MalformedTimestampError(f"Unrecognised hour {hour_text!r}")
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    if hour > 23 or minute > 59:
        raise MalformedTimestampError(f"Hour out of range {hour_text!r}")
    return time(hour=hour, minute=minute)


def parse_observations(
    location_id: str,
    day: date,
    raw_rows: Iterable[RawObservationRow],
    *,
    logger: logging.Logger | None = None,
) -> list[ObservationRecord]:
    logger = logger or logging.getLogger(__name__)
    records: list[ObservationRecord] = []
    for raw in raw_rows:
        try:
            hour = parse_hour(raw.hour_text)
        except MalformedTimestampError as exc:
            log_warning(
                logger,
                f"dropping observation: {exc}",
                location=location_id,
                day=day.isoformat(),
                event="OBSERVATION_DROPPED",
                status="warning",
                error_code=exc.error_code,
            )
            continue

        temperature = parse_decimal(raw.temperature_text)
        if temperature is None:
            log_warning(
                logger,
                f"dropping observation without temperature at {raw.hour_text!r}",
                location=location_id,
                day=day.isoformat(),
                event="OBSERVATION_DROPPED",
                status="warning",
                error_code="MISSING_TEMPERATURE",
            )
            continue

        records.append(
            ObservationRecord(
                location_id=location_id,
                timestamp=datetime.combine(day, hour),
                temperature=temperature,
                hour_text=raw.hour_text,
            )
        )
    return records
