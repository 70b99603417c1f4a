"""Per-interval min/max temperature aggregation."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Sequence

from meteo_scraping.common.errors import EmptyRangeError
from meteo_scraping.common.models import AggregateResult, ObservationRecord
from meteo_scraping.common.time_utils import format_timestamp, iter_days

ObservationSource = Callable[[str, date], Sequence[ObservationRecord]]


def fetch_observations(
    source: ObservationSource,
    location_id: str,
    begin: datetime,
    end: datetime,
) -> list[ObservationRecord]:
    """Fetch every calendar day touched by ``[begin, end]``, once each."""
    collected: list[ObservationRecord] = []
    for day in iter_days(begin, end):
        collected.extend(source(location_id, day))
    return collected


def filter_in_range(
    records: Sequence[ObservationRecord],
    begin: datetime,
    end: datetime,
) -> list[ObservationRecord]:
    ordered = sorted(records, key=lambda record: record.timestamp)
    return [record for record in ordered if begin <= record.timestamp <= end]


def aggregate_range(
    source: ObservationSource,
    location_id: str,
    begin: datetime,
    end: datetime,
    *,
    output_timestamp_format: str,
) -> AggregateResult:
    if begin > end:
        raise EmptyRangeError(f"Interval for {location_id} begins after it ends: {begin} > {end}")

    in_range = filter_in_range(fetch_observations(source, location_id, begin, end), begin, end)
    if not in_range:
        raise EmptyRangeError(f"No observations for {location_id} between {begin} and {end}")

    by_temperature = sorted(in_range, key=lambda record: record.temperature)
    return AggregateResult(
        location_id=location_id,
        end=end,
        end_text=format_timestamp(end, output_timestamp_format),
        temperature_min=by_temperature[0].temperature,
        temperature_max=by_temperature[-1].temperature,
        observation_count=len(in_range),
    )
