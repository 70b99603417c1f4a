"""Sequential interval driver with per-interval fault isolation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable

from meteo_scraping.common.errors import PipelineError
from meteo_scraping.common.logging import log_event, log_warning
from meteo_scraping.common.models import AggregateResult, DateInterval
from meteo_scraping.pipeline.aggregate import ObservationSource, aggregate_range
from meteo_scraping.pipeline.intervals import SkippedPair


@dataclass(frozen=True)
class IntervalFault:
    begin: str
    end: str
    row_number: int | None
    error_code: str
    message: str
    interval: DateInterval | None = None

    @classmethod
    def for_interval(cls, interval: DateInterval, error_code: str, message: str) -> "IntervalFault":
        return cls(
            begin=interval.begin.isoformat(),
            end=interval.end.isoformat(),
            row_number=interval.row_number,
            error_code=error_code,
            message=message,
            interval=interval,
        )

    @classmethod
    def for_skipped_pair(cls, pair: SkippedPair) -> "IntervalFault":
        return cls(
            begin=pair.begin_text,
            end=pair.end_text,
            row_number=pair.row_number,
            error_code=pair.error_code,
            message=pair.message,
        )

    def to_dict(self) -> dict:
        return {
            "begin": self.begin,
            "end": self.end,
            "row_number": self.row_number,
            "error_code": self.error_code,
            "message": self.message,
        }


@dataclass
class PipelineOutcome:
    interval_count: int = 0
    results: list[AggregateResult] = field(default_factory=list)
    faults: list[IntervalFault] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.faults)


def run_pipeline(
    intervals: Iterable[DateInterval],
    source: ObservationSource,
    location_id: str,
    *,
    output_timestamp_format: str,
    skipped: Iterable[SkippedPair] = (),
    logger: logging.Logger | None = None,
) -> PipelineOutcome:
    """Aggregate intervals in order; ``skipped`` pairs count as faults without a fetch."""
    logger = logger or logging.getLogger(__name__)
    outcome = PipelineOutcome()

    for pair in skipped:
        outcome.interval_count += 1
        outcome.faults.append(IntervalFault.for_skipped_pair(pair))

    for interval in intervals:
        outcome.interval_count += 1
        bounds = {
            "stage": "aggregate",
            "location": location_id,
            "begin": interval.begin.isoformat(),
            "end": interval.end.isoformat(),
        }
        started = time.monotonic()
        try:
            result = aggregate_range(
                source,
                location_id,
                interval.begin,
                interval.end,
                output_timestamp_format=output_timestamp_format,
            )
        except PipelineError as exc:
            outcome.faults.append(IntervalFault.for_interval(interval, exc.error_code, str(exc)))
            log_warning(
                logger,
                f"interval skipped: {exc}",
                **bounds,
                event="INTERVAL_SKIPPED",
                status="error",
                error_code=exc.error_code,
            )
            continue
        except Exception as exc:
            outcome.faults.append(IntervalFault.for_interval(interval, "UNEXPECTED_ERROR", repr(exc)))
            logger.error(
                "unexpected failure for interval",
                exc_info=True,
                extra={**bounds, "event": "INTERVAL_SKIPPED", "status": "error", "error_code": "UNEXPECTED_ERROR"},
            )
            continue

        outcome.results.append(result)
        log_event(
            logger,
            "interval aggregated",
            **bounds,
            event="INTERVAL_DONE",
            status="ok",
            rows_out=result.observation_count,
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    outcome.results.sort(key=lambda result: result.end)
    return outcome
