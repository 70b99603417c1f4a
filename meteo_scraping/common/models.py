"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping


@dataclass(frozen=True)
class InputRow:
    row_number: int
    values: Mapping[str, str] = field(default_factory=dict)

    def get(self, column: str) -> str:
        return self.values.get(column, "")


@dataclass(frozen=True)
class DateInterval:
    begin: datetime
    end: datetime
    begin_text: str
    end_text: str
    row_number: int | None = None


@dataclass(frozen=True)
class RawObservationRow:
    hour_text: str
    temperature_text: str


@dataclass(frozen=True)
class ObservationRecord:
    location_id: str
    timestamp: datetime
    temperature: Decimal
    hour_text: str = ""

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "timestamp": self.timestamp.isoformat(),
            "temperature": str(self.temperature),
            "hour_text": self.hour_text,
        }


@dataclass(frozen=True)
class AggregateResult:
    location_id: str
    end: datetime
    end_text: str
    temperature_min: Decimal
    temperature_max: Decimal
    observation_count: int = 0
