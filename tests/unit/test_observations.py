import logging
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from meteo_scraping.common.errors import MalformedTimestampError
from meteo_scraping.common.models import RawObservationRow
from meteo_scraping.pipeline.observations import parse_hour, parse_observations


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("14 h", time(14, 0)),
        ("14h", time(14, 0)),
        ("7h30", time(7, 30)),
        ("07:30", time(7, 30)),
        ("0 h", time(0, 0)),
    ],
)
def test_parse_hour_accepts_hour_layouts(text, expected):
    assert parse_hour(text) == expected


@pytest.mark.parametrize("text", ["", "n/a", "14", "25 h", "12h75", "Heure locale"])
def test_parse_hour_rejects_malformed(text):
    with pytest.raises(MalformedTimestampError):
        parse_hour(text)


def test_malformed_hour_drops_only_that_record(caplog):
    raw = [
        RawObservationRow("10 h", "12.5 °C"),
        RawObservationRow("??", "30.0 °C"),
        RawObservationRow("11 h", "13,0 °C"),
    ]

    with caplog.at_level(logging.WARNING):
        records = parse_observations("7156", date(2024, 3, 1), raw)

    assert [r.timestamp for r in records] == [datetime(2024, 3, 1, 10, 0), datetime(2024, 3, 1, 11, 0)]
    assert [r.temperature for r in records] == [Decimal("12.5"), Decimal("13.0")]
    assert all(r.location_id == "7156" for r in records)
    dropped = [rec for rec in caplog.records if getattr(rec, "error_code", None) == "MALFORMED_TIMESTAMP"]
    assert len(dropped) == 1


def test_missing_temperature_drops_record():
    raw = [RawObservationRow("10 h", ""), RawObservationRow("11 h", "4.0")]
    records = parse_observations("7156", date(2024, 3, 1), raw)
    assert [r.hour_text for r in records] == ["11 h"]
