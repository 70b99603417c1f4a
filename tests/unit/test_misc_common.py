from datetime import date, datetime
from decimal import Decimal

import pytest

from meteo_scraping.common.errors import MalformedTimestampError
from meteo_scraping.common.ids import generate_run_id
from meteo_scraping.common.numbers import format_decimal, parse_decimal
from meteo_scraping.common.time_utils import format_timestamp, iter_days, parse_day, parse_timestamp


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_parse_timestamp_uses_explicit_format():
    assert parse_timestamp("01/03/2024 08:30", "%d/%m/%Y %H:%M") == datetime(2024, 3, 1, 8, 30)


@pytest.mark.parametrize("value", ["", "   ", "2024-03-01 08:30", "32/01/2024 00:00"])
def test_parse_timestamp_rejects_other_layouts(value):
    with pytest.raises(MalformedTimestampError):
        parse_timestamp(value, "%d/%m/%Y %H:%M")


def test_format_timestamp_and_parse_day():
    assert format_timestamp(datetime(2024, 3, 5, 7, 0), "%d/%m/%Y %H:%M") == "05/03/2024 07:00"
    assert parse_day("2024-03-05") == date(2024, 3, 5)
    with pytest.raises(MalformedTimestampError):
        parse_day("05/03/2024")


def test_iter_days_includes_end_day():
    days = list(iter_days(datetime(2024, 2, 28, 23, 0), datetime(2024, 3, 1, 0, 30)))
    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_iter_days_empty_when_inverted():
    assert list(iter_days(datetime(2024, 3, 3), datetime(2024, 3, 1))) == []


def test_parse_decimal_accepts_both_separators():
    assert parse_decimal("15,2 °C") == Decimal("15.2")
    assert parse_decimal("-1.5 °C") == Decimal("-1.5")
    assert parse_decimal("−3,0") == Decimal("-3.0")
    assert parse_decimal("") is None
    assert parse_decimal(None) is None


def test_format_decimal_uses_separator():
    assert format_decimal(Decimal("9.0"), ",") == "9,0"
    assert format_decimal(Decimal("20.1"), ".") == "20.1"
