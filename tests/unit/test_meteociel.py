from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest

from meteo_scraping.common.errors import SourceFetchError, StationLookupError
from meteo_scraping.common.http import HttpRequestError
from meteo_scraping.harvest.meteociel import (
    MeteocielSource,
    build_observations_url,
    extract_observation_rows,
    lookup_station_id,
    parse_station_lookup,
)

FIXTURES = Path("tests/fixtures/meteociel")


class FakeHttpClient:
    def __init__(self, body: str = "", error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls: list[tuple[str, str, dict | None]] = []

    def get_text(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs.get("params")))
        if self.error:
            raise self.error
        return self.body

    def post_text(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs.get("params")))
        if self.error:
            raise self.error
        return self.body


def test_observations_url_uses_zero_based_month():
    url = build_observations_url("https://www.meteociel.fr/temps-reel/", "7156", date(2024, 1, 9))
    parsed = urlparse(url)
    assert parsed.path == "/temps-reel/obs_villes.php"
    assert parse_qs(parsed.query) == {
        "code2": ["7156"],
        "jour2": ["9"],
        "mois2": ["0"],
        "annee2": ["2024"],
        "affint": ["1"],
    }


def test_extract_rows_skips_header_and_other_tables():
    rows = extract_observation_rows((FIXTURES / "obs_day.html").read_text(encoding="utf-8"))
    assert [row.hour_text for row in rows] == ["23 h", "14 h", "n/a", "6 h", "5 h", "0 h"]
    assert rows[1].temperature_text == "15,2 °C"
    assert rows[4].temperature_text == ""


def test_extract_rows_returns_empty_for_unknown_page():
    assert extract_observation_rows((FIXTURES / "no_table.html").read_text(encoding="utf-8")) == []


def test_source_returns_parsed_records_for_day():
    client = FakeHttpClient((FIXTURES / "obs_day.html").read_text(encoding="utf-8"))
    source = MeteocielSource(client, base_url="https://meteo.test")

    records = source("7156", date(2024, 3, 1))

    assert [(r.timestamp, r.temperature) for r in records] == [
        (datetime(2024, 3, 1, 23, 0), Decimal("8.4")),
        (datetime(2024, 3, 1, 14, 0), Decimal("15.2")),
        (datetime(2024, 3, 1, 6, 0), Decimal("-1.5")),
        (datetime(2024, 3, 1, 0, 0), Decimal("2.0")),
    ]
    assert client.calls[0][1].startswith("https://meteo.test/obs_villes.php?")


def test_source_wraps_transport_errors():
    source = MeteocielSource(FakeHttpClient(error=HttpRequestError("HTTP status: 404")))
    with pytest.raises(SourceFetchError):
        source("7156", date(2024, 3, 1))


def test_parse_station_lookup_takes_first_match():
    body = "7156|Paris-Montsouris (75)|0|75|0|1716185221\n7150|Paris-Orly (94)|0|94|0|1716185221\n"
    assert parse_station_lookup(body) == "7156"


@pytest.mark.parametrize("body", ["", "no match", "abc|Somewhere"])
def test_parse_station_lookup_rejects_garbage(body):
    with pytest.raises(StationLookupError):
        parse_station_lookup(body)


def test_lookup_station_id_posts_station_name():
    client = FakeHttpClient("7335|Bressuire (79)|0|79|0|1716185221")

    assert lookup_station_id(client, "Bressuire", base_url="https://meteo.test") == "7335"
    assert client.calls == [("POST", "https://meteo.test/lieuhelper.php", {"mode": "findstation", "str": "Bressuire"})]


def test_lookup_station_id_wraps_http_errors():
    with pytest.raises(StationLookupError):
        lookup_station_id(FakeHttpClient(error=HttpRequestError("HTTP status: 500")), "Bressuire")
