"""meteociel.fr observation source and station lookup.

Observation pages are organised by calendar day: one request returns the
hourly table for a single station and day. The query uses zero-based
months (``mois2=0`` is January).
"""

from __future__ import annotations

import logging
import unicodedata
from datetime import date
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from meteo_scraping.common.constants import DEFAULT_BASE_URL
from meteo_scraping.common.errors import SourceFetchError, StationLookupError
from meteo_scraping.common.http import HttpClient, HttpRequestError
from meteo_scraping.common.models import ObservationRecord, RawObservationRow
from meteo_scraping.pipeline.observations import parse_observations

HOUR_HEADER_PREFIX = "heure"
TEMPERATURE_HEADER_PREFIX = "temperature"
DEFAULT_TEMPERATURE_COLUMN = 2


def build_observations_url(base_url: str, station_id: str, day: date) -> str:
    query = urlencode(
        {
            "code2": station_id,
            "jour2": day.day,
            "mois2": day.month - 1,
            "annee2": day.year,
            "affint": 1,
        }
    )
    return f"{base_url.rstrip('/')}/obs_villes.php?{query}"


def _normalise_label(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(stripped.lower().split())


def _cell_texts(row: Tag) -> list[str]:
    return [cell.get_text(" ", strip=True) for cell in row.find_all("td", recursive=False)]


def _is_header(cells: list[str]) -> bool:
    return bool(cells) and _normalise_label(cells[0]).startswith(HOUR_HEADER_PREFIX)


def _find_observation_table(soup: BeautifulSoup) -> Tag | None:
    for table in soup.find_all("table", attrs={"width": "100%"}):
        first_row = table.find("tr")
        if first_row is None:
            continue
        if _is_header(_cell_texts(first_row)):
            return table
    return None


def _temperature_column(header: list[str]) -> int:
    for idx, label in enumerate(header):
        if _normalise_label(label).startswith(TEMPERATURE_HEADER_PREFIX):
            return idx
    return DEFAULT_TEMPERATURE_COLUMN


def extract_observation_rows(html: str) -> list[RawObservationRow]:
    """Return the raw (hour, temperature) cells of the day's hourly table.

    Pages without a recognisable table yield an empty list.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = _find_observation_table(soup)
    if table is None:
        return []

    rows: list[RawObservationRow] = []
    temperature_idx = DEFAULT_TEMPERATURE_COLUMN
    for tr in table.find_all("tr"):
        cells = _cell_texts(tr)
        if not cells:
            continue
        if _is_header(cells):
            temperature_idx = _temperature_column(cells)
            continue
        if len(cells) <= temperature_idx:
            continue
        rows.append(RawObservationRow(hour_text=cells[0], temperature_text=cells[temperature_idx]))
    return rows


class MeteocielSource:
    """Observation source fetching one calendar day per call."""

    def __init__(
        self,
        http_client: HttpClient,
        *,
        base_url: str = DEFAULT_BASE_URL,
        logger: logging.Logger | None = None,
    ) -> None:
        self.http_client = http_client
        self.base_url = base_url
        self.logger = logger or logging.getLogger(__name__)

    def fetch_day_html(self, station_id: str, day: date) -> str:
        url = build_observations_url(self.base_url, station_id, day)
        try:
            return self.http_client.get_text(url)
        except HttpRequestError as exc:
            raise SourceFetchError(f"Fetching observations for {station_id} on {day.isoformat()} failed: {exc}") from exc

    def __call__(self, location_id: str, day: date) -> list[ObservationRecord]:
        html = self.fetch_day_html(location_id, day)
        try:
            raw_rows = extract_observation_rows(html)
        except Exception as exc:
            raise SourceFetchError(f"Unparseable observation page for {location_id} on {day.isoformat()}") from exc
        self.logger.debug(
            "observation page parsed",
            extra={"location": location_id, "day": day.isoformat(), "rows_in": len(raw_rows)},
        )
        return parse_observations(location_id, day, raw_rows, logger=self.logger)


def parse_station_lookup(body: str) -> str:
    """Extract the station id from a ``findstation`` response.

    The response lists one match per line, e.g.
    ``7156|Paris-Montsouris (75)|0|75|0|1716185221``; the first match wins.
    """
    for line in body.splitlines():
        line = line.strip()
        if not line or "|" not in line:
            continue
        candidate = line.split("|", 1)[0].strip()
        if candidate.isdigit():
            return candidate
    raise StationLookupError("No station found in lookup response")


def lookup_station_id(http_client: HttpClient, station_name: str, *, base_url: str = DEFAULT_BASE_URL) -> str:
    url = f"{base_url.rstrip('/')}/lieuhelper.php"
    try:
        body = http_client.post_text(url, params={"mode": "findstation", "str": station_name})
    except HttpRequestError as exc:
        raise StationLookupError(f"Station lookup for {station_name!r} failed: {exc}") from exc
    try:
        return parse_station_lookup(body)
    except StationLookupError as exc:
        raise StationLookupError(f"No station matches {station_name!r}") from exc
