"""Minimal strict schema for the YAML run configuration."""

from __future__ import annotations

from meteo_scraping.common.errors import ConfigError

_SECTION_KEYS = {
    "location": ({"station_id", "station_name"}, set()),
    "input": (
        {"path", "sheet_name", "start_row", "date_column", "timestamp_format"},
        {"path", "sheet_name", "date_column", "timestamp_format"},
    ),
    "output": (
        {"path", "sheet_name", "timestamp_format", "decimal_separator"},
        {"path", "timestamp_format"},
    ),
    "source": ({"base_url", "rate_per_sec"}, set()),
    "http": ({"connect_timeout", "read_timeout", "max_attempts"}, set()),
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_run_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("Run config must be a mapping")

    top_required = {"location", "input", "output"}
    _assert_required_keys(cfg, top_required, "run config")
    _assert_no_unknown_keys(cfg, set(_SECTION_KEYS), "run config", allow_unknown)

    for section, (known, required) in _SECTION_KEYS.items():
        obj = cfg.get(section)
        if obj is None:
            continue
        if not isinstance(obj, dict):
            raise ConfigError(f"{section} must be a mapping")
        _assert_required_keys(obj, required, section)
        _assert_no_unknown_keys(obj, known, section, allow_unknown)

    location = cfg["location"]
    has_id = location.get("station_id") not in (None, "")
    has_name = location.get("station_name") not in (None, "")
    if has_id == has_name:
        raise ConfigError("location requires exactly one of station_id or station_name")

    start_row = cfg["input"].get("start_row", 0)
    if isinstance(start_row, bool) or not isinstance(start_row, int) or start_row < 0:
        raise ConfigError("input.start_row must be a non-negative integer")

    separator = cfg["output"].get("decimal_separator", ",")
    if separator not in (",", "."):
        raise ConfigError("output.decimal_separator must be ',' or '.'")

    source = cfg.get("source") or {}
    if "rate_per_sec" in source:
        _assert_positive_number(source["rate_per_sec"], "source.rate_per_sec")

    http = cfg.get("http") or {}
    for key in ("connect_timeout", "read_timeout"):
        if key in http:
            _assert_positive_number(http[key], f"http.{key}")
    if "max_attempts" in http:
        attempts = http["max_attempts"]
        if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
            raise ConfigError("http.max_attempts must be an integer >= 1")

    return cfg
