"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from meteo_scraping.common.constants import DEFAULT_BASE_URL
from meteo_scraping.common.errors import ConfigError
from meteo_scraping.common.fs import read_yaml
from meteo_scraping.common.schema import validate_run_config

CONFIG_FILENAME = "meteo.yml"


@dataclass(frozen=True)
class RunConfig:
    station_id: str | None
    station_name: str | None
    input_path: Path
    input_sheet: str
    start_row: int
    date_column: str
    input_timestamp_format: str
    output_path: Path
    output_sheet: str
    output_timestamp_format: str
    decimal_separator: str
    base_url: str
    rate_per_sec: float
    connect_timeout: float
    read_timeout: float
    max_attempts: int


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def _optional_text(value: object) -> str | None:
    if value in (None, ""):
        return None
    return str(value).strip()


def build_run_config(cfg: dict) -> RunConfig:
    location = cfg["location"]
    input_cfg = cfg["input"]
    output_cfg = cfg["output"]
    source_cfg = cfg.get("source") or {}
    http_cfg = cfg.get("http") or {}
    return RunConfig(
        station_id=_optional_text(location.get("station_id")),
        station_name=_optional_text(location.get("station_name")),
        input_path=Path(input_cfg["path"]),
        input_sheet=str(input_cfg["sheet_name"]),
        start_row=int(input_cfg.get("start_row", 0)),
        date_column=str(input_cfg["date_column"]),
        input_timestamp_format=str(input_cfg["timestamp_format"]),
        output_path=Path(output_cfg["path"]),
        output_sheet=str(output_cfg.get("sheet_name", "Temperatures")),
        output_timestamp_format=str(output_cfg["timestamp_format"]),
        decimal_separator=str(output_cfg.get("decimal_separator", ",")),
        base_url=str(source_cfg.get("base_url", DEFAULT_BASE_URL)).rstrip("/"),
        rate_per_sec=float(source_cfg.get("rate_per_sec", 1.0)),
        connect_timeout=float(http_cfg.get("connect_timeout", 20.0)),
        read_timeout=float(http_cfg.get("read_timeout", 60.0)),
        max_attempts=int(http_cfg.get("max_attempts", 3)),
    )


def load_run_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> RunConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    return build_run_config(validate_run_config(cfg, allow_unknown=allow_unknown))
