"""CLI entrypoint for the meteociel range temperature pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from meteo_scraping.common.config_loader import RunConfig, load_run_config
from meteo_scraping.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from meteo_scraping.common.errors import PipelineError
from meteo_scraping.common.http import HttpClient, RetryConfig, TimeoutConfig
from meteo_scraping.common.ids import generate_run_id
from meteo_scraping.common.logging import build_logger, log_event
from meteo_scraping.common.time_utils import parse_day
from meteo_scraping.harvest.meteociel import MeteocielSource, lookup_station_id
from meteo_scraping.pipeline.driver import run_pipeline
from meteo_scraping.pipeline.export import write_results_workbook
from meteo_scraping.pipeline.intervals import build_intervals
from meteo_scraping.pipeline.load import read_input_rows
from meteo_scraping.pipeline.reports import write_run_summary


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=list(COMMANDS))
    parser.add_argument("--station-name", default=None)
    parser.add_argument("--station-id", default=None)
    parser.add_argument("--day", default=None, help="ISO day for fetch-day")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def build_http_client(cfg: RunConfig) -> HttpClient:
    return HttpClient(
        timeout=TimeoutConfig(connect=cfg.connect_timeout, read=cfg.read_timeout),
        retry=RetryConfig(max_attempts=cfg.max_attempts),
        rate_per_sec=cfg.rate_per_sec,
    )


def resolve_location_id(
    cfg: RunConfig,
    http_client: HttpClient,
    *,
    station_id: str | None = None,
    station_name: str | None = None,
) -> str:
    """Pick the station id once per run: an explicit id wins, otherwise look the name up."""
    if station_id:
        return station_id
    if station_name:
        return lookup_station_id(http_client, station_name, base_url=cfg.base_url)
    if cfg.station_id:
        return cfg.station_id
    return lookup_station_id(http_client, cfg.station_name or "", base_url=cfg.base_url)


def run_ranges(args: argparse.Namespace, cfg: RunConfig, source, location_id: str, logger: logging.Logger, run_id: str) -> int:
    data_dir = Path(args.data_dir)
    rows = read_input_rows(
        cfg.input_path,
        cfg.input_sheet,
        cfg.start_row,
        timestamp_format=cfg.input_timestamp_format,
        required_columns=(cfg.date_column,),
    )
    log_event(logger, "input loaded", run_id=run_id, stage="load", event="STAGE_END", status="ok", rows_out=len(rows))

    build = build_intervals(
        rows,
        date_column=cfg.date_column,
        timestamp_format=cfg.input_timestamp_format,
        logger=logger,
    )
    outcome = run_pipeline(
        build.intervals,
        source,
        location_id,
        output_timestamp_format=cfg.output_timestamp_format,
        skipped=build.skipped,
        logger=logger,
    )

    write_results_workbook(
        cfg.output_path,
        outcome.results,
        sheet_name=cfg.output_sheet,
        decimal_separator=cfg.decimal_separator,
    )
    write_run_summary(
        data_dir / "run_meta" / f"{run_id}.summary.json",
        run_id=run_id,
        location_id=location_id,
        outcome=outcome,
        output_path=cfg.output_path,
    )
    log_event(
        logger,
        "results written",
        run_id=run_id,
        stage="export",
        location=location_id,
        event="STAGE_END",
        status="partial" if outcome.partial else "ok",
        rows_in=outcome.interval_count,
        rows_out=len(outcome.results),
    )

    if outcome.partial:
        return EXIT_HARD_FAIL if args.strict else EXIT_PARTIAL
    return EXIT_SUCCESS


def fetch_day(args: argparse.Namespace, source, location_id: str) -> int:
    if not args.day:
        raise PipelineError("fetch-day requires --day YYYY-MM-DD")
    for record in source(location_id, parse_day(args.day)):
        sys.stdout.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(run_id, data_dir=Path(args.data_dir), level=args.log_level)

    try:
        cfg = load_run_config(
            Path(args.config_dir),
            overlay_config_dir=Path(args.overlay_config_dir) if args.overlay_config_dir else None,
        )
        with build_http_client(cfg) as client:
            location_id = resolve_location_id(
                cfg,
                client,
                station_id=args.station_id,
                station_name=args.station_name,
            )
            log_event(logger, "location resolved", run_id=run_id, stage="location", location=location_id, status="ok")

            if args.command == "lookup-station":
                sys.stdout.write(f"{location_id}\n")
                return EXIT_SUCCESS

            source = MeteocielSource(client, base_url=cfg.base_url, logger=logger)
            if args.command == "fetch-day":
                return fetch_day(args, source, location_id)
            return run_ranges(args, cfg, source, location_id, logger, run_id)
    except PipelineError as exc:
        log_event(
            logger,
            f"run failed: {exc}",
            run_id=run_id,
            stage=args.command,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception:
        logging.getLogger(__name__).exception("unexpected failure")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
