"""Run report aggregation."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from meteo_scraping.common.fs import write_json
from meteo_scraping.pipeline.driver import PipelineOutcome


def write_run_summary(
    path: Path,
    *,
    run_id: str,
    location_id: str,
    outcome: PipelineOutcome,
    output_path: Path | None = None,
) -> Path:
    faults_by_code = Counter(fault.error_code for fault in outcome.faults)
    payload = {
        "run_id": run_id,
        "location_id": location_id,
        "status": "partial" if outcome.partial else "success",
        "output_path": str(output_path) if output_path is not None else None,
        "counts": {
            "intervals": outcome.interval_count,
            "results": len(outcome.results),
            "faults": len(outcome.faults),
        },
        "faults_by_code": dict(sorted(faults_by_code.items())),
        "faults": [fault.to_dict() for fault in outcome.faults],
    }
    write_json(path, payload)
    return path
