from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

RECORD_SUFFIX = "_run.json"


def utc_timestamp(timestamp: str | None = None) -> str:
    if timestamp is not None:
        return timestamp
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def write_run_record(
    payload: dict[str, Any],
    out_dir: str | Path,
    timestamp: str | None = None,
) -> Path:
    """Write one JSON record per run as ``<UTC timestamp>_run.json``.

    Runs started within the same second get ``-2``, ``-3`` ... appended to the
    timestamp instead of overwriting each other.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = utc_timestamp(timestamp)
    path = out_dir / f"{stem}{RECORD_SUFFIX}"
    counter = 2
    while path.exists():
        path = out_dir / f"{stem}-{counter}{RECORD_SUFFIX}"
        counter += 1
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    return path


def list_run_records(out_dir: str | Path) -> list[Path]:
    out_dir = Path(out_dir)
    if not out_dir.is_dir():
        return []
    return sorted(out_dir.glob(f"*{RECORD_SUFFIX}"))
