"""Run outputs: metrics JSON, the trainer's loss curve, and their checksums.

``checksums.sha256`` uses the ``sha256sum`` line format, so a run directory can
be checked with ``sha256sum -c checksums.sha256`` as well as ``verify_checksums``.
"""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from .hashutil import file_checksum

CHECKSUMS_NAME = "checksums.sha256"


def read_metrics(path: str | Path) -> Dict:
    p = Path(path)
    if not p.exists():
        return {}
    data = json.loads(p.read_text())
    return data if isinstance(data, dict) else {}


def write_merge_metrics(path: str | Path, updates: Mapping) -> Dict:
    """Merge ``updates`` into the JSON object at ``path`` (created if missing).

    Top-level keys are replaced, so rerunning into the same directory refreshes
    ``report`` while keys written by other tools survive.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    merged = dict(read_metrics(p))
    merged.update(dict(updates))
    p.write_text(json.dumps(merged, indent=2) + "\n")
    return merged


def write_curves_csv(path: str | Path, history: Iterable[Tuple[int, float]], method: str = "adam") -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["method", "step", "loss"])
        for step, loss in history:
            writer.writerow([method, int(step), f"{float(loss):.6e}"])
    return p


def write_checksums(run_dir: str | Path, names: Sequence[str]) -> Dict[str, str]:
    run_dir = Path(run_dir)
    sums = {name: file_checksum(run_dir / name) for name in names}
    lines = [f"{digest}  {name}" for name, digest in sums.items()]
    (run_dir / CHECKSUMS_NAME).write_text("\n".join(lines) + "\n")
    return sums


def verify_checksums(run_dir: str | Path) -> Dict[str, bool]:
    run_dir = Path(run_dir)
    result = {}
    for line in (run_dir / CHECKSUMS_NAME).read_text().splitlines():
        if not line.strip():
            continue
        digest, name = line.split(None, 1)
        path = run_dir / name
        result[name] = path.exists() and file_checksum(path) == digest
    return result


__all__ = [
    "CHECKSUMS_NAME",
    "read_metrics",
    "verify_checksums",
    "write_checksums",
    "write_curves_csv",
    "write_merge_metrics",
]
