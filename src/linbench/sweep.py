"""Sweep iteration budgets and sample counts across seeds.

Every cell ``(sample_count, iterations)`` runs the full experiment once per
seed and aggregates the direct and iterative errors, which is how the
"more steps / more samples help on average" behaviour is measured.

Usage:
  python -m linbench.sweep --dimension 3 --sample_counts 3 10 100 \
      --iterations 100 1000 20000 --seeds 0 1 2 3 4 --out sweep.csv
"""
from __future__ import annotations

import argparse
import csv
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .config import ExperimentConfig
from .logutil import get_logger
from .run_experiment import run_experiment
from .trainer import METHOD

log = logging.getLogger(__name__)

SWEEP_COLUMNS = [
    "sample_count",
    "iterations",
    "runs",
    "direct_error_mean",
    "direct_error_max",
    "iterative_error_mean",
    "iterative_error_max",
]


@dataclass
class SweepRow:
    sample_count: int
    iterations: int
    runs: int
    direct_error_mean: float
    direct_error_max: float
    iterative_error_mean: float
    iterative_error_max: float


def sweep(
    base: ExperimentConfig,
    iterations: Sequence[int],
    sample_counts: Sequence[int],
    seeds: Sequence[int],
) -> List[SweepRow]:
    if not seeds:
        raise ValueError("sweep needs at least one seed")
    rows: List[SweepRow] = []
    for n in sample_counts:
        for budget in iterations:
            direct_errs, iter_errs = [], []
            for seed in seeds:
                cfg = base.replace(sample_count=n, iterations=budget, rng_seed=seed)
                report = run_experiment(cfg).report
                for row in report:
                    (iter_errs if row.method == METHOD else direct_errs).append(row.error)
            row = SweepRow(
                sample_count=int(n),
                iterations=int(budget),
                runs=len(seeds),
                direct_error_mean=float(np.mean(direct_errs)),
                direct_error_max=float(np.max(direct_errs)),
                iterative_error_mean=float(np.mean(iter_errs)),
                iterative_error_max=float(np.max(iter_errs)),
            )
            log.info(
                "[sweep] n=%d iterations=%d | direct mean %.3e | adam mean %.3e",
                row.sample_count, row.iterations, row.direct_error_mean, row.iterative_error_mean,
            )
            rows.append(row)
    return rows


def write_sweep_csv(path: str | Path, rows: Iterable[SweepRow]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SWEEP_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(asdict(row))
    return p


def main(argv: Optional[Iterable[str]] = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--dimension", type=int, default=3)
    ap.add_argument("--sample_counts", type=int, nargs="+", default=[3, 100])
    ap.add_argument("--iterations", type=int, nargs="+", default=[100, 1000, 20000])
    ap.add_argument("--seeds", type=int, nargs="+", default=list(range(5)))
    ap.add_argument("--lr", type=float, default=None)
    ap.add_argument("--out", default="sweep.csv")
    args = ap.parse_args(argv)

    get_logger("linbench")
    # per-run results are noise here; keep only the sweep summaries
    logging.getLogger("linbench.run_experiment").setLevel(logging.WARNING)
    # sample_count must be valid for the base config too
    base = ExperimentConfig(dimension=args.dimension, sample_count=max(args.dimension, min(args.sample_counts)))
    base = base.replace(learning_rate=args.lr)
    rows = sweep(base, args.iterations, args.sample_counts, args.seeds)
    out = write_sweep_csv(args.out, rows)
    print(f"[sweep] wrote {len(rows)} rows -> {out}")


if __name__ == "__main__":
    main()
