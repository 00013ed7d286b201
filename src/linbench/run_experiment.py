#!/usr/bin/env python3
"""
Run one comparison: generate data, solve it directly, fit it with ADAM, report.

Usage:
  python -m linbench.run_experiment --config configs/default.yaml
  python -m linbench.run_experiment --dimension 3 --sample_count 100 --iterations 20000 --seed 42

With ``out_dir`` set (config or CLI), writes under ``<out_dir>/<run_id>/``:
  metrics.json  report rows, config, seed entropy and checksums (merge-written)
  curves.csv    the trainer's loss trace
  checksums.sha256  sha256 of metrics.json and curves.csv (sha256sum -c format)
  log.txt       the run log

Failure policy: if either solver raises, no report is produced; the error is
logged and the process exits with status 2.
"""
from __future__ import annotations

import argparse
import datetime as dt
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

import numpy as np

from . import direct, trainer
from .compare import Report, compare
from .config import SCHEDULES, ExperimentConfig, load_config
from .data import Dataset, generate
from .errors import HarnessError
from .hashutil import array_checksum
from .logutil import get_logger
from .optim import AdamConfig
from .report_io import write_checksums, write_curves_csv, write_merge_metrics
from .schedules import make_schedule
from .seeds import make_rngs

log = logging.getLogger(__name__)


@dataclass
class ExperimentOutcome:
    config: ExperimentConfig
    ground_truth: np.ndarray
    dataset: Dataset
    report: Report
    seed_entropy: int
    checksums: Dict[str, str] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "config": self.config.to_dict(),
            "seed_entropy": self.seed_entropy,
            "ground_truth": [float(x) for x in self.ground_truth],
            "report": self.report.to_dict(),
            "estimates": {r.method: [float(x) for x in r.weights] for r in self.report.results},
            "fitted_bias": {r.method: r.bias for r in self.report.results if r.bias is not None},
            "checksums": dict(self.checksums),
            "timings": dict(self.timings),
        }


def auto_run_id(cfg: ExperimentConfig) -> str:
    # YYYY-MM-DD_d<dimension>_n<sample_count>_it<iterations>_<schedule>_s<seed>
    today = dt.date.today().strftime("%Y-%m-%d")
    seed = "none" if cfg.rng_seed is None else str(cfg.rng_seed)
    return f"{today}_d{cfg.dimension}_n{cfg.sample_count}_it{cfg.iterations}_{cfg.schedule}_s{seed}"


def build_schedule(cfg: ExperimentConfig):
    return make_schedule(
        cfg.schedule,
        cfg.learning_rate,
        total_steps=cfg.iterations,
        warmup_steps=cfg.warmup_steps,
        min_lr=cfg.min_lr,
        decay_rate=cfg.decay_rate,
        decay_steps=cfg.decay_steps,
    )


def run_experiment(cfg: ExperimentConfig) -> ExperimentOutcome:
    cfg.validate()
    entropy, data_rng, init_rng = make_rngs(cfg.rng_seed)
    ground_truth, dataset = generate(cfg.dimension, cfg.sample_count, rng=data_rng)
    log.info(
        "[data] d=%d n=%d seed=%s entropy=%d cond=%.3e",
        cfg.dimension, cfg.sample_count, cfg.rng_seed, entropy, direct.condition_number(dataset.inputs),
    )

    timings = {}
    t0 = time.perf_counter()
    exact = direct.solve(dataset, condition_threshold=cfg.condition_threshold)
    timings[exact.method] = time.perf_counter() - t0

    t0 = time.perf_counter()
    fitted = trainer.train(
        dataset,
        cfg.iterations,
        build_schedule(cfg),
        adam=AdamConfig(beta1=cfg.beta1, beta2=cfg.beta2, epsilon=cfg.epsilon),
        batch_size=cfg.batch_size,
        fit_bias=cfg.fit_bias,
        dtype=cfg.dtype,
        rng=init_rng,
        log_every=cfg.log_every,
    )
    timings[fitted.method] = time.perf_counter() - t0

    report = compare(ground_truth, [exact, fitted])
    for row in report:
        log.info("[result] %s | error %.3e | iterations %d | wall_sec %.3f", row.method, row.error, row.iterations, timings[row.method])
    checksums = {
        "dataset": array_checksum([ground_truth, dataset.inputs, dataset.targets]),
        "estimates": array_checksum([r.weights for r in report.results]),
    }
    return ExperimentOutcome(cfg, ground_truth, dataset, report, entropy, checksums, timings)


def write_outputs(outcome: ExperimentOutcome, run_dir: Path) -> Path:
    run_dir.mkdir(parents=True, exist_ok=True)
    metrics_path = run_dir / "metrics.json"
    write_merge_metrics(metrics_path, outcome.to_dict())
    written = ["metrics.json"]
    for r in outcome.report.results:
        if r.history:
            write_curves_csv(run_dir / "curves.csv", r.history, method=r.method)
            written.append("curves.csv")
    write_checksums(run_dir, written)
    return metrics_path


def _parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Compare a direct linear solve with ADAM on synthetic linear data.")
    ap.add_argument("--config", default=None, help="YAML experiment config (CLI flags override it)")
    ap.add_argument("--dimension", type=int, default=None)
    ap.add_argument("--sample_count", type=int, default=None)
    ap.add_argument("--iterations", type=int, default=None)
    seed = ap.add_mutually_exclusive_group()
    seed.add_argument("--seed", type=int, default=None, help="rng_seed")
    seed.add_argument("--no_seed", action="store_true", help="clear the config's rng_seed (fresh entropy, recorded in metrics.json)")
    ap.add_argument("--lr", type=float, default=None, help="learning_rate")
    ap.add_argument("--schedule", choices=SCHEDULES, default=None)
    ap.add_argument("--batch_size", type=int, default=None)
    ap.add_argument("--out_dir", default=None)
    ap.add_argument("--run_id", default=None)
    ap.add_argument("--verbose", action="store_true", help="log the loss trace")
    return ap.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = _parse_args(argv)
    logger = get_logger("linbench", level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        cfg = load_config(args.config) if args.config else ExperimentConfig()
        cfg = cfg.replace(
            dimension=args.dimension,
            sample_count=args.sample_count,
            iterations=args.iterations,
            rng_seed=args.seed,
            learning_rate=args.lr,
            schedule=args.schedule,
            batch_size=args.batch_size,
            out_dir=args.out_dir,
            run_id=args.run_id,
        )
        if args.no_seed:
            cfg = cfg.unseeded()
        run_dir = None
        if cfg.out_dir:
            run_id = cfg.run_id or auto_run_id(cfg)
            run_dir = Path(cfg.out_dir) / run_id
            get_logger("linbench", log_file=run_dir / "log.txt", level=logger.level)
            logger.info("[run] id=%s dir=%s", run_id, run_dir)
        outcome = run_experiment(cfg)
    except HarnessError as exc:
        logger.error("[error] %s: %s", type(exc).__name__, exc)
        raise SystemExit(2) from exc

    print(outcome.report.format_table())
    if run_dir is not None:
        metrics_path = write_outputs(outcome, run_dir)
        logger.info("[paths] metrics=%s", metrics_path)


if __name__ == "__main__":
    main()
