"""Score solver results against the ground truth.

Rows keep the order the results were supplied in; they are never sorted by
error, so a report reads as a trace of what ran.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatchError
from .result import SolverResult


class ReportRow(NamedTuple):
    method: str
    error: float
    iterations: int


@dataclass(frozen=True)
class Report:
    rows: Tuple[ReportRow, ...]
    results: Tuple[SolverResult, ...]

    def __iter__(self) -> Iterator[ReportRow]:
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)

    def __getitem__(self, i) -> ReportRow:
        return self.rows[i]

    def error_of(self, method: str) -> float:
        for row in self.rows:
            if row.method == method:
                return row.error
        raise KeyError(method)

    def to_dict(self) -> Dict[str, List[Dict]]:
        return {"rows": [row._asdict() for row in self.rows]}

    def format_table(self) -> str:
        width = max([len("method")] + [len(r.method) for r in self.rows])
        lines = [f"{'method':<{width}}  {'error':>12}  {'iterations':>10}"]
        for r in self.rows:
            lines.append(f"{r.method:<{width}}  {r.error:>12.3e}  {r.iterations:>10d}")
        return "\n".join(lines)


def euclidean_error(estimate: np.ndarray, ground_truth: np.ndarray) -> float:
    estimate = np.asarray(estimate, dtype=np.float64)
    ground_truth = np.asarray(ground_truth, dtype=np.float64)
    if estimate.shape != ground_truth.shape:
        raise DimensionMismatchError(
            f"estimate has shape {estimate.shape}, ground truth has shape {ground_truth.shape}"
        )
    return float(np.linalg.norm(estimate - ground_truth))


def compare(ground_truth: np.ndarray, results: Sequence[SolverResult]) -> Report:
    scored = tuple(r.with_error(euclidean_error(r.weights, ground_truth)) for r in results)
    rows = tuple(ReportRow(r.method, r.error, int(r.iterations)) for r in scored)
    return Report(rows=rows, results=scored)


__all__ = ["Report", "ReportRow", "compare", "euclidean_error"]
