"""Exact recovery of the weight vector by direct linear algebra.

- square systems (n == d): LU with partial pivoting (LAPACK gesv)
- overdetermined systems (n > d): reduced QR, then back-substitution against
  the upper-triangular R; XᵀX is never formed, so conditioning is not squared
"""
from __future__ import annotations

import logging

import numpy as np
from scipy.linalg import solve_triangular

from .data import Dataset
from .errors import InvalidConfigurationError, SingularSystemError
from .result import SolverResult

log = logging.getLogger(__name__)

DEFAULT_CONDITION_THRESHOLD = 1e12


def condition_number(inputs: np.ndarray) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.linalg.cond(inputs))


def _check_conditioning(inputs: np.ndarray, threshold: float) -> float:
    cond = condition_number(inputs)
    if not np.isfinite(cond) or cond > threshold:
        raise SingularSystemError(
            f"input matrix {inputs.shape} is numerically rank-deficient (cond={cond:.3e} > {threshold:.1e})"
        )
    return cond


def solve(dataset: Dataset, condition_threshold: float = DEFAULT_CONDITION_THRESHOLD) -> SolverResult:
    X, y = dataset.inputs, dataset.targets
    n, d = X.shape
    if n < d:
        raise InvalidConfigurationError(f"underdetermined system: {n} samples for {d} unknowns")
    cond = _check_conditioning(X, condition_threshold)
    try:
        if n == d:
            method = "direct"
            w = np.linalg.solve(X, y)
        else:
            method = "direct-lstsq"
            Q, R = np.linalg.qr(X, mode="reduced")
            w = solve_triangular(R, Q.T @ y, lower=False)
    except np.linalg.LinAlgError as exc:
        raise SingularSystemError(f"direct solve failed: {exc}") from exc
    log.debug("%s: n=%d d=%d cond=%.3e", method, n, d, cond)
    return SolverResult(method=method, weights=w, iterations=1)


__all__ = ["DEFAULT_CONDITION_THRESHOLD", "condition_number", "solve"]
