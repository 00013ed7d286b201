from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class SolverResult:
    """Terminal output of one solver run.

    ``error`` stays ``None`` until the comparator scores the result against the
    ground truth; scoring returns a copy instead of mutating this one. ``bias``
    is the fitted intercept of models that have one; it is not part of the
    recovered weight vector.
    """

    method: str
    weights: np.ndarray
    iterations: int
    error: Optional[float] = None
    history: Tuple[Tuple[int, float], ...] = ()
    bias: Optional[float] = None

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64)
        w.flags.writeable = False
        object.__setattr__(self, "weights", w)
        object.__setattr__(self, "history", tuple((int(s), float(l)) for s, l in self.history))

    def with_error(self, error: float) -> "SolverResult":
        return replace(self, error=float(error))

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "weights": [float(x) for x in self.weights],
            "iterations": int(self.iterations),
            "error": self.error,
            "bias": self.bias,
        }


__all__ = ["SolverResult"]
