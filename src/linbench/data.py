"""Synthetic noiseless linear data with a known ground truth.

``targets = inputs @ weights`` holds exactly (it is how the targets are
computed), so any residual a solver leaves behind is the solver's own error.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import DimensionMismatchError, InvalidConfigurationError
from .seeds import as_generator


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=np.float64)
    a.flags.writeable = False
    return a


@dataclass(frozen=True, eq=False)
class Dataset:
    inputs: np.ndarray   # (n, d)
    targets: np.ndarray  # (n,)

    def __post_init__(self):
        object.__setattr__(self, "inputs", _frozen(self.inputs))
        object.__setattr__(self, "targets", _frozen(self.targets))
        if self.inputs.ndim != 2 or self.targets.shape != (self.inputs.shape[0],):
            raise DimensionMismatchError(
                f"inputs must be (n, d) and targets (n,); got {self.inputs.shape} and {self.targets.shape}"
            )

    @property
    def sample_count(self) -> int:
        return self.inputs.shape[0]

    @property
    def dimension(self) -> int:
        return self.inputs.shape[1]

    def __len__(self):
        return self.sample_count

    def __getitem__(self, i):
        return self.inputs[i], self.targets[i]


def generate(
    dimension: int,
    sample_count: int,
    rng_seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, Dataset]:
    """Draw a ground-truth weight vector and ``sample_count`` samples consistent with it.

    Weights are drawn first, then the inputs, both uniform on [0, 1). Pass either
    ``rng_seed`` or an existing ``rng``; nothing touches numpy's global state.
    """
    if dimension < 1:
        raise InvalidConfigurationError(f"dimension must be >= 1, got {dimension}")
    if sample_count < dimension:
        raise InvalidConfigurationError(f"sample_count ({sample_count}) must be >= dimension ({dimension})")
    gen = as_generator(rng_seed, rng)
    weights = _frozen(gen.random(dimension))
    inputs = gen.random((sample_count, dimension))
    return weights, Dataset(inputs, inputs @ weights)


__all__ = ["Dataset", "generate"]
