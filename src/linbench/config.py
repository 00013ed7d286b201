"""Experiment configuration.

Configs are plain YAML mappings, e.g.::

  dimension: 3
  sample_count: 3
  iterations: 20000
  rng_seed: 42
  learning_rate: 1.0e-3
  schedule: constant      # constant | cosine | exponential
  fit_bias: true          # Dense-style layer with an intercept
  dtype: float32

Optimizer hyperparameters (``beta1``, ``beta2``, ``epsilon``) and the schedule
options are passed straight through to the iterative trainer, so a config file
fully documents the update rule used for a run. ``fit_bias`` and ``dtype``
describe the fitted model itself and change the outcome as much as the
optimizer settings do.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .errors import InvalidConfigurationError

SCHEDULES = ("constant", "cosine", "exponential")
DTYPES = ("float32", "float64")

# PyYAML reads "1e-3" as a string
_FLOAT_KEYS = {"learning_rate", "beta1", "beta2", "epsilon", "min_lr", "decay_rate", "condition_threshold"}
_INT_KEYS = {"dimension", "sample_count", "iterations", "rng_seed", "warmup_steps", "decay_steps", "batch_size", "log_every"}


def _coerce(key: str, value):
    if value is None:
        return None
    try:
        if key in _FLOAT_KEYS:
            return float(value)
        if key in _INT_KEYS:
            return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(f"{key}: cannot interpret {value!r}") from exc
    return value


@dataclass
class ExperimentConfig:
    dimension: int = 3
    sample_count: int = 3
    iterations: int = 20000
    rng_seed: Optional[int] = 42
    learning_rate: float = 1e-3
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-8
    schedule: str = "constant"
    warmup_steps: int = 0
    min_lr: float = 1e-5
    decay_rate: float = 0.5
    decay_steps: int = 5000
    batch_size: Optional[int] = None
    fit_bias: bool = True
    dtype: str = "float32"
    condition_threshold: float = 1e12
    log_every: int = 1000
    out_dir: Optional[str] = None
    run_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "ExperimentConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise InvalidConfigurationError(f"unknown config keys: {unknown}")
        cfg = cls(**{k: _coerce(k, v) for k, v in data.items()})
        cfg.validate()
        return cfg

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    def replace(self, **overrides) -> "ExperimentConfig":
        """Copy with ``overrides`` applied; ``None`` values are ignored."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ExperimentConfig.from_dict(data)

    def unseeded(self) -> "ExperimentConfig":
        """Copy with ``rng_seed`` cleared, which ``replace`` cannot express."""
        data = self.to_dict()
        data["rng_seed"] = None
        return ExperimentConfig.from_dict(data)

    def validate(self) -> None:
        if int(self.dimension) < 1:
            raise InvalidConfigurationError(f"dimension must be >= 1, got {self.dimension}")
        if int(self.sample_count) < int(self.dimension):
            raise InvalidConfigurationError(
                f"sample_count ({self.sample_count}) must be >= dimension ({self.dimension})"
            )
        if int(self.iterations) < 0:
            raise InvalidConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        if not float(self.learning_rate) > 0:
            raise InvalidConfigurationError(f"learning_rate must be > 0, got {self.learning_rate}")
        for name in ("beta1", "beta2"):
            value = float(getattr(self, name))
            if not 0.0 <= value < 1.0:
                raise InvalidConfigurationError(f"{name} must be in [0, 1), got {value}")
        if not float(self.epsilon) > 0:
            raise InvalidConfigurationError(f"epsilon must be > 0, got {self.epsilon}")
        if self.schedule not in SCHEDULES:
            raise InvalidConfigurationError(f"unknown schedule '{self.schedule}' (expected one of {SCHEDULES})")
        if self.batch_size is not None and not 1 <= int(self.batch_size) <= int(self.sample_count):
            raise InvalidConfigurationError(
                f"batch_size must be in [1, sample_count={self.sample_count}], got {self.batch_size}"
            )
        if not float(self.condition_threshold) > 1.0:
            raise InvalidConfigurationError(f"condition_threshold must be > 1, got {self.condition_threshold}")
        if self.dtype not in DTYPES:
            raise InvalidConfigurationError(f"dtype must be one of {DTYPES}, got {self.dtype!r}")
        if not isinstance(self.fit_bias, bool):
            raise InvalidConfigurationError(f"fit_bias must be true or false, got {self.fit_bias!r}")
        if int(self.log_every) < 1:
            raise InvalidConfigurationError(f"log_every must be >= 1, got {self.log_every}")


def load_config(path: str | Path) -> ExperimentConfig:
    p = Path(path)
    data = yaml.safe_load(p.read_text()) or {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"{p}: expected a mapping at top level, got {type(data).__name__}")
    return ExperimentConfig.from_dict(data)


__all__ = ["DTYPES", "ExperimentConfig", "SCHEDULES", "load_config"]
