"""ADAM update with explicit, caller-owned state.

Update rule, for gradient g at step t (1-based)::

  m  <- beta1 * m + (1 - beta1) * g
  v  <- beta2 * v + (1 - beta2) * g**2
  m_hat = m / (1 - beta1**t)
  v_hat = v / (1 - beta2**t)
  w  <- w - lr * m_hat / (sqrt(v_hat) + eps)

Defaults follow torch.optim.Adam. Moments are kept in the dtype of the
weights, so a float32 model runs its whole update in float32.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import DimensionMismatchError


@dataclass
class AdamConfig:
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-8


@dataclass
class AdamState:
    m: np.ndarray
    v: np.ndarray
    step: int = 0

    @classmethod
    def zeros(cls, dimension: int, dtype=np.float64) -> "AdamState":
        return cls(m=np.zeros(dimension, dtype=dtype), v=np.zeros(dimension, dtype=dtype), step=0)


def adam_step(weights: np.ndarray, grad: np.ndarray, state: AdamState, lr: float, cfg: AdamConfig) -> np.ndarray:
    """Apply one update in place to ``weights`` and ``state``; returns ``weights``."""
    if grad.shape != weights.shape or state.m.shape != weights.shape:
        raise DimensionMismatchError(
            f"weights {weights.shape}, grad {grad.shape} and state {state.m.shape} must agree"
        )
    state.step += 1
    t = state.step
    state.m *= cfg.beta1
    state.m += (1.0 - cfg.beta1) * grad
    state.v *= cfg.beta2
    state.v += (1.0 - cfg.beta2) * grad * grad
    m_hat = state.m / (1.0 - cfg.beta1 ** t)
    v_hat = state.v / (1.0 - cfg.beta2 ** t)
    weights -= lr * m_hat / (np.sqrt(v_hat) + cfg.epsilon)
    return weights


__all__ = ["AdamConfig", "AdamState", "adam_step"]
