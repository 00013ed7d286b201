"""Learning-rate schedules: callables mapping a 0-based step index to a rate."""
from __future__ import annotations

import math
from typing import Callable

from .errors import InvalidConfigurationError

Schedule = Callable[[int], float]


def constant(lr: float) -> Schedule:
    def lr_at(step_idx: int) -> float:
        return lr
    return lr_at


def cosine(lr: float, total_steps: int, warmup_steps: int = 0, min_lr: float = 0.0) -> Schedule:
    # linear warmup, then cosine decay from lr down to min_lr over the remaining steps
    min_lr_ratio = (min_lr / lr) if lr > 0 else 0.0

    def lr_at(step_idx: int) -> float:
        if step_idx < warmup_steps:
            return lr * float(step_idx + 1) / warmup_steps
        progress = (step_idx - warmup_steps) / max(1, total_steps - warmup_steps)
        progress = min(1.0, progress)
        cos = 0.5 * (1.0 + math.cos(math.pi * progress))
        return lr * (min_lr_ratio + (1 - min_lr_ratio) * cos)
    return lr_at


def exponential(lr: float, decay_rate: float, decay_steps: int) -> Schedule:
    def lr_at(step_idx: int) -> float:
        return lr * decay_rate ** (step_idx / decay_steps)
    return lr_at


def make_schedule(
    name: str,
    lr: float,
    total_steps: int = 0,
    warmup_steps: int = 0,
    min_lr: float = 0.0,
    decay_rate: float = 0.5,
    decay_steps: int = 1000,
) -> Schedule:
    name = str(name).lower()
    if name == "constant":
        return constant(lr)
    if name == "cosine":
        return cosine(lr, total_steps, warmup_steps=warmup_steps, min_lr=min_lr)
    if name == "exponential":
        if decay_steps < 1 or not 0.0 < decay_rate <= 1.0:
            raise InvalidConfigurationError(
                f"exponential schedule needs decay_steps >= 1 and 0 < decay_rate <= 1, got {decay_steps}, {decay_rate}"
            )
        return exponential(lr, decay_rate, decay_steps)
    raise InvalidConfigurationError(f"unknown schedule '{name}'")


__all__ = ["Schedule", "constant", "cosine", "exponential", "make_schedule"]
