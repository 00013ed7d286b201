"""Iterative fit of a linear model with ADAM.

The model is a dense layer ``y = X @ w + b`` trained in float32, with ``b``
starting at zero, the way a framework ``Dense(1)`` layer is set up by default.
Both choices are options (``fit_bias``, ``dtype``) and shape the outcome:

- with a bias and ``n == d`` the fit has ``d + 1`` unknowns for ``d``
  equations, so ADAM stops at one of many exact fits and ``w`` absorbs
  whatever bias it ends with
- float32 arithmetic bounds how close ``w`` can get even when the fit is
  determined

Stopping policy is a fixed budget: exactly ``iterations`` updates are applied,
with no convergence check.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

import numpy as np

from .data import Dataset
from .errors import DimensionMismatchError, InvalidConfigurationError
from .optim import AdamConfig, AdamState, adam_step
from .result import SolverResult
from .schedules import constant
from .seeds import init_generator

log = logging.getLogger(__name__)

METHOD = "adam"
DTYPES = ("float32", "float64")


def mse(weights: np.ndarray, X: np.ndarray, y: np.ndarray) -> float:
    err = X @ weights - y
    return float(np.mean(err * err))


def mse_grad(weights: np.ndarray, X: np.ndarray, y: np.ndarray) -> np.ndarray:
    # d/dw mean((Xw - y)^2) = 2/m * X^T (Xw - y)
    err = X @ weights - y
    return (2.0 / X.shape[0]) * (X.T @ err)


def _init_weights(dimension: int, initial_weights, rng: np.random.Generator) -> np.ndarray:
    if initial_weights is None:
        return rng.random(dimension)
    w = np.array(initial_weights, dtype=np.float64)
    if w.shape != (dimension,):
        raise DimensionMismatchError(f"initial_weights has shape {w.shape}, dataset dimension is {dimension}")
    return w


def _design(X: np.ndarray, fit_bias: bool, dtype) -> np.ndarray:
    # bias enters as a trailing column of ones
    if fit_bias:
        X = np.hstack([X, np.ones((X.shape[0], 1))])
    return X.astype(dtype)


def train(
    dataset: Dataset,
    iterations: int,
    schedule: Union[float, Callable[[int], float]] = 1e-3,
    initial_weights: Optional[np.ndarray] = None,
    *,
    adam: Optional[AdamConfig] = None,
    batch_size: Optional[int] = None,
    fit_bias: bool = True,
    dtype: str = "float32",
    rng: Optional[np.random.Generator] = None,
    rng_seed: Optional[int] = None,
    log_every: int = 1000,
) -> SolverResult:
    """Run ``iterations`` ADAM steps on the MSE of ``dataset``.

    ``schedule`` is either a fixed learning rate or a callable mapping the
    0-based step index to a rate (see ``linbench.schedules``). ``rng`` (or
    ``rng_seed``) drives the random initialisation and minibatch sampling;
    ``batch_size=None`` means full-batch gradients. ``initial_weights`` covers
    ``w`` only; the bias always starts at zero.
    """
    if iterations < 0:
        raise InvalidConfigurationError(f"iterations must be >= 0, got {iterations}")
    if dtype not in DTYPES:
        raise InvalidConfigurationError(f"dtype must be one of {DTYPES}, got {dtype!r}")
    n, d = dataset.inputs.shape
    if batch_size is not None and not 1 <= batch_size <= n:
        raise InvalidConfigurationError(f"batch_size must be in [1, {n}], got {batch_size}")
    lr_at = schedule if callable(schedule) else constant(float(schedule))
    adam = adam or AdamConfig()
    gen = init_generator(rng_seed, rng)

    X = _design(dataset.inputs, fit_bias, dtype)
    y = dataset.targets.astype(dtype)
    w0 = _init_weights(d, initial_weights, gen)
    params = np.concatenate([w0, np.zeros(1)]) if fit_bias else w0
    params = params.astype(dtype)
    state = AdamState.zeros(params.shape[0], dtype=dtype)
    history = [(0, mse(params, X, y))]
    log_every = max(1, int(log_every))

    for step_idx in range(iterations):
        if batch_size is None or batch_size == n:
            g = mse_grad(params, X, y)
        else:
            rows = gen.choice(n, size=batch_size, replace=False)
            g = mse_grad(params, X[rows], y[rows])
        adam_step(params, g, state, lr_at(step_idx), adam)
        done = step_idx + 1
        if done % log_every == 0 or done == iterations:
            loss = mse(params, X, y)
            history.append((done, loss))
            log.debug("[%s] step %d | loss %.6e | lr %.3e", METHOD, done, loss, lr_at(step_idx))

    if not np.all(np.isfinite(params)):
        log.warning("[%s] estimate diverged to non-finite values after %d steps", METHOD, iterations)
    bias = float(params[d]) if fit_bias else None
    return SolverResult(
        method=METHOD, weights=params[:d], iterations=state.step, bias=bias, history=tuple(history)
    )


__all__ = ["DTYPES", "METHOD", "mse", "mse_grad", "train"]
