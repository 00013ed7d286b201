"""Exception taxonomy for the harness.

All errors are deterministic numerical or configuration conditions, so they
are raised immediately and never retried.
"""
from __future__ import annotations


class HarnessError(Exception):
    """Base class for every error raised by linbench."""


class DimensionMismatchError(HarnessError, ValueError):
    """Raised when vector dimensions disagree with the configured dimension."""


class SingularSystemError(HarnessError, ArithmeticError):
    """Raised when the system matrix is numerically rank-deficient."""


class InvalidConfigurationError(HarnessError, ValueError):
    """Raised for out-of-range or unknown experiment options."""


__all__ = [
    "HarnessError",
    "DimensionMismatchError",
    "SingularSystemError",
    "InvalidConfigurationError",
]
