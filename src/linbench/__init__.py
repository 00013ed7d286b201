"""Exact linear solves vs. iterative ADAM fitting on synthetic linear data.

Modules:
- data: ground-truth weights and a noiseless dataset consistent with them
- direct: LU / QR recovery of the weights
- optim, schedules, trainer: fixed-budget ADAM fit of a linear model
- compare: Euclidean recovery error per solver, in run order
- run_experiment, sweep: command-line entry points
"""

from .compare import Report, ReportRow, compare
from .config import ExperimentConfig, load_config
from .data import Dataset, generate
from .direct import solve
from .errors import (
    DimensionMismatchError,
    HarnessError,
    InvalidConfigurationError,
    SingularSystemError,
)
from .result import SolverResult
from .trainer import train

__version__ = "0.1.0"

__all__ = [
    "Dataset",
    "DimensionMismatchError",
    "ExperimentConfig",
    "HarnessError",
    "InvalidConfigurationError",
    "Report",
    "ReportRow",
    "SingularSystemError",
    "SolverResult",
    "compare",
    "generate",
    "load_config",
    "solve",
    "train",
]
