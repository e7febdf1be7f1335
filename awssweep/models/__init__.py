"""Data models for sweep runs."""

from __future__ import annotations

from .sweep_result import DeletionFailure, SweepError, SweepResult
from .sweepable import Sweepable
from .sweeper import SweeperEntry

__all__ = [
    "DeletionFailure",
    "SweepError",
    "SweepResult",
    "Sweepable",
    "SweeperEntry",
]
