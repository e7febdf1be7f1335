"""Sweep report model.

Outcome of a whole sweep run across regions and resource kinds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class KindStatus(Enum):
    """Outcome of sweeping one kind in one region."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_RUN = "not_run"


@dataclass
class KindOutcome:
    """Result of sweeping one resource kind in one region.

    Attributes:
        region: AWS region
        kind: Resource kind name
        status: Sweep outcome
        discovered: Sweepables discovered
        deleted: Resources deleted
        skipped: Resources left alone because of dry-run mode
        errors: Failure messages, one per underlying error
        duration_seconds: Wall clock time spent on this kind
    """

    region: str
    kind: str
    status: KindStatus
    discovered: int = 0
    deleted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    duration_seconds: Optional[float] = None


@dataclass
class SweepReport:
    """Report for one sweep run.

    Attributes:
        run_id: Unique identifier for the run
        started_at: When the run began (UTC)
        regions: Regions swept
        dry_run: Whether deletions were skipped
        outcomes: Per region/kind outcomes in execution order
        completed_at: When the run finished (UTC)
    """

    run_id: str
    started_at: datetime
    regions: list[str]
    dry_run: bool = False
    outcomes: list[KindOutcome] = field(default_factory=list)
    completed_at: Optional[datetime] = None

    @property
    def failed(self) -> list[KindOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == KindStatus.FAILED]

    @property
    def succeeded(self) -> bool:
        """True when no kind failed."""
        return not self.failed

    @property
    def total_deleted(self) -> int:
        return sum(outcome.deleted for outcome in self.outcomes)

    @property
    def total_errors(self) -> int:
        return sum(len(outcome.errors) for outcome in self.outcomes)
