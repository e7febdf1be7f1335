"""Sweep result model.

Ordered accumulator of every failure seen while sweeping one resource kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


class DeletionFailure(Exception):
    """Failed deletion of a single sweepable.

    Attributes:
        kind: Resource kind name
        resource_id: Encoded resource identifier
        error: Underlying exception raised by the delete call
    """

    def __init__(self, kind: str, resource_id: str, error: BaseException) -> None:
        self.kind = kind
        self.resource_id = resource_id
        self.error = error
        super().__init__(kind, resource_id, error)

    def __str__(self) -> str:
        return f"deleting {self.kind} ({self.resource_id}): {self.error}"


class SweepError(Exception):
    """Aggregate of one or more sweep failures.

    Carries every underlying error, not just the first one.
    """

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: list[BaseException] = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        count = len(self.errors)
        lines = [f"{count} error{'s' if count != 1 else ''} occurred:"]
        lines.extend(f"\t* {err}" for err in self.errors)
        return "\n".join(lines)


@dataclass
class SweepResult:
    """Result of sweeping one resource kind in one region.

    A result is truthy when it holds at least one failure and falsy otherwise,
    so ``if result:`` reads as "did anything go wrong".

    Attributes:
        errors: Underlying failures in the order they were recorded
        discovered: Number of sweepables discovered
        deleted: Number of successful deletions
        skipped: Number of sweepables not deleted because of dry-run mode
    """

    errors: list[BaseException] = field(default_factory=list)
    discovered: int = 0
    deleted: int = 0
    skipped: int = 0

    def append(self, error: BaseException) -> None:
        """Record one failure."""
        self.errors.append(error)

    def extend(self, other: "SweepResult") -> None:
        """Merge another result's failures and counters into this one."""
        self.errors.extend(other.errors)
        self.discovered += other.discovered
        self.deleted += other.deleted
        self.skipped += other.skipped

    def error_or_none(self) -> Optional[SweepError]:
        """Collapse the failures into a single exception.

        Returns:
            SweepError holding every failure, or None if there were none
        """
        if not self.errors:
            return None
        return SweepError(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)
