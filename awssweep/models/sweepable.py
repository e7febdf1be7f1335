"""Sweepable model.

A single discovered resource bound to the call that deletes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class Sweepable:
    """Sweepable resource handle.

    Created fresh for every item discovered during a sweep run and discarded
    once the orchestrator has processed it. Holds no state beyond the run.

    Attributes:
        kind: Resource kind name (e.g., "aws_s3_access_point")
        id: Encoded resource identifier
        region: AWS region the resource lives in
        delete: Zero-argument callable that deletes exactly this resource
    """

    kind: str
    id: str
    region: str
    delete: Callable[[], None] = field(compare=False, repr=False)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the targeted resource within one run."""
        return (self.kind, self.id)

    def validate(self) -> bool:
        """Validate sweepable invariants.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if not self.kind:
            raise ValueError("Sweepable requires a kind")
        if not self.id:
            raise ValueError("Sweepable requires an id")
        if not callable(self.delete):
            raise ValueError("Sweepable delete must be callable")
        return True
