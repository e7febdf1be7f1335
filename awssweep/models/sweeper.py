"""Sweeper entry model.

Registration record tying a resource kind name to its discovery function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ..sweep.discovery import SweepContext
    from .sweep_result import SweepResult


@dataclass(frozen=True)
class SweeperEntry:
    """Sweeper registration entry.

    Created once at startup and never mutated afterwards.

    Attributes:
        name: Unique resource kind name (e.g., "aws_s3_access_point")
        run: Discovery function, called with (region, context)
        dependencies: Kinds that must be swept before this one
    """

    name: str
    run: Callable[[str, SweepContext], SweepResult] = field(compare=False, repr=False)
    dependencies: tuple[str, ...] = ()

    def validate(self) -> bool:
        """Validate entry invariants.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if not self.name:
            raise ValueError("Sweeper requires a name")
        if not callable(self.run):
            raise ValueError(f"Sweeper {self.name} requires a callable run function")
        if self.name in self.dependencies:
            raise ValueError(f"Sweeper {self.name} cannot depend on itself")
        if len(set(self.dependencies)) != len(self.dependencies):
            raise ValueError(f"Sweeper {self.name} has duplicate dependencies")
        return True
