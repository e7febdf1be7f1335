"""Sweeper registry.

Table of resource kind name -> discovery function and dependencies. Filled at
startup, frozen, and handed to the harness.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, Sequence

from ..models.sweep_result import SweepResult
from ..models.sweeper import SweeperEntry
from .dependency import DependencyResolver

logger = logging.getLogger(__name__)


class DuplicateSweeperError(Exception):
    """A sweeper with the same name is already registered."""


class RegistryFrozenError(Exception):
    """The registry no longer accepts registrations."""


class UnknownSweeperError(KeyError):
    """A sweeper or dependency name is not registered."""


class SweepRegistry:
    """Registry of sweepers keyed by resource kind name.

    Registration order is kept and used as the tie-breaker when ordering kinds
    that do not depend on each other.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SweeperEntry] = {}
        self._frozen = False

    def add(
        self,
        name: str,
        run: Callable[..., SweepResult],
        dependencies: Sequence[str] = (),
    ) -> SweeperEntry:
        """Register a sweeper.

        Args:
            name: Unique resource kind name
            run: Discovery function taking (region, context)
            dependencies: Kinds that must be swept before this one

        Returns:
            The registered entry

        Raises:
            DuplicateSweeperError: If name is already registered
            RegistryFrozenError: If the registry has been frozen
            ValueError: If the entry is invalid
        """
        if self._frozen:
            raise RegistryFrozenError(f"cannot register {name}: registry is frozen")

        if name in self._entries:
            raise DuplicateSweeperError(f"Sweeper {name} is already registered")

        entry = SweeperEntry(name=name, run=run, dependencies=tuple(dependencies))
        entry.validate()
        self._entries[name] = entry
        logger.debug(f"Registered sweeper {name} (dependencies: {list(entry.dependencies)})")
        return entry

    def freeze(self) -> "SweepRegistry":
        """Stop accepting registrations after checking every dependency exists.

        Returns:
            The registry itself

        Raises:
            UnknownSweeperError: If a dependency is not registered
            ValueError: If the dependencies form a cycle
        """
        self.execution_order()
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> SweeperEntry:
        """Look up a sweeper by name.

        Raises:
            UnknownSweeperError: If name is not registered
        """
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownSweeperError(name) from None

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._entries)

    def filter(self, patterns: Optional[str]) -> list[str]:
        """Select sweepers by a comma-separated substring filter.

        Every selected sweeper's dependencies are included transitively.

        Args:
            patterns: Filter such as "access_point,storage_lens"; None or ""
                selects everything

        Returns:
            Selected names in registration order
        """
        if not patterns:
            return self.names()

        terms = [term.strip().lower() for term in patterns.split(",") if term.strip()]
        matched = [name for name in self._entries if any(term in name.lower() for term in terms)]
        selected = self._with_dependencies(matched)
        return [name for name in self._entries if name in selected]

    def execution_order(self, names: Optional[Iterable[str]] = None) -> list[str]:
        """Order sweepers so that dependencies run first.

        Args:
            names: Sweepers to run (default: all); their dependencies are added

        Returns:
            Names in a valid execution order

        Raises:
            UnknownSweeperError: If a name or dependency is not registered
            ValueError: If the dependencies form a cycle
        """
        requested = self.names() if names is None else list(names)
        selected = self._with_dependencies(requested)
        ordered_input = [name for name in self._entries if name in selected]

        resolver = DependencyResolver()
        for name in ordered_input:
            for dependency in self._entries[name].dependencies:
                # dependency is processed before the kind that declares it
                resolver.add_dependency(parent=name, child=dependency)

        return resolver.compute_deletion_order(ordered_input)

    def _with_dependencies(self, names: Iterable[str]) -> set[str]:
        selected: set[str] = set()
        pending = list(names)

        while pending:
            name = pending.pop()
            if name in selected:
                continue
            entry = self.get(name)
            selected.add(name)
            pending.extend(entry.dependencies)

        return selected

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[SweeperEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
