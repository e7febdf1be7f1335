"""Resource kind sweepers, one package per AWS service."""

from __future__ import annotations

from ..sweep.registry import SweepRegistry
from . import s3control

SERVICE_PACKAGES = [
    s3control,
]


def build_registry() -> SweepRegistry:
    """Create a frozen registry holding every service's sweepers.

    Raises:
        DuplicateSweeperError: If two sweepers share a name
        UnknownSweeperError: If a sweeper depends on an unregistered kind
    """
    registry = SweepRegistry()
    for package in SERVICE_PACKAGES:
        package.register_sweepers(registry)
    return registry.freeze()
