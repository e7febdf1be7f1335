"""Sweep orchestration engine.

Discovers transient resources left behind by test runs and deletes them.

Classes:
    SweepRegistry: Resource kind name -> discovery function and dependencies
    SweepOrchestrator: Best-effort deletion of discovered resources
    SweepRunner: Runs sweepers per region in dependency order
    PageCursor: Sequential cursor over paginated listing APIs
    RegionPolicy: Region eligibility of a resource kind
"""

from __future__ import annotations

from .discovery import KindSpec, SweepContext, make_sweeper, sweep_kind
from .harness import SweepRunner
from .orchestrator import SweepOrchestrator
from .paginator import PageCursor, boto_page_cursor
from .region import RegionPolicy
from .registry import SweepRegistry

__all__ = [
    "KindSpec",
    "PageCursor",
    "RegionPolicy",
    "SweepContext",
    "SweepOrchestrator",
    "SweepRegistry",
    "SweepRunner",
    "boto_page_cursor",
    "make_sweeper",
    "sweep_kind",
]
