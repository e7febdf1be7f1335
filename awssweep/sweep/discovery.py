"""Per-kind discovery and sweep.

Drives one resource kind through region gating, paginated listing, sweepable
building and deletion, folding every failure into a single SweepResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..models.sweep_result import SweepResult
from ..models.sweepable import Sweepable
from .errors import ResourceIdentifierError, SweepClientError, SweepErrorAction, SweepListError, classify
from .orchestrator import SweepOrchestrator
from .paginator import PageCursor
from .region import RegionPolicy, always_eligible

if TYPE_CHECKING:
    from ..aws.client import SharedClientProvider, SweepClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepContext:
    """Collaborators shared by every sweeper in a run.

    Attributes:
        provider: Source of per-region backend clients
        orchestrator: Executes deletions
    """

    provider: SharedClientProvider
    orchestrator: SweepOrchestrator


@dataclass(frozen=True)
class KindSpec:
    """Description of one sweepable resource kind.

    Attributes:
        name: Resource kind name used in the registry
        display_name: Plural human-readable name for log messages
        cursor_factory: Builds a PageCursor over the kind's listing API
        builder: Turns one listed item into a Sweepable, or None to leave the
            item alone; raises ResourceIdentifierError for malformed items
        region_policy: Where the kind can be discovered
        dependencies: Kinds that must be swept before this one
    """

    name: str
    display_name: str
    cursor_factory: Callable[[SweepClient], PageCursor] = field(compare=False, repr=False)
    builder: Callable[[SweepClient, Any], Optional[Sweepable]] = field(compare=False, repr=False)
    region_policy: RegionPolicy = field(default_factory=always_eligible)
    dependencies: tuple[str, ...] = ()


def sweep_kind(spec: KindSpec, region: str, context: SweepContext) -> SweepResult:
    """Discover and delete every resource of one kind in one region.

    Listing stops at the first page error. Sweepables built from earlier pages
    are still deleted, whether the error was skippable or fatal. An item the
    builder fails on is recorded and the remaining items are still built.

    Args:
        spec: Resource kind description
        region: AWS region to sweep
        context: Shared client provider and orchestrator

    Returns:
        SweepResult holding listing, build and deletion failures
    """
    result = SweepResult()

    if not spec.region_policy.is_eligible(spec.name, region):
        logger.warning(f"Skipping {spec.display_name} sweep for region: {region}")
        return result

    try:
        client = context.provider.get(region)
    except Exception as e:
        result.append(SweepClientError(region, e))
        return result

    sweepables: list[Sweepable] = []
    try:
        cursor: Optional[PageCursor] = spec.cursor_factory(client)
    except Exception as e:
        logger.error(f"Error listing {spec.display_name} ({region}): {e}")
        result.append(SweepListError(spec.name, region, e))
        cursor = None

    while cursor is not None and cursor.has_more():
        try:
            page = cursor.next()
        except Exception as e:
            if classify(e) == SweepErrorAction.SKIP:
                logger.warning(f"Skipping {spec.display_name} sweep for {region}: {e}")
            else:
                logger.error(f"Error listing {spec.display_name} ({region}): {e}")
                result.append(SweepListError(spec.name, region, e))
            break

        for item in page:
            try:
                sweepable = spec.builder(client, item)
            except ResourceIdentifierError as e:
                logger.warning(f"Skipping malformed {spec.display_name} item ({region}): {e}")
                result.append(e)
                continue
            except Exception as e:
                logger.error(f"Error reading {spec.display_name} item ({region}): {e!r}")
                result.append(e)
                continue

            if sweepable is not None:
                sweepables.append(sweepable)

    logger.info(f"Found {len(sweepables)} {spec.display_name} to sweep in {region}")

    result.extend(context.orchestrator.run(sweepables))
    return result


def make_sweeper(spec: KindSpec) -> Callable[[str, SweepContext], SweepResult]:
    """Bind a KindSpec into a registry-compatible discovery function."""

    def run(region: str, context: SweepContext) -> SweepResult:
        return sweep_kind(spec, region, context)

    run.__name__ = f"sweep_{spec.name}"
    return run
