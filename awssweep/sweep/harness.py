"""Sweep runner.

Runs registered sweepers for each region in dependency order and collects
their results into a SweepReport.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..models.sweep_report import KindOutcome, KindStatus, SweepReport
from ..models.sweep_result import SweepResult
from .discovery import SweepContext
from .registry import SweepRegistry

logger = logging.getLogger(__name__)


class SweepRunner:
    """Sweep harness.

    A kind only starts once every kind it depends on has finished. A failed
    kind never stops independent kinds or other regions; kinds depending on it
    are held back unless allow_failures is set.

    Attributes:
        registry: Frozen sweeper registry
        context: Client provider and orchestrator handed to every sweeper
        allow_failures: Run dependent kinds even when a dependency failed
    """

    def __init__(
        self,
        registry: SweepRegistry,
        context: SweepContext,
        allow_failures: bool = False,
    ) -> None:
        """Initialize sweep runner.

        Args:
            registry: Sweeper registry (frozen on first run if it is not already)
            context: Shared client provider and orchestrator
            allow_failures: Run dependent kinds after a dependency failed (default: False)
        """
        self.registry = registry
        self.context = context
        self.allow_failures = allow_failures

    def run(self, regions: Sequence[str], sweepers: Optional[str] = None) -> SweepReport:
        """Sweep every selected kind in every region.

        Args:
            regions: Regions to sweep
            sweepers: Comma-separated name filter (default: all sweepers)

        Returns:
            SweepReport with one outcome per region/kind

        Raises:
            ValueError: If no regions are given or dependencies form a cycle
            UnknownSweeperError: If a dependency is not registered
        """
        if not regions:
            raise ValueError("At least one region is required")

        if not self.registry.frozen:
            self.registry.freeze()

        order = self.registry.execution_order(self.registry.filter(sweepers))

        report = SweepReport(
            run_id=f"sweep_{uuid.uuid4()}",
            started_at=datetime.now(timezone.utc),
            regions=list(regions),
            dry_run=self.context.orchestrator.dry_run,
        )

        for region in regions:
            logger.info(f"Running {len(order)} sweepers for region ({region})")
            report.outcomes.extend(self._run_region(region, order))

        report.completed_at = datetime.now(timezone.utc)
        return report

    def _run_region(self, region: str, order: list[str]) -> list[KindOutcome]:
        outcomes: list[KindOutcome] = []
        # kinds that failed or were held back in this region
        blocked: set[str] = set()

        for name in order:
            blocking = [dep for dep in self.registry.get(name).dependencies if dep in blocked]

            if blocking and not self.allow_failures:
                logger.warning(f"Not running sweeper {name} ({region}): dependencies failed: {', '.join(blocking)}")
                blocked.add(name)
                outcomes.append(KindOutcome(region=region, kind=name, status=KindStatus.NOT_RUN))
                continue

            outcome = self._run_sweeper(region, name)
            outcomes.append(outcome)

            if outcome.status == KindStatus.FAILED:
                blocked.add(name)

        return outcomes

    def _run_sweeper(self, region: str, name: str) -> KindOutcome:
        entry = self.registry.get(name)
        logger.info(f"Running sweeper {name} ({region})")
        start = time.monotonic()

        try:
            result = entry.run(region, self.context)
        except Exception as e:
            logger.exception(f"Sweeper {name} ({region}) raised an unexpected error")
            result = SweepResult(errors=[e])

        duration = time.monotonic() - start
        status = KindStatus.FAILED if result else KindStatus.SUCCEEDED

        if result:
            logger.error(f"Error running sweeper {name} ({region}): {result.error_or_none()}")
        else:
            logger.info(f"Completed sweeper {name} ({region}) in {duration:.2f}s")

        return KindOutcome(
            region=region,
            kind=name,
            status=status,
            discovered=result.discovered,
            deleted=result.deleted,
            skipped=result.skipped,
            errors=[str(err) for err in result.errors],
            duration_seconds=round(duration, 3),
        )
