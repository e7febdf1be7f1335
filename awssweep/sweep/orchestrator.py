"""Sweep orchestrator.

Deletes a batch of sweepables for one resource kind. Every sweepable gets a
deletion attempt regardless of how its siblings fare, and every failure ends up
in the returned result.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ..models.sweep_result import DeletionFailure, SweepResult
from ..models.sweepable import Sweepable
from .errors import error_code

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 10
DEFAULT_MAX_RETRIES = 5

# Error codes retried with backoff
THROTTLING_ERROR_CODES = frozenset(
    [
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "RequestLimitExceeded",
        "RequestThrottled",
        "TooManyRequestsException",
        "SlowDown",
    ]
)


class SweepOrchestrator:
    """Best-effort deletion of sweepables.

    Deletions run on a bounded thread pool. Throttling errors are retried with
    exponential backoff; anything else fails that sweepable immediately.

    Attributes:
        max_workers: Maximum concurrent deletions
        max_retries: Attempts per sweepable when throttled
        base_delay: Initial backoff delay in seconds
        dry_run: Log sweepables instead of deleting them
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = 1.0,
        dry_run: bool = False,
    ) -> None:
        """Initialize sweep orchestrator.

        Args:
            max_workers: Maximum concurrent deletions (default: 10)
            max_retries: Attempts per sweepable when throttled (default: 5)
            base_delay: Initial backoff delay in seconds (default: 1.0)
            dry_run: Skip deletions and only report (default: False)

        Raises:
            ValueError: If max_workers or max_retries is less than 1
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.max_workers = max_workers
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.dry_run = dry_run

    def run(self, sweepables: Sequence[Sweepable]) -> SweepResult:
        """Delete every sweepable.

        Args:
            sweepables: Sweepables to delete

        Returns:
            SweepResult with one DeletionFailure per failed deletion
        """
        result = SweepResult()
        unique = self._deduplicate(sweepables)
        result.discovered = len(unique)

        if not unique:
            return result

        if self.dry_run:
            for sweepable in unique:
                logger.info(f"[dry-run] Would delete {sweepable.kind}: {sweepable.id}")
            result.skipped = len(unique)
            return result

        lock = threading.Lock()

        def sweep_one(sweepable: Sweepable) -> None:
            try:
                self._delete_with_retry(sweepable)
            except Exception as e:
                logger.warning(f"Failed to delete {sweepable.kind} {sweepable.id}: {e}")
                with lock:
                    result.append(DeletionFailure(sweepable.kind, sweepable.id, e))
                return

            with lock:
                result.deleted += 1

        workers = min(self.max_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # sweep_one never raises, so no future can cancel its siblings
            list(executor.map(sweep_one, unique))

        # Completion order varies between runs; keep failures in input order
        position = {sweepable.key: index for index, sweepable in enumerate(unique)}
        result.errors.sort(key=lambda failure: position[(failure.kind, failure.resource_id)])

        logger.debug(f"Swept {result.deleted}/{len(unique)} resources, {len(result)} failed")
        return result

    def _delete_with_retry(self, sweepable: Sweepable) -> None:
        for attempt in range(self.max_retries):
            try:
                sweepable.delete()
                return
            except Exception as e:
                if error_code(e) not in THROTTLING_ERROR_CODES or attempt == self.max_retries - 1:
                    raise

                wait_time = self.base_delay * (2**attempt)
                logger.debug(
                    f"Throttled deleting {sweepable.kind} {sweepable.id}, "
                    f"retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})"
                )
                time.sleep(wait_time)

    def _deduplicate(self, sweepables: Sequence[Sweepable]) -> list[Sweepable]:
        seen: set[tuple[str, str]] = set()
        unique = []

        for sweepable in sweepables:
            if sweepable.key in seen:
                logger.debug(f"Skipping duplicate {sweepable.kind}: {sweepable.id}")
                continue
            seen.add(sweepable.key)
            unique.append(sweepable)

        return unique
