"""Audit log storage for sweep runs.

Stores and retrieves sweep reports in YAML format so operators can see what a
CI sweep deleted and what it left behind.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from ..models.sweep_report import SweepReport


class SweepAuditLog:
    """Sweep report storage and retrieval.

    Stores one YAML file per run, organized by year/month.

    Storage structure:
        ~/.awssweep/audit-logs/
            2026/
                10/
                    sweep-sweep_123.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit log storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.awssweep/audit-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".awssweep" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_run(self, report: SweepReport) -> Path:
        """Write a sweep report to audit storage.

        Overwrites an existing log with the same run ID.

        Args:
            report: Sweep report to log

        Returns:
            Path of the written file
        """
        year_month_dir = self.storage_dir / str(report.started_at.year) / f"{report.started_at.month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "resource_sweep",
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
            "run": {
                "run_id": report.run_id,
                "started_at": report.started_at.isoformat(),
                "completed_at": report.completed_at.isoformat() if report.completed_at else None,
                "regions": report.regions,
                "dry_run": report.dry_run,
                "succeeded": report.succeeded,
                "total_deleted": report.total_deleted,
                "total_errors": report.total_errors,
            },
            "outcomes": [
                {
                    "region": outcome.region,
                    "kind": outcome.kind,
                    "status": outcome.status.value,
                    "discovered": outcome.discovered,
                    "deleted": outcome.deleted,
                    "skipped": outcome.skipped,
                    "errors": outcome.errors,
                    "duration_seconds": outcome.duration_seconds,
                }
                for outcome in report.outcomes
            ],
        }

        audit_file = year_month_dir / f"sweep-{report.run_id}.yaml"
        with open(audit_file, "w") as f:
            yaml.safe_dump(audit_data, f, default_flow_style=False, sort_keys=False)

        return audit_file

    def get_run(self, run_id: str) -> Optional[dict]:
        """Retrieve a run's audit log by ID.

        Args:
            run_id: Run ID to retrieve

        Returns:
            Audit log dictionary if found, None otherwise
        """
        for audit_file in self.storage_dir.glob(f"*/*/sweep-{run_id}.yaml"):
            with open(audit_file, "r") as f:
                return yaml.safe_load(f)

        return None

    def list_runs(self) -> list[dict]:
        """List run summaries, oldest first.

        Returns:
            The "run" section of every stored audit log
        """
        runs = []

        for audit_file in sorted(self.storage_dir.glob("*/*/sweep-*.yaml")):
            with open(audit_file, "r") as f:
                audit_data = yaml.safe_load(f)
            runs.append(audit_data["run"])

        return sorted(runs, key=lambda run: run["started_at"])
