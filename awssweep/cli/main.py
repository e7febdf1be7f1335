"""Main CLI entry point using Typer."""

import logging
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..aws.client import SharedClientProvider
from ..models.sweep_report import KindStatus, SweepReport
from ..services import build_registry
from ..sweep.audit import SweepAuditLog
from ..sweep.discovery import SweepContext
from ..sweep.harness import SweepRunner
from ..sweep.orchestrator import SweepOrchestrator
from ..sweep.registry import UnknownSweeperError
from ..utils.logging import setup_logging
from .config import Config, ConfigError

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="awssweep",
    help="AWS Sweeper - delete resources left behind by acceptance test runs",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None

STATUS_STYLES = {
    KindStatus.SUCCEEDED: "green",
    KindStatus.FAILED: "bold red",
    KindStatus.NOT_RUN: "yellow",
}


@app.callback()
def main(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config file"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="AWS profile name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """AWS Sweeper - delete resources left behind by acceptance test runs."""
    global config

    try:
        config = Config.load(config_path)
    except ConfigError as e:
        console.print(f"✗ Configuration error: {e}", style="bold red")
        raise typer.Exit(code=2)

    # Override with CLI options
    if profile:
        config.aws_profile = profile

    # Setup logging
    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    # Disable colors if requested
    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import boto3

    from .. import __version__

    console.print(f"aws-sweeper version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"boto3 {boto3.__version__}")


@app.command("list")
def list_sweepers(
    sweepers: Optional[str] = typer.Option(
        None, "--sweepers", "-s", help="Comma-separated sweeper name filter (dependencies are included)"
    ),
):
    """List registered sweepers in execution order."""
    try:
        registry = build_registry()
        order = registry.execution_order(registry.filter(sweepers))
    except (UnknownSweeperError, ValueError) as e:
        console.print(f"✗ Invalid sweeper configuration: {e}", style="bold red")
        raise typer.Exit(code=2)

    if not order:
        console.print(f"No sweepers match filter '{sweepers}'", style="yellow")
        raise typer.Exit(code=0)

    table = Table(title="Registered Sweepers", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Sweeper", style="cyan")
    table.add_column("Dependencies")

    for index, name in enumerate(order, start=1):
        dependencies = registry.get(name).dependencies
        table.add_row(str(index), name, ", ".join(dependencies) or "-")

    console.print()
    console.print(table)
    console.print()


@app.command()
def sweep(
    regions: Optional[List[str]] = typer.Option(
        None, "--region", "-r", help="Region to sweep (repeatable, default: configured regions)"
    ),
    sweepers: Optional[str] = typer.Option(
        None, "--sweepers", "-s", help="Comma-separated sweeper name filter (dependencies are included)"
    ),
    allow_failures: bool = typer.Option(
        False, "--allow-failures", help="Run sweepers even when a sweeper they depend on failed"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="List resources that would be deleted without deleting"),
    max_workers: Optional[int] = typer.Option(None, "--max-workers", help="Maximum concurrent deletions per sweeper"),
    no_audit: bool = typer.Option(False, "--no-audit", help="Do not write a YAML audit log for this run"),
):
    """Sweep leftover test resources from one or more regions."""
    if config is None:
        console.print("✗ Configuration was not loaded", style="bold red")
        raise typer.Exit(code=2)

    selected_regions = list(regions or config.regions)
    if not selected_regions:
        console.print("✗ No regions given. Use --region or set regions in the config file", style="bold red")
        raise typer.Exit(code=2)

    try:
        orchestrator = SweepOrchestrator(
            max_workers=max_workers or config.max_workers,
            max_retries=config.max_retries,
            dry_run=dry_run,
        )
        registry = build_registry()
    except (UnknownSweeperError, ValueError) as e:
        console.print(f"✗ Invalid sweeper configuration: {e}", style="bold red")
        raise typer.Exit(code=2)

    context = SweepContext(
        provider=SharedClientProvider(profile_name=config.aws_profile),
        orchestrator=orchestrator,
    )
    runner = SweepRunner(registry, context, allow_failures=allow_failures or config.allow_failures)

    mode = "[yellow]dry run[/yellow]" if dry_run else "[red]deleting[/red]"
    console.print(f"🧹 Sweeping {', '.join(selected_regions)} ({mode})\n")

    report = runner.run(selected_regions, sweepers=sweepers)
    _print_report(report)

    if not no_audit:
        audit_log = SweepAuditLog(storage_dir=config.audit_dir)
        audit_file = audit_log.log_run(report)
        console.print(f"Audit log: {audit_file}")

    if not report.succeeded:
        raise typer.Exit(code=1)


def _print_report(report: SweepReport) -> None:
    table = Table(title=f"Sweep {report.run_id}", show_header=True, header_style="bold magenta")
    table.add_column("Region", style="cyan")
    table.add_column("Sweeper", style="cyan")
    table.add_column("Status")
    table.add_column("Found", justify="right")
    table.add_column("Deleted", justify="right", style="green")
    table.add_column("Errors", justify="right")

    for outcome in report.outcomes:
        table.add_row(
            outcome.region,
            outcome.kind,
            f"[{STATUS_STYLES[outcome.status]}]{outcome.status.value}[/]",
            str(outcome.discovered),
            str(outcome.skipped if report.dry_run else outcome.deleted),
            str(len(outcome.errors)),
        )

    console.print(table)
    console.print()

    for outcome in report.failed:
        console.print(f"✗ {outcome.kind} ({outcome.region}):", style="bold red")
        for error in outcome.errors:
            console.print(f"    • {error}", markup=False)

    if report.succeeded:
        verb = "would be deleted" if report.dry_run else "deleted"
        count = sum(outcome.skipped for outcome in report.outcomes) if report.dry_run else report.total_deleted
        console.print(f"✓ Sweep complete: {count} resources {verb}", style="bold green")
    else:
        console.print(
            f"✗ Sweep finished with {report.total_errors} errors in {len(report.failed)} sweepers",
            style="bold red",
        )


# Audit history commands group
runs_app = typer.Typer(help="Sweep run history commands")
app.add_typer(runs_app, name="runs")


@runs_app.command("list")
def runs_list():
    """List sweep runs recorded in the audit log, oldest first."""
    if config is None:
        console.print("✗ Configuration was not loaded", style="bold red")
        raise typer.Exit(code=2)

    runs = SweepAuditLog(storage_dir=config.audit_dir).list_runs()

    if not runs:
        console.print("No sweep runs found.", style="yellow")
        return

    table = Table(show_header=True, title="Sweep Runs", header_style="bold magenta")
    table.add_column("Run ID", style="cyan")
    table.add_column("Started", style="green")
    table.add_column("Regions")
    table.add_column("Dry Run", justify="center")
    table.add_column("Deleted", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Result")

    for run in runs:
        table.add_row(
            run["run_id"],
            run["started_at"],
            ", ".join(run["regions"]),
            "✓" if run["dry_run"] else "",
            str(run["total_deleted"]),
            str(run["total_errors"]),
            "[green]succeeded[/]" if run["succeeded"] else "[bold red]failed[/]",
        )

    console.print(table)
    console.print(f"\nTotal runs: {len(runs)}")


@runs_app.command("show")
def runs_show(run_id: str = typer.Argument(..., help="Run ID to display")):
    """Display per-sweeper outcomes of one recorded sweep run."""
    if config is None:
        console.print("✗ Configuration was not loaded", style="bold red")
        raise typer.Exit(code=2)

    audit_data = SweepAuditLog(storage_dir=config.audit_dir).get_run(run_id)
    if audit_data is None:
        console.print(f"✗ Sweep run '{run_id}' not found", style="bold red")
        raise typer.Exit(code=1)

    run = audit_data["run"]
    console.print(f"\n[bold]Sweep run: {run['run_id']}[/bold]")
    console.print(f"Started: {run['started_at']}")
    console.print(f"Completed: {run['completed_at'] or '-'}")
    console.print(f"Regions: {', '.join(run['regions'])}")
    console.print(f"Mode: {'dry run' if run['dry_run'] else 'delete'}\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Region", style="cyan")
    table.add_column("Sweeper", style="cyan")
    table.add_column("Status")
    table.add_column("Found", justify="right")
    table.add_column("Deleted", justify="right", style="green")
    table.add_column("Errors", justify="right")

    for outcome in audit_data["outcomes"]:
        status = KindStatus(outcome["status"])
        table.add_row(
            outcome["region"],
            outcome["kind"],
            f"[{STATUS_STYLES[status]}]{status.value}[/]",
            str(outcome["discovered"]),
            str(outcome["skipped"] if run["dry_run"] else outcome["deleted"]),
            str(len(outcome["errors"])),
        )

    console.print(table)

    for outcome in audit_data["outcomes"]:
        for error in outcome["errors"]:
            console.print(f"✗ {outcome['kind']} ({outcome['region']}): {error}", style="red", markup=False)


def cli_main():
    """Entry point for the awssweep console script."""
    app()


if __name__ == "__main__":
    cli_main()
