"""Rich-powered console output."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from placementdesk.models import Job
from placementdesk.reporting.statistics import days_until_deadline

_console = Console()

_STATUS_STYLES = {
    "under_review": "yellow",
    "shortlisted": "bold cyan",
    "accepted": "bold green",
    "rejected": "dim red",
}


def print_banner() -> None:
    """Display the startup banner."""
    _console.print(
        Panel.fit(
            "[bold cyan]PlacementDesk[/bold cyan]  Campus Placement Management",
            border_style="cyan",
        )
    )


def print_dashboard(summary: dict[str, int]) -> None:
    """Display the headline counts."""
    table = Table(title="Placement Dashboard", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Students", str(summary["total_students"]))
    table.add_row("Eligible students", str(summary["eligible_students"]))
    table.add_row("Employers", str(summary["total_employers"]))
    table.add_row("Verified employers", str(summary["verified_employers"]))
    table.add_row("Jobs", str(summary["total_jobs"]))
    table.add_row("Active jobs", str(summary["active_jobs"]))
    table.add_row("Applications", str(summary["total_applications"]))

    _console.print()
    _console.print(table)


def print_application_breakdown(stats: dict[str, Any]) -> None:
    """Display applications per status and per month."""
    table = Table(title="Applications", show_header=True, header_style="bold magenta")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    for status, count in stats["by_status"].items():
        style = _STATUS_STYLES.get(status, "")
        table.add_row(f"[{style}]{status}[/{style}]", str(count))
    _console.print()
    _console.print(table)

    if stats["by_month"]:
        months = Table(title="By Month", show_header=True, header_style="bold magenta")
        months.add_column("Month")
        months.add_column("Count", justify="right")
        for month, count in stats["by_month"].items():
            months.add_row(month, str(count))
        _console.print(months)


def print_popular_jobs(job_stats: dict[str, Any]) -> None:
    table = Table(title="Most Popular Jobs", show_header=True, header_style="bold magenta")
    table.add_column("Job")
    table.add_column("Company")
    table.add_column("Applications", justify="right")
    for entry in job_stats["most_popular_jobs"]:
        job: Job = entry["job"]
        table.add_row(
            job.title or "(untitled)",
            job.company or "(unknown)",
            str(entry["application_count"]),
        )
    _console.print()
    _console.print(table)


def print_closing_soon(jobs: list[Job], now: datetime) -> None:
    """List jobs whose application deadline is near."""
    if not jobs:
        _console.print("[dim]No deadlines in the coming days.[/dim]")
        return
    table = Table(title="Deadlines Approaching", show_header=True, header_style="bold magenta")
    table.add_column("Job")
    table.add_column("Company")
    table.add_column("Deadline")
    table.add_column("Days left", justify="right")
    for job in jobs:
        deadline = job.application_deadline.date().isoformat() if job.application_deadline else "-"
        table.add_row(job.title, job.company, deadline, str(days_until_deadline(job, now)))
    _console.print()
    _console.print(table)
    _console.print()
