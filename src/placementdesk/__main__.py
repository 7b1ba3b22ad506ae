"""Entry point: ``python -m placementdesk``."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

import typer

from placementdesk.exceptions import PlacementDeskError
from placementdesk.portal import PlacementPortal
from placementdesk.settings import AppSettings, load_seed_data

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="placementdesk",
    help="PlacementDesk - campus placement management",
    add_completion=False,
)


def _configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


@contextmanager
def _open_portal(ctx: typer.Context) -> Iterator[PlacementPortal]:
    """Build the portal from the settings path given to the app, seeding it if configured."""
    try:
        settings = AppSettings.from_yaml(ctx.obj.get("settings_path"))
        portal = PlacementPortal(settings)
    except PlacementDeskError as exc:
        logger.error("%s: %s", exc.error_kind, exc)
        raise typer.Exit(code=1) from None
    try:
        if settings.seed_file:
            portal.seed(load_seed_data(settings.seed_file))
        yield portal
    except PlacementDeskError as exc:
        logger.error("%s: %s", exc.error_kind, exc)
        raise typer.Exit(code=1) from None
    finally:
        portal.close()


def _print_report(portal: PlacementPortal) -> None:
    from placementdesk.reporting import console

    console.print_banner()
    console.print_dashboard(portal.dashboard())
    console.print_application_breakdown(portal.application_statistics())
    console.print_popular_jobs(portal.job_statistics())
    console.print_closing_soon(portal.jobs_closing_soon(), portal.clock())


@app.callback(invoke_without_command=True)
def main_options(
    ctx: typer.Context,
    settings: Optional[str] = typer.Option(None, "--settings", help="Path to settings.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Campus placement desk. Runs ``report`` when no command is given."""
    _configure_logging(verbose)
    ctx.obj = {"settings_path": settings}
    if ctx.invoked_subcommand is None:
        with _open_portal(ctx) as portal:
            _print_report(portal)


@app.command()
def report(ctx: typer.Context) -> None:
    """Print the dashboard and statistics."""
    with _open_portal(ctx) as portal:
        _print_report(portal)


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: api_host)"),
    port: Optional[int] = typer.Option(None, help="Port to bind to (default: api_port)"),
) -> None:
    """Start the JSON API server."""
    from placementdesk.api.server import serve as run_server

    with _open_portal(ctx) as portal:
        run_server(portal, host or portal.settings.api_host, port or portal.settings.api_port)


@app.command()
def export(
    ctx: typer.Context,
    fmt: str = typer.Option("json", "--format", help="json or csv"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Default: state_dir"),
) -> None:
    """Export applications to a JSON or CSV file."""
    from placementdesk.reporting.data_export import export_to_file

    if fmt not in ("json", "csv"):
        raise typer.BadParameter("format must be json or csv", param_hint="--format")
    with _open_portal(ctx) as portal:
        export_to_file(
            portal.applications.all_applications(),
            output_dir or portal.settings.state_dir,
            fmt,
        )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
