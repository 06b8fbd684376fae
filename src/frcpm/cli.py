"""CLI entry point."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from frcpm.core.config import get_settings
from frcpm.core.logging import configure_logging

app = typer.Typer(
    name="frcpm",
    help="FRC project management background task core",
    no_args_is_help=True,
)
console = Console()


@app.command()
def version() -> None:
    """Show version."""
    from frcpm import __version__

    console.print(f"frcpm {__version__}")


@app.command()
def info() -> None:
    """Show system information and effective settings."""
    import sys

    from frcpm import __version__

    settings = get_settings()
    console.print(f"[bold]FRCPM[/bold] {__version__}")
    console.print(f"Python {sys.version}")
    console.print(f"Database: {settings.database_url}")
    console.print(f"Workers: {settings.worker_count}")
    console.print(f"Team: {settings.team_number or '[dim]not set[/dim]'}")
    console.print(f"TBA API: {'configured' if settings.tba_api_key else '[dim]not configured[/dim]'}")
    console.print(f"FRC API: {'configured' if settings.frc_api_username and settings.frc_api_key else '[dim]not configured[/dim]'}")


@app.command("init-db")
def init_db(
    seed: bool = typer.Option(False, "--seed", help="Insert default subteams and a sample project"),
) -> None:
    """Create the database schema."""
    from frcpm.database.provider import SQLAlchemyProvider
    from frcpm.database.seed import seed_defaults
    from frcpm.database.task import DatabaseTask
    from frcpm.executor.sync import SyncExecutor
    from frcpm.reporter.simple import LoggingTaskReporter

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    provider = SQLAlchemyProvider(settings.database_url, echo=settings.database_echo)
    try:
        provider.create_schema()
        console.print(f"[green]Schema ready[/green] at {settings.database_url}")
        if not seed:
            return
        task = DatabaseTask("Seed default data", lambda handle: seed_defaults(handle.session), provider)
        LoggingTaskReporter().attach(task)
        with SyncExecutor() as executor:
            inserted = executor.submit_task(task).result()
        if inserted:
            console.print("[green]Default data inserted[/green]")
        else:
            console.print("[yellow]Database already has data; nothing seeded[/yellow]")
    finally:
        provider.dispose()


@app.command()
def stats() -> None:
    """Show row counts per table."""
    from frcpm.core.context import AppContext
    from frcpm.services import MilestoneService, ProjectService, SubteamService, TeamMemberService

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    table = Table(title="FRCPM database")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    with AppContext(settings) as context:
        for label, service_type in (
            ("Projects", ProjectService),
            ("Milestones", MilestoneService),
            ("Subteams", SubteamService),
            ("Team members", TeamMemberService),
        ):
            count = context.resolve(service_type).count_async().result(timeout=settings.shutdown_timeout)
            table.add_row(label, f"{count:,}")
    console.print(table)


if __name__ == "__main__":
    app()
