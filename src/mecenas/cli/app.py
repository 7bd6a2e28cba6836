"""Main CLI application using Typer."""

import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler

from mecenas import __version__

# Create Typer app
app = typer.Typer(
    name="mecenas",
    help="Mecenas - privacy-aware legal assistant for Polish law firms",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=verbose)],
    )


@app.command()
def version():
    """Show mecenas version."""
    console.print(f"mecenas version {__version__}")


@app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
    model: str = typer.Option(None, "--model", "-m", help="Main local model name"),
):
    """Create a default configuration file."""
    from mecenas.cli.init_cmd import init_command

    init_command(force=force, model=model)


@app.command()
def chat(
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.mecenas/mecenas.yaml)",
    ),
):
    """Start interactive chat session."""
    from mecenas.cli.chat import chat_command

    chat_command(config_path=config_path)


@app.command()
def doctor(
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
):
    """Run system health checks and diagnostics."""
    from mecenas.cli.doctor import doctor_command

    doctor_command(config_path=config_path)


@app.command()
def audit(
    db_path: str = typer.Option(
        "~/.mecenas/privacy_audit.db",
        "--db",
        "-d",
        help="Path to privacy audit database",
    ),
    action: str = typer.Option(
        None,
        "--action",
        "-a",
        help="Filter by action (route_local, route_cloud, route_refuse, ...)",
    ),
    session_key: str = typer.Option(
        None,
        "--session",
        "-s",
        help="Filter by session key",
    ),
    user_id: str = typer.Option(
        None,
        "--user",
        "-u",
        help="Filter by user ID",
    ),
    hours: int = typer.Option(
        None,
        "--hours",
        help="Only show events from last N hours",
    ),
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Maximum number of events to show",
    ),
    output_format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
):
    """Query the privacy audit trail."""
    from mecenas.cli.audit_cmd import query_privacy_events

    query_privacy_events(
        db_path=db_path,
        action=action,
        session_key=session_key,
        user_id=user_id,
        hours=hours,
        limit=limit,
        output_format=output_format,
    )


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
