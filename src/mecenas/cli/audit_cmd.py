"""Privacy audit query CLI command.

Lists routing and consent events from the privacy audit trail for
compliance reporting. Entries carry statistics only, never personal data.
"""

import sqlite3
import time
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from mecenas.privacy.audit import PrivacyAuditStore

console = Console()

ACTION_STYLES = {
    "route_local": "green",
    "route_cloud": "yellow",
    "route_cloud_anon": "yellow",
    "route_refuse": "red",
}


def _format_timestamp(ts: float) -> str:
    """Format an epoch timestamp for display."""
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def query_privacy_events(
    db_path: str = "~/.mecenas/privacy_audit.db",
    action: str | None = None,
    session_key: str | None = None,
    user_id: str | None = None,
    hours: int | None = None,
    limit: int = 20,
    output_format: str = "table",
) -> None:
    """Query privacy audit events.

    Args:
        db_path: Path to the privacy audit database
        action: Filter by action
        session_key: Filter by session key
        user_id: Filter by user ID
        hours: Only include events from the last N hours
        limit: Maximum number of events
        output_format: "table" or "json"
    """
    if not Path(db_path).expanduser().exists():
        console.print(f"[yellow]No audit database at {db_path}[/yellow]")
        return

    since = time.time() - hours * 3600 if hours else None
    try:
        store = PrivacyAuditStore(db_path)
        events = store.query(
            action=action,
            session_key=session_key,
            user_id=user_id,
            since=since,
            limit=limit,
        )
    except sqlite3.Error as e:
        console.print(f"[red]Error querying privacy audit log: {e}[/red]")
        return

    if not events:
        console.print("[yellow]No events found[/yellow]")
        return

    if output_format == "json":
        console.print_json(data=events)
        return

    table = Table(title=f"Privacy Audit Events ({len(events)} records)")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Action", style="bold")
    table.add_column("Session", style="magenta")
    table.add_column("Case", style="blue")
    table.add_column("Reason")
    table.add_column("PII", justify="right")
    table.add_column("Types", style="dim")
    table.add_column("Mode")
    table.add_column("Provider", style="green")

    for event in events:
        style = ACTION_STYLES.get(event["action"], "white")
        table.add_row(
            _format_timestamp(event["timestamp"]),
            f"[{style}]{event['action']}[/{style}]",
            event["session_key"],
            event["case_id"] or "N/A",
            event["reason"] or "",
            str(event["pii_match_count"]),
            ", ".join(event["pii_types"]),
            event["privacy_mode"] or "",
            event["provider"] or "",
        )

    console.print(table)
