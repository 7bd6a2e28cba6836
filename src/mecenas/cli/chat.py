"""Interactive chat REPL command."""

from __future__ import annotations

import asyncio
import getpass
import logging
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from mecenas.agent import create_orchestrator
from mecenas.config.loader import ConfigError, load_config
from mecenas.privacy import effective_mode
from mecenas.privacy.models import AuditAction, AuditEntry, PrivacyMode
from mecenas.reminders import DeadlineReminder, start_deadline_reminders
from mecenas.store import InMemoryCaseStore
from mecenas.store.models import Session

if TYPE_CHECKING:
    from mecenas.agent import Orchestrator
    from mecenas.config.schema import MecenasConfig

console = Console()
logger = logging.getLogger(__name__)

HELP_TEXT = """[bold]Komendy:[/bold]
  /privacy [auto|strict|off]  pokaż lub zmień tryb prywatności sesji
  /clear                      wyczyść aktywną sprawę
  /help                       pokaż tę pomoc
  /exit                       zakończ"""


def chat_command(config_path: str | None = None) -> None:
    """Start interactive chat session.

    Args:
        config_path: Optional path to config file
    """
    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except ConfigError as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        console.print("Run [bold]mecenas init[/bold] to create a config file.")
        return

    console.print(
        Panel.fit(
            f"[bold blue]mecenas chat[/bold blue]\n"
            f"Model: {config.agent.model}\n"
            f"Privacy mode: {config.privacy.mode}\n"
            f"Type /help for commands, /exit to quit",
            border_style="blue",
        )
    )

    asyncio.run(_async_chat(config))


def print_reminders(reminders: list[DeadlineReminder]) -> None:
    """Show a batch of deadline reminders."""
    for reminder in reminders:
        when = reminder.date.strftime("%d.%m.%Y")
        if reminder.overdue:
            console.print(
                f"\n[bold red]⏰ Termin minął:[/bold red] {reminder.deadline_title} "
                f"({reminder.case_title}) — {when}"
            )
        else:
            console.print(
                f"\n[bold yellow]⏰ Przypomnienie:[/bold yellow] {reminder.deadline_title} "
                f"({reminder.case_title}) — {when}, pozostało dni: {reminder.days_left}"
            )


def handle_slash_command(command: str, session: Session, orchestrator: Orchestrator) -> bool:
    """Handle a slash command.

    Args:
        command: Raw input starting with "/"
        session: Current chat session
        orchestrator: Orchestrator (for audit and config)

    Returns:
        True if the chat should exit
    """
    parts = command.strip().split()
    name = parts[0].lower()

    if name in ("/exit", "/quit"):
        return True

    if name == "/help":
        console.print(HELP_TEXT)
    elif name == "/clear":
        session.metadata.pop("activeCaseId", None)
        console.print("[cyan]Aktywna sprawa wyczyszczona.[/cyan]")
    elif name == "/privacy":
        if len(parts) == 1:
            mode = effective_mode(session, orchestrator.config.privacy.mode)
            console.print(f"Tryb prywatności: [bold]{mode}[/bold]")
            return False
        mode = PrivacyMode.parse(parts[1].lower())
        if mode is None:
            console.print("[red]Tryb musi być: auto, strict, off[/red]")
            return False
        session.metadata["privacyMode"] = mode.value
        orchestrator.audit.record(
            AuditEntry(
                action=AuditAction.MODE_CHANGE,
                session_key=session.key,
                user_id=session.user_id,
                reason=f"session_privacy_set_{mode.value}",
                privacy_mode=mode.value,
            )
        )
        console.print(f"[cyan]Tryb prywatności sesji: {mode.value}[/cyan]")
    else:
        console.print(f"[yellow]Nieznana komenda: {name}. Wpisz /help.[/yellow]")

    return False


async def _async_chat(config: MecenasConfig) -> None:
    """Async chat loop.

    Args:
        config: Mecenas configuration
    """
    store = InMemoryCaseStore()
    orchestrator = create_orchestrator(config, store=store)
    session = Session(key=f"cli:{uuid.uuid4().hex[:12]}", user_id=getpass.getuser(), channel="cli")

    stop_reminders = None
    if config.reminders.enabled:
        stop_reminders = await start_deadline_reminders(
            store,
            print_reminders,
            interval=config.reminders.interval_seconds,
            capacity=config.reminders.capacity,
        )

    try:
        while True:
            try:
                user_input = await asyncio.to_thread(Prompt.ask, "\n[bold cyan]Ty[/bold cyan]")

                if not user_input.strip():
                    continue

                if user_input.startswith("/"):
                    if handle_slash_command(user_input, session, orchestrator):
                        break
                    continue

                session.add_turn("user", user_input)
                with console.status("[bold green]Myślę...[/bold green]", spinner="dots"):
                    response = await orchestrator.handle_message(user_input, session)

                if response:
                    session.add_turn("assistant", response)
                    console.print("\n[bold green]Mecenas[/bold green]")
                    console.print(Markdown(response))

            except KeyboardInterrupt:
                console.print("\n[yellow]Interrupted[/yellow]")
                if Confirm.ask("Exit chat?", default=False):
                    break
            except EOFError:
                break
            except Exception as e:
                logger.exception("Chat turn failed")
                console.print(f"\n[red]Error: {e}[/red]")
    finally:
        if stop_reminders is not None:
            await stop_reminders()
        await orchestrator.close()

    console.print("\n[cyan]Do widzenia![/cyan]")
