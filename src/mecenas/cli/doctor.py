"""Doctor command - system health check."""

import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mecenas.config.loader import DEFAULT_CONFIG_PATH, ConfigError, get_anthropic_key, load_config
from mecenas.config.schema import MecenasConfig
from mecenas.llm.probe import AvailabilityProbe, model_matches

console = Console()

OK = "[green]✓[/green]"
WARN = "[yellow]⚠[/yellow]"
FAIL = "[red]✗[/red]"


def doctor_command(config_path: str | None = None) -> None:
    """Run system health checks.

    Args:
        config_path: Optional path to config file
    """
    console.print(
        Panel.fit(
            "[bold blue]mecenas system health check[/bold blue]\nChecking your installation...",
            border_style="blue",
        )
    )

    asyncio.run(_async_doctor(Path(config_path) if config_path else DEFAULT_CONFIG_PATH))


async def _async_doctor(config_path: Path) -> None:
    """Async doctor logic."""
    issues: list[str] = []
    warnings: list[str] = []

    table = Table(title="System Health Check", show_header=True, header_style="bold cyan")
    table.add_column("Check", style="white", width=30)
    table.add_column("Status", width=10)
    table.add_column("Details", style="dim")

    # 1. Python version
    py_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    if sys.version_info >= (3, 11):
        table.add_row("Python Version", OK, py_version)
    else:
        table.add_row("Python Version", FAIL, f"{py_version} (need 3.11+)")
        issues.append("Python version too old. Upgrade to Python 3.11 or higher.")

    # 2. Configuration
    config = MecenasConfig()
    if config_path.exists():
        try:
            config = load_config(config_path)
            table.add_row("Configuration", OK, str(config_path))
        except ConfigError as e:
            table.add_row("Configuration", FAIL, f"Invalid: {e}")
            issues.append(f"Config file is invalid: {e}")
    else:
        config = load_config(config_path)
        table.add_row("Configuration", WARN, "Not found (using defaults)")
        warnings.append(f"No config file at {config_path}. Run 'mecenas init' to create one.")

    table.add_row("Privacy Mode", OK, config.privacy.mode)

    # 3. Ollama and models
    probe = AvailabilityProbe(
        host=config.ollama.host,
        probe_timeout=config.ollama.probe_timeout,
        model_probe_timeout=config.ollama.model_probe_timeout,
    )
    ollama_running = await probe.is_local_provider_up()
    if ollama_running:
        table.add_row("Ollama Server", OK, f"Running at {config.ollama.host}")

        models = await probe.list_models()
        wanted = [("Main Model", config.agent.model, True)]
        if config.agent.speed_model:
            wanted.append(("Speed Model", config.agent.speed_model, False))

        for label, name, required in wanted:
            if any(model_matches(installed, name) for installed in models):
                table.add_row(label, OK, f"{name} available")
            elif required:
                table.add_row(label, FAIL, f"{name} not found")
                issues.append(f"Model '{name}' not installed. Run: ollama pull {name}")
            else:
                table.add_row(label, WARN, f"{name} not found")
                warnings.append(f"Speed model '{name}' not installed. Run: ollama pull {name}")
    else:
        table.add_row("Ollama Server", FAIL, "Not running")
        issues.append(
            "Ollama is not running. Start with: ollama serve "
            "(messages with personal data will be refused)"
        )

    # 4. Cloud provider
    if get_anthropic_key(config):
        table.add_row("Anthropic API Key", OK, f"Set in {config.cloud.api_key_env}")
    else:
        table.add_row("Anthropic API Key", WARN, f"{config.cloud.api_key_env} not set")
        warnings.append("No Anthropic API key. Cloud fallback for non-sensitive messages is disabled.")

    if config.privacy.block_cloud_on_pii:
        table.add_row("Cloud Fallback on PII", OK, "Blocked")
    else:
        table.add_row("Cloud Fallback on PII", WARN, "Allowed (anonymized)")
        warnings.append("block_cloud_on_pii is off: sensitive messages may reach the cloud in anonymized form.")

    console.print("\n")
    console.print(table)

    console.print("\n")
    if not issues and not warnings:
        console.print(
            Panel.fit(
                "[bold green]✓ All checks passed![/bold green]\nYour mecenas installation is healthy.",
                border_style="green",
            )
        )
        return

    if issues:
        console.print("[bold red]Issues Found:[/bold red]")
        for i, issue in enumerate(issues, 1):
            console.print(f"  {i}. {issue}")
        console.print()

    if warnings:
        console.print("[bold yellow]Warnings:[/bold yellow]")
        for i, warning in enumerate(warnings, 1):
            console.print(f"  {i}. {warning}")
        console.print()

    if issues:
        console.print("[yellow]Fix the issues above before using mecenas.[/yellow]")
    else:
        console.print("[green]No critical issues. Warnings are optional improvements.[/green]")
