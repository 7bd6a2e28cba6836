"""Initialize command - write a default configuration file."""

import asyncio

from rich.console import Console
from rich.panel import Panel

from mecenas.config.loader import DEFAULT_CONFIG_PATH, save_config
from mecenas.config.schema import MecenasConfig
from mecenas.llm.probe import AvailabilityProbe, model_matches

console = Console()


def init_command(force: bool = False, model: str | None = None) -> None:
    """Create ~/.mecenas/mecenas.yaml with defaults.

    Args:
        force: Overwrite an existing config file
        model: Main local model name (default model if None)
    """
    if DEFAULT_CONFIG_PATH.exists() and not force:
        console.print(f"[yellow]Config already exists at {DEFAULT_CONFIG_PATH}[/yellow]")
        console.print("Use [bold]--force[/bold] to overwrite.")
        return

    config = MecenasConfig()
    if model:
        config.agent.model = model

    installed = asyncio.run(_installed_models(config))
    if installed is None:
        console.print("[yellow]⚠ Ollama is not running. Start it with: ollama serve[/yellow]")
    elif not any(model_matches(name, config.agent.model) for name in installed):
        console.print(
            f"[yellow]⚠ Model {config.agent.model} is not installed. "
            f"Run: ollama pull {config.agent.model}[/yellow]"
        )

    save_config(config)
    console.print(
        Panel.fit(
            f"[bold green]✓ Configuration written[/bold green]\n"
            f"{DEFAULT_CONFIG_PATH}\n"
            f"Model: {config.agent.model}\n"
            f"Privacy mode: {config.privacy.mode}",
            border_style="green",
        )
    )


async def _installed_models(config: MecenasConfig) -> list[str] | None:
    """List installed models, or None if Ollama is unreachable."""
    probe = AvailabilityProbe(host=config.ollama.host)
    if not await probe.is_local_provider_up():
        return None
    return await probe.list_models()
