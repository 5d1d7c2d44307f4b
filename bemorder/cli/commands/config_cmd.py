"""Config command for viewing and managing bemorder configuration."""

import typer

from ..app import app, console
from ...config import (
    VALID_STRATEGIES,
    get_config,
    reset_config,
    CONFIG_FILE,
)


VALID_KEYS = {
    "ordering.strategy",
    "sources.deps_suffixes",
}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. ordering.strategy)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify bemorder configuration.

    Examples:
        bemorder config show
        bemorder config set ordering.strategy weight
        bemorder config set sources.deps_suffixes .deps.yaml,.deps.json
        bemorder config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] bemorder config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    console.print()
    console.print("[bold]bemorder Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Ordering[/bold cyan]")
    console.print(f"  strategy      = {config.ordering.strategy}")

    console.print()
    console.print("[bold cyan]Sources[/bold cyan]")
    console.print(f"  deps_suffixes = {', '.join(config.sources.deps_suffixes)}")

    console.print()
    console.print(f"[dim]Config file: {CONFIG_FILE}[/dim]")


def _set_config(key: str, value: str):
    """Set a config value and persist it."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print(f"Valid keys: {', '.join(sorted(VALID_KEYS))}")
        raise typer.Exit(1)

    config = get_config()

    if key == "ordering.strategy":
        if value not in VALID_STRATEGIES:
            console.print(f"[red]Invalid strategy:[/red] {value}")
            console.print(f"Valid strategies: {', '.join(VALID_STRATEGIES)}")
            raise typer.Exit(1)
        config.ordering.strategy = value
    elif key == "sources.deps_suffixes":
        suffixes = [s.strip() for s in value.split(",") if s.strip()]
        if not suffixes:
            console.print("[red]Invalid suffix list:[/red] expected comma-separated suffixes")
            raise typer.Exit(1)
        config.sources.deps_suffixes = suffixes

    config.save()
    console.print(f"[green]✓[/green] Set {key} = {value}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        console.print(f"[green]✓[/green] Removed {CONFIG_FILE}")
    else:
        console.print("[dim]No config file to remove[/dim]")
    reset_config()
