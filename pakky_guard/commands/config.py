"""Config commands: show, get, set, path."""
from __future__ import annotations

import json
import sys
from dataclasses import asdict

import typer
from rich import print as rprint

from ..core.config_manager import ConfigManager
from ..utils.formatter import fmt

config_app = typer.Typer(name="config", help="Manage the saved security preference", no_args_is_help=True)


@config_app.command("show")
def config_show():
    """Show current configuration."""
    manager = ConfigManager()
    print(json.dumps(asdict(manager.load()), indent=2))


@config_app.command("get")
def config_get(key: str = typer.Argument(..., help="Config key (e.g. security.level)")):
    """Get a configuration value."""
    manager = ConfigManager()
    value = manager.get(key)
    if value is None:
        print(f"Key not found: {key}", file=sys.stderr)
        raise typer.Exit(code=1)
    if isinstance(value, dict):
        print(json.dumps(value, indent=2))
    else:
        print(value)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key (e.g. security.level)"),
    value: str = typer.Argument(..., help="Value to set"),
):
    """Set a configuration value."""
    manager = ConfigManager()
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, ValueError):
        parsed = value
    try:
        manager.set(key, parsed)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise typer.Exit(code=2)
    rprint(fmt.success(f"Set {key} = {json.dumps(manager.get(key))}"))


@config_app.command("path")
def config_path():
    """Print the location of the config file."""
    print(ConfigManager().path)
