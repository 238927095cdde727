"""Typer commands for inspecting and bootstrapping the settings file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
import yaml

from wolfybot.apps.cli.commands import run_safe
from wolfybot.services.settings import BotSettings, SettingsError, load_settings, save_settings, settings_path

app = typer.Typer(help="Settings file helpers")


@app.command("show")
@run_safe
def show_cmd(
    json_output: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """Print effective settings (file + environment) with secrets masked."""
    try:
        settings = load_settings()
    except SettingsError as err:
        typer.secho(str(err), fg=typer.colors.RED)
        raise typer.Exit(1)
    data = settings.masked()
    if json_output:
        typer.echo(json.dumps(data, ensure_ascii=False))
        return
    typer.echo(f"# {settings_path()}")
    typer.echo(yaml.safe_dump(data, allow_unicode=True, sort_keys=False).rstrip())


@app.command("init")
@run_safe
def init_cmd(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write the file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a settings file filled with defaults."""
    target = path or settings_path()
    if target.exists() and not force:
        typer.secho(f"{target} already exists; use --force to overwrite.", fg=typer.colors.RED)
        raise typer.Exit(1)
    written = save_settings(BotSettings(), target)
    typer.secho(f"Settings written to {written}", fg=typer.colors.GREEN)


__all__ = ["app"]
