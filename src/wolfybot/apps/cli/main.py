"""Typer entry point: ``wolfybot``."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from wolfybot.apps.cli.commands import bot as bot_cmd
from wolfybot.apps.cli.commands import config as config_cmd
from wolfybot.services.settings import SettingsError, load_settings

app = typer.Typer(help="WolfyBot: Slack question answering via Wit.ai and Wolfram|Alpha")
app.add_typer(config_cmd.app, name="config")
bot_cmd.register(app)


def _resolve_level(explicit: Optional[str]) -> str:
    if explicit:
        return explicit.upper()
    try:
        return load_settings().log_level
    except SettingsError:
        return "INFO"


def level_number(name: str) -> int:
    """Numeric level for ``name``; anything that is not a level name means INFO."""
    level = getattr(logging, name, None)
    return level if isinstance(level, int) and not isinstance(level, bool) else logging.INFO


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)"),
) -> None:
    logging.basicConfig(
        level=level_number(_resolve_level(log_level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    # both log every socket frame / request on INFO
    logging.getLogger("slack_sdk").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["app"]
