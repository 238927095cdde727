from __future__ import annotations

import asyncio
import json
import logging

import typer

from wolfybot.apps.cli.commands import run_safe
from wolfybot.services.bot import WolfyBot
from wolfybot.services.chat.slack import SlackGateway
from wolfybot.services.eventbus import LocalEventBus
from wolfybot.services.knowledge.client import WolframClient
from wolfybot.services.nlu.client import WitClient, WitHttpError
from wolfybot.services.nlu.dispatcher import IntentDispatcher
from wolfybot.services.settings import BotSettings, SettingsError, load_settings

_log = logging.getLogger("wolfybot.cli")


class _NoChat:
    async def post_reply(self, user: str, text: str) -> None:
        return None


def _load(*required: str) -> BotSettings:
    try:
        settings = load_settings()
        settings.require(*required)
    except SettingsError as err:
        typer.secho(str(err), fg=typer.colors.RED)
        raise typer.Exit(1)
    return settings


def _build_clients(settings: BotSettings) -> tuple[WitClient, WolframClient]:
    wit = WitClient(
        token=settings.wit_token or "",
        api_version=settings.wit_api_version,
        timeout=settings.http_timeout,
    )
    wolfram = WolframClient(
        app_id=settings.wolfram_app_id or "",
        units=settings.wolfram_units,
        answer_timeout=settings.wolfram_answer_timeout,
        timeout=settings.http_timeout,
    )
    return wit, wolfram


async def _serve(settings: BotSettings) -> None:
    wit, wolfram = _build_clients(settings)
    bus = LocalEventBus()
    gateway = SlackGateway(bus, bot_token=settings.slack_bot_token, app_token=settings.slack_app_token)
    bot = WolfyBot(nlu=wit, dispatcher=IntentDispatcher(wolfram, settings.replies), chat=gateway)
    bot.attach(bus)
    try:
        await gateway.start()
    finally:
        await gateway.close()
        await bus.drain()
        await wit.aclose()
        await wolfram.aclose()


async def _ask_once(settings: BotSettings, text: str) -> tuple[str | None, float | None, str]:
    wit, wolfram = _build_clients(settings)
    bot = WolfyBot(nlu=wit, dispatcher=IntentDispatcher(wolfram, settings.replies), chat=_NoChat())
    try:
        return await bot.compose_reply(text)
    finally:
        await wit.aclose()
        await wolfram.aclose()


@run_safe
def run_cmd() -> None:
    """Connect to Slack over Socket Mode and answer messages until interrupted."""
    settings = _load("slack_bot_token", "slack_app_token", "wit_token", "wolfram_app_id")
    _log.info("wolfybot starting")
    try:
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@run_safe
def ask_cmd(
    text: str = typer.Argument(..., help="Message to classify and answer"),
    json_output: bool = typer.Option(False, "--json", help="Print label, confidence and reply as JSON"),
) -> None:
    """Run one message through NLU and dispatch without Slack, and print the reply."""
    settings = _load("wit_token", "wolfram_app_id")
    try:
        label, confidence, reply = asyncio.run(_ask_once(settings, text))
    except WitHttpError as err:
        typer.secho(f"Wit.ai request failed ({err.status_code}): {err}", fg=typer.colors.RED)
        raise typer.Exit(1)
    if json_output:
        typer.echo(json.dumps({"label": label, "confidence": confidence, "reply": reply}, ensure_ascii=False))
        return
    typer.echo(reply)


def register(app: typer.Typer) -> None:
    app.command("run")(run_cmd)
    app.command("ask")(ask_cmd)


__all__ = ["register"]
