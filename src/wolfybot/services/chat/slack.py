"""Slack side of the bot: Socket Mode listener and reply sender."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from slack_sdk.errors import SlackApiError

from wolfybot.domain import ChatMessage
from wolfybot.services.eventbus import LocalEventBus, emit

_log = logging.getLogger("wolfybot.slack")

CHAT_MESSAGE = "chat.message"

_IGNORED_SUBTYPES = frozenset({"bot_message", "message_changed", "message_deleted"})


def is_human_message(event: Mapping[str, Any]) -> bool:
    if event.get("bot_id"):
        return False
    if event.get("subtype") in _IGNORED_SUBTYPES:
        return False
    text = event.get("text")
    return isinstance(text, str) and bool(text.strip())


class SlackGateway:
    """
    Bridges a slack_bolt ``AsyncApp`` and the local event bus.

    Inbound human messages are published as ``chat.message`` events; replies
    go back as a direct message to the author.
    """

    def __init__(
        self,
        bus: LocalEventBus,
        *,
        bot_token: str | None = None,
        app_token: str | None = None,
        app: Any = None,
        socket_handler: Any = None,
    ) -> None:
        self.bus = bus
        self.app_token = app_token
        self._handler = socket_handler
        if app is None:
            from slack_bolt.async_app import AsyncApp

            app = AsyncApp(token=bot_token)
        self.app = app
        self.app.event("message")(self._on_message)

    async def _on_message(self, event: dict[str, Any]) -> None:
        if not is_human_message(event):
            _log.debug(
                "slack.message skipped subtype=%s bot_id=%s",
                event.get("subtype"),
                event.get("bot_id"),
            )
            return
        message = ChatMessage.from_payload(event)
        _log.info("slack.message received user=%s channel=%s", message.user, message.channel)
        emit(self.bus, CHAT_MESSAGE, message.to_payload(), source="slack.gateway")

    async def post_reply(self, user: str, text: str) -> None:
        try:
            await self.app.client.chat_postMessage(channel=user, text=text)
        except SlackApiError as exc:
            _log.error(
                "failed to post reply user=%s error=%s",
                user,
                exc.response.get("error") if exc.response is not None else exc,
            )

    async def start(self) -> None:
        if self._handler is None:
            from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

            self._handler = AsyncSocketModeHandler(self.app, self.app_token)
        _log.info("starting Slack Socket Mode connection")
        await self._handler.start_async()

    async def close(self) -> None:
        handler, self._handler = self._handler, None
        if handler is not None:
            await handler.close_async()
            _log.info("Slack Socket Mode connection closed")


__all__ = ["CHAT_MESSAGE", "SlackGateway", "is_human_message"]
