from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from wolfybot.domain import ChatMessage, Event
from wolfybot.services.chat.slack import CHAT_MESSAGE
from wolfybot.services.eventbus import LocalEventBus
from wolfybot.services.nlu.client import WitHttpError
from wolfybot.services.nlu.dispatcher import IntentDispatcher
from wolfybot.services.nlu.models import NluResponse
from wolfybot.services.nlu.selector import ENTITY_CONFIDENCE_THRESHOLD, select_best_entity

_log = logging.getLogger("wolfybot.bot")


class NluSource(Protocol):
    async def message(self, text: str) -> NluResponse: ...


class ReplySink(Protocol):
    async def post_reply(self, user: str, text: str) -> None: ...


@dataclass
class WolfyBot:
    """
    Per-message pipeline: classify, select, dispatch, reply.

    Each ``chat.message`` event runs in its own task (see ``LocalEventBus``);
    the bot keeps no state between messages.
    """

    nlu: NluSource
    dispatcher: IntentDispatcher
    chat: ReplySink
    threshold: float = ENTITY_CONFIDENCE_THRESHOLD

    def attach(self, bus: LocalEventBus) -> None:
        bus.subscribe(CHAT_MESSAGE, self._on_chat_message)

    async def _on_chat_message(self, event: Event) -> None:
        await self.handle_message(ChatMessage.from_payload(event.payload))

    async def compose_reply(self, text: str) -> tuple[Optional[str], Optional[float], str]:
        """
        Run NLU and dispatch for ``text`` without sending anything.

        Returns ``(label, confidence, reply)``. ``WitHttpError`` propagates.
        """
        response = await self.nlu.message(text)
        label, entity = select_best_entity(response.candidates(), self.threshold)
        reply = await self.dispatcher.reply_for(label, entity, text=text)
        return label, entity.confidence if entity is not None else None, reply

    async def handle_message(self, message: ChatMessage) -> Optional[str]:
        text = message.text.strip()
        if not text:
            return None
        try:
            label, confidence, reply = await self.compose_reply(text)
        except WitHttpError as exc:
            _log.error(
                "unable to get a response from Wit.ai user=%s status=%s error=%s",
                message.user,
                exc.status_code,
                exc,
            )
            return None
        _log.info("reply user=%s label=%s confidence=%s", message.user, label, confidence)
        await self.chat.post_reply(message.user, reply)
        return reply


__all__ = ["WolfyBot", "NluSource", "ReplySink"]
