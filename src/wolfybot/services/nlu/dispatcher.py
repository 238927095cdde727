from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Mapping, Optional, Protocol

from wolfybot.services.knowledge.client import NO_SHORT_ANSWER, NOT_UNDERSTOOD_ANSWER, WolframHttpError

from .models import NluEntity

_log = logging.getLogger("wolfybot.nlu.dispatcher")

GREETINGS = "greetings"
WOLFRAM_SEARCH_QUERY = "wolfram_search_query"

DEFAULT_REPLIES: Dict[str, str] = {
    "greeting": "Hello! I am WolfyBot and I am here to answer your questions. :-)",
    "not_understood": "Oops, looks like I didn't quite understand that! :-O",
    "too_long": (
        "Whoops! I'm still learning the ropes and while I got your answer, "
        "it's a little long for me to communicate. :-P"
    ),
    "unclear": "WARNING: User input is unclear. :-/ Try clarifying your question?",
}


class KnowledgeSource(Protocol):
    async def short_answer(self, query: str) -> str: ...


def _query_text(entity: NluEntity, text: str) -> str:
    """
    Text forwarded to the knowledge API:

      - entity.value when it is a non-empty string
      - entity.body (the matched span) otherwise
      - the whole message as the last resort
    """
    if isinstance(entity.value, str) and entity.value.strip():
        return entity.value.strip()
    if isinstance(entity.body, str) and entity.body.strip():
        return entity.body.strip()
    return text.strip()


class IntentDispatcher:
    """Turn the selected NLU label into the reply text for the user."""

    def __init__(self, knowledge: KnowledgeSource, replies: Optional[Mapping[str, str]] = None) -> None:
        self.knowledge = knowledge
        self.replies: Dict[str, str] = dict(DEFAULT_REPLIES)
        if replies:
            self.replies.update({k: v for k, v in replies.items() if k in DEFAULT_REPLIES and v})
        self._handlers: Dict[str, Callable[[NluEntity, str], Awaitable[Optional[str]]]] = {
            GREETINGS: self._greeting,
            WOLFRAM_SEARCH_QUERY: self._wolfram_search,
        }

    async def reply_for(self, label: Optional[str], entity: Optional[NluEntity], *, text: str) -> str:
        handler = self._handlers.get(label or "")
        if handler is None or entity is None:
            _log.debug("nlu.intent %r: no handler, replying unclear", label)
            return self.replies["unclear"]
        reply = await handler(entity, text)
        if reply is None:
            return self.replies["unclear"]
        _log.debug("nlu.intent %s dispatched", label)
        return reply

    async def _greeting(self, entity: NluEntity, text: str) -> Optional[str]:
        return self.replies["greeting"]

    async def _wolfram_search(self, entity: NluEntity, text: str) -> Optional[str]:
        query = _query_text(entity, text)
        if not query:
            return None
        try:
            answer = await self.knowledge.short_answer(query)
        except WolframHttpError as exc:
            _log.error(
                "unable to retrieve data from Wolfram|Alpha status=%s error=%s",
                exc.status_code,
                exc,
            )
            return None
        if answer == NOT_UNDERSTOOD_ANSWER:
            return self.replies["not_understood"]
        if answer == NO_SHORT_ANSWER:
            return self.replies["too_long"]
        return answer or None


__all__ = ["DEFAULT_REPLIES", "GREETINGS", "WOLFRAM_SEARCH_QUERY", "IntentDispatcher", "KnowledgeSource"]
