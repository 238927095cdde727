from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Event:
    type: str
    payload: dict = field(default_factory=dict)
    source: str = ""
    ts: float = 0.0


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """A single message written by a human in the chat workspace."""

    user: str
    channel: str
    text: str
    ts: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChatMessage":
        def _s(key: str) -> str:
            value = payload.get(key)
            return value if isinstance(value, str) else ""

        return cls(user=_s("user"), channel=_s("channel"), text=_s("text"), ts=_s("ts"))

    def to_payload(self) -> dict[str, str]:
        return {"user": self.user, "channel": self.channel, "text": self.text, "ts": self.ts}


__all__ = ["Event", "ChatMessage"]
