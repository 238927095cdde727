from __future__ import annotations

from .slack import CHAT_MESSAGE, SlackGateway, is_human_message

__all__ = ["CHAT_MESSAGE", "SlackGateway", "is_human_message"]
