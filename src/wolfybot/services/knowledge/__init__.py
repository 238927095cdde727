from __future__ import annotations

from .client import NO_SHORT_ANSWER, NOT_UNDERSTOOD_ANSWER, WolframClient, WolframHttpError

__all__ = ["NO_SHORT_ANSWER", "NOT_UNDERSTOOD_ANSWER", "WolframClient", "WolframHttpError"]
