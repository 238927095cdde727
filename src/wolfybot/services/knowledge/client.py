from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

_log = logging.getLogger("wolfybot.knowledge")

NOT_UNDERSTOOD_ANSWER = "Wolfram|Alpha did not understand your input"
NO_SHORT_ANSWER = "No short answer available"


class WolframHttpError(RuntimeError):
    def __init__(self, message: str, *, status_code: int, payload: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass(slots=True)
class WolframClient:
    """
    Async client for the Wolfram|Alpha Short Answers API.

    The API answers in plain text. HTTP 501 is not a failure: it carries one
    of ``NOT_UNDERSTOOD_ANSWER`` / ``NO_SHORT_ANSWER`` as the body, so both
    200 and 501 come back as answers and callers compare the text.
    """

    app_id: str
    units: str = "metric"
    answer_timeout: int = 1000
    timeout: float = 15.0
    base_url: str = "https://api.wolframalpha.com"
    _client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if not self._client:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()

    async def short_answer(self, query: str) -> str:
        assert self._client is not None
        params = {
            "appid": self.app_id,
            "i": query,
            "units": self.units,
            "timeout": str(self.answer_timeout),
        }
        try:
            response = await self._client.get("/v1/result", params=params)
        except httpx.RequestError as exc:
            raise WolframHttpError(f"GET /v1/result failed: {exc}", status_code=0) from exc

        body = response.text.strip()
        if response.status_code == 200 or response.status_code == 501:
            _log.debug("wolfram.short_answer status=%s chars=%d", response.status_code, len(body))
            return body
        raise WolframHttpError(
            body or f"HTTP {response.status_code}",
            status_code=response.status_code,
            payload=body or None,
        )


__all__ = ["WolframClient", "WolframHttpError", "NOT_UNDERSTOOD_ANSWER", "NO_SHORT_ANSWER"]
