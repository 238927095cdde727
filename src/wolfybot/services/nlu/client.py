from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from .models import NluResponse

_log = logging.getLogger("wolfybot.nlu")


class WitHttpError(RuntimeError):
    def __init__(self, message: str, *, status_code: int, error_code: str | None = None, payload: Any | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.payload = payload


@dataclass(slots=True)
class WitClient:
    """Async HTTP client for the Wit.ai ``/message`` endpoint."""

    token: str
    api_version: str = "20240304"
    timeout: float = 15.0
    base_url: str = "https://api.wit.ai"
    _client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if not self._client:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        assert self._client is not None
        headers = {"Authorization": f"Bearer {self.token}", "Accept": "application/json"}
        try:
            response = await self._client.request(method, path, params=params, headers=headers)
        except httpx.RequestError as exc:
            raise WitHttpError(f"{method} {path} failed: {exc}", status_code=0) from exc

        content: Any | None = None
        if response.content:
            try:
                content = response.json()
            except ValueError:
                content = response.text

        if response.status_code >= 400:
            error_code: str | None = None
            message = response.text or f"HTTP {response.status_code}"
            if isinstance(content, Mapping):
                detail = content.get("error") or content.get("message")
                if isinstance(detail, str):
                    message = detail
                code = content.get("code")
                if isinstance(code, str):
                    error_code = code
            raise WitHttpError(message, status_code=response.status_code, error_code=error_code, payload=content)

        return content

    async def message(self, text: str) -> NluResponse:
        """Classify ``text`` and return the parsed entities."""
        result = await self._request("GET", "/message", params={"v": self.api_version, "q": text})
        if not isinstance(result, Mapping):
            raise WitHttpError("Wit.ai returned a non-JSON body", status_code=200, payload=result)
        try:
            parsed = NluResponse.model_validate(result)
        except ValidationError as exc:
            raise WitHttpError(f"unexpected Wit.ai payload: {exc}", status_code=200, payload=result) from exc
        _log.debug("wit.message entities=%s traits=%s", list(parsed.entities), list(parsed.traits))
        return parsed


__all__ = ["WitClient", "WitHttpError"]
