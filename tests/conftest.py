from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from wolfybot.services.knowledge.client import WolframClient
from wolfybot.services.nlu.client import WitClient

_ENV_VARS = (
    "SLACK_ACCESS_TOKEN",
    "SLACK_APP_TOKEN",
    "WIT_AI_ACCESS_TOKEN",
    "WOLFRAM_APP_ID",
    "WOLFYBOT_LOG_LEVEL",
    "WOLFYBOT_BASE_DIR",
)


@pytest.fixture(autouse=True)
def tmp_config(tmp_path, monkeypatch) -> Path:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "bot.yaml"
    monkeypatch.setenv("WOLFYBOT_CONFIG", str(path))
    return path


@pytest.fixture
def cli_app():
    from wolfybot.apps.cli.main import app

    return app


@pytest.fixture
def wit_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], WitClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> WitClient:
        client = httpx.AsyncClient(base_url="https://api.wit.ai", transport=httpx.MockTransport(handler))
        return WitClient(token="wit-token", api_version="20240304", _client=client)

    return _make


@pytest.fixture
def wolfram_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], WolframClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> WolframClient:
        client = httpx.AsyncClient(base_url="https://api.wolframalpha.com", transport=httpx.MockTransport(handler))
        return WolframClient(app_id="APPID", _client=client)

    return _make


class FakeKnowledge:
    def __init__(self, answer: str | None = None, error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.queries: list[str] = []

    async def short_answer(self, query: str) -> str:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.answer or ""


class FakeChat:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def post_reply(self, user: str, text: str) -> None:
        self.sent.append((user, text))


class FakeSlackClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def chat_postMessage(self, **kwargs: Any) -> dict:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"ok": True}


class FakeSlackApp:
    def __init__(self, client: FakeSlackClient | None = None) -> None:
        self.client = client or FakeSlackClient()
        self.listeners: dict[str, list[Callable]] = {}

    def event(self, name: str):
        def _register(func: Callable) -> Callable:
            self.listeners.setdefault(name, []).append(func)
            return func

        return _register
