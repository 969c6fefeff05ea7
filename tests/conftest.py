from __future__ import annotations

import json
import time
from typing import Any

import httpx
import pytest

from careerchat.core.settings import Settings


def completion(content: str | None = "hello", **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
    }
    body.update(extra)
    return body


class UpstreamRecorder:
    """MockTransport handler replaying canned responses and recording requests."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.times: list[float] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.times.append(time.monotonic())
        if not self._responses:
            raise AssertionError(f"unexpected upstream call to {request.url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)

    def payload(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openrouter_api_key="sk-server-test",
        openrouter_model="openai/gpt-4o-mini",
        deployment_host=None,
        allow_direct_fallback=None,
        client_api_key=None,
    )


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()
