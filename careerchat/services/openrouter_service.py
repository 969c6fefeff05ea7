from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from careerchat.core.errors import ConfigurationError, upstream_error
from careerchat.core.retry import with_retry
from careerchat.core.settings import Settings, get_settings
from careerchat.models.chat import NO_RESPONSE_TEXT, ChatResponse

logger = logging.getLogger(__name__)


def read_json(response: httpx.Response) -> Any:
    """Decode a response body, treating malformed JSON as an empty object."""
    try:
        return response.json()
    except ValueError:
        return {}


def extract_error_message(response: httpx.Response, data: Any) -> str:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
    return response.text or response.reason_phrase or "Unknown error"


def extract_reply(data: Any) -> ChatResponse:
    if not isinstance(data, dict):
        data = {}

    content = None
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")

    return ChatResponse(
        message=content or NO_RESPONSE_TEXT,
        usage=data.get("usage"),
        model=data.get("model"),
        provider=data.get("provider"),
    )


class OpenRouterService:
    """Single chat-completion call against OpenRouter with one transient retry."""

    def __init__(
        self,
        api_key: str | None,
        *,
        api_url: str,
        app_title: str,
        temperature: float = 0.2,
        max_tokens: int = 500,
        retry_delay: float = 0.6,
        timeout: float = 60.0,
        credential_name: str = "OPENROUTER_API_KEY",
        label: str = "OpenRouter",
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._app_title = app_title
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._credential_name = credential_name
        self._label = label
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> OpenRouterService:
        settings = settings or get_settings()
        return cls(
            settings.openrouter_api_key,
            api_url=settings.openrouter_api_url,
            app_title=settings.openrouter_app_title,
            temperature=settings.openrouter_temperature,
            max_tokens=settings.openrouter_max_tokens,
            retry_delay=settings.upstream_retry_delay_seconds,
            timeout=settings.upstream_timeout_seconds,
            transport=transport,
            sleep=sleep,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _headers(self, referer: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": referer,
            "X-Title": self._app_title,
        }

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str,
        referer: str,
    ) -> ChatResponse:
        if not self._api_key:
            raise ConfigurationError(f"Missing {self._credential_name}")

        payload = {
            "model": model,
            "messages": messages,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "stream": False,
        }
        headers = self._headers(referer)

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:

            async def _send() -> httpx.Response:
                return await client.post(self._api_url, json=payload, headers=headers)

            response = await with_retry(
                _send, delay=self._retry_delay, sleep=self._sleep
            )

        data = read_json(response)
        if not response.is_success:
            api_message = extract_error_message(response, data)
            logger.error(
                "Upstream chat completion failed: status=%s message=%s",
                response.status_code,
                api_message,
            )
            raise upstream_error(
                response.status_code,
                api_message,
                label=self._label,
                credential_name=self._credential_name,
            )

        return extract_reply(data)
