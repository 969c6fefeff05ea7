from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Iterable, Mapping
from urllib.parse import urlparse

import httpx
from langchain_core.prompts import PromptTemplate

from careerchat.core.errors import ChatProxyError, ConfigurationError, UnexpectedError
from careerchat.core.retry import with_retry
from careerchat.core.settings import OPENROUTER_CHAT_COMPLETIONS_URL, Settings, get_settings
from careerchat.models.chat import NO_RESPONSE_TEXT, ChatMessage, ChatResult, UserProfile
from careerchat.services.openrouter_service import (
    OpenRouterService,
    extract_error_message,
    read_json,
)

logger = logging.getLogger(__name__)

CHAT_PROXY_PATH = "/api/chat"
NOT_SPECIFIED = "Not specified"

_LOCAL_HOSTNAME = re.compile(r"^(localhost|127\.0\.0\.1|0\.0\.0\.0)$", re.IGNORECASE)

_CAREER_ADVISOR_PROMPT = PromptTemplate.from_template(
    """You are an expert AI career advisor. You help professionals navigate their career journey with personalized guidance, skill recommendations, and strategic advice.

User Profile:
- Name: {name}
- Current Title: {title}
- Location: {location}
- Interests: {interests}
- Bio: {bio}

Provide helpful, actionable career advice that is:
1. Personalized to their background and goals
2. Practical and implementable
3. Encouraging and supportive
4. Based on current industry trends
5. Specific with concrete next steps

Keep responses concise but comprehensive, around 200-300 words."""
)


def is_local_host(hostname: str | None) -> bool:
    return bool(hostname) and bool(_LOCAL_HOSTNAME.match(hostname))


def build_career_advisor_prompt(profile: UserProfile) -> str:
    return _CAREER_ADVISOR_PROMPT.format(
        name=profile.name or "User",
        title=profile.title or NOT_SPECIFIED,
        location=profile.location or NOT_SPECIFIED,
        interests=", ".join(profile.interests or []) or NOT_SPECIFIED,
        bio=profile.bio or NOT_SPECIFIED,
    )


def _error_text(error: Exception) -> str:
    if isinstance(error, ChatProxyError):
        return error.message
    return str(error) or type(error).__name__


class ChatClient:
    """Send chat turns through the proxy, optionally falling back to OpenRouter.

    The direct fallback exists for local development, where the proxy route
    is often not served. It needs its own credential and must stay disabled
    for deployed clients.
    """

    def __init__(
        self,
        proxy_base_url: str,
        *,
        default_model: str = "openai/gpt-4o-mini",
        allow_direct_fallback: bool = False,
        fallback_api_key: str | None = None,
        fallback_api_url: str = OPENROUTER_CHAT_COMPLETIONS_URL,
        fallback_app_title: str = "AI Career Guidance System (Local)",
        fallback_referer: str = "http://localhost:5173",
        retry_delay: float = 0.6,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._proxy_url = proxy_base_url.rstrip("/") + CHAT_PROXY_PATH
        self._default_model = default_model
        self._allow_direct_fallback = allow_direct_fallback
        self._fallback_referer = fallback_referer
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._fallback = OpenRouterService(
            fallback_api_key,
            api_url=fallback_api_url,
            app_title=fallback_app_title,
            retry_delay=retry_delay,
            timeout=timeout,
            credential_name="OPENROUTER_CLIENT_API_KEY",
            label="OpenRouter fallback",
            transport=transport,
            sleep=sleep,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ChatClient:
        settings = settings or get_settings()
        allow = settings.allow_direct_fallback
        if allow is None:
            allow = is_local_host(urlparse(settings.chat_proxy_base_url).hostname)
        return cls(
            settings.chat_proxy_base_url,
            default_model=settings.client_model,
            allow_direct_fallback=allow,
            fallback_api_key=settings.client_api_key,
            fallback_api_url=settings.openrouter_api_url,
            fallback_app_title=f"{settings.openrouter_app_title} (Local)",
            fallback_referer=settings.client_origin,
            retry_delay=settings.upstream_retry_delay_seconds,
            timeout=settings.upstream_timeout_seconds,
            transport=transport,
        )

    @property
    def allow_direct_fallback(self) -> bool:
        return self._allow_direct_fallback

    async def send_message(
        self,
        messages: Iterable[ChatMessage | Mapping[str, Any]],
        model: str | None = None,
    ) -> ChatResult:
        try:
            payload_messages = [
                m.model_dump() if isinstance(m, ChatMessage) else dict(m) for m in messages
            ]
        except (TypeError, ValueError) as e:
            logger.error("Rejected chat messages: %s", e)
            return ChatResult(success=False, error=f"Invalid chat messages: {e}")
        model = model or self._default_model

        try:
            return await self._call_proxy(payload_messages, model)
        except Exception as proxy_error:
            if not self._allow_direct_fallback:
                logger.error("Chat proxy request failed: %s", _error_text(proxy_error))
                return ChatResult(success=False, error=_error_text(proxy_error))

            logger.warning(
                "%s unavailable or failing; falling back to direct OpenRouter call: %s",
                CHAT_PROXY_PATH,
                _error_text(proxy_error),
            )

        try:
            return await self._call_direct(payload_messages, model)
        except Exception as fallback_error:
            logger.error("Direct OpenRouter fallback failed: %s", _error_text(fallback_error))
            return ChatResult(success=False, error=_error_text(fallback_error))

    async def generate_career_advice(
        self,
        profile: UserProfile | Mapping[str, Any],
        question: str,
    ) -> ChatResult:
        try:
            if not isinstance(profile, UserProfile):
                profile = UserProfile.model_validate(dict(profile))

            messages = [
                ChatMessage(role="system", content=build_career_advisor_prompt(profile)),
                ChatMessage(role="user", content=question),
            ]
        except (TypeError, ValueError) as e:
            logger.error("Rejected career advice request: %s", e)
            return ChatResult(success=False, error=f"Invalid career advice request: {e}")
        return await self.send_message(messages)

    async def _call_proxy(self, messages: list[dict[str, Any]], model: str) -> ChatResult:
        payload = {"model": model, "messages": messages}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:

                async def _send() -> httpx.Response:
                    return await client.post(self._proxy_url, json=payload)

                response = await with_retry(
                    _send, delay=self._retry_delay, sleep=self._sleep
                )
        except httpx.HTTPError as e:
            raise UnexpectedError(f"Chat proxy unreachable: {e}") from e

        if not response.is_success:
            raise ChatProxyError(
                extract_error_message(response, read_json(response)),
                status_code=response.status_code,
            )

        # A dev server without the proxy route answers with its HTML shell.
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise UnexpectedError("Chat proxy returned an unexpected response body")

        return ChatResult(
            success=True,
            message=data.get("message") or NO_RESPONSE_TEXT,
            usage=data.get("usage"),
        )

    async def _call_direct(self, messages: list[dict[str, Any]], model: str) -> ChatResult:
        if not self._fallback.configured:
            raise ConfigurationError("Missing OPENROUTER_CLIENT_API_KEY for local fallback.")

        reply = await self._fallback.complete(
            messages=messages,
            model=model,
            referer=self._fallback_referer,
        )
        return ChatResult(success=True, message=reply.message, usage=reply.usage)
