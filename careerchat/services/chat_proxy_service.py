from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError

from careerchat.core.errors import (
    ChatProxyError,
    ConfigurationError,
    InvalidRequestError,
    MethodNotAllowedError,
    UnexpectedError,
)
from careerchat.core.settings import Settings, get_settings
from careerchat.models.chat import ChatRequest
from careerchat.services.openrouter_service import OpenRouterService

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("POST",)


@dataclass
class ProxyReply:
    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: ChatProxyError) -> ProxyReply:
        headers: dict[str, str] = {}
        if isinstance(error, MethodNotAllowedError):
            headers["Allow"] = ", ".join(error.allowed)
        return cls(status_code=error.status_code, body=error.to_body(), headers=headers)


def parse_body(body: bytes | str | Mapping[str, Any] | None) -> Any:
    """Decode a request body that may arrive raw, as JSON text, or pre-parsed.

    Some hosting layers hand the function a JSON document that was itself
    serialized to a string; such bodies are decoded twice.
    """
    if body is None or isinstance(body, Mapping):
        return body

    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        if not body.strip():
            return None

        parsed = json.loads(body)
        if isinstance(parsed, str):
            parsed = json.loads(parsed)
    except ValueError as e:
        raise InvalidRequestError("Invalid JSON in request body") from e
    return parsed


def validate_chat_request(payload: Any) -> ChatRequest:
    messages = payload.get("messages") if isinstance(payload, Mapping) else None
    if not isinstance(messages, list) or not messages:
        raise InvalidRequestError("Missing messages array in request body")

    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidRequestError(
            f"Invalid chat request at '{location}': {first.get('msg')}"
        ) from e


class ChatProxyService:
    """Server-side hop between the browser and OpenRouter.

    The only component holding the OpenRouter credential. Every outcome,
    including unexpected failures, is returned as a ``ProxyReply``.
    """

    def __init__(
        self,
        upstream: OpenRouterService,
        settings: Settings | None = None,
    ) -> None:
        self._upstream = upstream
        self._settings = settings or get_settings()

    def resolve_referer(self, headers: Mapping[str, str]) -> str:
        if self._settings.deployment_host:
            return f"https://{self._settings.deployment_host}"
        origin = headers.get("origin")
        if origin:
            return origin
        host = headers.get("host")
        if host:
            return f"https://{host}"
        return self._settings.default_referer

    async def handle(
        self,
        method: str,
        body: bytes | str | Mapping[str, Any] | None,
        headers: Mapping[str, str],
    ) -> ProxyReply:
        try:
            if method.upper() not in ALLOWED_METHODS:
                raise MethodNotAllowedError(ALLOWED_METHODS)

            if not self._upstream.configured:
                raise ConfigurationError("Missing OPENROUTER_API_KEY on server")

            request = validate_chat_request(parse_body(body))
            referer = self.resolve_referer(headers)

            reply = await self._upstream.complete(
                messages=[m.model_dump() for m in request.messages],
                model=request.model or self._settings.openrouter_model,
                referer=referer,
            )
            return ProxyReply(status_code=200, body=reply.model_dump(exclude_none=True))

        except ChatProxyError as e:
            logger.info("Chat request failed: status=%s message=%s", e.status_code, e.message)
            return ProxyReply.from_error(e)
        except Exception as e:
            logger.exception("Chat API unhandled error")
            return ProxyReply.from_error(UnexpectedError(str(e) or type(e).__name__))
