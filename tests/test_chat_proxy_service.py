from __future__ import annotations

import pytest

from careerchat.core.errors import InvalidRequestError
from careerchat.models.chat import ChatResponse
from careerchat.services.chat_proxy_service import ChatProxyService, parse_body


class _FakeUpstream:
    configured = True

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, messages, model, referer):
        self.calls.append({"messages": messages, "model": model, "referer": referer})
        if self.error:
            raise self.error
        return ChatResponse(message="ok")


def test_referer_prefers_deployment_host(settings):
    settings.deployment_host = "career-guide.vercel.app"
    service = ChatProxyService(upstream=_FakeUpstream(), settings=settings)

    referer = service.resolve_referer({"origin": "https://x.test", "host": "y.test"})

    assert referer == "https://career-guide.vercel.app"


def test_referer_falls_back_through_origin_host_and_default(settings):
    service = ChatProxyService(upstream=_FakeUpstream(), settings=settings)

    assert service.resolve_referer({"origin": "https://x.test", "host": "y.test"}) == "https://x.test"
    assert service.resolve_referer({"host": "y.test"}) == "https://y.test"
    assert service.resolve_referer({}) == "https://vercel.app"


def test_parse_body_variants():
    assert parse_body(None) is None
    assert parse_body(b"  ") is None
    assert parse_body({"messages": []}) == {"messages": []}
    assert parse_body(b'{"a": 1}') == {"a": 1}
    assert parse_body('"{\\"a\\": 1}"') == {"a": 1}

    with pytest.raises(InvalidRequestError):
        parse_body("{oops")
    with pytest.raises(InvalidRequestError):
        parse_body('"{oops"')


@pytest.mark.asyncio
async def test_handle_accepts_structured_body(settings):
    upstream = _FakeUpstream()
    service = ChatProxyService(upstream=upstream, settings=settings)

    reply = await service.handle(
        "post",
        {"messages": [{"role": "system", "content": "be brief"}], "model": "m"},
        {"host": "app.test"},
    )

    assert reply.status_code == 200
    assert reply.body == {"message": "ok"}
    assert upstream.calls == [
        {
            "messages": [{"role": "system", "content": "be brief"}],
            "model": "m",
            "referer": "https://app.test",
        }
    ]


@pytest.mark.asyncio
async def test_handle_never_raises(settings):
    service = ChatProxyService(
        upstream=_FakeUpstream(error=RuntimeError("exploded")), settings=settings
    )

    reply = await service.handle("POST", b'{"messages": [{"role": "user", "content": "hi"}]}', {})

    assert reply.status_code == 500
    assert reply.body == {"error": {"message": "exploded"}}


@pytest.mark.asyncio
async def test_method_not_allowed_reply_discloses_allowed_methods(settings):
    upstream = _FakeUpstream()
    service = ChatProxyService(upstream=upstream, settings=settings)

    reply = await service.handle("GET", None, {})

    assert reply.status_code == 405
    assert reply.headers == {"Allow": "POST"}
    assert upstream.calls == []


def test_parse_body_rejects_invalid_utf8():
    with pytest.raises(InvalidRequestError) as excinfo:
        parse_body(b'{"messages":[{"role":"user","content":"\xff\xfe"}]}')

    assert excinfo.value.message == "Invalid JSON in request body"


@pytest.mark.asyncio
async def test_handle_forwards_extra_message_fields(settings):
    upstream = _FakeUpstream()
    service = ChatProxyService(upstream=upstream, settings=settings)

    reply = await service.handle(
        "POST",
        {"messages": [{"role": "user", "content": "hi", "name": "ada"}]},
        {},
    )

    assert reply.status_code == 200
    assert upstream.calls[0]["messages"] == [{"role": "user", "content": "hi", "name": "ada"}]
