from __future__ import annotations

import asyncio
import logging
import sys

from careerchat.core.errors import ChatProxyError
from careerchat.core.logging import configure_logging
from careerchat.core.settings import get_settings
from careerchat.services.openrouter_service import OpenRouterService

logger = logging.getLogger(__name__)

_PROBE_MESSAGES = [
    {"role": "system", "content": "You are a helpful assistant."},
    {"role": "user", "content": "Say ok."},
]


async def check_key() -> bool:
    """Send one tiny completion with the client fallback credential."""
    settings = get_settings()

    service = OpenRouterService(
        settings.client_api_key,
        api_url=settings.openrouter_api_url,
        app_title="Key Test",
        temperature=0.1,
        max_tokens=10,
        timeout=settings.upstream_timeout_seconds,
        credential_name="OPENROUTER_CLIENT_API_KEY",
    )

    try:
        reply = await service.complete(
            messages=_PROBE_MESSAGES,
            model=settings.client_model,
            referer=settings.client_origin,
        )
    except ChatProxyError as e:
        logger.error("Key check failed: status=%s message=%s", e.status_code, e.message)
        return False
    except Exception:
        logger.exception("Key check request failed")
        return False

    logger.info("Key check ok: model=%s reply=%r usage=%s", reply.model, reply.message, reply.usage)
    return True


def main() -> None:
    configure_logging(get_settings())
    sys.exit(0 if asyncio.run(check_key()) else 1)


if __name__ == "__main__":
    main()
