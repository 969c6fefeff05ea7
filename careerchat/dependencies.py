from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from careerchat.core.settings import get_settings
from careerchat.db.session import get_db_session
from careerchat.services.chat_history_service import ChatHistoryService
from careerchat.services.chat_proxy_service import ChatProxyService
from careerchat.services.openrouter_service import OpenRouterService


@lru_cache
def get_openrouter_service() -> OpenRouterService:
    return OpenRouterService.from_settings(get_settings())


@lru_cache
def get_chat_proxy_service() -> ChatProxyService:
    return ChatProxyService(upstream=get_openrouter_service(), settings=get_settings())


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_chat_history_service(db: Session = Depends(get_db)) -> ChatHistoryService:
    return ChatHistoryService(db)
