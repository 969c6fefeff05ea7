from __future__ import annotations

from functools import lru_cache
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from careerchat.core.settings import get_settings


@lru_cache
def get_engine(database_url: str | None = None) -> Engine:
    url = make_url(database_url or get_settings().database_url)

    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        # Local runs and tests; an in-memory database must share one connection.
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool

    # SQLAlchemy connects lazily on first use.
    return create_engine(url, **kwargs)
