from __future__ import annotations

from collections.abc import Generator

from sqlalchemy.orm import Session, sessionmaker

from careerchat.db.engine import get_engine


def get_sessionmaker(database_url: str | None = None) -> sessionmaker[Session]:
    return sessionmaker(
        bind=get_engine(database_url),
        autoflush=False,
        expire_on_commit=False,
    )


def get_db_session(database_url: str | None = None) -> Generator[Session, None, None]:
    with get_sessionmaker(database_url)() as db:
        yield db
