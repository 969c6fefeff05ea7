from __future__ import annotations

from sqlalchemy.engine import Engine

from careerchat.db.base import Base


def init_db(engine: Engine) -> None:
    """Create ORM tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from careerchat.db.engine import get_engine

    init_db(get_engine())
