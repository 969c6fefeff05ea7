from careerchat.db.base import Base
from careerchat.db.engine import get_engine
from careerchat.db.init_db import init_db
from careerchat.db.session import get_db_session, get_sessionmaker

# Registers ChatMessageRecord on Base.metadata.
from careerchat.db import models as _models  # noqa: F401

__all__ = [
    "Base",
    "get_engine",
    "get_sessionmaker",
    "get_db_session",
    "init_db",
]
