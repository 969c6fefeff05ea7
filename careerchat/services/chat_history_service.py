from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from careerchat.db.models import ChatMessageRecord

logger = logging.getLogger(__name__)


class ChatHistoryService:
    """Per-user chat message log backing the dashboard and chat pages."""

    def __init__(self, db: Session):
        self._db = db

    def save_message(self, user_id: str, message: str, sender: str) -> ChatMessageRecord:
        """
        Append one chat turn to the user's history.

        Args:
            user_id: Identity-store id of the user
            message: Message text as shown in the chat
            sender: "user" or "assistant"

        Returns:
            The persisted ChatMessageRecord
        """
        try:
            record = ChatMessageRecord(user_id=user_id, message=message, sender=sender)

            self._db.add(record)
            self._db.commit()
            self._db.refresh(record)

            logger.info(
                "Saved chat message %s (user=%s, sender=%s)", record.id, user_id, sender
            )
            return record

        except Exception:
            self._db.rollback()
            logger.exception("Failed to save chat message for user %s", user_id)
            raise

    def get_history(self, user_id: str) -> list[ChatMessageRecord]:
        """Full conversation for a user, oldest first."""
        stmt = (
            select(ChatMessageRecord)
            .where(ChatMessageRecord.user_id == user_id)
            .order_by(ChatMessageRecord.timestamp.asc(), ChatMessageRecord.id.asc())
        )
        return list(self._db.execute(stmt).scalars().all())

    def get_recent(self, user_id: str, limit: int = 10) -> list[ChatMessageRecord]:
        """Most recent messages for activity feeds, newest first."""
        stmt = (
            select(ChatMessageRecord)
            .where(ChatMessageRecord.user_id == user_id)
            .order_by(ChatMessageRecord.timestamp.desc(), ChatMessageRecord.id.desc())
            .limit(limit)
        )
        return list(self._db.execute(stmt).scalars().all())
