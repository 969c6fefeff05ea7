import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from careerchat.dependencies import get_chat_history_service
from careerchat.models.chat import ChatHistoryCreate, ChatHistoryRead
from careerchat.services.chat_history_service import ChatHistoryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/chat-history",
    response_model=ChatHistoryRead,
    status_code=status.HTTP_201_CREATED,
)
async def save_chat_message(
    request: ChatHistoryCreate,
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> ChatHistoryRead:
    """
    Persist a single chat turn for a user.

    Args:
        request: user id, message text and sender
        history_service: Injected service for database operations

    Returns:
        The stored message with its id and timestamp
    """
    try:
        if not request.message.strip():
            raise HTTPException(status_code=400, detail="Chat message cannot be empty")

        record = history_service.save_message(
            user_id=request.user_id,
            message=request.message,
            sender=request.sender,
        )
        return ChatHistoryRead.model_validate(record)

    except HTTPException as e:
        raise e
    except Exception as e:
        logger.exception("save_chat_message endpoint failed")
        raise HTTPException(status_code=500, detail=f"Internal server error: {e}")


@router.get("/chat-history/{user_id}", response_model=list[ChatHistoryRead])
async def get_chat_history(
    user_id: str,
    limit: int | None = Query(default=None, ge=1, le=100),
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> list[ChatHistoryRead]:
    try:
        if limit is None:
            records = history_service.get_history(user_id)
        else:
            records = history_service.get_recent(user_id, limit=limit)
        return [ChatHistoryRead.model_validate(r) for r in records]
    except Exception as e:
        logger.exception("get_chat_history endpoint failed")
        raise HTTPException(status_code=500, detail=f"Internal server error: {e}")
