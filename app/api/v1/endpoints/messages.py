"""Chat endpoints: sending, inbox, reading and blocking."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.realtime import get_notifier
from app.database import get_db
from app.schemas.message import (
    BlockCreate,
    BlockResponse,
    CanSendResponse,
    ConversationListResponse,
    MarkReadRequest,
    MarkReadResponse,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    SendMessageResponse,
    UnreadCountResponse,
)
from app.schemas.user import UserResponse
from app.services import block_service, conversation_gate, message_service
from app.services.notification_service import NotificationPort

router = APIRouter(prefix="", tags=["messages"])


@router.post("/send", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    notifier: Annotated[NotificationPort, Depends(get_notifier)],
) -> SendMessageResponse:
    """
    Send a message.

    Users who have not matched may exchange a single intro message. After
    that, further sends fail with 403 and code MATCH_REQUIRED until both
    users like each other.
    """
    return await message_service.send_message(
        db, notifier, current_user.id, message_data.receiver_id, message_data.content
    )


@router.get("/can-send/{receiver_id}", response_model=CanSendResponse)
async def can_send(
    receiver_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CanSendResponse:
    """Whether a message to this user would currently pass the gate."""
    return CanSendResponse(
        can_send=await conversation_gate.can_send_intro(db, current_user.id, receiver_id),
        is_mutual_match=await conversation_gate.is_mutual_match(db, current_user.id, receiver_id),
    )


@router.get("/conversations", response_model=ConversationListResponse)
async def get_conversations(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ConversationListResponse:
    conversations = await message_service.get_conversations(db, current_user.id)
    return ConversationListResponse(conversations=conversations)


@router.get("/unread/count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UnreadCountResponse:
    return await message_service.get_unread_count(db, current_user.id)


@router.get("/search", response_model=list[MessageResponse])
async def search_messages(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    q: str = Query(..., min_length=1, max_length=200),
    limit: int = Query(50, ge=1, le=100),
) -> list[MessageResponse]:
    messages = await message_service.search_messages(db, current_user.id, q, limit)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post("/mark-read", response_model=MarkReadResponse)
async def mark_as_read(
    data: MarkReadRequest,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MarkReadResponse:
    marked = await message_service.mark_conversation_read(db, current_user.id, data.conversation_id)
    return MarkReadResponse(marked_read=marked)


@router.post("/block", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def block_user(
    data: BlockCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BlockResponse:
    block = await block_service.block_user(db, current_user.id, data.user_id)
    return BlockResponse.model_validate(block)


@router.delete("/block/{blocked_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unblock_user(
    blocked_user_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await block_service.unblock_user(db, current_user.id, blocked_user_id)


# NOTE: Parameterised routes last so they don't shadow the ones above
@router.get("/{conversation_id}", response_model=MessageListResponse)
async def get_messages(
    conversation_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> MessageListResponse:
    messages, total = await message_service.get_messages(
        db, current_user.id, conversation_id, limit, offset
    )
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await message_service.delete_message(db, current_user.id, message_id)
