"""Schemas for messaging: conversations, messages and blocks."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from app.schemas.profile import ProfileBrief


class MessageCreate(BaseModel):
    """Request to send a message"""

    receiver_id: UUID
    content: str = Field(..., min_length=1, max_length=settings.MESSAGE_MAX_LENGTH)


class MessageResponse(BaseModel):
    """Message details returned by API"""

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    receiver_id: UUID
    content: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SendMessageResponse(BaseModel):
    message: MessageResponse
    conversation_id: UUID
    is_mutual_match: bool
    # True when this message used up the one free intro
    intro_consumed: bool


class MessageListResponse(BaseModel):
    """Paginated list of messages"""

    messages: list[MessageResponse]
    total: int
    limit: int
    offset: int


class ConversationSummary(BaseModel):
    """Conversation row in the inbox"""

    id: UUID
    other_user_id: UUID
    other_user_online: bool = False
    other_profile: ProfileBrief | None = None
    last_message: MessageResponse | None = None
    unread_count: int
    has_intro_message: bool
    is_mutual_match: bool
    updated_at: datetime


class ConversationListResponse(BaseModel):
    conversations: list[ConversationSummary]


class MarkReadRequest(BaseModel):
    conversation_id: UUID


class MarkReadResponse(BaseModel):
    marked_read: int


class UnreadCountResponse(BaseModel):
    total_unread: int
    conversations: int


class BlockCreate(BaseModel):
    user_id: UUID


class BlockResponse(BaseModel):
    id: UUID
    blocker_id: UUID
    blocked_user_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CanSendResponse(BaseModel):
    can_send: bool
    is_mutual_match: bool
