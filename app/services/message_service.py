"""Message service for chat functionality."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.conversation import Conversation, ConversationParticipant
from app.models.message import Message
from app.models.notification import NotificationType
from app.models.profile import Profile
from app.models.user import User
from app.schemas.message import (
    ConversationSummary,
    MessageResponse,
    SendMessageResponse,
    UnreadCountResponse,
)
from app.schemas.profile import ProfileBrief
from app.services import block_service, conversation_gate, notification_service, user_service
from app.services.notification_service import NotificationPort

logger = logging.getLogger(__name__)


def _validate_content(content: str) -> None:
    if not content or not content.strip():
        raise ValidationError("Message cannot be empty", field="content")
    if len(content) > settings.MESSAGE_MAX_LENGTH:
        raise ValidationError("Message too long", field="content")


async def send_message(
    db: AsyncSession,
    notifier: NotificationPort | None,
    sender_id: UUID,
    receiver_id: UUID,
    content: str,
) -> SendMessageResponse:
    """
    Send a message, creating the conversation on first contact.

    1. Validate content and receiver
    2. Refuse if either side blocked the other
    3. Pass the conversation gate (raises MatchRequiredError when the intro is spent)
    4. Store the message, bump the receiver's unread counter, queue a notification
    5. Commit, then push the notification
    """
    _validate_content(content)
    if sender_id == receiver_id:
        raise ValidationError("You cannot message yourself", field="receiver_id")

    receiver = await user_service.get_user_by_id(db, receiver_id)
    if receiver is None:
        raise NotFoundError("User not found", resource="user")

    if await block_service.is_blocked_between(db, sender_id, receiver_id):
        raise ForbiddenError("You cannot message this user")

    is_mutual = await conversation_gate.is_mutual_match(db, sender_id, receiver_id)
    existing = await conversation_gate.get_conversation_between(db, sender_id, receiver_id)
    gate = await conversation_gate.record_send(db, sender_id, receiver_id, is_mutual, existing)
    conversation = gate.conversation

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
    )
    db.add(message)
    await db.flush()

    await db.execute(
        update(ConversationParticipant)
        .where(
            ConversationParticipant.conversation_id == conversation.id,
            ConversationParticipant.user_id == receiver_id,
        )
        .values(unread_count=ConversationParticipant.unread_count + 1)
    )

    sender_name_result = await db.execute(
        select(Profile.first_name).where(Profile.user_id == sender_id)
    )
    sender_name = sender_name_result.scalar_one_or_none() or "Someone"
    notification = await notification_service.create_notification(
        db,
        receiver_id,
        NotificationType.NEW_MESSAGE,
        f"New message from {sender_name}",
        content[: settings.NOTIFICATION_PREVIEW_LENGTH],
        {
            "conversation_id": str(conversation.id),
            "message_id": str(message.id),
            "sender_id": str(sender_id),
        },
    )

    await db.commit()
    logger.info(
        "Message %s sent %s -> %s (mutual=%s, intro_consumed=%s)",
        message.id,
        sender_id,
        receiver_id,
        is_mutual,
        gate.intro_consumed_now,
    )

    await notification_service.dispatch(notifier, [notification])

    return SendMessageResponse(
        message=MessageResponse.model_validate(message),
        conversation_id=conversation.id,
        is_mutual_match=is_mutual,
        intro_consumed=gate.intro_consumed_now,
    )


async def get_participant_conversation(
    db: AsyncSession,
    conversation_id: UUID,
    user_id: UUID,
) -> Conversation:
    """Load a conversation the user takes part in."""
    conversation = await db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found", resource="conversation")
    if user_id not in (conversation.user_a_id, conversation.user_b_id):
        raise ForbiddenError("You are not a participant in this conversation")
    return conversation


async def get_conversations(db: AsyncSession, user_id: UUID) -> list[ConversationSummary]:
    """Inbox for a user, most recently active first."""
    result = await db.execute(
        select(Conversation, ConversationParticipant.unread_count)
        .outerjoin(
            ConversationParticipant,
            (ConversationParticipant.conversation_id == Conversation.id)
            & (ConversationParticipant.user_id == user_id),
        )
        .where(or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id))
        .order_by(Conversation.updated_at.desc())
    )

    summaries = []
    for conversation, unread_count in result.all():
        other_id = conversation.other_user_id(user_id)

        last_message_result = await db.execute(
            select(Message)
            .where(Message.conversation_id == conversation.id)
            .order_by(Message.created_at.desc())
            .limit(1)
        )
        last_message = last_message_result.scalar_one_or_none()

        other_result = await db.execute(
            select(Profile, User.is_online)
            .select_from(User)
            .outerjoin(Profile, Profile.user_id == User.id)
            .where(User.id == other_id)
        )
        other_row = other_result.first()
        other_profile, other_online = other_row if other_row else (None, False)

        summaries.append(
            ConversationSummary(
                id=conversation.id,
                other_user_id=other_id,
                other_user_online=bool(other_online),
                other_profile=ProfileBrief.model_validate(other_profile) if other_profile else None,
                last_message=MessageResponse.model_validate(last_message) if last_message else None,
                unread_count=unread_count or 0,
                has_intro_message=conversation.has_intro_message,
                is_mutual_match=await conversation_gate.is_mutual_match(db, user_id, other_id),
                updated_at=conversation.updated_at,
            )
        )

    return summaries


async def get_messages(
    db: AsyncSession,
    user_id: UUID,
    conversation_id: UUID,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Message], int]:
    """Messages in chronological order; the page is counted from the newest."""
    await get_participant_conversation(db, conversation_id, user_id)

    total_result = await db.execute(
        select(func.count(Message.id)).where(Message.conversation_id == conversation_id)
    )
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    # Reverse to get chronological order for display
    messages = list(result.scalars().all())
    messages.reverse()
    return messages, total


async def mark_conversation_read(
    db: AsyncSession,
    user_id: UUID,
    conversation_id: UUID,
) -> int:
    """Mark everything the user received in a conversation as read."""
    await get_participant_conversation(db, conversation_id, user_id)

    result = await db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.receiver_id == user_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=datetime.now(timezone.utc))
    )
    await db.execute(
        update(ConversationParticipant)
        .where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
        )
        .values(unread_count=0)
    )
    await db.commit()
    return result.rowcount


async def delete_message(db: AsyncSession, user_id: UUID, message_id: UUID) -> None:
    """Hard-delete a message. Only its sender may do this."""
    message = await db.get(Message, message_id)
    if message is None:
        raise NotFoundError("Message not found", resource="message")
    if message.sender_id != user_id:
        raise ForbiddenError("You can only delete your own messages")

    if not message.is_read:
        await db.execute(
            update(ConversationParticipant)
            .where(
                ConversationParticipant.conversation_id == message.conversation_id,
                ConversationParticipant.user_id == message.receiver_id,
                ConversationParticipant.unread_count > 0,
            )
            .values(unread_count=ConversationParticipant.unread_count - 1)
        )

    await db.delete(message)
    await db.commit()
    logger.info("Message %s deleted by sender %s", message_id, user_id)


async def get_unread_count(db: AsyncSession, user_id: UUID) -> UnreadCountResponse:
    result = await db.execute(
        select(
            func.coalesce(func.sum(ConversationParticipant.unread_count), 0),
            func.count(ConversationParticipant.id).filter(ConversationParticipant.unread_count > 0),
        ).where(ConversationParticipant.user_id == user_id)
    )
    total_unread, conversations = result.one()
    return UnreadCountResponse(total_unread=total_unread or 0, conversations=conversations or 0)


async def search_messages(
    db: AsyncSession,
    user_id: UUID,
    query: str,
    limit: int = 50,
) -> list[Message]:
    """Case-insensitive substring search over the user's messages."""
    result = await db.execute(
        select(Message)
        .where(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id),
            Message.content.icontains(query, autoescape=True),
        )
        .order_by(Message.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
