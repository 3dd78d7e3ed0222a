"""
Conversation gate: decides whether a message between two users may be sent.

Two users who have not matched get exactly one free intro message per pair.
The first unmatched send consumes it (``has_intro_message`` becomes true);
any further unmatched send is refused with MatchRequiredError until the pair
likes each other. A mutual match always allows sending and clears the flag.

Writes are race-safe without locks: the conversation row is inserted with
ON CONFLICT DO NOTHING against UNIQUE(user_a_id, user_b_id), and the intro is
consumed by a conditional UPDATE whose rowcount decides who wins. None of the
functions here commit; the caller owns the transaction.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MatchRequiredError
from app.database import dialect_insert
from app.models.conversation import Conversation, ConversationParticipant
from app.models.like import Like

logger = logging.getLogger(__name__)


class GateDecision(str, Enum):
    ALLOW_MATCHED = "allow_matched"
    ALLOW_NEW_INTRO = "allow_new_intro"
    ALLOW_CONSUME_INTRO = "allow_consume_intro"
    REJECT = "reject"


@dataclass
class GateResult:
    conversation: Conversation
    intro_consumed_now: bool


def evaluate_gate(is_mutual_match: bool, conversation: Conversation | None) -> GateDecision:
    """Pure transition rule for one send attempt."""
    if is_mutual_match:
        return GateDecision.ALLOW_MATCHED
    if conversation is None:
        return GateDecision.ALLOW_NEW_INTRO
    if not conversation.has_intro_message:
        return GateDecision.ALLOW_CONSUME_INTRO
    return GateDecision.REJECT


def ordered_pair(user_x: uuid.UUID, user_y: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    return (user_x, user_y) if user_x < user_y else (user_y, user_x)


async def get_conversation_between(
    db: AsyncSession,
    user_x: uuid.UUID,
    user_y: uuid.UUID,
) -> Conversation | None:
    user_a_id, user_b_id = ordered_pair(user_x, user_y)
    result = await db.execute(
        select(Conversation)
        .where(Conversation.user_a_id == user_a_id, Conversation.user_b_id == user_b_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def is_mutual_match(db: AsyncSession, user_x: uuid.UUID, user_y: uuid.UUID) -> bool:
    """A mutual Like in either direction."""
    result = await db.execute(
        select(Like.id)
        .where(
            Like.is_mutual.is_(True),
            or_(
                and_(Like.liker_id == user_x, Like.liked_user_id == user_y),
                and_(Like.liker_id == user_y, Like.liked_user_id == user_x),
            ),
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def can_send_intro(db: AsyncSession, sender_id: uuid.UUID, receiver_id: uuid.UUID) -> bool:
    """
    Advisory read-only check for clients deciding whether to show the composer.
    The authoritative decision is made by record_send.
    """
    mutual = await is_mutual_match(db, sender_id, receiver_id)
    conversation = await get_conversation_between(db, sender_id, receiver_id)
    return evaluate_gate(mutual, conversation) != GateDecision.REJECT


async def _reload(db: AsyncSession, conversation_id: uuid.UUID) -> Conversation:
    result = await db.execute(
        select(Conversation)
        .where(Conversation.id == conversation_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _add_participants(db: AsyncSession, conversation_id: uuid.UUID, *user_ids: uuid.UUID) -> None:
    now = datetime.now(timezone.utc)
    await db.execute(
        dialect_insert(db, ConversationParticipant)
        .values(
            [
                {
                    "id": uuid.uuid4(),
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "unread_count": 0,
                    "joined_at": now,
                }
                for user_id in user_ids
            ]
        )
        .on_conflict_do_nothing(index_elements=["conversation_id", "user_id"])
    )


async def _insert_conversation(
    db: AsyncSession,
    user_x: uuid.UUID,
    user_y: uuid.UUID,
    has_intro_message: bool,
) -> uuid.UUID | None:
    """Insert the pair's conversation. Returns its id, or None if the pair already had one."""
    user_a_id, user_b_id = ordered_pair(user_x, user_y)
    now = datetime.now(timezone.utc)
    result = await db.execute(
        dialect_insert(db, Conversation)
        .values(
            id=uuid.uuid4(),
            user_a_id=user_a_id,
            user_b_id=user_b_id,
            has_intro_message=has_intro_message,
            created_at=now,
            updated_at=now,
        )
        .on_conflict_do_nothing(index_elements=["user_a_id", "user_b_id"])
        .returning(Conversation.id)
    )
    conversation_id = result.scalar_one_or_none()
    if conversation_id is not None:
        await _add_participants(db, conversation_id, user_a_id, user_b_id)
    return conversation_id


async def _clear_intro(db: AsyncSession, conversation_id: uuid.UUID) -> None:
    await db.execute(
        update(Conversation)
        .where(Conversation.id == conversation_id)
        .values(has_intro_message=False, updated_at=datetime.now(timezone.utc))
    )


async def _consume_intro(db: AsyncSession, conversation_id: uuid.UUID) -> bool:
    """Flip has_intro_message false -> true. Only one caller can win."""
    result = await db.execute(
        update(Conversation)
        .where(
            Conversation.id == conversation_id,
            Conversation.has_intro_message.is_(False),
        )
        .values(has_intro_message=True, updated_at=datetime.now(timezone.utc))
    )
    return result.rowcount == 1


async def record_send(
    db: AsyncSession,
    sender_id: uuid.UUID,
    receiver_id: uuid.UUID,
    is_mutual_match: bool,
    existing_conversation: Conversation | None,
) -> GateResult:
    """
    Apply the gate for one send attempt and return the conversation to write into.

    Raises MatchRequiredError when the pair is unmatched and the intro is spent.
    """
    decision = evaluate_gate(is_mutual_match, existing_conversation)

    if decision == GateDecision.ALLOW_MATCHED:
        if existing_conversation is None:
            conversation_id = await _insert_conversation(db, sender_id, receiver_id, False)
            if conversation_id is None:
                conversation = await get_conversation_between(db, sender_id, receiver_id)
                conversation_id = conversation.id
        else:
            conversation_id = existing_conversation.id
        await _clear_intro(db, conversation_id)
        return GateResult(conversation=await _reload(db, conversation_id), intro_consumed_now=False)

    if decision == GateDecision.ALLOW_NEW_INTRO:
        conversation_id = await _insert_conversation(db, sender_id, receiver_id, True)
        if conversation_id is not None:
            logger.info("Intro message consumed by %s -> %s (new conversation)", sender_id, receiver_id)
            return GateResult(conversation=await _reload(db, conversation_id), intro_consumed_now=True)
        # Another send created the conversation first; compete for its intro instead
        existing_conversation = await get_conversation_between(db, sender_id, receiver_id)

    if await _consume_intro(db, existing_conversation.id):
        logger.info("Intro message consumed by %s -> %s", sender_id, receiver_id)
        return GateResult(
            conversation=await _reload(db, existing_conversation.id),
            intro_consumed_now=True,
        )

    logger.info(
        "Send blocked by gate: %s -> %s (conversation=%s)",
        sender_id,
        receiver_id,
        existing_conversation.id,
    )
    raise MatchRequiredError(conversation_id=str(existing_conversation.id))


async def create_conversation_for_match(
    db: AsyncSession,
    user_x: uuid.UUID,
    user_y: uuid.UUID,
) -> Conversation:
    """
    Open (or unlock) the pair's conversation after a mutual like.

    An existing conversation, e.g. one started by an intro message, gets its
    intro flag cleared.
    """
    conversation_id = await _insert_conversation(db, user_x, user_y, False)
    if conversation_id is None:
        existing = await get_conversation_between(db, user_x, user_y)
        conversation_id = existing.id
        await _clear_intro(db, conversation_id)
        await _add_participants(db, conversation_id, *ordered_pair(user_x, user_y))
    return await _reload(db, conversation_id)
