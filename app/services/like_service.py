"""Like service: likes, mutual matches and like listings."""

import logging
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.database import dialect_insert
from app.models.like import Like
from app.models.notification import NotificationType
from app.models.profile import Profile
from app.models.user import User
from app.schemas.like import (
    LikeCheckResponse,
    LikeResponse,
    LikeStatsResponse,
    LikeWithProfile,
    SendLikeResponse,
)
from app.schemas.profile import ProfileBrief
from app.services import conversation_gate, notification_service
from app.services.notification_service import NotificationPort

logger = logging.getLogger(__name__)


async def _get_like(db: AsyncSession, liker_id: UUID, liked_user_id: UUID) -> Like | None:
    result = await db.execute(
        select(Like).where(Like.liker_id == liker_id, Like.liked_user_id == liked_user_id)
    )
    return result.scalar_one_or_none()


async def _lock_pair(db: AsyncSession, user_x: UUID, user_y: UUID) -> None:
    """
    Row-lock both users for the rest of the transaction, lower id first.

    Likes in opposite directions between the same pair then run one after
    the other, so the second one always sees the first and marks the match.
    SQLite ignores FOR UPDATE; its single writer serialises these anyway.
    """
    await db.execute(
        select(User.id)
        .where(User.id.in_(conversation_gate.ordered_pair(user_x, user_y)))
        .order_by(User.id)
        .with_for_update()
    )


async def _display_name(db: AsyncSession, user_id: UUID) -> str:
    result = await db.execute(select(Profile.first_name).where(Profile.user_id == user_id))
    return result.scalar_one_or_none() or "Someone"


async def send_like(
    db: AsyncSession,
    notifier: NotificationPort | None,
    liker_id: UUID,
    liked_user_id: UUID,
) -> SendLikeResponse:
    """
    Like another user.

    1. Reject self-likes and unknown or inactive targets
    2. Lock the pair, reject repeats and insert the like
       (the unique index decides concurrent duplicates)
    3. If the target already liked back, mark both likes mutual and open the conversation
    4. Bump the target's like count and notify
    """
    if liker_id == liked_user_id:
        raise ValidationError("You cannot like yourself", field="liked_user_id")

    target_result = await db.execute(
        select(Profile.id)
        .join(User, User.id == Profile.user_id)
        .where(
            Profile.user_id == liked_user_id,
            Profile.is_active.is_(True),
            User.status == "active",
        )
    )
    if target_result.scalar_one_or_none() is None:
        raise NotFoundError("User not found", resource="user")

    await _lock_pair(db, liker_id, liked_user_id)
    if await _get_like(db, liker_id, liked_user_id):
        raise ConflictError("You have already liked this user")

    insert_result = await db.execute(
        dialect_insert(db, Like)
        .values(liker_id=liker_id, liked_user_id=liked_user_id, is_mutual=False)
        .on_conflict_do_nothing(index_elements=["liker_id", "liked_user_id"])
        .returning(Like.id)
    )
    like_id = insert_result.scalar_one_or_none()
    if like_id is None:
        raise ConflictError("You have already liked this user")

    reverse_like = await _get_like(db, liked_user_id, liker_id)
    is_mutual = reverse_like is not None
    conversation_id = None

    if is_mutual:
        await db.execute(
            update(Like).where(Like.id.in_([like_id, reverse_like.id])).values(is_mutual=True)
        )
        conversation = await conversation_gate.create_conversation_for_match(
            db, liker_id, liked_user_id
        )
        conversation_id = conversation.id

    await db.execute(
        update(Profile)
        .where(Profile.user_id == liked_user_id)
        .values(like_count=Profile.like_count + 1)
    )

    notifications = []
    liker_name = await _display_name(db, liker_id)
    if is_mutual:
        liked_name = await _display_name(db, liked_user_id)
        for user_id, other_id, other_name in (
            (liker_id, liked_user_id, liked_name),
            (liked_user_id, liker_id, liker_name),
        ):
            notifications.append(
                await notification_service.create_notification(
                    db,
                    user_id,
                    NotificationType.MUTUAL_MATCH,
                    "It's a match!",
                    f"You and {other_name} liked each other",
                    {"user_id": str(other_id), "conversation_id": str(conversation_id)},
                )
            )
    else:
        notifications.append(
            await notification_service.create_notification(
                db,
                liked_user_id,
                NotificationType.NEW_LIKE,
                "New like",
                f"{liker_name} liked your profile",
                {"user_id": str(liker_id)},
            )
        )

    await db.commit()

    if is_mutual:
        logger.info("Mutual match between %s and %s", liker_id, liked_user_id)
    else:
        logger.info("User %s liked %s", liker_id, liked_user_id)

    await notification_service.dispatch(notifier, notifications)

    like = await db.get(Like, like_id, populate_existing=True)
    return SendLikeResponse(
        like=LikeResponse.model_validate(like),
        is_mutual_match=is_mutual,
        conversation_id=conversation_id,
    )


async def unlike_user(db: AsyncSession, liker_id: UUID, liked_user_id: UUID) -> None:
    """Remove a like; a mutual match on the other side reverts to one-way."""
    await _lock_pair(db, liker_id, liked_user_id)
    like = await _get_like(db, liker_id, liked_user_id)
    if like is None:
        raise NotFoundError("Like not found", resource="like")

    await db.delete(like)
    await db.execute(
        update(Like)
        .where(Like.liker_id == liked_user_id, Like.liked_user_id == liker_id)
        .values(is_mutual=False)
    )
    await db.execute(
        update(Profile)
        .where(Profile.user_id == liked_user_id, Profile.like_count > 0)
        .values(like_count=Profile.like_count - 1)
    )
    await db.commit()
    logger.info("User %s unliked %s", liker_id, liked_user_id)


async def _list_likes(
    db: AsyncSession,
    condition,
    profile_user_column,
    page: int,
    per_page: int,
) -> tuple[list[LikeWithProfile], int]:
    total_result = await db.execute(select(func.count(Like.id)).where(condition))
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Like, Profile)
        .outerjoin(Profile, Profile.user_id == profile_user_column)
        .where(condition)
        .order_by(Like.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    likes = []
    for like, profile in result.all():
        item = LikeWithProfile.model_validate(like)
        if profile is not None:
            item.profile = ProfileBrief.model_validate(profile)
        likes.append(item)
    return likes, total


async def get_sent_likes(
    db: AsyncSession, user_id: UUID, page: int = 1, per_page: int = 20
) -> tuple[list[LikeWithProfile], int]:
    return await _list_likes(db, Like.liker_id == user_id, Like.liked_user_id, page, per_page)


async def get_received_likes(
    db: AsyncSession, user_id: UUID, page: int = 1, per_page: int = 20
) -> tuple[list[LikeWithProfile], int]:
    return await _list_likes(db, Like.liked_user_id == user_id, Like.liker_id, page, per_page)


async def get_mutual_likes(
    db: AsyncSession, user_id: UUID, page: int = 1, per_page: int = 20
) -> tuple[list[LikeWithProfile], int]:
    return await _list_likes(
        db,
        and_(Like.liker_id == user_id, Like.is_mutual.is_(True)),
        Like.liked_user_id,
        page,
        per_page,
    )


async def check_if_liked(db: AsyncSession, user_id: UUID, target_user_id: UUID) -> LikeCheckResponse:
    like = await _get_like(db, user_id, target_user_id)
    return LikeCheckResponse(has_liked=like is not None, is_mutual=bool(like and like.is_mutual))


async def get_like_stats(db: AsyncSession, user_id: UUID) -> LikeStatsResponse:
    sent = await db.execute(select(func.count(Like.id)).where(Like.liker_id == user_id))
    received = await db.execute(select(func.count(Like.id)).where(Like.liked_user_id == user_id))
    mutual = await db.execute(
        select(func.count(Like.id)).where(Like.liker_id == user_id, Like.is_mutual.is_(True))
    )
    return LikeStatsResponse(
        sent=sent.scalar() or 0,
        received=received.scalar() or 0,
        mutual=mutual.scalar() or 0,
    )
