"""Blocking between users."""

import logging
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.database import dialect_insert
from app.models.block import Block
from app.services import user_service

logger = logging.getLogger(__name__)


async def is_blocked_between(db: AsyncSession, user_a: UUID, user_b: UUID) -> bool:
    """True if either user has blocked the other."""
    result = await db.execute(
        select(Block.id)
        .where(
            or_(
                and_(Block.blocker_id == user_a, Block.blocked_user_id == user_b),
                and_(Block.blocker_id == user_b, Block.blocked_user_id == user_a),
            )
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_blocked_user_ids(db: AsyncSession, user_id: UUID) -> set[UUID]:
    """Users this user blocked plus users who blocked this user."""
    result = await db.execute(
        select(Block.blocker_id, Block.blocked_user_id).where(
            or_(Block.blocker_id == user_id, Block.blocked_user_id == user_id)
        )
    )
    ids = set()
    for blocker_id, blocked_user_id in result.all():
        ids.add(blocked_user_id if blocker_id == user_id else blocker_id)
    return ids


async def block_user(db: AsyncSession, blocker_id: UUID, blocked_user_id: UUID) -> Block:
    if blocker_id == blocked_user_id:
        raise ValidationError("You cannot block yourself", field="user_id")

    if await user_service.get_user_by_id(db, blocked_user_id) is None:
        raise NotFoundError("User not found", resource="user")

    result = await db.execute(
        dialect_insert(db, Block)
        .values(blocker_id=blocker_id, blocked_user_id=blocked_user_id)
        .on_conflict_do_nothing(index_elements=["blocker_id", "blocked_user_id"])
        .returning(Block.id)
    )
    block_id = result.scalar_one_or_none()
    if block_id is None:
        raise ConflictError("User is already blocked")

    await db.commit()
    logger.info("User %s blocked %s", blocker_id, blocked_user_id)

    block = await db.get(Block, block_id)
    return block


async def unblock_user(db: AsyncSession, blocker_id: UUID, blocked_user_id: UUID) -> None:
    result = await db.execute(
        delete(Block).where(
            Block.blocker_id == blocker_id,
            Block.blocked_user_id == blocked_user_id,
        )
    )
    if result.rowcount == 0:
        raise NotFoundError("Block not found", resource="block")

    await db.commit()
    logger.info("User %s unblocked %s", blocker_id, blocked_user_id)
