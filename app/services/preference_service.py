"""Match preference persistence."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.match_preference import MatchPreference
from app.schemas.match_preference import MatchPreferenceCreate


async def get_preferences(db: AsyncSession, user_id: uuid.UUID) -> MatchPreference | None:
    """Get a user's match preferences, or None when never set."""
    result = await db.execute(
        select(MatchPreference).where(MatchPreference.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def upsert_preferences(
    db: AsyncSession,
    user_id: uuid.UUID,
    data: MatchPreferenceCreate,
) -> MatchPreference:
    """Create or replace match preferences."""
    preferences = await get_preferences(db, user_id)

    if preferences:
        for field, value in data.model_dump().items():
            setattr(preferences, field, value)
    else:
        preferences = MatchPreference(user_id=user_id, **data.model_dump())
        db.add(preferences)

    await db.commit()
    await db.refresh(preferences)
    return preferences


async def delete_preferences(db: AsyncSession, user_id: uuid.UUID) -> bool:
    """Delete preferences. Returns True if deleted, False if none existed."""
    preferences = await get_preferences(db, user_id)
    if not preferences:
        return False

    await db.delete(preferences)
    await db.commit()
    return True
