"""Match preference endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.exceptions import NotFoundError
from app.database import get_db
from app.schemas.match_preference import MatchPreferenceCreate, MatchPreferenceResponse
from app.schemas.user import UserResponse
from app.services import preference_service

router = APIRouter(prefix="", tags=["preferences"])


@router.post("/", response_model=MatchPreferenceResponse)
async def create_or_update_preferences(
    preferences: MatchPreferenceCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MatchPreferenceResponse:
    """
    Create or update match preferences.

    This is an upsert operation. Empty lists (e.g. religion: []) leave that
    category unconstrained; a category only rejects candidates outright when
    its *_is_deal_breaker flag is set.
    """
    result = await preference_service.upsert_preferences(db, current_user.id, preferences)
    return MatchPreferenceResponse.model_validate(result)


@router.get("/", response_model=MatchPreferenceResponse)
async def get_my_preferences(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MatchPreferenceResponse:
    """Get current user's match preferences."""
    preferences = await preference_service.get_preferences(db, current_user.id)

    if not preferences:
        raise NotFoundError("No preferences set. Use POST /preferences/ to create.", resource="preferences")

    return MatchPreferenceResponse.model_validate(preferences)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
async def delete_preferences(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Delete match preferences.

    Without preferences every candidate scores the neutral 50.
    """
    deleted = await preference_service.delete_preferences(db, current_user.id)

    if not deleted:
        raise NotFoundError("No preferences to delete", resource="preferences")
