from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.exceptions import ValidationError
from app.database import get_db
from app.schemas.match import CompatibilityResponse, MatchCandidate, MatchFilter, MatchListResponse
from app.schemas.user import UserResponse
from app.services import matching_service

router = APIRouter(prefix="", tags=["matches"])


@router.get("/explore", response_model=MatchListResponse)
async def explore_matches(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> MatchListResponse:
    """
    Browse candidates ranked by compatibility.

    Candidates violating one of your deal-breakers are left out.
    """
    matches, total = await matching_service.explore_matches(db, current_user.id, limit, offset)
    return MatchListResponse(matches=matches, total=total, limit=limit, offset=offset)


@router.get("/suggestions", response_model=list[MatchCandidate])
async def get_match_suggestions(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(10, ge=1, le=50),
) -> list[MatchCandidate]:
    """Top suggestions, online users first."""
    return await matching_service.get_match_suggestions(db, current_user.id, limit)


@router.post("/filter", response_model=MatchListResponse)
async def filter_matches(
    filters: MatchFilter,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MatchListResponse:
    matches, total = await matching_service.filter_matches(db, current_user.id, filters)
    return MatchListResponse(matches=matches, total=total, limit=filters.limit, offset=filters.offset)


@router.api_route(
    "/compatibility/{target_user_id}",
    methods=["GET", "POST"],
    response_model=CompatibilityResponse,
)
async def get_compatibility(
    target_user_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CompatibilityResponse:
    """
    Score a user against your preferences.

    Returns the score (0-100), the categories that matched and the
    deal-breaker that was violated, if any.
    """
    if target_user_id == current_user.id:
        raise ValidationError("Cannot check compatibility with yourself", field="target_user_id")

    return await matching_service.calculate_compatibility(db, current_user.id, target_user_id)
