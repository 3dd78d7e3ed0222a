from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.realtime import get_notifier
from app.database import get_db
from app.schemas.like import (
    LikeCheckResponse,
    LikeCreate,
    LikeListResponse,
    LikeStatsResponse,
    SendLikeResponse,
)
from app.schemas.user import UserResponse
from app.services import like_service
from app.services.notification_service import NotificationPort

router = APIRouter(prefix="", tags=["likes"])


@router.post("/", response_model=SendLikeResponse, status_code=status.HTTP_201_CREATED)
async def send_like(
    like_data: LikeCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    notifier: Annotated[NotificationPort, Depends(get_notifier)],
) -> SendLikeResponse:
    """
    Like a user.

    When the other user already liked you back this creates a mutual match
    and opens (or unlocks) your conversation.
    """
    return await like_service.send_like(db, notifier, current_user.id, like_data.liked_user_id)


# NOTE: These specific routes MUST be defined before /{liked_user_id}
@router.get("/sent", response_model=LikeListResponse)
async def get_sent_likes(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> LikeListResponse:
    likes, total = await like_service.get_sent_likes(db, current_user.id, page, per_page)
    return LikeListResponse(likes=likes, total=total, page=page, per_page=per_page)


@router.get("/received", response_model=LikeListResponse)
async def get_received_likes(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> LikeListResponse:
    likes, total = await like_service.get_received_likes(db, current_user.id, page, per_page)
    return LikeListResponse(likes=likes, total=total, page=page, per_page=per_page)


@router.get("/mutual", response_model=LikeListResponse)
async def get_mutual_likes(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> LikeListResponse:
    likes, total = await like_service.get_mutual_likes(db, current_user.id, page, per_page)
    return LikeListResponse(likes=likes, total=total, page=page, per_page=per_page)


@router.get("/stats", response_model=LikeStatsResponse)
async def get_like_stats(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeStatsResponse:
    return await like_service.get_like_stats(db, current_user.id)


@router.get("/check/{target_user_id}", response_model=LikeCheckResponse)
async def check_if_liked(
    target_user_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeCheckResponse:
    return await like_service.check_if_liked(db, current_user.id, target_user_id)


@router.delete("/{liked_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unlike_user(
    liked_user_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await like_service.unlike_user(db, current_user.id, liked_user_id)
