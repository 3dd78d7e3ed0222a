from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.database import get_db
from app.schemas.notification import (
    NotificationListResponse,
    NotificationResponse,
    NotificationsMarkedRead,
    NotificationUnreadCount,
)
from app.schemas.user import UserResponse
from app.services import notification_service

router = APIRouter(prefix="", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> NotificationListResponse:
    notifications, total, unread_count = await notification_service.list_notifications(
        db, current_user.id, page, per_page
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        unread_count=unread_count,
        page=page,
        per_page=per_page,
    )


@router.get("/unread-count", response_model=NotificationUnreadCount)
async def get_unread_count(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationUnreadCount:
    count = await notification_service.get_unread_count(db, current_user.id)
    return NotificationUnreadCount(unread_count=count)


@router.patch("/read-all", response_model=NotificationsMarkedRead)
async def mark_all_as_read(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationsMarkedRead:
    marked = await notification_service.mark_all_as_read(db, current_user.id)
    return NotificationsMarkedRead(marked_read=marked)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: UUID,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationResponse:
    notification = await notification_service.mark_as_read(db, current_user.id, notification_id)
    return NotificationResponse.model_validate(notification)
