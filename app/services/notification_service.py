"""
In-app notifications.

Rows are persisted inside the caller's transaction; live delivery goes through
a NotificationPort after commit and never fails the operation that emitted it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.notification import Notification, NotificationType
from app.schemas.notification import NotificationResponse

logger = logging.getLogger(__name__)


class NotificationPort(Protocol):
    """Anything that can push an event to a connected user."""

    async def notify(self, user_id: UUID, payload: dict[str, Any]) -> None: ...


def build_payload(notification: Notification) -> dict[str, Any]:
    return {
        "event": "notification",
        "notification": NotificationResponse.model_validate(notification).model_dump(mode="json"),
    }


async def create_notification(
    db: AsyncSession,
    user_id: UUID,
    type: NotificationType,
    title: str,
    body: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    """Add a notification to the session. The caller commits."""
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        body=body,
        data=data,
    )
    db.add(notification)
    await db.flush()
    return notification


async def dispatch(
    notifier: NotificationPort | None,
    notifications: Iterable[Notification],
) -> None:
    """Push committed notifications. Delivery problems are logged, not raised."""
    if notifier is None:
        return
    for notification in notifications:
        try:
            await notifier.notify(notification.user_id, build_payload(notification))
        except Exception:
            logger.warning(
                "Failed to deliver notification %s to user %s",
                notification.id,
                notification.user_id,
                exc_info=True,
            )


async def get_unread_count(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    )
    return result.scalar() or 0


async def list_notifications(
    db: AsyncSession,
    user_id: UUID,
    page: int = 1,
    per_page: int = 20,
) -> tuple[list[Notification], int, int]:
    """Newest first. Returns (notifications, total, unread_count)."""
    total_result = await db.execute(
        select(func.count(Notification.id)).where(Notification.user_id == user_id)
    )
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    notifications = list(result.scalars().all())

    return notifications, total, await get_unread_count(db, user_id)


async def mark_as_read(db: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found", resource="notification")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(notification)
    return notification


async def mark_all_as_read(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=datetime.now(timezone.utc))
    )
    await db.commit()
    return result.rowcount
