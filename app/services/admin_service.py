"""
Admin moderation: bans, deletions and report review.

Every moderation action writes an AuditLog row in the same transaction.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models.audit_log import AuditAction, AuditLog
from app.models.block import Block
from app.models.conversation import Conversation, ConversationParticipant
from app.models.email_verification import EmailVerificationCode
from app.models.like import Like
from app.models.match_preference import MatchPreference
from app.models.message import Message
from app.models.notification import Notification, NotificationType
from app.models.profile import Profile
from app.models.report import Report
from app.models.user import User
from app.schemas.report import ReportAction, ReportAdminResponse, ReportReview
from app.services import notification_service, report_service
from app.services.notification_service import NotificationPort

logger = logging.getLogger(__name__)


def _audit(
    db: AsyncSession,
    admin_id: UUID,
    action: AuditAction,
    target_type: str,
    target_id: UUID,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    log = AuditLog(
        admin_id=admin_id,
        action=action.value,
        target_type=target_type,
        target_id=target_id,
        details=details,
    )
    db.add(log)
    return log


async def get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found", resource="user")
    return user


async def list_users(
    db: AsyncSession,
    page: int = 1,
    per_page: int = 20,
    search: str | None = None,
    status: str | None = None,
) -> tuple[list[User], int]:
    """Non-admin users, newest first, optionally searched by email/phone."""
    query = select(User).where(User.is_admin.is_(False))

    if search:
        query = query.where(
            or_(
                User.email.icontains(search, autoescape=True),
                User.phone.icontains(search, autoescape=True),
            )
        )
    if status:
        query = query.where(User.status == status)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    offset = (page - 1) * per_page
    result = await db.execute(query.order_by(User.created_at.desc()).offset(offset).limit(per_page))
    return list(result.scalars().all()), total


async def ban_user(
    db: AsyncSession,
    notifier: NotificationPort | None,
    admin_id: UUID,
    user_id: UUID,
    reason: str,
) -> User:
    user = await get_user_or_404(db, user_id)
    if user.is_admin:
        raise ForbiddenError("Cannot ban admin users")
    if user.status == "banned":
        raise ConflictError("User is already banned")

    user.status = "banned"
    user.ban_reason = reason
    user.is_online = False
    _audit(db, admin_id, AuditAction.BAN_USER, "user", user_id, {"reason": reason})
    notification = await notification_service.create_notification(
        db,
        user_id,
        NotificationType.SYSTEM_ANNOUNCEMENT,
        "Account banned",
        f"Your account has been banned. Reason: {reason}",
        {"reason": reason},
    )

    await db.commit()
    await db.refresh(user)
    logger.info("Admin %s banned user %s: %s", admin_id, user_id, reason)

    await notification_service.dispatch(notifier, [notification])
    return user


async def unban_user(
    db: AsyncSession,
    admin_id: UUID,
    user_id: UUID,
    note: str | None = None,
) -> User:
    user = await get_user_or_404(db, user_id)
    if user.status not in ("suspended", "banned"):
        raise ConflictError("User is not suspended or banned")

    previous_status = user.status
    user.status = "active"
    user.ban_reason = None
    _audit(
        db,
        admin_id,
        AuditAction.UNBAN_USER,
        "user",
        user_id,
        {"previous_status": previous_status, "note": note},
    )

    await db.commit()
    await db.refresh(user)
    logger.info("Admin %s unbanned user %s", admin_id, user_id)
    return user


async def delete_user(db: AsyncSession, admin_id: UUID, user_id: UUID) -> None:
    """Remove a user and everything that belongs to them."""
    user = await get_user_or_404(db, user_id)
    if user.is_admin:
        raise ForbiddenError("Cannot delete admin users")
    email = user.email

    conversation_ids = select(Conversation.id).where(
        or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id)
    )
    await db.execute(delete(Message).where(Message.conversation_id.in_(conversation_ids)))
    await db.execute(
        delete(ConversationParticipant).where(
            ConversationParticipant.conversation_id.in_(conversation_ids)
        )
    )
    await db.execute(
        delete(Conversation).where(
            or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id)
        )
    )

    # Likes given by this user inflated other profiles' like counts
    await db.execute(
        update(Profile)
        .where(Profile.user_id.in_(select(Like.liked_user_id).where(Like.liker_id == user_id)))
        .values(like_count=case((Profile.like_count > 0, Profile.like_count - 1), else_=0))
    )
    # Reverse likes are no longer mutual
    await db.execute(
        update(Like).where(Like.liked_user_id == user_id).values(is_mutual=False)
    )
    await db.execute(delete(Like).where(or_(Like.liker_id == user_id, Like.liked_user_id == user_id)))
    await db.execute(
        delete(Block).where(or_(Block.blocker_id == user_id, Block.blocked_user_id == user_id))
    )
    await db.execute(delete(Notification).where(Notification.user_id == user_id))
    await db.execute(
        delete(Report).where(
            or_(Report.reported_user_id == user_id, Report.reporter_user_id == user_id)
        )
    )
    await db.execute(delete(MatchPreference).where(MatchPreference.user_id == user_id))
    await db.execute(delete(EmailVerificationCode).where(EmailVerificationCode.user_id == user_id))
    await db.execute(delete(Profile).where(Profile.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))

    _audit(db, admin_id, AuditAction.DELETE_USER, "user", user_id, {"email": email})
    await db.commit()
    logger.info("Admin %s deleted user %s", admin_id, user_id)


async def to_admin_report(db: AsyncSession, report: Report) -> ReportAdminResponse:
    """Report with both users' emails for display."""
    reported_email = await db.execute(select(User.email).where(User.id == report.reported_user_id))
    reporter_email = await db.execute(select(User.email).where(User.id == report.reporter_user_id))

    report_data = ReportAdminResponse.model_validate(report)
    report_data.reported_user_email = reported_email.scalar_one_or_none()
    report_data.reporter_user_email = reporter_email.scalar_one_or_none()
    return report_data


async def list_reports(
    db: AsyncSession,
    page: int = 1,
    per_page: int = 20,
    status: str | None = None,
) -> tuple[list[Report], int]:
    """Pending reports first, then newest."""
    query = select(Report)
    if status:
        query = query.where(Report.status == status)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    result = await db.execute(
        query.order_by(
            case((Report.status == "pending", 0), else_=1),
            Report.created_at.desc(),
        )
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(result.scalars().all()), total


async def review_report(
    db: AsyncSession,
    admin_id: UUID,
    report_id: UUID,
    review: ReportReview,
) -> Report:
    """Record the review and apply the chosen action to the reported account."""
    report = await report_service.get_report(db, report_id)

    report.status = review.status.value
    report.admin_notes = review.admin_notes
    report.reviewed_by = admin_id
    report.reviewed_at = datetime.now(timezone.utc)

    applied = ReportAction.no_action
    if review.action != ReportAction.no_action:
        reported_user = await db.get(User, report.reported_user_id)
        if reported_user and not reported_user.is_admin:
            if review.action == ReportAction.ban_user:
                reported_user.status = "banned"
                reported_user.ban_reason = f"Reported for: {report.reason}"
            else:
                reported_user.status = "suspended"
            reported_user.is_online = False
            applied = review.action

    _audit(
        db,
        admin_id,
        AuditAction.REVIEW_REPORT,
        "report",
        report_id,
        {"status": report.status, "action": applied.value},
    )

    await db.commit()
    await db.refresh(report)
    logger.info("Admin %s reviewed report %s -> %s", admin_id, report_id, report.status)
    return report


async def list_audit_logs(
    db: AsyncSession,
    page: int = 1,
    per_page: int = 50,
    action: str | None = None,
) -> tuple[list[AuditLog], int]:
    query = select(AuditLog)
    if action:
        query = query.where(AuditLog.action == action)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    result = await db.execute(
        query.order_by(AuditLog.created_at.desc()).offset((page - 1) * per_page).limit(per_page)
    )
    return list(result.scalars().all()), total
