from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.core.exceptions import InsufficientPermissionsError
from app.core.realtime import get_notifier
from app.database import get_db
from app.models.audit_log import AuditAction
from app.schemas.admin import AuditLogListResponse, AuditLogResponse
from app.schemas.report import (
    ReportAdminListResponse,
    ReportAdminResponse,
    ReportReview,
    ReportStatus,
)
from app.schemas.user import (
    UserAdminListResponse,
    UserAdminResponse,
    UserBan,
    UserResponse,
    UserStatus,
    UserUnban,
)
from app.services import admin_service, report_service
from app.services.notification_service import NotificationPort

router = APIRouter(prefix="", tags=["admin"])


async def get_current_admin_user(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
) -> UserResponse:
    """Dependency that checks if current user is admin."""
    if not current_user.is_admin:
        raise InsufficientPermissionsError()
    return current_user


# ==================== User Management Endpoints ====================


@router.get("/users", response_model=UserAdminListResponse)
async def list_users(
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, description="Search by email or phone"),
    user_status: UserStatus | None = Query(None, alias="status"),
) -> UserAdminListResponse:
    """List all users with optional search and filter (admin only)."""
    users, total = await admin_service.list_users(
        db, page, per_page, search, user_status.value if user_status else None
    )
    return UserAdminListResponse(
        users=[UserAdminResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/users/{user_id}", response_model=UserAdminResponse)
async def get_user_admin(
    user_id: UUID,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserAdminResponse:
    """Get user details (admin only)."""
    user = await admin_service.get_user_or_404(db, user_id)
    return UserAdminResponse.model_validate(user)


@router.post("/users/{user_id}/ban", response_model=UserAdminResponse)
async def ban_user(
    user_id: UUID,
    ban_data: UserBan,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    notifier: Annotated[NotificationPort, Depends(get_notifier)],
) -> UserAdminResponse:
    """Ban a user (admin only)."""
    user = await admin_service.ban_user(db, notifier, admin_user.id, user_id, ban_data.reason)
    return UserAdminResponse.model_validate(user)


@router.post("/users/{user_id}/unban", response_model=UserAdminResponse)
async def unban_user(
    user_id: UUID,
    unban_data: UserUnban,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserAdminResponse:
    """Unban a user (admin only)."""
    user = await admin_service.unban_user(db, admin_user.id, user_id, unban_data.note)
    return UserAdminResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a user and all their data (admin only)."""
    await admin_service.delete_user(db, admin_user.id, user_id)


# ==================== Reports Management Endpoints ====================


@router.get("/reports", response_model=ReportAdminListResponse)
async def list_reports(
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    report_status: ReportStatus | None = Query(None, alias="status"),
) -> ReportAdminListResponse:
    """List all user reports, pending first (admin only)."""
    reports, total = await admin_service.list_reports(
        db, page, per_page, report_status.value if report_status else None
    )
    return ReportAdminListResponse(
        reports=[await admin_service.to_admin_report(db, r) for r in reports],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/reports/{report_id}", response_model=ReportAdminResponse)
async def get_report_admin(
    report_id: UUID,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportAdminResponse:
    """Get report details (admin only)."""
    report = await report_service.get_report(db, report_id)
    return await admin_service.to_admin_report(db, report)


@router.post("/reports/{report_id}/review", response_model=ReportAdminResponse)
async def review_report(
    report_id: UUID,
    review_data: ReportReview,
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportAdminResponse:
    """Review a report and optionally suspend or ban the reported user (admin only)."""
    report = await admin_service.review_report(db, admin_user.id, report_id, review_data)
    return await admin_service.to_admin_report(db, report)


# ==================== Audit Log Endpoints ====================


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def list_audit_logs(
    admin_user: Annotated[UserResponse, Depends(get_current_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    action: AuditAction | None = None,
) -> AuditLogListResponse:
    logs, total = await admin_service.list_audit_logs(
        db, page, per_page, action.value if action else None
    )
    return AuditLogListResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=total,
        page=page,
        per_page=per_page,
    )
