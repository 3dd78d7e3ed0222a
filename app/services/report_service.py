from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services import user_service


async def create_report(db: AsyncSession, reporter_id: UUID, data: ReportCreate) -> Report:
    if data.reported_user_id == reporter_id:
        raise ValidationError("You cannot report yourself", field="reported_user_id")

    if await user_service.get_user_by_id(db, data.reported_user_id) is None:
        raise NotFoundError("User not found", resource="user")

    report = Report(
        reported_user_id=data.reported_user_id,
        reporter_user_id=reporter_id,
        reason=data.reason.value,
        description=data.description,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report


async def get_report(db: AsyncSession, report_id: UUID) -> Report:
    result = await db.execute(select(Report).where(Report.id == report_id))
    report = result.scalar_one_or_none()
    if report is None:
        raise NotFoundError("Report not found", resource="report")
    return report
