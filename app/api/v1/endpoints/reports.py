from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import get_current_user
from app.database import get_db
from app.schemas.report import ReportCreate, ReportResponse
from app.schemas.user import UserResponse
from app.services import report_service

router = APIRouter(prefix="", tags=["reports"])


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """Report another user to the moderators."""
    report = await report_service.create_report(db, current_user.id, report_data)
    return ReportResponse.model_validate(report)
