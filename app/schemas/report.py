from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReportReason(str, Enum):
    fake_profile = "fake_profile"
    harassment = "harassment"
    inappropriate_content = "inappropriate_content"
    scam = "scam"
    underage = "underage"
    spam = "spam"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    dismissed = "dismissed"
    action_taken = "action_taken"


class ReportAction(str, Enum):
    """What happens to the reported account once a report is reviewed."""

    no_action = "no_action"
    suspend_user = "suspend_user"
    ban_user = "ban_user"


class ReportCreate(BaseModel):
    reported_user_id: UUID
    reason: ReportReason
    description: str | None = Field(None, max_length=1000)


class ReportResponse(BaseModel):
    id: UUID
    reported_user_id: UUID
    reason: str
    description: str | None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportAdminResponse(ReportResponse):
    reporter_user_id: UUID
    reviewed_by: UUID | None
    admin_notes: str | None
    reviewed_at: datetime | None
    # Filled in by the admin service for display
    reported_user_email: str | None = None
    reporter_user_email: str | None = None


class ReportAdminListResponse(BaseModel):
    reports: list[ReportAdminResponse]
    total: int
    page: int
    per_page: int


class ReportReview(BaseModel):
    status: ReportStatus
    admin_notes: str | None = Field(None, max_length=2000)
    action: ReportAction = ReportAction.no_action
