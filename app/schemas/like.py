from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.profile import ProfileBrief


class LikeCreate(BaseModel):
    liked_user_id: UUID


class LikeResponse(BaseModel):
    id: UUID
    liker_id: UUID
    liked_user_id: UUID
    is_mutual: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SendLikeResponse(BaseModel):
    like: LikeResponse
    is_mutual_match: bool
    conversation_id: UUID | None = None


class LikeWithProfile(LikeResponse):
    # Profile of the other side of the like
    profile: ProfileBrief | None = None


class LikeListResponse(BaseModel):
    likes: list[LikeWithProfile]
    total: int
    page: int
    per_page: int


class LikeCheckResponse(BaseModel):
    has_liked: bool
    is_mutual: bool


class LikeStatsResponse(BaseModel):
    sent: int
    received: int
    mutual: int
