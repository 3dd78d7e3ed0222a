from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.schemas.profile import Gender, ProfileBrief


class CompatibilityResponse(BaseModel):
    """Score of a candidate against the viewer's preferences"""

    score: int = Field(ge=0, le=100)
    matched_attributes: list[str]
    deal_breakers: list[str]


class MatchCandidate(BaseModel):
    """A candidate profile with its compatibility"""

    user_id: UUID
    is_online: bool
    profile: ProfileBrief
    compatibility: CompatibilityResponse


class MatchListResponse(BaseModel):
    """Page of candidates"""

    matches: list[MatchCandidate]
    total: int
    limit: int
    offset: int


class MatchFilter(BaseModel):
    """Ad-hoc filter for browsing candidates"""

    age_min: int | None = Field(None, ge=18, le=100)
    age_max: int | None = Field(None, ge=18, le=100)
    gender: Gender | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    religion: list[str] | None = None
    education: list[str] | None = None
    online_only: bool = False

    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_age_range(self) -> "MatchFilter":
        if self.age_min is not None and self.age_max is not None and self.age_min > self.age_max:
            raise ValueError("age_min must be less than or equal to age_max")
        return self
