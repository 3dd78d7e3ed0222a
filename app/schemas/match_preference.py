"""Match preference schemas for API requests and responses."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MatchPreferenceCreate(BaseModel):
    """Schema for creating/updating match preferences."""

    # Age preferences
    age_min: int = Field(default=18, ge=18, le=100)
    age_max: int = Field(default=100, ge=18, le=100)
    age_is_deal_breaker: bool = False

    # Location preferences
    location_states: list[str] = []
    location_is_deal_breaker: bool = False

    # Background preferences
    religion: list[str] = []
    religion_is_deal_breaker: bool = False
    zodiac: list[str] = []
    zodiac_is_deal_breaker: bool = False

    # Medical preferences
    genotype: list[str] = []
    genotype_is_deal_breaker: bool = False
    blood_group: list[str] = []
    blood_group_is_deal_breaker: bool = False

    # Physical preferences
    body_type: list[str] = []
    body_type_is_deal_breaker: bool = False
    tattoos_acceptable: bool | None = None
    tattoos_is_deal_breaker: bool = False
    piercings_acceptable: bool | None = None
    piercings_is_deal_breaker: bool = False

    @model_validator(mode="after")
    def check_age_range(self) -> "MatchPreferenceCreate":
        if self.age_min > self.age_max:
            raise ValueError("age_min must be less than or equal to age_max")
        return self


class MatchPreferenceResponse(BaseModel):
    """Schema for match preference response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID

    age_min: int
    age_max: int
    age_is_deal_breaker: bool

    location_states: list[str] | None = None
    location_is_deal_breaker: bool

    religion: list[str] | None = None
    religion_is_deal_breaker: bool
    zodiac: list[str] | None = None
    zodiac_is_deal_breaker: bool

    genotype: list[str] | None = None
    genotype_is_deal_breaker: bool
    blood_group: list[str] | None = None
    blood_group_is_deal_breaker: bool

    body_type: list[str] | None = None
    body_type_is_deal_breaker: bool
    tattoos_acceptable: bool | None = None
    tattoos_is_deal_breaker: bool
    piercings_acceptable: bool | None = None
    piercings_is_deal_breaker: bool

    created_at: datetime
    updated_at: datetime
