from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    male = "male"
    female = "female"


class ProfileCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    gender: Gender
    zodiac_sign: str | None = Field(None, max_length=20)
    about_me: str | None = Field(None, max_length=1500)

    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)

    religion: str | None = Field(None, max_length=50)
    education: str | None = Field(None, max_length=100)
    work_status: str | None = Field(None, max_length=50)
    relationship_status: str | None = Field(None, max_length=50)

    height: str | None = Field(None, max_length=20)
    body_type: str | None = Field(None, max_length=30)
    has_tattoos: bool = False
    has_piercings: bool = False

    genotype: str | None = Field(None, max_length=10)
    blood_group: str | None = Field(None, max_length=10)

    drinking_status: str | None = Field(None, max_length=30)
    smoking_status: str | None = Field(None, max_length=30)


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    date_of_birth: date | None = None
    zodiac_sign: str | None = Field(None, max_length=20)
    about_me: str | None = Field(None, max_length=1500)

    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)

    religion: str | None = Field(None, max_length=50)
    education: str | None = Field(None, max_length=100)
    work_status: str | None = Field(None, max_length=50)
    relationship_status: str | None = Field(None, max_length=50)

    height: str | None = Field(None, max_length=20)
    body_type: str | None = Field(None, max_length=30)
    has_tattoos: bool | None = None
    has_piercings: bool | None = None

    genotype: str | None = Field(None, max_length=10)
    blood_group: str | None = Field(None, max_length=10)

    drinking_status: str | None = Field(None, max_length=30)
    smoking_status: str | None = Field(None, max_length=30)

    is_active: bool | None = None


class ProfileResponse(BaseModel):
    id: UUID
    user_id: UUID

    first_name: str
    last_name: str
    date_of_birth: date
    age: int
    gender: str
    zodiac_sign: str | None
    about_me: str | None

    city: str | None
    state: str | None
    country: str | None

    religion: str | None
    education: str | None
    work_status: str | None
    relationship_status: str | None

    height: str | None
    body_type: str | None
    has_tattoos: bool
    has_piercings: bool

    genotype: str | None
    blood_group: str | None

    drinking_status: str | None
    smoking_status: str | None

    is_active: bool
    like_count: int
    profile_completeness: int

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileBrief(BaseModel):
    """Compact card shown in listings (explore, likes, conversations)."""

    user_id: UUID
    first_name: str
    age: int
    gender: str
    zodiac_sign: str | None
    city: str | None
    state: str | None
    country: str | None
    religion: str | None
    education: str | None

    model_config = ConfigDict(from_attributes=True)
