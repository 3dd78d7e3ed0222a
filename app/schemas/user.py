from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserStatus(str, Enum):
    active = "active"
    suspended = "suspended"
    banned = "banned"


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    phone: str | None = Field(None, max_length=20)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: UUID
    email: str
    phone: str | None
    status: UserStatus
    email_verified: bool
    is_admin: bool = False
    is_online: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    sub: str
    exp: int


# Admin schemas
class UserAdminResponse(UserResponse):
    ban_reason: str | None = None
    last_active_at: datetime | None = None


class UserAdminListResponse(BaseModel):
    users: list[UserAdminResponse]
    total: int
    page: int
    per_page: int


class UserBan(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class UserUnban(BaseModel):
    note: str | None = Field(None, max_length=500)


class EmailCodeIssued(BaseModel):
    message: str = "Verification code sent"
    expires_at: datetime
    # Only filled in when EXPOSE_VERIFICATION_CODE is enabled
    code: str | None = None


class EmailVerify(BaseModel):
    code: str = Field(..., pattern=r"^\d{6}$")
