import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password, verify_password
from app.models.email_verification import EmailVerificationCode
from app.models.user import User
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_phone(db: AsyncSession, phone: str) -> User | None:
    result = await db.execute(select(User).where(User.phone == phone))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    user = User(
        email=data.email.lower(),
        phone=data.phone,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def set_online(db: AsyncSession, user_id: UUID, is_online: bool) -> None:
    """Flip presence; called by the WebSocket endpoint on connect/disconnect."""
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(is_online=is_online, last_active_at=datetime.now(timezone.utc))
    )
    await db.commit()


async def issue_email_code(db: AsyncSession, user_id: UUID) -> EmailVerificationCode:
    """
    Create a six-digit code for confirming the user's email.

    Delivery is left to the mail integration; the code is logged at debug level.
    """
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found", resource="user")
    if user.email_verified:
        raise ConflictError("Email is already verified")

    record = EmailVerificationCode(
        user_id=user_id,
        code=f"{secrets.randbelow(1_000_000):06d}",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.EMAIL_CODE_EXPIRE_MINUTES),
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info("Email verification code issued for user %s", user_id)
    logger.debug("Verification code for %s: %s", user.email, record.code)
    return record


async def verify_email_code(db: AsyncSession, user_id: UUID, code: str) -> User:
    """Mark the newest matching unused, unexpired code as spent and verify the email."""
    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(EmailVerificationCode)
        .where(
            EmailVerificationCode.user_id == user_id,
            EmailVerificationCode.code == code,
            EmailVerificationCode.used_at.is_(None),
            EmailVerificationCode.expires_at > now,
        )
        .order_by(EmailVerificationCode.created_at.desc())
        .limit(1)
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise ValidationError("Invalid or expired verification code", field="code")

    record.used_at = now
    await db.execute(update(User).where(User.id == user_id).values(email_verified=True))
    await db.commit()

    logger.info("Email verified for user %s", user_id)
    return await db.get(User, user_id, populate_existing=True)
