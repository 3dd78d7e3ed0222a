from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AlreadyExistsError, ValidationError
from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfileUpdate

# (month, day) start of each sign, in calendar order; dates before Jan 20 are Capricorn
ZODIAC_STARTS = [
    ((1, 20), "Aquarius"),
    ((2, 19), "Pisces"),
    ((3, 21), "Aries"),
    ((4, 20), "Taurus"),
    ((5, 21), "Gemini"),
    ((6, 21), "Cancer"),
    ((7, 23), "Leo"),
    ((8, 23), "Virgo"),
    ((9, 23), "Libra"),
    ((10, 23), "Scorpio"),
    ((11, 22), "Sagittarius"),
    ((12, 22), "Capricorn"),
]

COMPLETENESS_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "about_me",
    "city",
    "state",
    "country",
    "height",
    "body_type",
    "education",
    "work_status",
    "religion",
)

MINIMUM_AGE = 18


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Calculate age in whole years."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_zodiac_sign(birth_date: date) -> str:
    sign = "Capricorn"
    for start, name in ZODIAC_STARTS:
        if (birth_date.month, birth_date.day) >= start:
            sign = name
    return sign


def calculate_completeness(profile: Profile) -> int:
    """Percentage of the core profile fields that are filled in."""
    filled = sum(1 for field in COMPLETENESS_FIELDS if getattr(profile, field, None))
    return round(filled / len(COMPLETENESS_FIELDS) * 100)


def _check_adult(birth_date: date) -> int:
    age = calculate_age(birth_date)
    if age < MINIMUM_AGE:
        raise ValidationError(
            f"You must be at least {MINIMUM_AGE} years old", field="date_of_birth"
        )
    return age


async def get_profile_by_user_id(db: AsyncSession, user_id: UUID) -> Profile | None:
    """Get profile by user ID."""
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def create_profile(db: AsyncSession, user_id: UUID, data: ProfileCreate) -> Profile:
    """Create the profile for a user; age and zodiac are derived from date of birth."""
    if await get_profile_by_user_id(db, user_id):
        raise AlreadyExistsError("Profile already exists")

    profile_data = data.model_dump()
    profile_data["gender"] = data.gender.value
    profile_data["age"] = _check_adult(data.date_of_birth)
    if not profile_data.get("zodiac_sign"):
        profile_data["zodiac_sign"] = calculate_zodiac_sign(data.date_of_birth)

    profile = Profile(user_id=user_id, **profile_data)
    profile.profile_completeness = calculate_completeness(profile)

    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(db: AsyncSession, profile: Profile, data: ProfileUpdate) -> Profile:
    """Update profile fields. Only update fields that are provided."""
    update_data = data.model_dump(exclude_unset=True)

    if update_data.get("date_of_birth"):
        update_data["age"] = _check_adult(update_data["date_of_birth"])
        if not update_data.get("zodiac_sign"):
            update_data["zodiac_sign"] = calculate_zodiac_sign(update_data["date_of_birth"])

    for field, value in update_data.items():
        setattr(profile, field, value)

    profile.profile_completeness = calculate_completeness(profile)

    await db.commit()
    await db.refresh(profile)
    return profile
