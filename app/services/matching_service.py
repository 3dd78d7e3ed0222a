"""Matching service for compatibility scoring and candidate listings."""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import NotFoundError
from app.models.match_preference import MatchPreference
from app.models.profile import Profile
from app.models.user import User
from app.schemas.match import CompatibilityResponse, MatchCandidate, MatchFilter
from app.schemas.profile import ProfileBrief
from app.services import block_service, preference_service

logger = logging.getLogger(__name__)


def _check_list_match(preference_list: list | None, value: str | None) -> bool:
    """Check if value is one of the listed values, compared exactly."""
    if not value:
        return False
    return value in (preference_list or [])


@dataclass(frozen=True)
class CategoryRule:
    """
    One preference category.

    ``applies`` decides whether the viewer constrained the category at all;
    ``matches`` decides whether the candidate satisfies it.
    """

    name: str
    weight: int
    deal_breaker_flag: str
    applies: Callable[[MatchPreference], bool]
    matches: Callable[[MatchPreference, Profile], bool]


def _list_rule(name: str, weight: int, preference_field: str, profile_field: str, flag: str) -> CategoryRule:
    return CategoryRule(
        name=name,
        weight=weight,
        deal_breaker_flag=flag,
        applies=lambda prefs: bool(getattr(prefs, preference_field)),
        matches=lambda prefs, profile: _check_list_match(
            getattr(prefs, preference_field), getattr(profile, profile_field)
        ),
    )


def _flag_rule(name: str, weight: int, preference_field: str, profile_field: str, flag: str) -> CategoryRule:
    return CategoryRule(
        name=name,
        weight=weight,
        deal_breaker_flag=flag,
        applies=lambda prefs: getattr(prefs, preference_field) is not None,
        matches=lambda prefs, profile: (
            getattr(profile, profile_field) is not None
            and bool(getattr(profile, profile_field)) == getattr(prefs, preference_field)
        ),
    )


# Evaluation order matters: the first violated deal-breaker ends scoring.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        name="age",
        weight=15,
        deal_breaker_flag="age_is_deal_breaker",
        applies=lambda prefs: True,
        matches=lambda prefs, profile: (
            profile.age is not None and prefs.age_min <= profile.age <= prefs.age_max
        ),
    ),
    _list_rule("location", 10, "location_states", "state", "location_is_deal_breaker"),
    _list_rule("religion", 15, "religion", "religion", "religion_is_deal_breaker"),
    _list_rule("zodiac", 10, "zodiac", "zodiac_sign", "zodiac_is_deal_breaker"),
    _list_rule("genotype", 10, "genotype", "genotype", "genotype_is_deal_breaker"),
    _list_rule("bloodGroup", 5, "blood_group", "blood_group", "blood_group_is_deal_breaker"),
    _list_rule("bodyType", 10, "body_type", "body_type", "body_type_is_deal_breaker"),
    _flag_rule("tattoos", 5, "tattoos_acceptable", "has_tattoos", "tattoos_is_deal_breaker"),
    _flag_rule("piercings", 5, "piercings_acceptable", "has_piercings", "piercings_is_deal_breaker"),
)

EDUCATION_BONUS = 10
LIFESTYLE_BONUS = 5
MAX_SCORE = 100


def _same_value(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a == b


def score_profiles(
    viewer_profile: Profile,
    candidate_profile: Profile,
    preferences: MatchPreference | None,
) -> CompatibilityResponse:
    """
    Score a candidate against the viewer's stored preferences.

    Scoring:
    - No preferences: neutral score, nothing matched
    - Each constrained category, in CATEGORY_RULES order: weight on match;
      a miss on a deal-breaker category returns score 0 immediately
    - Education (+10) and drinking status (+5) shared by both profiles
    - Capped at 100
    """
    if preferences is None:
        return CompatibilityResponse(
            score=settings.NEUTRAL_COMPATIBILITY_SCORE,
            matched_attributes=[],
            deal_breakers=[],
        )

    total = 0
    matched: list[str] = []

    for rule in CATEGORY_RULES:
        if not rule.applies(preferences):
            continue
        if rule.matches(preferences, candidate_profile):
            total += rule.weight
            matched.append(rule.name)
        elif getattr(preferences, rule.deal_breaker_flag):
            return CompatibilityResponse(
                score=0,
                matched_attributes=matched,
                deal_breakers=[rule.name],
            )

    if _same_value(viewer_profile.education, candidate_profile.education):
        total += EDUCATION_BONUS
        matched.append("education")

    if _same_value(viewer_profile.drinking_status, candidate_profile.drinking_status):
        total += LIFESTYLE_BONUS
        matched.append("lifestyle")

    return CompatibilityResponse(
        score=min(total, MAX_SCORE),
        matched_attributes=matched,
        deal_breakers=[],
    )


async def _get_profile_or_404(db: AsyncSession, user_id: uuid.UUID) -> Profile:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise NotFoundError("Profile not found", resource="profile")
    return profile


async def calculate_compatibility(
    db: AsyncSession,
    viewer_id: uuid.UUID,
    candidate_id: uuid.UUID,
) -> CompatibilityResponse:
    """Compatibility of a candidate from the viewer's point of view."""
    viewer_profile = await _get_profile_or_404(db, viewer_id)
    candidate_profile = await _get_profile_or_404(db, candidate_id)
    preferences = await preference_service.get_preferences(db, viewer_id)
    return score_profiles(viewer_profile, candidate_profile, preferences)


def _opposite_gender(gender: str) -> str:
    return "female" if gender == "male" else "male"


async def _candidate_pool(
    db: AsyncSession,
    viewer_profile: Profile,
    gender: str | None = None,
    verified_only: bool = True,
) -> Select:
    """
    Base query: active profiles the viewer may see.

    Defaults to the opposite gender; an explicit ``gender`` replaces it.
    """
    excluded = await block_service.get_blocked_user_ids(db, viewer_profile.user_id)
    excluded.add(viewer_profile.user_id)

    query = (
        select(Profile, User.is_online)
        .join(User, User.id == Profile.user_id)
        .where(
            Profile.user_id.not_in(list(excluded)),
            Profile.gender == (gender or _opposite_gender(viewer_profile.gender)),
            Profile.is_active.is_(True),
            User.status == "active",
        )
    )
    if verified_only:
        query = query.where(User.email_verified.is_(True))
    return query


def _apply_preference_prefilter(query: Select, preferences: MatchPreference | None) -> Select:
    if preferences is None:
        return query

    query = query.where(Profile.age.between(preferences.age_min, preferences.age_max))
    if preferences.location_states:
        query = query.where(Profile.state.in_(preferences.location_states))
    if preferences.religion:
        query = query.where(Profile.religion.in_(preferences.religion))
    return query


def _to_candidate(
    profile: Profile,
    is_online: bool,
    compatibility: CompatibilityResponse,
) -> MatchCandidate:
    return MatchCandidate(
        user_id=profile.user_id,
        is_online=bool(is_online),
        profile=ProfileBrief.model_validate(profile),
        compatibility=compatibility,
    )


async def explore_matches(
    db: AsyncSession,
    user_id: uuid.UUID,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[MatchCandidate], int]:
    """
    Browse candidates ranked by compatibility.

    1. Opposite gender, active, email verified, not blocked either way
    2. Prefilter by the viewer's age range, states and religions
    3. Score each candidate, drop those hitting a deal-breaker
    4. Sort by score descending
    """
    viewer_profile = await _get_profile_or_404(db, user_id)
    preferences = await preference_service.get_preferences(db, user_id)

    query = _apply_preference_prefilter(await _candidate_pool(db, viewer_profile), preferences)
    result = await db.execute(query.order_by(Profile.created_at.desc()))

    scored = []
    for profile, is_online in result.all():
        compatibility = score_profiles(viewer_profile, profile, preferences)
        if compatibility.deal_breakers:
            continue
        scored.append(_to_candidate(profile, is_online, compatibility))

    scored.sort(key=lambda c: c.compatibility.score, reverse=True)
    return scored[offset : offset + limit], len(scored)


async def get_match_suggestions(
    db: AsyncSession,
    user_id: uuid.UUID,
    limit: int = 10,
) -> list[MatchCandidate]:
    """Top candidates with online users first, then by score."""
    viewer_profile = await _get_profile_or_404(db, user_id)
    preferences = await preference_service.get_preferences(db, user_id)

    query = _apply_preference_prefilter(await _candidate_pool(db, viewer_profile), preferences)
    result = await db.execute(
        query.order_by(User.last_active_at.desc().nulls_last()).limit(limit * 2)
    )

    suggestions = []
    for profile, is_online in result.all():
        compatibility = score_profiles(viewer_profile, profile, preferences)
        if compatibility.deal_breakers:
            continue
        suggestions.append(_to_candidate(profile, is_online, compatibility))

    suggestions.sort(key=lambda c: (c.is_online, c.compatibility.score), reverse=True)
    return suggestions[:limit]


async def filter_matches(
    db: AsyncSession,
    user_id: uuid.UUID,
    filters: MatchFilter,
) -> tuple[list[MatchCandidate], int]:
    """Ad-hoc filtering; results carry compatibility but are not ranked by it."""
    viewer_profile = await _get_profile_or_404(db, user_id)
    preferences = await preference_service.get_preferences(db, user_id)

    gender = filters.gender.value if filters.gender else None
    query = await _candidate_pool(db, viewer_profile, gender=gender, verified_only=False)
    if filters.age_min is not None:
        query = query.where(Profile.age >= filters.age_min)
    if filters.age_max is not None:
        query = query.where(Profile.age <= filters.age_max)
    if filters.country:
        query = query.where(Profile.country == filters.country)
    if filters.state:
        query = query.where(Profile.state == filters.state)
    if filters.city:
        query = query.where(Profile.city == filters.city)
    if filters.religion:
        query = query.where(Profile.religion.in_(filters.religion))
    if filters.education:
        query = query.where(Profile.education.in_(filters.education))
    if filters.online_only:
        query = query.where(User.is_online.is_(True))

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    result = await db.execute(
        query.order_by(Profile.created_at.desc()).offset(filters.offset).limit(filters.limit)
    )
    candidates = [
        _to_candidate(profile, is_online, score_profiles(viewer_profile, profile, preferences))
        for profile, is_online in result.all()
    ]
    return candidates, total
