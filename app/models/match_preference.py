"""Match preference model holding deal-breaker settings for compatibility scoring."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class MatchPreference(Base):
    """
    What a user is looking for in a partner.

    Every list category pairs an acceptable-values list with an
    ``*_is_deal_breaker`` flag. An empty list means the category is
    unconstrained.
    """

    __tablename__ = "match_preferences"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # Age (inclusive range)
    age_min: Mapped[int] = mapped_column(Integer, default=18, nullable=False)
    age_max: Mapped[int] = mapped_column(Integer, default=100, nullable=False)
    age_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Location
    location_states: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    location_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Religion
    religion: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    religion_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Zodiac
    zodiac: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    zodiac_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Medical
    genotype: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    genotype_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    blood_group: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    blood_group_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Physical
    body_type: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    body_type_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tattoos_acceptable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    tattoos_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    piercings_acceptable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    piercings_is_deal_breaker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    user = relationship("User", back_populates="match_preference")

    __table_args__ = (
        CheckConstraint("age_min <= age_max", name="age_range_check"),
    )
