"""SQLAlchemy ORM models.

Tables:
- supplements: one row per supplement, timing and cycle flattened to columns
- user_settings: per-user settings (wake time)
"""

from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SupplementModel(Base):
    __tablename__ = "supplements"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)

    # Display
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    short_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    dosage: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Cost inputs
    price: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("0"))
    quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="pills")

    # Timing: "fixed" uses the schedule_* columns, "relative_wake" uses offset/pills
    timing_type: Mapped[str] = mapped_column(String(32), nullable=False, server_default="fixed")
    schedule_am: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    schedule_pm: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    schedule_am_pills: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    schedule_pm_pills: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    offset_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    relative_pills: Mapped[float] = mapped_column(Float, nullable=False, default=1)

    # Cycle (all NULL = always active)
    cycle_on_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cycle_off_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cycle_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Notes
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommended_dosage: Mapped[str | None] = mapped_column(Text, nullable=True)
    side_effects: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)

    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_supplements_price"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="chk_supplements_rating"),
        CheckConstraint(
            "offset_minutes IS NULL OR offset_minutes >= 0", name="chk_supplements_offset"
        ),
        CheckConstraint(
            "timing_type IN ('fixed', 'relative_wake')", name="chk_supplements_timing_type"
        ),
        Index("idx_supplements_user_created", "user_id", created_at.desc()),
    )


class UserSettingsModel(Base):
    __tablename__ = "user_settings"

    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    wake_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )
