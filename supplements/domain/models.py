"""Supplement domain models.

Input side (pydantic): one Supplement as stored and edited by the user.
Derived side (frozen dataclasses): values the engine computes on every
read and never persists.

Design principles:
- Timing is a tagged union: Fixed AM/PM slots or an offset after waking,
  never both. The flat legacy `schedule` + `timing` shape is folded in.
- Nullable fields mean "not provided": quantity=None is not quantity=0.
- Read-only: the engine never mutates a Supplement.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

DEFAULT_GOAL = "General Health"


class UnitType(StrEnum):
    PILLS = "pills"
    GRAMS = "grams"
    MG = "mg"
    ML = "ml"
    OZ = "oz"


class TimingType(StrEnum):
    FIXED = "fixed"
    RELATIVE_WAKE = "relative_wake"


class Bucket(StrEnum):
    MORNING = "morning"
    NIGHT = "night"


class FixedTiming(BaseModel):
    """Calendar AM/PM slots, independent of wake time."""

    type: Literal["fixed"] = "fixed"
    am: bool = False
    pm: bool = False
    am_pills: float = Field(1, ge=0)
    pm_pills: float = Field(1, ge=0)

    @property
    def daily_pills(self) -> float:
        return (self.am_pills if self.am else 0) + (self.pm_pills if self.pm else 0)


class RelativeWakeTiming(BaseModel):
    """Taken `offset_minutes` after the user's wake time, once a day."""

    type: Literal["relative_wake"] = "relative_wake"
    offset_minutes: int = Field(0, ge=0)
    pills: float = Field(1, ge=0)

    @property
    def daily_pills(self) -> float:
        return self.pills


class Cycle(BaseModel):
    """Repeating on/off pattern anchored to start_date."""

    on_days: int | None = Field(None, ge=0)
    off_days: int | None = Field(None, ge=0)
    start_date: date | None = None

    @property
    def is_configured(self) -> bool:
        return None not in (self.on_days, self.off_days, self.start_date)


class SupplementFields(BaseModel):
    """User-editable supplement fields (request body for create/replace)."""

    name: str = Field(..., min_length=1, max_length=200)
    short_name: str | None = None
    link: str | None = None
    dosage: str | None = None

    price: float = Field(0.0, ge=0)
    quantity: float | None = Field(None, ge=0)
    unit_type: UnitType = UnitType.PILLS

    timing: FixedTiming | RelativeWakeTiming = Field(
        default_factory=FixedTiming, discriminator="type"
    )
    cycle: Cycle | None = None

    rating: int = Field(0, ge=0, le=5)
    reason: str | None = None
    recommended_dosage: str | None = None
    side_effects: str | None = None
    ai_analysis: str | None = None
    archived: bool = False

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_schedule(cls, data: Any) -> Any:
        """Accept the flat `schedule: {am, pm, am_pills, pm_pills}` shape.

        A relative_wake timing clears the schedule's am/pm flags. A timing
        object without a `type` is treated as fixed.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        timing = data.get("timing")
        if isinstance(timing, dict) and "type" not in timing:
            timing = {**timing, "type": TimingType.FIXED.value}
            data["timing"] = timing

        if "schedule" not in data:
            return data
        schedule = data.pop("schedule") or {}
        timing = timing if isinstance(timing, dict) else {}

        if timing.get("type") == TimingType.RELATIVE_WAKE:
            data["timing"] = timing
            return data

        folded: dict[str, Any] = {"type": TimingType.FIXED.value}
        for key in ("am", "pm", "am_pills", "pm_pills"):
            if schedule.get(key) is not None:
                folded[key] = schedule[key]
        data["timing"] = folded
        return data

    @property
    def goal(self) -> str:
        return (self.reason or "").strip() or DEFAULT_GOAL


class Supplement(SupplementFields):
    """A stored supplement, as handed to the engine."""

    id: UUID = Field(default_factory=uuid4)


# --- Derived value objects ---


@dataclass(frozen=True)
class ResolvedTiming:
    bucket: Bucket
    absolute_minute_of_day: int
    display_time: str | None = None  # None for fixed AM/PM anchors


@dataclass(frozen=True)
class CycleStatus:
    is_active: bool
    day_in_cycle: int
    days_remaining: int


@dataclass(frozen=True)
class CostBreakdown:
    price_per_unit: float = 0.0
    daily_cost: float = 0.0
    monthly_cost: float = 0.0
    yearly_cost: float = 0.0
    value_score: float = 0.0


@dataclass(frozen=True)
class DisplayItem:
    """One row of a Morning or Night stack."""

    supplement_id: UUID
    name: str
    dosage: str | None
    pills: float
    sort_time: int
    display_time: str | None
    timing_label: str
    cycle: CycleStatus | None = None


@dataclass(frozen=True)
class Protocol:
    morning: list[DisplayItem] = field(default_factory=list)
    night: list[DisplayItem] = field(default_factory=list)
    unscheduled: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class RankedSupplement:
    supplement_id: UUID
    name: str
    daily_cost: float
    value_score: float


@dataclass(frozen=True)
class GoalSpend:
    goal: str
    daily_cost: float
    supplement_count: int


@dataclass(frozen=True)
class PortfolioSummary:
    daily_total: float = 0.0
    monthly_total: float = 0.0
    yearly_total: float = 0.0
    top_spender: RankedSupplement | None = None
    best_value: RankedSupplement | None = None
    cheapest: RankedSupplement | None = None
    spend_by_goal: list[GoalSpend] = field(default_factory=list)
