"""Protocol assembly and portfolio summaries.

assemble() builds the Morning/Night stacks; summarize() aggregates cost
projections across the collection. Both drop archived supplements first.
Paused (off-cycle) supplements stay in the stacks with their cycle status
attached; de-emphasizing them is up to the caller.
"""

from collections.abc import Iterable
from datetime import date

from supplements.domain.models import (
    Bucket,
    CostBreakdown,
    DisplayItem,
    GoalSpend,
    PortfolioSummary,
    Protocol,
    RankedSupplement,
    RelativeWakeTiming,
    Supplement,
)
from supplements.engine import cost, cycle, timing
from supplements.engine.clock import describe_offset, safe_wake_minute


def active_supplements(supplements: Iterable[Supplement]) -> list[Supplement]:
    return [s for s in supplements if not s.archived]


def _timing_label(supplement: Supplement, bucket: Bucket) -> str:
    if isinstance(supplement.timing, RelativeWakeTiming):
        return describe_offset(supplement.timing.offset_minutes)
    return "AM" if bucket == Bucket.MORNING else "PM"


def _pills_for(supplement: Supplement, bucket: Bucket) -> float:
    t = supplement.timing
    if isinstance(t, RelativeWakeTiming):
        return t.pills
    return t.am_pills if bucket == Bucket.MORNING else t.pm_pills


def assemble(supplements: Iterable[Supplement], wake_time: str, today: date) -> Protocol:
    """Build the Morning and Night stacks, each sorted by time of day.

    Sorting is stable: supplements with equal sort times keep input order.
    """
    wake_minute = safe_wake_minute(wake_time)
    morning: list[DisplayItem] = []
    night: list[DisplayItem] = []
    unscheduled = []

    for supplement in active_supplements(supplements):
        resolved = timing.resolve(supplement, wake_minute)
        if not resolved:
            unscheduled.append(supplement.id)
            continue

        status = cycle.get_status(supplement.cycle, today)
        for r in resolved:
            item = DisplayItem(
                supplement_id=supplement.id,
                name=supplement.name,
                dosage=supplement.dosage,
                pills=_pills_for(supplement, r.bucket),
                sort_time=r.absolute_minute_of_day,
                display_time=r.display_time,
                timing_label=_timing_label(supplement, r.bucket),
                cycle=status,
            )
            (morning if r.bucket == Bucket.MORNING else night).append(item)

    morning.sort(key=lambda item: item.sort_time)
    night.sort(key=lambda item: item.sort_time)
    return Protocol(morning=morning, night=night, unscheduled=unscheduled)


def _ranked(supplement: Supplement, breakdown: CostBreakdown) -> RankedSupplement:
    return RankedSupplement(
        supplement_id=supplement.id,
        name=supplement.name,
        daily_cost=breakdown.daily_cost,
        value_score=breakdown.value_score,
    )


def summarize(supplements: Iterable[Supplement]) -> PortfolioSummary:
    """Portfolio totals, top spender, best value, cheapest, spend by goal."""
    projected = [(s, cost.project(s)) for s in active_supplements(supplements)]
    if not projected:
        return PortfolioSummary()

    daily_total = sum(b.daily_cost for _, b in projected)

    # max()/min() return the first of equal candidates, so ties favour input order.
    spending = [(s, b) for s, b in projected if b.daily_cost > 0]
    top_spender = max(spending, key=lambda p: p[1].daily_cost, default=None)
    cheapest = min(spending, key=lambda p: p[1].daily_cost, default=None)
    rated = [(s, b) for s, b in projected if s.rating > 0 and b.value_score > 0]
    best_value = max(rated, key=lambda p: p[1].value_score, default=None)

    goals: dict[str, list[float]] = {}
    for s, b in projected:
        goals.setdefault(s.goal, []).append(b.daily_cost)
    spend_by_goal = sorted(
        (
            GoalSpend(goal=g, daily_cost=sum(costs), supplement_count=len(costs))
            for g, costs in goals.items()
        ),
        key=lambda g: g.daily_cost,
        reverse=True,
    )

    return PortfolioSummary(
        daily_total=daily_total,
        monthly_total=daily_total * cost.DAYS_PER_MONTH,
        yearly_total=daily_total * cost.DAYS_PER_YEAR,
        top_spender=_ranked(*top_spender) if top_spender else None,
        best_value=_ranked(*best_value) if best_value else None,
        cheapest=_ranked(*cheapest) if cheapest else None,
        spend_by_goal=spend_by_goal,
    )
