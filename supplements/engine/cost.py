"""Cost projections for a single supplement.

Missing or zero price/quantity is not an error: every cost field is 0.
A value_score of 0 means "not ranked", never "free".
"""

from supplements.domain.models import CostBreakdown, Supplement

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


def daily_pills(supplement: Supplement) -> float:
    return supplement.timing.daily_pills


def project(supplement: Supplement) -> CostBreakdown:
    price = supplement.price or 0
    quantity = supplement.quantity or 0
    if price <= 0 or quantity <= 0:
        return CostBreakdown()

    price_per_unit = price / quantity
    daily_cost = price_per_unit * daily_pills(supplement)
    value_score = 0.0
    if supplement.rating > 0 and daily_cost > 0:
        value_score = supplement.rating / daily_cost
    return CostBreakdown(
        price_per_unit=price_per_unit,
        daily_cost=daily_cost,
        monthly_cost=daily_cost * DAYS_PER_MONTH,
        yearly_cost=daily_cost * DAYS_PER_YEAR,
        value_score=value_score,
    )


def days_of_supply(supplement: Supplement) -> float | None:
    """How many days one container lasts at the current schedule."""
    per_day = daily_pills(supplement)
    if not supplement.quantity or supplement.quantity <= 0 or per_day <= 0:
        return None
    return supplement.quantity / per_day
