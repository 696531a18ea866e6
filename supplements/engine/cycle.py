"""On/off cycle status.

Day counting uses civil dates (date objects), never timestamps, so the
result cannot drift with the time of day, timezone, or DST changes.
"""

from datetime import date, timedelta

import structlog

from supplements.domain.models import Cycle, CycleStatus
from supplements.engine.errors import DegenerateCycleError

logger = structlog.get_logger()


def cycle_length(on_days: int, off_days: int) -> int:
    length = on_days + off_days
    if length <= 0:
        raise DegenerateCycleError(on_days, off_days)
    return length


def compute_status(on_days: int, off_days: int, start_date: date, today: date) -> CycleStatus:
    """Status on `today` for a cycle started on `start_date`.

    A start date in the future reports day 1, active, 0 days remaining.
    Raises DegenerateCycleError when on_days + off_days == 0.
    """
    length = cycle_length(on_days, off_days)
    diff_days = (today - start_date).days
    if diff_days < 0:
        return CycleStatus(is_active=True, day_in_cycle=1, days_remaining=0)

    position = diff_days % length
    is_active = position < on_days
    remaining = on_days - position if is_active else length - position
    return CycleStatus(is_active=is_active, day_in_cycle=position + 1, days_remaining=remaining)


def get_status(cycle: Cycle | None, today: date) -> CycleStatus | None:
    """Status for a supplement's cycle, or None when it is always active."""
    if cycle is None or not cycle.is_configured:
        return None
    try:
        return compute_status(cycle.on_days, cycle.off_days, cycle.start_date, today)
    except DegenerateCycleError as exc:
        logger.warning("cycle_degenerate", on_days=exc.on_days, off_days=exc.off_days)
        return None


def next_transition(cycle: Cycle | None, today: date) -> date | None:
    """Date on which the current on/off phase ends."""
    status = get_status(cycle, today)
    if status is None or status.days_remaining == 0:
        return None
    return today + timedelta(days=status.days_remaining)
