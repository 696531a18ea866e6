"""Timing resolution: a supplement's dosing rule -> bucket + sortable minute.

Relative-wake rules resolve to a real clock time and land in Morning
before 17:00, Night from 17:00 on. Fixed rules use synthetic anchors
(8:00 AM / 8:00 PM) for ordering and carry no display time.
"""

from supplements.domain.models import (
    Bucket,
    FixedTiming,
    RelativeWakeTiming,
    ResolvedTiming,
    Supplement,
)
from supplements.engine.clock import add_offset, format_minute_of_day

NIGHT_STARTS_AT_HOUR = 17
FIXED_AM_ANCHOR = 8 * 60
FIXED_PM_ANCHOR = 20 * 60


def bucket_for_minute(minute: int) -> Bucket:
    return Bucket.MORNING if minute // 60 < NIGHT_STARTS_AT_HOUR else Bucket.NIGHT


def resolve_relative(timing: RelativeWakeTiming, wake_minute: int) -> ResolvedTiming:
    minute = add_offset(wake_minute, timing.offset_minutes)
    return ResolvedTiming(
        bucket=bucket_for_minute(minute),
        absolute_minute_of_day=minute,
        display_time=format_minute_of_day(minute),
    )


def resolve_fixed(timing: FixedTiming) -> list[ResolvedTiming]:
    resolved = []
    if timing.am:
        resolved.append(ResolvedTiming(Bucket.MORNING, FIXED_AM_ANCHOR))
    if timing.pm:
        resolved.append(ResolvedTiming(Bucket.NIGHT, FIXED_PM_ANCHOR))
    return resolved


def resolve(supplement: Supplement, wake_minute: int) -> list[ResolvedTiming]:
    """Return one ResolvedTiming per stack the supplement belongs to.

    wake_minute is the already-parsed wake time (see clock.safe_wake_minute).
    An empty list means the supplement is in neither stack.
    """
    timing = supplement.timing
    if isinstance(timing, RelativeWakeTiming):
        return [resolve_relative(timing, wake_minute)]
    return resolve_fixed(timing)
