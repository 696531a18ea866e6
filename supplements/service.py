"""Protocol service: stored rows -> domain models -> engine outputs.

A display pass never fails because of one bad record: rows that do not
validate as a Supplement are skipped, logged, and counted. Everything
after loading is a pure function of (supplements, wake time, today).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.exceptions import StoredRecordInvalidError
from shared.metrics import protocol_assemblies_total, records_skipped_total
from supplements.domain.models import (
    CostBreakdown,
    CycleStatus,
    PortfolioSummary,
    Protocol,
    ResolvedTiming,
    Supplement,
)
from supplements.domain.orm import SupplementModel
from supplements.engine import cost, cycle, protocol, timing
from supplements.engine.clock import safe_wake_minute
from supplements.repository import SupplementRepository, row_to_record

logger = structlog.get_logger()


@dataclass
class SkippedRecord:
    supplement_id: str
    reason: str


@dataclass
class LoadResult:
    supplements: list[Supplement] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)


@dataclass
class ProtocolView:
    wake_time: str
    as_of: date
    protocol: Protocol
    summary: PortfolioSummary
    skipped: list[SkippedRecord] = field(default_factory=list)


@dataclass
class SupplementView:
    """One supplement plus everything the engine derives from it."""

    supplement: Supplement
    timings: list[ResolvedTiming]
    cycle: CycleStatus | None
    next_cycle_change: date | None
    cost: CostBreakdown
    days_of_supply: float | None


def _record_skip(row: SupplementModel, exc: PydanticValidationError) -> SkippedRecord:
    reasons = sorted({err["type"] for err in exc.errors()})
    records_skipped_total.labels(reason=reasons[0]).inc()
    logger.warning("record_skipped", supplement_id=str(row.id), reasons=reasons)
    return SkippedRecord(supplement_id=str(row.id), reason=reasons[0])


def load_supplement(row: SupplementModel) -> Supplement:
    """Load a single stored row; a row that no longer validates is a 409 problem."""
    try:
        return Supplement.model_validate(row_to_record(row))
    except PydanticValidationError as exc:
        skipped = _record_skip(row, exc)
        raise StoredRecordInvalidError(skipped.supplement_id, [skipped.reason]) from exc


def load_supplements(rows: list[SupplementModel]) -> LoadResult:
    result = LoadResult()
    for row in rows:
        try:
            result.supplements.append(Supplement.model_validate(row_to_record(row)))
        except PydanticValidationError as exc:
            result.skipped.append(_record_skip(row, exc))
    return result


def describe_supplement(supplement: Supplement, wake_time: str, today: date) -> SupplementView:
    if supplement.archived:
        return SupplementView(
            supplement=supplement,
            timings=[],
            cycle=None,
            next_cycle_change=None,
            cost=CostBreakdown(),
            days_of_supply=None,
        )
    return SupplementView(
        supplement=supplement,
        timings=timing.resolve(supplement, safe_wake_minute(wake_time)),
        cycle=cycle.get_status(supplement.cycle, today),
        next_cycle_change=cycle.next_transition(supplement.cycle, today),
        cost=cost.project(supplement),
        days_of_supply=cost.days_of_supply(supplement),
    )


def build_view(
    supplements: list[Supplement],
    wake_time: str,
    today: date,
    source: str,
    skipped: list[SkippedRecord] | None = None,
) -> ProtocolView:
    view = ProtocolView(
        wake_time=wake_time,
        as_of=today,
        protocol=protocol.assemble(supplements, wake_time, today),
        summary=protocol.summarize(supplements),
        skipped=skipped or [],
    )
    protocol_assemblies_total.labels(source=source).inc()
    logger.info(
        "protocol_assembled",
        source=source,
        morning=len(view.protocol.morning),
        night=len(view.protocol.night),
        unscheduled=len(view.protocol.unscheduled),
        skipped=len(view.skipped),
    )
    return view


async def resolve_wake_time(repo: SupplementRepository, user_id: UUID) -> str:
    return await repo.get_wake_time(user_id) or settings.default_wake_time


async def build_user_protocol(session: AsyncSession, user_id: UUID, today: date) -> ProtocolView:
    repo = SupplementRepository(session)
    wake_time = await resolve_wake_time(repo, user_id)
    loaded = load_supplements(await repo.list_for_user(user_id, include_archived=False))
    return build_view(loaded.supplements, wake_time, today, source="stored", skipped=loaded.skipped)


async def build_cost_report(session: AsyncSession, user_id: UUID) -> dict[str, Any]:
    repo = SupplementRepository(session)
    loaded = load_supplements(await repo.list_for_user(user_id, include_archived=False))
    return {
        "items": [
            {
                "supplement_id": s.id,
                "name": s.name,
                "goal": s.goal,
                "cost": cost.project(s),
                "days_of_supply": cost.days_of_supply(s),
            }
            for s in loaded.supplements
        ],
        "summary": protocol.summarize(loaded.supplements),
        "skipped": loaded.skipped,
    }
