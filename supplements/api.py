"""FastAPI router for supplements and the daily protocol.

Endpoints:
- POST   /api/v1/protocol/preview                      (stateless)
- GET    /api/v1/users/{user_id}/supplements
- POST   /api/v1/users/{user_id}/supplements
- GET    /api/v1/users/{user_id}/supplements/{id}
- PUT    /api/v1/users/{user_id}/supplements/{id}
- POST   /api/v1/users/{user_id}/supplements/{id}/archive
- POST   /api/v1/users/{user_id}/supplements/{id}/unarchive
- DELETE /api/v1/users/{user_id}/supplements/{id}
- GET    /api/v1/users/{user_id}/settings
- PUT    /api/v1/users/{user_id}/settings/wake-time
- GET    /api/v1/users/{user_id}/protocol
- GET    /api/v1/users/{user_id}/costs
"""

import time
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.database import get_session
from shared.exceptions import InvalidWakeTimeError, SupplementNotFoundError, ValidationError
from shared.metrics import api_requests_total, api_response_duration_seconds
from shared.middleware import request_id_var
from supplements import service
from supplements.domain.models import Supplement, SupplementFields
from supplements.domain.validation import validate_supplement_record, validate_wake_time
from supplements.repository import SupplementRepository

router = APIRouter(prefix="/api/v1")


# --- Request models ---


class PreviewRequest(BaseModel):
    """Compute a protocol for supplements that are not stored."""

    supplements: list[Supplement] = Field(default_factory=list)
    wake_time: str = Field(..., description="Wake time, 24h HH:MM")
    as_of: date | None = Field(None, description="Civil date for cycle status; defaults to today")


class WakeTimeRequest(BaseModel):
    wake_time: str = Field(..., description="Wake time, 24h HH:MM")


# --- Response helpers ---


def _meta() -> dict[str, Any]:
    return {
        "request_id": request_id_var.get(""),
        "timestamp": datetime.now(UTC).isoformat(),
        "api_version": settings.api_version,
    }


def _observe(endpoint: str, method: str, status_code: int, start_time: float) -> None:
    api_requests_total.labels(endpoint=endpoint, method=method, status_code=str(status_code)).inc()
    api_response_duration_seconds.labels(endpoint=endpoint).observe(time.monotonic() - start_time)


def _view_to_dict(view: service.SupplementView) -> dict[str, Any]:
    return {
        **view.supplement.model_dump(mode="json"),
        "derived": {
            "timings": view.timings,
            "cycle": view.cycle,
            "next_cycle_change": view.next_cycle_change,
            "cost": view.cost,
            "days_of_supply": view.days_of_supply,
        },
    }


def _check_supplement(fields: SupplementFields) -> None:
    errors = validate_supplement_record(fields.model_dump())
    if errors:
        raise ValidationError([e.as_violation() for e in errors])


def _check_wake_time(value: str) -> None:
    if validate_wake_time(value):
        raise InvalidWakeTimeError(value)


# --- Stateless ---


@router.post("/protocol/preview")
async def preview_protocol(body: PreviewRequest):
    """Assemble Morning/Night stacks and a cost summary for the posted supplements."""
    start_time = time.monotonic()
    _check_wake_time(body.wake_time)
    today = body.as_of or date.today()

    view = service.build_view(body.supplements, body.wake_time, today, source="preview")

    _observe("preview", "POST", 200, start_time)
    return {"data": view, "meta": _meta()}


# --- Supplements CRUD ---


@router.get("/users/{user_id}/supplements")
async def list_supplements(
    user_id: UUID,
    session: AsyncSession = Depends(get_session),
    include_archived: bool = Query(True),
):
    """List a user's supplements, newest first. Malformed rows are reported, not returned."""
    start_time = time.monotonic()
    repo = SupplementRepository(session)
    loaded = service.load_supplements(await repo.list_for_user(user_id, include_archived))

    _observe("supplements", "GET", 200, start_time)
    return {
        "data": [s.model_dump(mode="json") for s in loaded.supplements],
        "meta": {**_meta(), "skipped": loaded.skipped},
    }


@router.post("/users/{user_id}/supplements", status_code=201)
async def create_supplement(
    user_id: UUID,
    body: SupplementFields,
    session: AsyncSession = Depends(get_session),
):
    start_time = time.monotonic()
    _check_supplement(body)

    repo = SupplementRepository(session)
    row = await repo.create(user_id, body)
    await session.commit()

    _observe("supplements", "POST", 201, start_time)
    return {"data": service.load_supplement(row).model_dump(mode="json"), "meta": _meta()}


@router.get("/users/{user_id}/supplements/{supplement_id}")
async def get_supplement(
    user_id: UUID,
    supplement_id: UUID,
    session: AsyncSession = Depends(get_session),
    as_of: date | None = Query(None),
):
    """Fetch one supplement with its resolved timing, cycle status and cost breakdown."""
    start_time = time.monotonic()
    repo = SupplementRepository(session)
    row = await repo.get(user_id, supplement_id)
    if row is None:
        raise SupplementNotFoundError(str(supplement_id))

    wake_time = await service.resolve_wake_time(repo, user_id)
    supplement = service.load_supplement(row)
    view = service.describe_supplement(supplement, wake_time, as_of or date.today())

    _observe("supplement", "GET", 200, start_time)
    return {"data": _view_to_dict(view), "meta": _meta()}


@router.put("/users/{user_id}/supplements/{supplement_id}")
async def replace_supplement(
    user_id: UUID,
    supplement_id: UUID,
    body: SupplementFields,
    session: AsyncSession = Depends(get_session),
):
    start_time = time.monotonic()
    _check_supplement(body)

    repo = SupplementRepository(session)
    row = await repo.replace(user_id, supplement_id, body)
    if row is None:
        raise SupplementNotFoundError(str(supplement_id))
    await session.commit()

    _observe("supplement", "PUT", 200, start_time)
    return {"data": service.load_supplement(row).model_dump(mode="json"), "meta": _meta()}


async def _set_archived(
    session: AsyncSession, user_id: UUID, supplement_id: UUID, archived: bool
) -> dict[str, Any]:
    repo = SupplementRepository(session)
    row = await repo.set_archived(user_id, supplement_id, archived)
    if row is None:
        raise SupplementNotFoundError(str(supplement_id))
    supplement = service.load_supplement(row)
    await session.commit()
    return {"data": supplement.model_dump(mode="json"), "meta": _meta()}


@router.post("/users/{user_id}/supplements/{supplement_id}/archive")
async def archive_supplement(
    user_id: UUID, supplement_id: UUID, session: AsyncSession = Depends(get_session)
):
    start_time = time.monotonic()
    result = await _set_archived(session, user_id, supplement_id, True)
    _observe("archive", "POST", 200, start_time)
    return result


@router.post("/users/{user_id}/supplements/{supplement_id}/unarchive")
async def unarchive_supplement(
    user_id: UUID, supplement_id: UUID, session: AsyncSession = Depends(get_session)
):
    start_time = time.monotonic()
    result = await _set_archived(session, user_id, supplement_id, False)
    _observe("unarchive", "POST", 200, start_time)
    return result


@router.delete("/users/{user_id}/supplements/{supplement_id}", status_code=204)
async def delete_supplement(
    user_id: UUID, supplement_id: UUID, session: AsyncSession = Depends(get_session)
):
    start_time = time.monotonic()
    repo = SupplementRepository(session)
    if not await repo.delete(user_id, supplement_id):
        raise SupplementNotFoundError(str(supplement_id))
    await session.commit()

    _observe("supplement", "DELETE", 204, start_time)
    return Response(status_code=204)


# --- Settings ---


@router.get("/users/{user_id}/settings")
async def get_settings(user_id: UUID, session: AsyncSession = Depends(get_session)):
    start_time = time.monotonic()
    repo = SupplementRepository(session)
    stored = await repo.get_wake_time(user_id)

    _observe("settings", "GET", 200, start_time)
    return {
        "data": {
            "wake_time": stored or settings.default_wake_time,
            "is_default": stored is None,
        },
        "meta": _meta(),
    }


@router.put("/users/{user_id}/settings/wake-time")
async def update_wake_time(
    user_id: UUID, body: WakeTimeRequest, session: AsyncSession = Depends(get_session)
):
    """Persist the user's wake time. Rejects anything that is not 24h HH:MM."""
    start_time = time.monotonic()
    _check_wake_time(body.wake_time)

    repo = SupplementRepository(session)
    await repo.set_wake_time(user_id, body.wake_time)
    await session.commit()

    _observe("wake_time", "PUT", 200, start_time)
    return {"data": {"wake_time": body.wake_time, "is_default": False}, "meta": _meta()}


# --- Derived views ---


@router.get("/users/{user_id}/protocol")
async def get_protocol(
    user_id: UUID,
    session: AsyncSession = Depends(get_session),
    as_of: date | None = Query(None),
):
    """Morning/Night stacks and portfolio summary for the user's stored supplements."""
    start_time = time.monotonic()
    view = await service.build_user_protocol(session, user_id, as_of or date.today())

    _observe("protocol", "GET", 200, start_time)
    return {"data": view, "meta": _meta()}


@router.get("/users/{user_id}/costs")
async def get_costs(user_id: UUID, session: AsyncSession = Depends(get_session)):
    start_time = time.monotonic()
    report = await service.build_cost_report(session, user_id)

    _observe("costs", "GET", 200, start_time)
    return {"data": report, "meta": _meta()}
