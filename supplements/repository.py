"""Supplement repository: all DB access for supplements and user settings.

Also owns the mapping between the flat supplements table and the domain
model's timing union / cycle object.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from supplements.domain.models import RelativeWakeTiming, SupplementFields, TimingType
from supplements.domain.orm import SupplementModel, UserSettingsModel


def fields_to_columns(fields: SupplementFields) -> dict[str, Any]:
    """Flatten a SupplementFields model into supplements table columns."""
    timing = fields.timing
    cycle = fields.cycle
    columns: dict[str, Any] = {
        "name": fields.name,
        "short_name": fields.short_name,
        "link": fields.link,
        "dosage": fields.dosage,
        "price": fields.price,
        "quantity": fields.quantity,
        "unit_type": fields.unit_type.value,
        "timing_type": timing.type,
        "cycle_on_days": cycle.on_days if cycle else None,
        "cycle_off_days": cycle.off_days if cycle else None,
        "cycle_start_date": cycle.start_date if cycle else None,
        "rating": fields.rating,
        "reason": fields.reason,
        "recommended_dosage": fields.recommended_dosage,
        "side_effects": fields.side_effects,
        "ai_analysis": fields.ai_analysis,
        "archived": fields.archived,
    }
    if isinstance(timing, RelativeWakeTiming):
        # relative_wake clears the fixed slots
        columns.update(
            schedule_am=False,
            schedule_pm=False,
            schedule_am_pills=1,
            schedule_pm_pills=1,
            offset_minutes=timing.offset_minutes,
            relative_pills=timing.pills,
        )
    else:
        columns.update(
            schedule_am=timing.am,
            schedule_pm=timing.pm,
            schedule_am_pills=timing.am_pills,
            schedule_pm_pills=timing.pm_pills,
            offset_minutes=None,
            relative_pills=1,
        )
    return columns


def row_to_record(row: SupplementModel) -> dict[str, Any]:
    """Rebuild the nested domain shape from a supplements row (unvalidated)."""
    if row.timing_type == TimingType.RELATIVE_WAKE:
        timing: dict[str, Any] = {
            "type": TimingType.RELATIVE_WAKE.value,
            "offset_minutes": row.offset_minutes or 0,
            "pills": row.relative_pills,
        }
    else:
        timing = {
            "type": TimingType.FIXED.value,
            "am": row.schedule_am,
            "pm": row.schedule_pm,
            "am_pills": row.schedule_am_pills,
            "pm_pills": row.schedule_pm_pills,
        }

    cycle = None
    if any(
        v is not None for v in (row.cycle_on_days, row.cycle_off_days, row.cycle_start_date)
    ):
        cycle = {
            "on_days": row.cycle_on_days,
            "off_days": row.cycle_off_days,
            "start_date": row.cycle_start_date,
        }

    return {
        "id": row.id,
        "name": row.name,
        "short_name": row.short_name,
        "link": row.link,
        "dosage": row.dosage,
        "price": row.price,
        "quantity": row.quantity,
        "unit_type": row.unit_type,
        "timing": timing,
        "cycle": cycle,
        "rating": row.rating,
        "reason": row.reason,
        "recommended_dosage": row.recommended_dosage,
        "side_effects": row.side_effects,
        "ai_analysis": row.ai_analysis,
        "archived": row.archived,
    }


class SupplementRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(
        self, user_id: UUID, include_archived: bool = True
    ) -> list[SupplementModel]:
        """All of a user's supplements, newest first."""
        query = select(SupplementModel).where(SupplementModel.user_id == user_id)
        if not include_archived:
            query = query.where(SupplementModel.archived.is_(False))
        query = query.order_by(SupplementModel.created_at.desc(), SupplementModel.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, user_id: UUID, supplement_id: UUID) -> SupplementModel | None:
        query = select(SupplementModel).where(
            SupplementModel.id == supplement_id,
            SupplementModel.user_id == user_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, user_id: UUID, fields: SupplementFields) -> SupplementModel:
        row = SupplementModel(user_id=user_id, **fields_to_columns(fields))
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def replace(
        self, user_id: UUID, supplement_id: UUID, fields: SupplementFields
    ) -> SupplementModel | None:
        row = await self.get(user_id, supplement_id)
        if row is None:
            return None
        for column, value in fields_to_columns(fields).items():
            setattr(row, column, value)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def set_archived(
        self, user_id: UUID, supplement_id: UUID, archived: bool
    ) -> SupplementModel | None:
        row = await self.get(user_id, supplement_id)
        if row is None:
            return None
        row.archived = archived
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def delete(self, user_id: UUID, supplement_id: UUID) -> bool:
        stmt = delete(SupplementModel).where(
            SupplementModel.id == supplement_id,
            SupplementModel.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_wake_time(self, user_id: UUID) -> str | None:
        query = select(UserSettingsModel.wake_time).where(UserSettingsModel.user_id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def set_wake_time(self, user_id: UUID, wake_time: str) -> None:
        """Insert or update the user's wake time."""
        stmt = pg_insert(UserSettingsModel).values(user_id=user_id, wake_time=wake_time)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={"wake_time": stmt.excluded.wake_time, "updated_at": func.now()},
        )
        await self.session.execute(stmt)
