"""Tests for the service layer and row mapping (unit-level, no DB)."""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from shared.config import settings
from shared.exceptions import StoredRecordInvalidError
from supplements.domain.models import (
    CostBreakdown,
    FixedTiming,
    RelativeWakeTiming,
    SupplementFields,
)
from supplements.domain.orm import SupplementModel
from supplements.repository import fields_to_columns, row_to_record
from supplements.service import (
    build_user_protocol,
    build_view,
    describe_supplement,
    load_supplement,
    load_supplements,
)
from tests.conftest import TODAY, USER_ID, make_supplement


def _row(**overrides) -> SupplementModel:
    fields = SupplementFields.model_validate(
        {"name": "Vitamin C", "price": 12, "quantity": 100, "schedule": {"am": True}, **overrides}
    )
    return SupplementModel(id=uuid4(), user_id=USER_ID, **fields_to_columns(fields))


class TestRowMapping:
    def test_fixed_round_trip(self):
        row = _row(schedule={"am": True, "pm": True, "am_pills": 2, "pm_pills": 1})
        record = row_to_record(row)
        expected = FixedTiming(am=True, pm=True, am_pills=2, pm_pills=1)
        assert record["timing"] == expected.model_dump()
        assert record["cycle"] is None

    def test_relative_wake_clears_fixed_columns(self):
        row = _row(timing={"type": "relative_wake", "offset_minutes": 30, "pills": 2})
        assert row.schedule_am is False and row.schedule_pm is False
        assert row.offset_minutes == 30
        assert row_to_record(row)["timing"] == RelativeWakeTiming(
            offset_minutes=30, pills=2
        ).model_dump()

    def test_cycle_columns(self):
        row = _row(cycle={"on_days": 5, "off_days": 2, "start_date": date(2026, 3, 1)})
        assert row.cycle_on_days == 5
        assert row_to_record(row)["cycle"] == {
            "on_days": 5,
            "off_days": 2,
            "start_date": date(2026, 3, 1),
        }


class TestLoadSupplements:
    def test_valid_rows_load(self):
        result = load_supplements([_row(), _row(name="Zinc")])
        assert [s.name for s in result.supplements] == ["Vitamin C", "Zinc"]
        assert result.skipped == []

    def test_malformed_row_is_skipped(self):
        bad = _row(name="Broken")
        bad.rating = 9
        result = load_supplements([_row(), bad, _row(name="Zinc")])
        assert [s.name for s in result.supplements] == ["Vitamin C", "Zinc"]
        assert len(result.skipped) == 1
        assert result.skipped[0].supplement_id == str(bad.id)
        assert result.skipped[0].reason == "less_than_equal"

    def test_single_row_loads(self):
        assert load_supplement(_row(name="Zinc")).name == "Zinc"

    def test_single_malformed_row_raises_problem(self):
        bad = _row(name="Broken")
        bad.price = -5
        with pytest.raises(StoredRecordInvalidError) as exc_info:
            load_supplement(bad)
        assert exc_info.value.status == 409
        assert str(bad.id) in exc_info.value.detail


class TestViews:
    def test_describe_supplement(self):
        s = make_supplement(
            price=30,
            quantity=60,
            timing={"type": "relative_wake", "offset_minutes": 30},
            cycle={"on_days": 5, "off_days": 2, "start_date": TODAY},
        )
        view = describe_supplement(s, "07:00", TODAY)
        assert [t.display_time for t in view.timings] == ["7:30 AM"]
        assert view.cycle.day_in_cycle == 1
        assert view.next_cycle_change == date(2026, 3, 19)
        assert view.cost.daily_cost == 0.5
        assert view.days_of_supply == 60

    def test_describe_archived_has_nothing_derived(self):
        s = make_supplement(
            price=30,
            quantity=60,
            schedule={"am": True},
            cycle={"on_days": 5, "off_days": 2, "start_date": TODAY},
            archived=True,
        )
        view = describe_supplement(s, "07:00", TODAY)
        assert view.timings == []
        assert view.cycle is None
        assert view.next_cycle_change is None
        assert view.cost == CostBreakdown()
        assert view.days_of_supply is None

    def test_build_view_carries_inputs(self):
        view = build_view([make_supplement(schedule={"am": True})], "06:00", TODAY, "preview")
        assert view.wake_time == "06:00"
        assert view.as_of == TODAY
        assert len(view.protocol.morning) == 1
        assert view.summary.daily_total == 0.5


def _patched_repo(wake_time, rows):
    return (
        patch(
            "supplements.service.SupplementRepository.get_wake_time",
            new=AsyncMock(return_value=wake_time),
        ),
        patch(
            "supplements.service.SupplementRepository.list_for_user",
            new=AsyncMock(return_value=rows),
        ),
    )


class TestBuildUserProtocol:
    async def test_uses_default_wake_time_when_unset(self):
        rows = [_row(timing={"type": "relative_wake", "offset_minutes": 0})]
        wake_patch, rows_patch = _patched_repo(None, rows)
        with wake_patch, rows_patch:
            view = await build_user_protocol(AsyncMock(), USER_ID, TODAY)

        assert view.wake_time == settings.default_wake_time
        [item] = view.protocol.morning
        assert item.sort_time == 7 * 60

    async def test_stored_wake_time_wins(self):
        rows = [_row(timing={"type": "relative_wake", "offset_minutes": 0})]
        wake_patch, rows_patch = _patched_repo("05:30", rows)
        with wake_patch, rows_patch:
            view = await build_user_protocol(AsyncMock(), USER_ID, TODAY)

        assert view.protocol.morning[0].display_time == "5:30 AM"
