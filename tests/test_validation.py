"""Parametrized tests for supplement and wake-time boundary validation."""

import pytest

from supplements.domain.validation import validate_supplement_record, validate_wake_time


@pytest.mark.parametrize(
    "overrides, expected_reason",
    [
        ({"name": "   "}, "blank_name"),
        ({"quantity": 0}, "non_positive_quantity"),
        ({"cycle": {"on_days": 5, "off_days": None, "start_date": None}}, "incomplete_cycle"),
        (
            {"cycle": {"on_days": 0, "off_days": 3, "start_date": "2026-03-01"}},
            "non_positive_on_days",
        ),
        (
            {"timing": {"type": "fixed", "am": True, "pm": False, "am_pills": 0, "pm_pills": 1}},
            "empty_dose_slot",
        ),
    ],
    ids=["blank_name", "zero_quantity", "incomplete_cycle", "zero_on_days", "empty_am_slot"],
)
def test_validation_catches_violation(valid_supplement_record, overrides, expected_reason):
    record = {**valid_supplement_record, **overrides}
    errors = validate_supplement_record(record)
    reasons = [e.reason for e in errors]
    assert expected_reason in reasons, f"Expected '{expected_reason}' in {reasons}"


def test_valid_record_passes_all_rules(valid_supplement_record):
    errors = validate_supplement_record(valid_supplement_record)
    assert errors == [], f"Valid record should pass all rules, got: {errors}"


def test_no_cycle_is_valid(valid_supplement_record):
    assert validate_supplement_record({**valid_supplement_record, "cycle": None}) == []


def test_disabled_slot_may_have_zero_pills(valid_supplement_record):
    record = {
        **valid_supplement_record,
        "timing": {"type": "fixed", "am": True, "pm": False, "am_pills": 1, "pm_pills": 0},
    }
    assert validate_supplement_record(record) == []


def test_relative_wake_record_is_valid(valid_supplement_record):
    record = {
        **valid_supplement_record,
        "timing": {"type": "relative_wake", "offset_minutes": 0, "pills": 1},
    }
    assert validate_supplement_record(record) == []


def test_violation_shape():
    [error] = validate_supplement_record({"name": "x", "quantity": -1})
    assert error.as_violation() == {
        "field": "quantity",
        "message": "non_positive_quantity",
        "constraint": "positive",
    }


class TestWakeTime:
    @pytest.mark.parametrize("value", ["00:00", "6:05", "06:05", "19:59", "23:59"])
    def test_valid(self, value):
        assert validate_wake_time(value) == []

    @pytest.mark.parametrize("value", ["24:00", "12:60", "6", "06-30", "", "06:30\n", None])
    def test_invalid(self, value):
        [error] = validate_wake_time(value)
        assert error.reason == "invalid_wake_time"
