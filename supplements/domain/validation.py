"""Boundary validation rules for supplement records and wake times.

Field ranges (price >= 0, rating 0-5, offset >= 0) are enforced by the
pydantic models. These rules cover what a single field constraint cannot.
Returns a list of ValidationError; empty list means valid.
"""

from dataclasses import dataclass
from typing import Any

from shared.config import WAKE_TIME_PATTERN


@dataclass
class ValidationError:
    field: str
    rule: str
    reason: str
    value: Any

    def as_violation(self) -> dict[str, str]:
        return {"field": self.field, "message": self.reason, "constraint": self.rule}


def validate_wake_time(value: Any) -> list[ValidationError]:
    if not isinstance(value, str) or not WAKE_TIME_PATTERN.fullmatch(value):
        return [ValidationError("wake_time", "format", "invalid_wake_time", value)]
    return []


def validate_supplement_record(record: dict[str, Any]) -> list[ValidationError]:
    """Validate a supplement dict (model_dump of SupplementFields) before it is stored."""
    errors: list[ValidationError] = []

    # Rule 1: Name must not be blank
    name = record.get("name")
    if not name or not str(name).strip():
        errors.append(ValidationError("name", "required", "blank_name", name))

    # Rule 2: Quantity, when given, is a positive container size
    quantity = record.get("quantity")
    if quantity is not None and quantity <= 0:
        errors.append(ValidationError("quantity", "positive", "non_positive_quantity", quantity))

    # Rule 3: A cycle is all-or-nothing
    cycle = record.get("cycle")
    if cycle:
        parts = {k: cycle.get(k) for k in ("on_days", "off_days", "start_date")}
        provided = [k for k, v in parts.items() if v is not None]
        if provided and len(provided) < len(parts):
            missing = [k for k in parts if k not in provided]
            errors.append(ValidationError("cycle", "complete", "incomplete_cycle", missing))

        # Rule 4: At least one "on" day per cycle
        on_days = parts["on_days"]
        if on_days is not None and on_days <= 0:
            errors.append(
                ValidationError("cycle.on_days", "positive", "non_positive_on_days", on_days)
            )

    # Rule 5: An enabled fixed slot takes at least something
    timing = record.get("timing") or {}
    if timing.get("type") == "fixed":
        for slot in ("am", "pm"):
            pills = timing.get(f"{slot}_pills")
            if timing.get(slot) and pills is not None and pills <= 0:
                errors.append(
                    ValidationError(f"timing.{slot}_pills", "positive", "empty_dose_slot", pills)
                )

    return errors
