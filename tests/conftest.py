"""Shared test fixtures."""

import sys
from datetime import date
from pathlib import Path
from typing import Any
from uuid import UUID

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from supplements.domain.models import Supplement  # noqa: E402

USER_ID = UUID("a1b2c3d4-5678-90ab-cdef-1234567890ab")
TODAY = date(2026, 3, 14)


def make_supplement(**overrides: Any) -> Supplement:
    """Build a Supplement from the flat/legacy-friendly field set."""
    data: dict[str, Any] = {
        "name": "Magnesium Glycinate",
        "dosage": "400mg",
        "price": 30.0,
        "quantity": 60,
        "rating": 0,
    }
    data.update(overrides)
    return Supplement.model_validate(data)


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def valid_supplement_record():
    """A fully valid supplement dict for validation testing."""
    return {
        "name": "Vitamin D3",
        "dosage": "5000 IU",
        "price": 18.0,
        "quantity": 120,
        "unit_type": "pills",
        "timing": {"type": "fixed", "am": True, "pm": False, "am_pills": 1, "pm_pills": 1},
        "cycle": {"on_days": 5, "off_days": 2, "start_date": date(2026, 3, 1)},
        "rating": 4,
        "reason": "Immunity",
        "archived": False,
    }
