"""Shared fixtures for duittrack-core tests."""

from datetime import date
from decimal import Decimal

import pytest

from duittrack_core.models import (
    Budget,
    CategoryBudget,
    ExpenseRecord,
    Period,
    ResetConfig,
)
from duittrack_core.period_generator import get_current_period


@pytest.fixture
def reset_25() -> ResetConfig:
    """Reset on the 25th, the most common payday setup."""
    return ResetConfig.fixed(25)


@pytest.fixture
def last_day() -> ResetConfig:
    """Reset on the last day of each month."""
    return ResetConfig.last_day_of_month()


@pytest.fixture
def october_period(reset_25: ResetConfig) -> Period:
    """25 Sep - 24 Oct 2025, current on 19 Oct 2025."""
    return get_current_period(reset_25, date(2025, 10, 19))


@pytest.fixture
def october_expenses() -> list[ExpenseRecord]:
    """A handful of expenses within the October period."""
    return [
        ExpenseRecord(id="e1", amount=Decimal("50000"), category="makanan", date=date(2025, 10, 4)),
        ExpenseRecord(id="e2", amount=Decimal("150000"), category="makanan", date=date(2025, 10, 5)),
        ExpenseRecord(id="e3", amount=Decimal("100000"), category="transport", date=date(2025, 10, 7)),
        ExpenseRecord(id="e4", amount=Decimal("200000"), category="belanja", date=date(2025, 10, 10)),
    ]


@pytest.fixture
def october_budget() -> Budget:
    """Budget with one category over its limit."""
    return Budget(
        id="b1",
        period_id="2025-09-25",
        user_id="user_1",
        categories={
            "makanan": CategoryBudget(budget=Decimal("150000"), spent=Decimal("200000")),
            "transport": CategoryBudget(budget=Decimal("300000"), spent=Decimal("100000")),
            "belanja": CategoryBudget(budget=Decimal("1550000"), spent=Decimal("200000")),
        },
        total_budget=Decimal("2000000"),
        total_spent=Decimal("500000"),
    )
