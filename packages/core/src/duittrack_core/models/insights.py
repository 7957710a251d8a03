"""Result models for the insight calculators.

Ratios are plain floats (0.0 - 1.0 for progress, 0 - 100+ for percentages).
Monetary projections are floored to whole Rupiah.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class VelocityStatus(str, Enum):
    """Pace of spending compared to elapsed time."""

    TOO_FAST = "too-fast"
    ON_TRACK = "on-track"
    SLOW = "slow"


class CategoryStatus(str, Enum):
    """Budget consumption level of a single category."""

    OVER = "over"
    DANGER = "danger"
    WARNING = "warning"
    SAFE = "safe"


class PaceStatus(str, Enum):
    """Three-tier budget status shown on the dashboard."""

    SAFE = "safe"
    WATCH = "watch"
    OVER = "over"


class Trend(str, Enum):
    """Direction of change between two periods."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class VelocityAnalysis(BaseModel):
    """Spending velocity within a period."""

    time_progress: float = Field(description="Share of the period elapsed (0-1)")
    spent_progress: float = Field(description="Share of the budget spent (0-1+)")
    difference: float = Field(description="spent_progress - time_progress")
    status: VelocityStatus
    days_to_exhaust: int = Field(description="Days until the budget runs out at the current rate")
    daily_target: int = Field(description="Recommended daily spending for the remaining days")
    projected_savings: int = Field(default=0, description="Projected leftover when spending slowly")
    daily_burn_rate: int = Field(description="Average spending per elapsed day")
    projected_total: int = Field(description="Projected spending by the end of the period")


class CategoryAnalysis(BaseModel):
    """Budget consumption of a single category."""

    category: str
    budget: Decimal
    spent: Decimal
    percentage: float
    status: CategoryStatus
    remaining: Decimal


class WeekendSpending(BaseModel):
    amount: Decimal = Decimal("0")
    percentage: float = 0.0
    is_significant: bool = False


class TopSpendingDay(BaseModel):
    day: str = "N/A"
    amount: Decimal = Decimal("0")


class RecentActivity(BaseModel):
    days_without_expense: int = 0
    last_expense_date: Optional[date] = None


class PatternAnalysis(BaseModel):
    """Weekday/weekend spending patterns over a list of expenses."""

    weekend_spending: WeekendSpending = Field(default_factory=WeekendSpending)
    top_spending_day: TopSpendingDay = Field(default_factory=TopSpendingDay)
    recent_activity: RecentActivity = Field(default_factory=RecentActivity)


class PeriodComparison(BaseModel):
    """Total spending compared with the previous period."""

    change: Decimal
    percentage: float
    trend: Trend


class CategoryComparison(BaseModel):
    """Category spending compared with the previous period."""

    category: str
    change: Decimal
    percentage: float
    is_significant: bool


class BudgetStatus(BaseModel):
    """Dashboard badge comparing spending pace with elapsed time."""

    status: PaceStatus
    icon: str
    label: str
    percentage: float = Field(description="Buffer or overspend in percentage points")
