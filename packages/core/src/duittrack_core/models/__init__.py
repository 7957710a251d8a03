"""Data models for duittrack-core.

This package provides the value objects of the period engine:
- Reset-day configuration and tracking periods (period.py)
- Budget and expense records read from the store (budget.py)
- Insight calculator results (insights.py)
"""

from duittrack_core.models.period import (
    # Enumerations
    ResetType,
    PeriodDirection,
    # Configuration and periods
    ResetConfig,
    Period,
    # Reset-date changes
    PeriodImpact,
    TransitionPeriodResult,
    ResetDateChangeHistory,
    ChangeSafety,
    ChangePreview,
    BudgetRecalculationNeeds,
)
from duittrack_core.models.budget import (
    ExpenseRecord,
    CategoryBudget,
    Budget,
    PeriodData,
    PeriodSummary,
    CategorySpending,
    TopCategory,
    BudgetSummary,
)
from duittrack_core.models.insights import (
    # Enumerations
    VelocityStatus,
    CategoryStatus,
    PaceStatus,
    Trend,
    # Results
    VelocityAnalysis,
    CategoryAnalysis,
    WeekendSpending,
    TopSpendingDay,
    RecentActivity,
    PatternAnalysis,
    PeriodComparison,
    CategoryComparison,
    BudgetStatus,
)

__all__ = [
    # Period models
    "ResetType",
    "PeriodDirection",
    "ResetConfig",
    "Period",
    "PeriodImpact",
    "TransitionPeriodResult",
    "ResetDateChangeHistory",
    "ChangeSafety",
    "ChangePreview",
    "BudgetRecalculationNeeds",
    # Budget models
    "ExpenseRecord",
    "CategoryBudget",
    "Budget",
    "PeriodData",
    "PeriodSummary",
    "CategorySpending",
    "TopCategory",
    "BudgetSummary",
    # Insight models
    "VelocityStatus",
    "CategoryStatus",
    "PaceStatus",
    "Trend",
    "VelocityAnalysis",
    "CategoryAnalysis",
    "WeekendSpending",
    "TopSpendingDay",
    "RecentActivity",
    "PatternAnalysis",
    "PeriodComparison",
    "CategoryComparison",
    "BudgetStatus",
]
