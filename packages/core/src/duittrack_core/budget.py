"""Budget helpers shared by the dashboard, budget and expense screens."""

import math
from decimal import Decimal
from typing import Union

from .models.budget import BudgetSummary, CategoryBudget
from .models.insights import CategoryStatus

Amount = Union[int, float, Decimal]

DEFAULT_WARNING_THRESHOLD = 80


def to_decimal(value: Amount) -> Decimal:
    """Convert an amount to Decimal without float representation noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def format_rupiah(amount: Amount) -> str:
    """Whole Rupiah with dot thousands separators, e.g. 1500000 -> "1.500.000".

    The sign is dropped; callers render it themselves.
    """
    if isinstance(amount, float) and math.isnan(amount):
        return "0"
    whole = abs(math.floor(to_decimal(amount)))
    return f"{whole:,}".replace(",", ".")


def get_budget_status(spent: Amount, budget: Amount) -> CategoryStatus:
    """Budget consumption level with the 60/80/100% thresholds of the budget page."""
    budget = to_decimal(budget)
    if budget == 0:
        return CategoryStatus.SAFE

    percentage = to_decimal(spent) / budget * 100
    if percentage >= 100:
        return CategoryStatus.OVER
    if percentage >= 80:
        return CategoryStatus.DANGER
    if percentage >= 60:
        return CategoryStatus.WARNING
    return CategoryStatus.SAFE


def calculate_remaining(budget: Amount, spent: Amount) -> Decimal:
    """Remaining budget; negative when overspent."""
    return to_decimal(budget) - to_decimal(spent)


def calculate_budget_percentage(spent: Amount, budget: Amount) -> int:
    """Percentage of the budget used, rounded half up; 0 for a zero budget."""
    budget = to_decimal(budget)
    if budget == 0:
        return 0
    return math.floor(to_decimal(spent) / budget * 100 + Decimal("0.5"))


def should_show_budget_warning(
    spent: Amount,
    budget: Amount,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> bool:
    budget = to_decimal(budget)
    if budget == 0:
        return False
    return to_decimal(spent) / budget * 100 >= to_decimal(warning_threshold)


def calculate_budget_efficiency(
    total_budget: Amount,
    total_spent: Amount,
    days_elapsed: int,
    total_days: int,
) -> float:
    """Score from 0 to 100 of how closely spending follows elapsed time.

    100 means the share of budget spent equals the share of the period
    elapsed.
    """
    total_budget = to_decimal(total_budget)
    if total_budget <= 0 or total_days <= 0:
        return 0.0

    spent_percentage = float(to_decimal(total_spent) / total_budget * 100)
    time_progress = days_elapsed / total_days * 100
    return max(0.0, 100 - abs(spent_percentage - time_progress))


def aggregate_budget_summary(
    categories: Union[dict[str, CategoryBudget], list[CategoryBudget]],
    period: str = "",
) -> BudgetSummary:
    """Sum per-category budgets into period totals."""
    items = list(categories.values()) if isinstance(categories, dict) else list(categories)

    total_budget = sum((c.budget for c in items), Decimal("0"))
    total_spent = sum((c.spent for c in items), Decimal("0"))

    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        overall_percentage=calculate_budget_percentage(total_spent, total_budget),
        categories_count=len(items),
        over_budget_count=sum(1 for c in items if c.spent > c.budget),
        period=period,
    )
