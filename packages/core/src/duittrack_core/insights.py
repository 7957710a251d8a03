"""Spending insight calculators.

Pure functions over aggregates the caller has already loaded for a
period: budget and spending totals, the period's elapsed and total days,
and the list of expenses. None of them raise on degenerate input; zero
budgets, zero elapsed days and empty expense lists fall back to zero
values instead of NaN or infinity.

Thresholds:
- Velocity: spending more than 15 percentage points ahead of elapsed time
  is "too-fast", more than 15 points behind is "slow".
- Category: >=100% "over", >=90% "danger", >=75% "warning".
- Period comparison: a change beyond +/-10% is a trend; a category change
  beyond +/-20% is significant.
"""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .budget import Amount, to_decimal
from .calendar_math import DateLike, to_day
from .models.budget import ExpenseRecord
from .models.insights import (
    BudgetStatus,
    CategoryAnalysis,
    CategoryComparison,
    CategoryStatus,
    PaceStatus,
    PatternAnalysis,
    PeriodComparison,
    RecentActivity,
    TopSpendingDay,
    Trend,
    VelocityAnalysis,
    VelocityStatus,
    WeekendSpending,
)
from .models.period import Period
from .period_generator import days_elapsed_in_period, get_total_days_in_period

VELOCITY_TOLERANCE = 0.15
WEEKEND_SIGNIFICANCE = 50
PERIOD_TREND_THRESHOLD = 10
CATEGORY_SIGNIFICANCE = 20

# Day names indexed Sunday-first (0 = Minggu, 6 = Sabtu)
DAY_NAMES = ("Minggu", "Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu")
WEEKEND_DAYS = (0, 6)

ZERO = Decimal("0")


def _sunday_first_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def _progress(days_elapsed: int, total_days: int) -> float:
    return days_elapsed / total_days if total_days > 0 else 0.0


def _percentage_change(current: Decimal, previous: Decimal) -> float:
    if previous > 0:
        return float((current - previous) / previous * 100)
    return 100.0 if current > 0 else 0.0


def calculate_spending_velocity(
    total_budget: Amount,
    total_spent: Amount,
    days_elapsed: int,
    total_days: int,
) -> VelocityAnalysis:
    """Compare how fast the budget is being spent with how much of the
    period has passed.

    Args:
        total_budget: Budget for the whole period.
        total_spent: Spending so far.
        days_elapsed: Days of the period elapsed, including today.
        total_days: Length of the period in days.

    Returns:
        VelocityAnalysis. Monetary projections are floored to whole Rupiah.
    """
    budget = to_decimal(total_budget)
    spent = to_decimal(total_spent)

    time_progress = _progress(days_elapsed, total_days)
    spent_progress = float(spent / budget) if budget > 0 else 0.0
    difference = spent_progress - time_progress

    if difference > VELOCITY_TOLERANCE:
        status = VelocityStatus.TOO_FAST
    elif difference < -VELOCITY_TOLERANCE:
        status = VelocityStatus.SLOW
    else:
        status = VelocityStatus.ON_TRACK

    daily_rate = spent / days_elapsed if days_elapsed > 0 else ZERO
    days_to_exhaust = budget / daily_rate if daily_rate > 0 else Decimal(total_days)

    days_remaining = total_days - days_elapsed
    budget_remaining = max(ZERO, budget - spent)
    daily_target = budget_remaining / days_remaining if days_remaining > 0 else ZERO

    # spent / time_progress, kept in Decimal
    if time_progress > 0:
        projected_total = spent * total_days / days_elapsed
    else:
        projected_total = spent

    projected_savings = ZERO
    if status == VelocityStatus.SLOW and time_progress > 0:
        projected_savings = max(ZERO, budget - projected_total)

    return VelocityAnalysis(
        time_progress=time_progress,
        spent_progress=spent_progress,
        difference=difference,
        status=status,
        days_to_exhaust=math.floor(days_to_exhaust),
        daily_target=math.floor(daily_target),
        projected_savings=math.floor(projected_savings),
        daily_burn_rate=math.floor(daily_rate),
        projected_total=math.floor(projected_total),
    )


def calculate_period_velocity(
    period: Period,
    total_budget: Amount,
    total_spent: Amount,
    today: Optional[DateLike] = None,
) -> VelocityAnalysis:
    """Spending velocity using the elapsed and total days of ``period``."""
    return calculate_spending_velocity(
        total_budget,
        total_spent,
        days_elapsed_in_period(period, today),
        get_total_days_in_period(period),
    )


def analyze_category_spending(
    category: str,
    budget: Amount,
    spent: Amount,
) -> CategoryAnalysis:
    """Budget consumption of one category."""
    budget = to_decimal(budget)
    spent = to_decimal(spent)
    percentage = float(spent / budget * 100) if budget > 0 else 0.0

    if percentage >= 100:
        status = CategoryStatus.OVER
    elif percentage >= 90:
        status = CategoryStatus.DANGER
    elif percentage >= 75:
        status = CategoryStatus.WARNING
    else:
        status = CategoryStatus.SAFE

    return CategoryAnalysis(
        category=category,
        budget=budget,
        spent=spent,
        percentage=percentage,
        status=status,
        remaining=budget - spent,
    )


def analyze_spending_patterns(
    expenses: Iterable[ExpenseRecord],
    today: Optional[DateLike] = None,
) -> PatternAnalysis:
    """Weekend share, top spending weekday and days since the last expense."""
    expenses = list(expenses)
    if not expenses:
        return PatternAnalysis()

    spending_by_day = [ZERO] * 7
    for expense in expenses:
        spending_by_day[_sunday_first_weekday(expense.day)] += expense.amount

    total_spent = sum(spending_by_day, ZERO)
    weekend_total = sum((spending_by_day[d] for d in WEEKEND_DAYS), ZERO)
    weekend_percentage = float(weekend_total / total_spent * 100) if total_spent > 0 else 0.0

    # Ties go to the earliest day of the week
    top_day, top_amount = 0, ZERO
    for day, amount in enumerate(spending_by_day):
        if amount > top_amount:
            top_day, top_amount = day, amount

    last_expense_date = max(e.day for e in expenses)
    days_without_expense = max(0, (to_day(today) - last_expense_date).days)

    return PatternAnalysis(
        weekend_spending=WeekendSpending(
            amount=weekend_total,
            percentage=weekend_percentage,
            is_significant=weekend_percentage > WEEKEND_SIGNIFICANCE,
        ),
        top_spending_day=TopSpendingDay(day=DAY_NAMES[top_day], amount=top_amount),
        recent_activity=RecentActivity(
            days_without_expense=days_without_expense,
            last_expense_date=last_expense_date,
        ),
    )


def compare_periods(current_spent: Amount, previous_spent: Amount) -> PeriodComparison:
    """Total spending of this period against the previous one."""
    current = to_decimal(current_spent)
    previous = to_decimal(previous_spent)
    percentage = _percentage_change(current, previous)

    if percentage > PERIOD_TREND_THRESHOLD:
        trend = Trend.INCREASING
    elif percentage < -PERIOD_TREND_THRESHOLD:
        trend = Trend.DECREASING
    else:
        trend = Trend.STABLE

    return PeriodComparison(change=current - previous, percentage=percentage, trend=trend)


def compare_category_spending(
    category: str,
    current_spent: Amount,
    previous_spent: Amount,
) -> CategoryComparison:
    """Category spending of this period against the previous one."""
    current = to_decimal(current_spent)
    previous = to_decimal(previous_spent)
    percentage = _percentage_change(current, previous)

    return CategoryComparison(
        category=category,
        change=current - previous,
        percentage=percentage,
        is_significant=abs(percentage) > CATEGORY_SIGNIFICANCE,
    )


def calculate_budget_status(
    total_budget: Amount,
    total_spent: Amount,
    days_elapsed: int,
    total_days: int,
) -> BudgetStatus:
    """Three-tier badge: spending at or behind pace is "safe", up to 15
    points ahead is "watch", beyond that "over".

    ``percentage`` is the buffer or overspend in percentage points.
    """
    budget = to_decimal(total_budget)
    time_progress = _progress(days_elapsed, total_days)
    spent_progress = float(to_decimal(total_spent) / budget) if budget > 0 else 0.0
    difference = spent_progress - time_progress
    percentage = abs(difference * 100)

    if difference <= 0:
        status, icon, word = PaceStatus.SAFE, "✅", "Safe"
    elif difference <= VELOCITY_TOLERANCE:
        status, icon, word = PaceStatus.WATCH, "⚠️", "Watch"
    else:
        status, icon, word = PaceStatus.OVER, "\U0001f6a8", "Over"

    return BudgetStatus(
        status=status,
        icon=icon,
        label=f"{percentage:.0f}% {word}",
        percentage=percentage,
    )
