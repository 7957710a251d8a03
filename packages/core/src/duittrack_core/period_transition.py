"""Reset-date change planning.

When a user moves their reset day mid-cycle, the current period is closed
on the day before the new reset day and a new period starts on that reset
day. Nothing is deleted: historical periods keep their boundaries, the
open period is only shortened (or stretched up to the new start), and the
next period begins exactly one day after the transition period ends.

Everything here is a pure computation. Persisting the two resulting
periods and the history record is the caller's job, and recomputing the
plan from the same inputs yields the same result, so failed writes can be
retried.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Union

import structlog
from dateutil.relativedelta import relativedelta

from .budget import format_rupiah
from .calendar_math import (
    DateLike,
    end_of_day,
    format_date_long,
    format_month_id,
    format_period_id,
    start_of_day,
    to_day,
)
from .exceptions import ValidationError
from .models.period import (
    BudgetRecalculationNeeds,
    ChangePreview,
    ChangeSafety,
    Period,
    PeriodImpact,
    ResetConfig,
    ResetDateChangeHistory,
    ResetType,
    TransitionPeriodResult,
)
from .period_generator import get_current_period

logger = structlog.get_logger()

ONE_DAY = timedelta(days=1)


def _new_period_start(new_config: ResetConfig, today: date) -> date:
    """First reset day under ``new_config`` strictly after today.

    A reset day equal to today's day counts as already passed, so the new
    period starts next month. Last-day-of-month configurations always start
    on the last day of next month.
    """
    if new_config.is_last_day_of_month:
        return today + relativedelta(months=1, day=31)

    this_month = today + relativedelta(day=new_config.reset_day)
    if today < this_month:
        return this_month
    return today + relativedelta(months=1, day=new_config.reset_day)


def _next_reset_date(start: date, config: ResetConfig) -> date:
    """Reset day of the month after ``start``, clamped like the generator."""
    day = 31 if config.is_last_day_of_month else config.reset_day
    return start + relativedelta(months=1, day=day)


def calculate_impact(
    old_config: ResetConfig,
    new_config: ResetConfig,
    today: Optional[DateLike] = None,
) -> PeriodImpact:
    """Compute how switching from ``old_config`` to ``new_config`` today
    affects the current period.

    Args:
        old_config: Configuration the current period was generated with.
        new_config: Configuration the user wants to switch to.
        today: Date of the change (default: today).

    Returns:
        PeriodImpact with the current period, the new end of the current
        period, the start of the first new period, and whether (and by how
        many inclusive days) the current period is cut short.
    """
    today_day = to_day(today)
    current_period = get_current_period(old_config, today_day)

    new_start = _new_period_start(new_config, today_day)
    transition_end = new_start - ONE_DAY

    will_close_early = transition_end < current_period.end_day
    days_lost = (current_period.end_day - transition_end).days + 1 if will_close_early else 0

    return PeriodImpact(
        current_period=current_period,
        transition_end_date=end_of_day(transition_end),
        new_period_start_date=start_of_day(new_start),
        will_close_early=will_close_early,
        days_lost=days_lost,
    )


def execute_change(
    user_id: str,
    old_config: ResetConfig,
    new_config: ResetConfig,
    today: Optional[DateLike] = None,
) -> TransitionPeriodResult:
    """Build the transition plan for a reset-date change.

    Input is assumed to have passed ``validate_change``; it is not checked
    again here.

    Returns:
        TransitionPeriodResult holding the original period, the transition
        period (original with its end moved to the day before the new reset
        day), the first period under the new configuration, the ids of both
        periods, and a summary for the user.
    """
    today_day = to_day(today)
    impact = calculate_impact(old_config, new_config, today_day)
    current_period = impact.current_period

    transition_period = current_period.model_copy(
        update={
            "end_date": impact.transition_end_date,
            "user_id": user_id,
            "is_active": current_period.start_day <= today_day <= impact.transition_end_date.date(),
            "is_transition": True,
            "note": (
                f"Period closed early due to reset date change from "
                f"{old_config.display()} to {new_config.display()}"
            ),
        }
    )

    new_start = impact.new_period_start_date.date()
    new_end = _next_reset_date(new_start, new_config) - ONE_DAY
    new_period = Period(
        id=format_period_id(new_start),
        start_date=start_of_day(new_start),
        end_date=end_of_day(new_end),
        month=format_month_id(new_start),
        user_id=user_id,
        is_active=new_start <= today_day <= new_end,
        reset_date=new_config.reset_day,
        is_transition=True,
        note=f"First period with new reset date: {new_config.display()}",
    )

    new_start_text = format_date_long(new_start)
    if impact.will_close_early:
        summary = (
            f"Period saat ini akan ditutup pada {format_date_long(impact.transition_end_date)}. "
            f"Period baru dimulai {new_start_text} dengan reset date {new_config.display()}."
        )
    else:
        summary = (
            f"Period baru dimulai {new_start_text} dengan reset date {new_config.display()}."
        )

    affected_period_ids = [current_period.id, new_period.id]
    logger.info(
        "reset_change_planned",
        user_id=user_id,
        old_reset=old_config.display(),
        new_reset=new_config.display(),
        transition_end=format_period_id(impact.transition_end_date),
        new_period_id=new_period.id,
        will_close_early=impact.will_close_early,
        days_lost=impact.days_lost,
    )

    return TransitionPeriodResult(
        original_period=current_period,
        transition_period=transition_period,
        new_period=new_period,
        affected_period_ids=affected_period_ids,
        summary=summary,
    )


def validate_change(old_config: ResetConfig, new_config: ResetConfig) -> Optional[str]:
    """Return an error message if the change is invalid, None if it is valid.

    The stored reset day of a last-day-of-month configuration carries no
    meaning, so two such configurations are always the same.
    """
    if old_config.reset_type == new_config.reset_type and (
        old_config.is_last_day_of_month or old_config.reset_day == new_config.reset_day
    ):
        return "Tidak ada perubahan reset date."

    if new_config.reset_type == ResetType.FIXED and not 1 <= new_config.reset_day <= 31:
        return "Reset date harus antara 1-31."

    return None


def ensure_valid_change(old_config: ResetConfig, new_config: ResetConfig) -> None:
    """Raise if ``validate_change`` rejects the change.

    Raises:
        ValidationError: With the message from ``validate_change``.
    """
    error = validate_change(old_config, new_config)
    if error is not None:
        raise ValidationError(
            error,
            field="reset_day",
            value=new_config.reset_day,
            constraint="changed reset date between 1 and 31",
        )


def is_change_safe(
    transaction_count: int,
    budget_amount: Union[int, float, Decimal],
) -> ChangeSafety:
    """Advise whether shortening the current period touches any data.

    Only a period with no transactions and no budget is safe; otherwise the
    warnings describe what would be affected. The caller decides whether to
    proceed.
    """
    warnings: list[str] = []

    if transaction_count > 0:
        warnings.append(f"Ada {transaction_count} transaksi yang akan terpengaruh")

    if budget_amount > 0:
        warnings.append(f"Budget senilai Rp {format_rupiah(budget_amount)} akan direset")

    return ChangeSafety(
        is_safe=transaction_count == 0 and budget_amount == 0,
        warnings=warnings,
    )


def create_change_history(
    user_id: str,
    old_config: ResetConfig,
    new_config: ResetConfig,
    affected_period_ids: list[str],
    reason: Optional[str] = None,
    changed_at: Optional[datetime] = None,
) -> ResetDateChangeHistory:
    """Build the audit record of a reset-date change."""
    return ResetDateChangeHistory(
        user_id=user_id,
        old_reset_date=old_config.reset_day,
        new_reset_date=new_config.reset_day,
        old_reset_type=old_config.reset_type,
        new_reset_type=new_config.reset_type,
        changed_at=changed_at or datetime.now(timezone.utc),
        affected_period_ids=list(affected_period_ids),
        reason=reason,
    )


def has_pending_transitions(periods: list[Period]) -> bool:
    return any(p.is_transition for p in periods)


def get_transition_periods(periods: list[Period]) -> list[Period]:
    return [p for p in periods if p.is_transition]


def calculate_budget_recalculation_needs(
    result: TransitionPeriodResult,
) -> BudgetRecalculationNeeds:
    """Both periods of a transition need their budget recomputed."""
    return BudgetRecalculationNeeds(
        needs_recalculation=True,
        affected_periods=list(result.affected_period_ids),
        reason=(
            "Budget needs to be recalculated for transition period and new period "
            "due to reset date change."
        ),
    )


def generate_change_preview(
    old_config: ResetConfig,
    new_config: ResetConfig,
    today: Optional[DateLike] = None,
) -> ChangePreview:
    """Texts for the confirmation dialog of a reset-date change."""
    impact = calculate_impact(old_config, new_config, today)

    warnings: list[str] = []
    if impact.will_close_early:
        warnings.append(f"Period saat ini akan ditutup {impact.days_lost} hari lebih awal")
        warnings.append("Budget untuk period saat ini akan direset")

    benefits = [
        f"Period baru akan dimulai setiap {new_config.display()}",
        "Semua data historis tetap aman dan tidak berubah",
    ]

    return ChangePreview(
        title="Perubahan Reset Date Budget",
        description=f"Mengubah reset date dari {old_config.display()} ke {new_config.display()}",
        warnings=warnings,
        benefits=benefits,
    )
