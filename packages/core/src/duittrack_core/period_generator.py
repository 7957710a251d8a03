"""Tracking-period generation from a reset-day configuration.

A tracking period runs from one occurrence of the user's reset day to the
day before the next one. Periods are never stored as a canonical sequence;
they are recomputed from a ``ResetConfig`` and a reference date whenever
they are needed:

- ``FIXED``: the period of month M starts on the reset day of M and ends the
  day before the reset day of M+1. A reset day past the end of a month is
  clamped to that month's last day (31 in February -> 28/29).
- ``LAST_DAY_OF_MONTH``: the period of month M starts on the last day of
  M-1 and ends the day before the last day of M. A reference date that is
  itself the last day of a month therefore belongs to the next month's
  period.

Consecutive periods are contiguous: ``periods[i].end_day + 1 day`` is the
start of the neighbouring period.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional

import structlog
from dateutil.relativedelta import relativedelta

from .calendar_math import (
    DateLike,
    clamp_reset_day,
    end_of_day,
    format_month_id,
    format_period_id,
    last_day_of_month,
    parse_period_id,
    shift_month,
    start_of_day,
    to_day,
)
from .exceptions import ValidationError
from .models.period import Period, PeriodDirection, ResetConfig

logger = structlog.get_logger()

DEFAULT_PERIOD_COUNT = 6
CURRENT_PERIOD_WINDOW = 3
DATE_LOOKUP_WINDOW = 24
ID_LOOKUP_WINDOW = 12

ONE_DAY = timedelta(days=1)

RESET_DATE_PRESETS = (
    {
        "value": 1,
        "label": "Awal bulan",
        "description": "Popular untuk gaji PNS",
        "popular": False,
    },
    {
        "value": 25,
        "label": "Tanggal 25",
        "description": "Paling populer di Indonesia",
        "popular": True,
    },
)


def _anchor_month(config: ResetConfig, reference: date) -> date:
    """First day of the month generation starts from for ``reference``."""
    if config.is_last_day_of_month and reference == last_day_of_month(reference):
        return shift_month(reference, 1)
    return shift_month(reference, 0)


def _period_bounds(config: ResetConfig, month: date) -> tuple[date, date]:
    if config.is_last_day_of_month:
        start = month + relativedelta(months=-1, day=31)
        end = month + relativedelta(day=31) - ONE_DAY
        return start, end

    start = month + relativedelta(day=config.reset_day)
    end = month + relativedelta(months=1, day=config.reset_day) - ONE_DAY
    return start, end


def _build_period(config: ResetConfig, month: date, reference: date) -> Period:
    start, end = _period_bounds(config, month)
    return Period(
        id=format_period_id(start),
        start_date=start_of_day(start),
        end_date=end_of_day(end),
        month=format_month_id(start),
        is_active=start <= reference <= end,
        reset_date=config.reset_day,
    )


def _with_activity(period: Period, today: date) -> Period:
    is_active = period.start_day <= today <= period.end_day
    if period.is_active == is_active:
        return period
    return period.model_copy(update={"is_active": is_active})


def generate_periods(
    config: ResetConfig,
    reference_date: Optional[DateLike] = None,
    count: int = DEFAULT_PERIOD_COUNT,
    direction: PeriodDirection = PeriodDirection.BACKWARD,
) -> list[Period]:
    """Generate ``count`` consecutive periods around ``reference_date``.

    Offset ``i`` is the period of the reference month shifted by ``-i``
    (``BACKWARD``, most recent first) or ``+i`` (``FORWARD``). With a fixed
    reset day the first period may start after the reference date; the
    period containing it is then the second one.

    Args:
        config: Reset-day configuration.
        reference_date: Date the batch is generated around (default: today).
        count: Number of periods to generate.
        direction: Whether to walk into the past or the future.

    Returns:
        Periods in generation order. ``is_active`` is set on the one that
        contains the reference date.
    """
    reference = to_day(reference_date)
    anchor = _anchor_month(config, reference)
    step = -1 if direction == PeriodDirection.BACKWARD else 1

    periods = []
    for i in range(max(0, count)):
        periods.append(_build_period(config, shift_month(anchor, step * i), reference))
    return periods


def get_current_period(
    config: ResetConfig,
    today: Optional[DateLike] = None,
    window: int = CURRENT_PERIOD_WINDOW,
) -> Period:
    """Period containing today.

    Falls back to the first generated period if none is active, which does
    not happen for well-formed configurations.
    """
    periods = generate_periods(config, today, max(window, CURRENT_PERIOD_WINDOW))
    current = next((p for p in periods if p.is_active), None)
    if current is None:
        logger.warning("no_active_period", reset_day=config.reset_day, reset_type=config.reset_type.value)
        return periods[0]
    return current


def get_period_for_date(
    config: ResetConfig,
    target: DateLike,
    today: Optional[DateLike] = None,
    window: int = DATE_LOOKUP_WINDOW,
) -> Period:
    """Period containing ``target``.

    Searches the ``window`` periods leading up to today first. Dates outside
    that window (far past or future) get a period computed directly around
    the date, so a usable period is always returned. ``is_active`` is
    relative to today in both cases.
    """
    today_day = to_day(today)
    target_day = to_day(target)

    periods = generate_periods(config, today_day, max(window, DATE_LOOKUP_WINDOW))
    period = next((p for p in periods if is_date_in_period(target_day, p)), None)
    if period is not None:
        return period

    candidates = generate_periods(config, target_day, 2)
    period = next((p for p in candidates if p.is_active), candidates[0])
    return _with_activity(period, today_day)


def get_period_by_id(
    config: ResetConfig,
    period_id: str,
    today: Optional[DateLike] = None,
    window: int = ID_LOOKUP_WINDOW,
) -> Optional[Period]:
    """Find a generated period by its ``YYYY-MM-DD`` id, or None."""
    periods = generate_periods(config, today, max(window, ID_LOOKUP_WINDOW))
    return next((p for p in periods if p.id == period_id), None)


def get_days_remaining_in_period(period: Period, now: Optional[DateLike] = None) -> int:
    """Whole days left until the end of ``period``, rounded up; never negative.

    ``now`` is a local datetime (or a date, meaning its start of day). An
    aware datetime is converted to local time, since period bounds are naive.
    """
    if now is None:
        moment = datetime.now()
    elif isinstance(now, datetime):
        moment = now
        if moment.tzinfo is not None:
            moment = moment.astimezone().replace(tzinfo=None)
    else:
        moment = start_of_day(now)
    remaining = (period.end_date - moment) / ONE_DAY
    return max(0, math.ceil(remaining))


def get_total_days_in_period(period: Period) -> int:
    """Inclusive number of days covered by ``period``."""
    return math.ceil((period.end_date - period.start_date) / ONE_DAY)


def is_date_in_period(value: DateLike, period: Period) -> bool:
    """Whether the calendar day of ``value`` lies within ``period``."""
    day = to_day(value)
    return period.start_day <= day <= period.end_day


def days_elapsed_in_period(period: Period, today: Optional[DateLike] = None) -> int:
    """Inclusive days elapsed in ``period`` as of today, between 1 and its length."""
    elapsed = (to_day(today) - period.start_day).days + 1
    return min(max(1, elapsed), get_total_days_in_period(period))


def current_period_id_for_reset_date(reset_day: int, today: Optional[DateLike] = None) -> str:
    """Id of the current period for a fixed reset day."""
    return get_current_period(ResetConfig.fixed(reset_day), today).id


def validate_period_reset_date(stored_period_id: Optional[str], reset_day: int) -> bool:
    """Whether a remembered period id was produced by ``reset_day``.

    Used to drop a stale period selection after the user changes their
    reset day. A clamped id (e.g. 2025-02-28 for reset day 31) still counts
    as a match.
    """
    if not stored_period_id or not 1 <= reset_day <= 31:
        return False
    try:
        start = parse_period_id(stored_period_id)
    except ValidationError:
        return False

    is_valid = start == clamp_reset_day(reset_day, start)
    if not is_valid:
        logger.info(
            "period_reset_date_mismatch",
            stored_period_id=stored_period_id,
            stored_day=start.day,
            reset_day=reset_day,
        )
    return is_valid


def reset_date_presets() -> list[dict]:
    """Suggested reset days for the settings screen."""
    return [dict(preset) for preset in RESET_DATE_PRESETS]
