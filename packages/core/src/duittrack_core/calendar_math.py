"""Calendar arithmetic for tracking periods.

Pure, stateless helpers: month lengths, month shifting, reset-day clamping,
period id formatting and short display labels. Month arithmetic goes
through ``dateutil.relativedelta``, whose absolute ``day`` argument is
clamped to the length of the target month (31 in February -> 28/29).
"""

from datetime import date, datetime, time
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .exceptions import ValidationError

DateLike = Union[date, datetime]

END_OF_DAY = time(23, 59, 59, 999000)

# Indonesian month names (id-ID)
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Agu", "Sep", "Okt", "Nov", "Des",
)
MONTH_NAMES = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def to_day(value: Optional[DateLike] = None) -> date:
    """Calendar day of ``value``; today when ``value`` is None."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def shift_month(value: DateLike, offset: int) -> date:
    """First day of the month ``offset`` months away from ``value``."""
    return to_day(value) + relativedelta(months=offset, day=1)


def last_day_of_month(value: DateLike) -> date:
    """Final calendar day of the month containing ``value``."""
    return to_day(value) + relativedelta(day=31)


def days_in_month(value: DateLike) -> int:
    """Number of days in the month containing ``value`` (leap-year aware)."""
    return last_day_of_month(value).day


def clamp_reset_day(reset_day: int, month: DateLike) -> date:
    """Date of ``reset_day`` in the month of ``month``, clamped to its last day.

    A reset day of 31 in February lands on the 28th (29th in a leap year).
    """
    return to_day(month) + relativedelta(day=reset_day)


def start_of_day(value: DateLike) -> datetime:
    """00:00:00.000 on the day of ``value``."""
    return datetime.combine(to_day(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    """23:59:59.999 on the day of ``value``."""
    return datetime.combine(to_day(value), END_OF_DAY)


def format_period_id(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` id of a period starting on ``value``."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_month_id(value: DateLike) -> str:
    """``YYYY-MM`` grouping key of a period starting on ``value``."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_period_id(period_id: str) -> date:
    """Parse a canonical period id back into its start date.

    Raises:
        ValidationError: If the id is not a zero-padded ``YYYY-MM-DD`` date.
    """
    parts = period_id.split("-") if period_id else []
    if (
        len(parts) != 3
        or [len(p) for p in parts] != [4, 2, 2]
        or not all(p.isdigit() for p in parts)
    ):
        raise ValidationError(
            f"Invalid period id: {period_id!r}",
            field="period_id",
            value=period_id,
            constraint="YYYY-MM-DD",
        )
    try:
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError as e:
        raise ValidationError(
            f"Invalid period id: {period_id!r}",
            field="period_id",
            value=period_id,
            constraint=str(e),
        ) from e


def _same_month(start: DateLike, end: DateLike) -> bool:
    return (start.year, start.month) == (end.year, end.month)


def format_period_display(start: DateLike, end: DateLike) -> str:
    """Period label: "1 - 31 Jan 2025" or "25 Jan - 24 Feb 2025"."""
    start_month = MONTH_ABBREVIATIONS[start.month - 1]
    end_month = MONTH_ABBREVIATIONS[end.month - 1]
    if _same_month(start, end):
        return f"{start.day} - {end.day} {start_month} {end.year}"
    return f"{start.day} {start_month} - {end.day} {end_month} {end.year}"


def format_period_short(start: DateLike, end: DateLike) -> str:
    """Compact label for narrow screens: "1-31 Jan" or "25 Jan - 24 Feb"."""
    start_month = MONTH_ABBREVIATIONS[start.month - 1]
    end_month = MONTH_ABBREVIATIONS[end.month - 1]
    if _same_month(start, end):
        return f"{start.day}-{end.day} {start_month}"
    return f"{start.day} {start_month} - {end.day} {end_month}"


def format_date_long(value: DateLike) -> str:
    """Full date such as "19 Oktober 2025"."""
    return f"{value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def format_period_range(start: DateLike, end: DateLike) -> str:
    """Full range such as "25 Januari 2025 - 24 Februari 2025"."""
    return f"{format_date_long(start)} - {format_date_long(end)}"
