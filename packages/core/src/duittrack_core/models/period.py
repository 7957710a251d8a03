"""Tracking-period data models.

This module provides the value objects of the period engine:
- Reset-day configuration (fixed day of month or last day of month)
- Generated tracking periods and their transition metadata
- Results of a reset-date change (impact, transition plan, history record)

Periods are derived values. They are recomputed on demand from a
``ResetConfig`` and a reference date and only become stored records when a
caller persists the output of a reset-date change.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from duittrack_core.calendar_math import format_period_display


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class ResetType(str, Enum):
    """How the reset day of a tracking period is determined."""

    FIXED = "fixed"
    LAST_DAY_OF_MONTH = "last-day-of-month"


class PeriodDirection(str, Enum):
    """Direction in which a batch of periods is generated."""

    BACKWARD = "backward"
    FORWARD = "forward"


class ResetConfig(BaseModel):
    """Reset-day configuration of a user profile.

    ``reset_day`` only matters for ``FIXED`` configurations. A
    ``LAST_DAY_OF_MONTH`` configuration may still carry whatever day was
    stored with the profile (historically ``-1``).
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {"reset_day": 25, "reset_type": "fixed"},
                {"reset_day": -1, "reset_type": "last-day-of-month"},
            ]
        },
    )

    reset_day: int = Field(
        default=25,
        description="Day of month (1-31) on which a new period starts",
    )
    reset_type: ResetType = Field(
        default=ResetType.FIXED,
        description="Fixed day of month or last day of month",
    )

    @model_validator(mode="after")
    def fixed_day_in_range(self) -> "ResetConfig":
        """A fixed reset day must be a valid day of month."""
        if self.reset_type == ResetType.FIXED and not 1 <= self.reset_day <= 31:
            raise ValueError("reset_day must be between 1 and 31 for fixed reset type")
        return self

    @classmethod
    def fixed(cls, reset_day: int) -> "ResetConfig":
        """Build a configuration that resets on a fixed day of month."""
        return cls(reset_day=reset_day, reset_type=ResetType.FIXED)

    @classmethod
    def last_day_of_month(cls) -> "ResetConfig":
        """Build a configuration that resets on the last day of each month."""
        return cls(reset_day=-1, reset_type=ResetType.LAST_DAY_OF_MONTH)

    @property
    def is_last_day_of_month(self) -> bool:
        return self.reset_type == ResetType.LAST_DAY_OF_MONTH

    def display(self) -> str:
        """Short Indonesian label, e.g. "tanggal 25" or "akhir bulan"."""
        if self.is_last_day_of_month:
            return "akhir bulan"
        return f"tanggal {self.reset_day}"


class Period(BaseModel):
    """One budgeting cycle bounded by two consecutive reset days.

    ``start_date`` is normalised to 00:00:00.000 and ``end_date`` to
    23:59:59.999, so both ends are inclusive.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "2025-09-25",
                    "start_date": "2025-09-25T00:00:00",
                    "end_date": "2025-10-24T23:59:59.999000",
                    "month": "2025-09",
                    "is_active": True,
                }
            ]
        },
    )

    id: str = Field(description="Canonical YYYY-MM-DD form of the start date")
    start_date: datetime = Field(description="Start of the period (start of day)")
    end_date: datetime = Field(description="End of the period (end of day, inclusive)")
    month: str = Field(description="YYYY-MM of the start date, for display grouping")
    user_id: str = Field(default="", description="Owner, filled in by the service layer")
    is_active: bool = Field(
        default=False,
        description="Whether the reference date falls within the period",
    )
    reset_date: Optional[int] = Field(
        default=None,
        description="Reset day that produced this period",
    )
    is_transition: bool = Field(
        default=False,
        description="Whether the period was shaped by a reset-date change",
    )
    note: Optional[str] = Field(
        default=None,
        description="Explanation for an abnormal period",
    )
    created_at: Optional[datetime] = Field(default=None)

    @property
    def start_day(self) -> date:
        """Start date without time of day."""
        return self.start_date.date()

    @property
    def end_day(self) -> date:
        """End date without time of day."""
        return self.end_date.date()

    @property
    def display_name(self) -> str:
        """Human label such as "25 Sep - 24 Okt 2025"."""
        return format_period_display(self.start_date, self.end_date)


class PeriodImpact(BaseModel):
    """Effect of switching to a new reset configuration today."""

    current_period: Period = Field(description="Current period under the old configuration")
    transition_end_date: datetime = Field(
        description="New end of the current period (end of day)"
    )
    new_period_start_date: datetime = Field(
        description="Start of the first period under the new configuration"
    )
    will_close_early: bool = Field(
        description="Whether the current period ends before its natural end"
    )
    days_lost: int = Field(
        default=0,
        ge=0,
        description="Inclusive number of days cut from the current period",
    )


class TransitionPeriodResult(BaseModel):
    """Plan for a reset-date change; the caller decides how to persist it."""

    original_period: Period
    transition_period: Period = Field(
        description="The original period with its end pulled back"
    )
    new_period: Period = Field(description="First period under the new configuration")
    affected_period_ids: list[str] = Field(default_factory=list)
    summary: str = Field(description="Human-readable description of the change")


class ResetDateChangeHistory(BaseModel):
    """Audit record of a reset-date change."""

    id: Optional[str] = None
    user_id: str
    old_reset_date: int
    new_reset_date: int
    old_reset_type: ResetType
    new_reset_type: ResetType
    changed_at: datetime = Field(default_factory=_utc_now)
    affected_period_ids: list[str] = Field(default_factory=list)
    reason: Optional[str] = None


class ChangeSafety(BaseModel):
    """Advisory result of ``is_change_safe``."""

    is_safe: bool
    warnings: list[str] = Field(default_factory=list)


class ChangePreview(BaseModel):
    """Text shown to the user before confirming a reset-date change."""

    title: str
    description: str
    warnings: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)


class BudgetRecalculationNeeds(BaseModel):
    """Which periods need their budget recomputed after a change."""

    needs_recalculation: bool
    affected_periods: list[str] = Field(default_factory=list)
    reason: str
