"""DuitTrack Core - Flexible tracking periods and spending insights."""

__version__ = "0.1.0"

from .models import Period, ResetConfig, ResetType, TransitionPeriodResult
from .period_generator import (
    generate_periods,
    get_current_period,
    get_period_by_id,
    get_period_for_date,
)
from .period_transition import calculate_impact, execute_change, validate_change
from .period_service import PeriodDataCache, PeriodService

__all__ = [
    "Period",
    "ResetConfig",
    "ResetType",
    "TransitionPeriodResult",
    "generate_periods",
    "get_current_period",
    "get_period_by_id",
    "get_period_for_date",
    "calculate_impact",
    "execute_change",
    "validate_change",
    "PeriodDataCache",
    "PeriodService",
]
