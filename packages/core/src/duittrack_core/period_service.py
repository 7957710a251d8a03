"""Service layer between the period engine and the external stores.

``PeriodService`` resolves a user's reset configuration, loads period data
bundles (expenses + budget) through a ``BudgetExpenseStore``, caches them
per period id in an explicit ``PeriodDataCache``, and carries out
reset-date changes: validate, plan, persist, invalidate.
"""

from datetime import date
from typing import Any, Callable, Optional, TypeVar

import structlog

from .calendar_math import DateLike, parse_period_id, to_day
from .config import DuitTrackSettings
from .exceptions import StoreError
from .insights import calculate_period_velocity
from .models.budget import CategorySpending, PeriodData, PeriodSummary, TopCategory
from .models.insights import VelocityAnalysis
from .models.period import Period, ResetConfig, TransitionPeriodResult
from .period_generator import get_current_period, get_period_by_id, get_period_for_date
from .period_transition import create_change_history, ensure_valid_change, execute_change
from .store import BudgetExpenseStore, ProfileSource

logger = structlog.get_logger()

T = TypeVar("T")


class PeriodDataCache:
    """Period data bundles keyed by period id.

    Owned by a service instance; nothing is shared between instances.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PeriodData] = {}

    def get(self, period_id: str) -> Optional[PeriodData]:
        return self._entries.get(period_id)

    def set(self, data: PeriodData) -> None:
        self._entries[data.period_id] = data

    def invalidate(self, period_id: str) -> None:
        """Drop one period; unknown ids are ignored."""
        self._entries.pop(period_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, period_id: object) -> bool:
        return period_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class PeriodService:
    """
    Period-aware access to budget and expense data for the UI.

    The period engine computes; this class does the I/O around it. Store
    failures surface as StoreError, configuration problems as
    ValidationError.
    """

    def __init__(
        self,
        store: BudgetExpenseStore,
        profiles: ProfileSource,
        settings: Optional[DuitTrackSettings] = None,
        cache: Optional[PeriodDataCache] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Budget/expense store used for reads and transition writes
            profiles: Source of each user's reset configuration
            settings: Configuration (default: loaded from the environment)
            cache: Period data cache (default: a new, empty cache)
        """
        self.store = store
        self.profiles = profiles
        self.settings = settings or DuitTrackSettings()
        self.cache = cache if cache is not None else PeriodDataCache()

    def _call_store(
        self,
        operation: str,
        func: Callable[..., T],
        *args: Any,
        period_id: Optional[str] = None,
    ) -> T:
        try:
            return func(*args)
        except StoreError:
            raise
        except Exception as e:
            logger.error("store_operation_failed", operation=operation, period_id=period_id, error=str(e))
            raise StoreError(
                f"Store operation {operation} failed: {e}",
                operation=operation,
                period_id=period_id,
            ) from e

    def _today(self, today: Optional[DateLike]) -> date:
        if today is None:
            return self.settings.today()
        return to_day(today)

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------

    def reset_config_for(self, user_id: str) -> ResetConfig:
        """Reset configuration of the user, or the configured default."""
        config = self._call_store("get_reset_config", self.profiles.get_reset_config, user_id)
        if config is None:
            return self.settings.default_reset_config()
        return config

    def current_period(self, user_id: str, today: Optional[DateLike] = None) -> Period:
        config = self.reset_config_for(user_id)
        period = get_current_period(
            config, self._today(today), window=self.settings.period.current_window
        )
        return period.model_copy(update={"user_id": user_id})

    def period_for_date(
        self,
        user_id: str,
        target: DateLike,
        today: Optional[DateLike] = None,
    ) -> Period:
        config = self.reset_config_for(user_id)
        period = get_period_for_date(
            config, target, self._today(today), window=self.settings.period.lookup_window
        )
        return period.model_copy(update={"user_id": user_id})

    def resolve_period(
        self,
        user_id: str,
        period_id: str,
        today: Optional[DateLike] = None,
    ) -> Period:
        """Period for an id, searching recent periods first.

        Ids outside the search window are mapped through the date they
        encode.

        Raises:
            ValidationError: If ``period_id`` is not a ``YYYY-MM-DD`` id.
        """
        config = self.reset_config_for(user_id)
        today_day = self._today(today)
        period = get_period_by_id(config, period_id, today_day, window=self.settings.period.id_window)
        if period is None:
            period = get_period_for_date(
                config,
                parse_period_id(period_id),
                today_day,
                window=self.settings.period.lookup_window,
            )
        return period.model_copy(update={"user_id": user_id})

    # ------------------------------------------------------------------
    # Period data
    # ------------------------------------------------------------------

    def load_period_data(self, period_id: str, use_cache: bool = True) -> PeriodData:
        """Load expenses and budget of a period, from cache when possible."""
        use_cache = use_cache and self.settings.period.cache_enabled
        if use_cache:
            cached = self.cache.get(period_id)
            if cached is not None:
                logger.debug("period_data_cache_hit", period_id=period_id)
                return cached

        expenses = self._call_store(
            "get_expenses_by_period", self.store.get_expenses_by_period, period_id, period_id=period_id
        )
        budget = self._call_store(
            "get_budget_by_period", self.store.get_budget_by_period, period_id, period_id=period_id
        )
        data = PeriodData.from_records(period_id, expenses, budget)

        if self.settings.period.cache_enabled:
            self.cache.set(data)

        logger.info(
            "period_data_loaded",
            period_id=period_id,
            expense_count=len(data.expenses),
            total_spent=str(data.total_spent),
        )
        return data

    def reload_period_data(self, period_id: str) -> PeriodData:
        """Load a period again, bypassing and refreshing the cache."""
        self.cache.invalidate(period_id)
        return self.load_period_data(period_id, use_cache=False)

    def get_period_summary(self, period_id: str) -> PeriodSummary:
        data = self.load_period_data(period_id)

        percentage_used = (
            float(data.total_spent / data.total_budget * 100) if data.total_budget > 0 else 0.0
        )
        categories_over_budget = []
        if data.budget:
            categories_over_budget = [
                category_id
                for category_id, category in data.budget.categories.items()
                if category.spent > category.budget
            ]

        return PeriodSummary(
            total_expenses=len(data.expenses),
            total_spent=data.total_spent,
            total_budget=data.total_budget,
            remaining_budget=data.total_budget - data.total_spent,
            percentage_used=percentage_used,
            categories_over_budget=categories_over_budget,
        )

    def get_category_spending(self, period_id: str) -> dict[str, CategorySpending]:
        data = self.load_period_data(period_id)
        if not data.budget:
            return {}

        return {
            category_id: CategorySpending(
                spent=category.spent,
                budget=category.budget,
                remaining=category.budget - category.spent,
                percentage=float(category.spent / category.budget * 100) if category.budget > 0 else 0.0,
            )
            for category_id, category in data.budget.categories.items()
        }

    def get_top_spending_categories(self, period_id: str, limit: int = 5) -> list[TopCategory]:
        """Categories with the highest spending, largest first."""
        data = self.load_period_data(period_id)
        if not data.budget:
            return []

        ranked = sorted(
            data.budget.categories.items(), key=lambda item: item[1].spent, reverse=True
        )
        return [
            TopCategory(
                category_id=category_id,
                spent=category.spent,
                percentage=(
                    float(category.spent / data.total_spent * 100)
                    if data.total_spent > 0
                    else 0.0
                ),
            )
            for category_id, category in ranked[:limit]
        ]

    def period_has_data(self, period_id: str) -> bool:
        data = self.load_period_data(period_id)
        return len(data.expenses) > 0 or data.budget is not None

    def velocity_for_period(
        self,
        user_id: str,
        period_id: str,
        today: Optional[DateLike] = None,
    ) -> VelocityAnalysis:
        """Spending velocity of a period using its own length and progress."""
        today_day = self._today(today)
        period = self.resolve_period(user_id, period_id, today_day)
        data = self.load_period_data(period_id)
        return calculate_period_velocity(period, data.total_budget, data.total_spent, today_day)

    # ------------------------------------------------------------------
    # Reset-date changes
    # ------------------------------------------------------------------

    def change_reset_config(
        self,
        user_id: str,
        new_config: ResetConfig,
        reason: Optional[str] = None,
        today: Optional[DateLike] = None,
    ) -> TransitionPeriodResult:
        """Switch a user to a new reset configuration.

        Validates the change, computes the transition plan, writes the
        transition and new period records and the history entry, updates the
        profile, and drops cached data of the affected periods. Writes are
        upserts keyed by period id, so the whole call can be retried after a
        StoreError.

        Raises:
            ValidationError: If the change is a no-op or the reset day is invalid.
            StoreError: If any store write fails.
        """
        old_config = self.reset_config_for(user_id)
        ensure_valid_change(old_config, new_config)

        result = execute_change(user_id, old_config, new_config, self._today(today))
        history = create_change_history(
            user_id, old_config, new_config, result.affected_period_ids, reason
        )

        self._call_store(
            "save_periods",
            self.store.save_periods,
            [result.transition_period, result.new_period],
            period_id=result.new_period.id,
        )
        self._call_store("save_change_history", self.store.save_change_history, history)
        self._call_store("set_reset_config", self.profiles.set_reset_config, user_id, new_config)

        for period_id in result.affected_period_ids:
            self.cache.invalidate(period_id)

        logger.info(
            "reset_change_applied",
            user_id=user_id,
            affected_period_ids=result.affected_period_ids,
            reason=reason,
        )
        return result
