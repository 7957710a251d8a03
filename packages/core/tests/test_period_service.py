"""Tests for the period service layer."""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from duittrack_core.config import DuitTrackSettings, PeriodSettings
from duittrack_core.exceptions import StoreError, ValidationError
from duittrack_core.models import (
    Budget,
    ExpenseRecord,
    Period,
    ResetConfig,
    ResetDateChangeHistory,
    VelocityStatus,
)
from duittrack_core.period_service import PeriodDataCache, PeriodService
from duittrack_core.store import BudgetExpenseStore, ProfileSource

TODAY = date(2025, 10, 19)


class InMemoryProfiles:
    def __init__(self, configs: Optional[dict[str, ResetConfig]] = None):
        self.configs = dict(configs or {})

    def get_reset_config(self, user_id: str) -> Optional[ResetConfig]:
        return self.configs.get(user_id)

    def set_reset_config(self, user_id: str, config: ResetConfig) -> None:
        self.configs[user_id] = config


class InMemoryStore:
    def __init__(self):
        self.expenses: dict[str, list[ExpenseRecord]] = {}
        self.budgets: dict[str, Budget] = {}
        self.periods: dict[str, Period] = {}
        self.history: list[ResetDateChangeHistory] = []
        self.reads = 0
        self.fail_on: Optional[str] = None

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise ConnectionError("network unreachable")

    def get_expenses_by_period(self, period_id: str) -> list[ExpenseRecord]:
        self._maybe_fail("get_expenses_by_period")
        self.reads += 1
        return list(self.expenses.get(period_id, []))

    def get_budget_by_period(self, period_id: str) -> Optional[Budget]:
        self._maybe_fail("get_budget_by_period")
        return self.budgets.get(period_id)

    def save_periods(self, periods: list[Period]) -> None:
        self._maybe_fail("save_periods")
        for period in periods:
            self.periods[period.id] = period

    def save_change_history(self, history: ResetDateChangeHistory) -> None:
        self._maybe_fail("save_change_history")
        self.history.append(history)


@pytest.fixture
def store(october_expenses, october_budget) -> InMemoryStore:
    store = InMemoryStore()
    store.expenses["2025-09-25"] = october_expenses
    store.budgets["2025-09-25"] = october_budget
    return store


@pytest.fixture
def profiles(reset_25: ResetConfig) -> InMemoryProfiles:
    return InMemoryProfiles({"user_1": reset_25})


@pytest.fixture
def settings() -> DuitTrackSettings:
    return DuitTrackSettings(env="test", timezone="Asia/Jakarta", period=PeriodSettings())


@pytest.fixture
def service(store, profiles, settings) -> PeriodService:
    return PeriodService(store, profiles, settings)


class TestProtocols:
    def test_fakes_satisfy_protocols(self, store, profiles):
        assert isinstance(store, BudgetExpenseStore)
        assert isinstance(profiles, ProfileSource)


class TestPeriodDataCache:
    """Test suite for PeriodDataCache."""

    def test_set_get_invalidate(self, service: PeriodService):
        cache = PeriodDataCache()
        data = service.load_period_data("2025-09-25")

        cache.set(data)
        assert "2025-09-25" in cache
        assert len(cache) == 1
        assert cache.get("2025-09-25") is data

        cache.invalidate("2025-09-25")
        cache.invalidate("unknown")
        assert cache.get("2025-09-25") is None

    def test_clear(self, service: PeriodService):
        service.load_period_data("2025-09-25")
        service.load_period_data("2025-08-25")

        service.cache.clear()
        assert len(service.cache) == 0


class TestPeriodResolution:
    """Test suite for resolving periods of a user."""

    def test_current_period(self, service: PeriodService):
        period = service.current_period("user_1", TODAY)

        assert period.id == "2025-09-25"
        assert period.user_id == "user_1"

    def test_unknown_user_gets_default_config(self, service: PeriodService):
        assert service.reset_config_for("nobody") == ResetConfig.fixed(25)

    def test_period_for_date(self, service: PeriodService):
        period = service.period_for_date("user_1", date(2025, 8, 30), TODAY)

        assert period.id == "2025-08-25"
        assert period.is_active is False

    def test_resolve_recent_period(self, service: PeriodService):
        assert service.resolve_period("user_1", "2025-07-25", TODAY).end_day == date(2025, 8, 24)

    def test_resolve_old_period(self, service: PeriodService):
        period = service.resolve_period("user_1", "2019-03-25", TODAY)

        assert period.id == "2019-03-25"
        assert period.end_day == date(2019, 4, 24)

    def test_resolve_malformed_id(self, service: PeriodService):
        with pytest.raises(ValidationError):
            service.resolve_period("user_1", "oktober", TODAY)

    def test_profile_failure_wrapped(self, store, settings):
        class BrokenProfiles(InMemoryProfiles):
            def get_reset_config(self, user_id):
                raise TimeoutError("profile service timed out")

        service = PeriodService(store, BrokenProfiles(), settings)

        with pytest.raises(StoreError) as exc_info:
            service.current_period("user_1", TODAY)

        assert exc_info.value.operation == "get_reset_config"
        assert isinstance(exc_info.value.__cause__, TimeoutError)


class TestPeriodData:
    """Test suite for loading and summarising period data."""

    def test_load_is_cached(self, service: PeriodService, store: InMemoryStore):
        first = service.load_period_data("2025-09-25")
        second = service.load_period_data("2025-09-25")

        assert first is second
        assert store.reads == 1

    def test_bypass_cache(self, service: PeriodService, store: InMemoryStore):
        service.load_period_data("2025-09-25")
        service.load_period_data("2025-09-25", use_cache=False)

        assert store.reads == 2

    def test_reload_refreshes_cache(self, service: PeriodService, store: InMemoryStore):
        service.load_period_data("2025-09-25")
        store.expenses["2025-09-25"].append(
            ExpenseRecord(amount=Decimal("25000"), date=date(2025, 10, 18))
        )

        data = service.reload_period_data("2025-09-25")

        assert data.total_spent == Decimal("525000")
        assert service.load_period_data("2025-09-25") is data

    def test_cache_disabled_by_settings(self, store, profiles):
        settings = DuitTrackSettings(env="test", period=PeriodSettings(cache_enabled=False))
        service = PeriodService(store, profiles, settings)

        service.load_period_data("2025-09-25")
        service.load_period_data("2025-09-25")

        assert store.reads == 2
        assert len(service.cache) == 0

    def test_store_failure_wrapped(self, service: PeriodService, store: InMemoryStore):
        store.fail_on = "get_expenses_by_period"

        with pytest.raises(StoreError) as exc_info:
            service.load_period_data("2025-09-25")

        assert exc_info.value.operation == "get_expenses_by_period"
        assert exc_info.value.period_id == "2025-09-25"
        assert exc_info.value.recoverable is True

    def test_period_summary(self, service: PeriodService):
        summary = service.get_period_summary("2025-09-25")

        assert summary.total_expenses == 4
        assert summary.total_spent == Decimal("500000")
        assert summary.total_budget == Decimal("2000000")
        assert summary.remaining_budget == Decimal("1500000")
        assert summary.percentage_used == pytest.approx(25.0)
        assert summary.categories_over_budget == ["makanan"]

    def test_empty_period_summary(self, service: PeriodService):
        summary = service.get_period_summary("2025-08-25")

        assert summary.total_expenses == 0
        assert summary.percentage_used == 0.0
        assert service.period_has_data("2025-08-25") is False
        assert service.period_has_data("2025-09-25") is True

    def test_category_spending(self, service: PeriodService):
        spending = service.get_category_spending("2025-09-25")

        assert set(spending) == {"makanan", "transport", "belanja"}
        assert spending["makanan"].remaining == Decimal("-50000")
        assert spending["transport"].percentage == pytest.approx(100000 / 300000 * 100)
        assert service.get_category_spending("2025-08-25") == {}

    def test_top_spending_categories(self, service: PeriodService):
        top = service.get_top_spending_categories("2025-09-25", limit=2)

        assert [c.category_id for c in top] == ["makanan", "belanja"]
        assert top[0].percentage == pytest.approx(40.0)

    def test_velocity_for_period(self, service: PeriodService):
        velocity = service.velocity_for_period("user_1", "2025-09-25", TODAY)

        # 25 of 30 days elapsed, 25% of the budget spent
        assert velocity.time_progress == pytest.approx(25 / 30)
        assert velocity.status == VelocityStatus.SLOW


class TestChangeResetConfig:
    """Test suite for PeriodService.change_reset_config."""

    def test_change_persists_plan(self, service, store, profiles):
        service.load_period_data("2025-09-25")

        result = service.change_reset_config("user_1", ResetConfig.fixed(1), "Gaji awal bulan", TODAY)

        assert result.affected_period_ids == ["2025-09-25", "2025-11-01"]
        assert store.periods["2025-09-25"].end_day == date(2025, 10, 31)
        assert store.periods["2025-11-01"].is_transition is True
        assert len(store.history) == 1
        assert store.history[0].reason == "Gaji awal bulan"
        assert store.history[0].affected_period_ids == ["2025-09-25", "2025-11-01"]
        assert profiles.configs["user_1"] == ResetConfig.fixed(1)
        assert "2025-09-25" not in service.cache

    def test_no_op_change_rejected(self, service, store):
        with pytest.raises(ValidationError):
            service.change_reset_config("user_1", ResetConfig.fixed(25), today=TODAY)

        assert store.periods == {}
        assert store.history == []

    def test_failed_write_keeps_profile(self, service, store, profiles):
        store.fail_on = "save_change_history"

        with pytest.raises(StoreError) as exc_info:
            service.change_reset_config("user_1", ResetConfig.fixed(1), today=TODAY)

        assert exc_info.value.operation == "save_change_history"
        assert profiles.configs["user_1"] == ResetConfig.fixed(25)

    def test_retry_after_failure_is_idempotent(self, service, store, profiles):
        store.fail_on = "save_change_history"
        with pytest.raises(StoreError):
            service.change_reset_config("user_1", ResetConfig.fixed(1), today=TODAY)

        store.fail_on = None
        service.change_reset_config("user_1", ResetConfig.fixed(1), today=TODAY)

        assert sorted(store.periods) == ["2025-09-25", "2025-11-01"]
        assert len(store.history) == 1
        assert profiles.configs["user_1"] == ResetConfig.fixed(1)
