"""Interfaces of the external collaborators of the period engine.

The engine never performs I/O. Profiles (and their reset configuration)
and budget/expense records live in a remote document store; these
protocols describe what the service layer needs from it. They use
structural subtyping via typing.Protocol, so any adapter with matching
method signatures is compatible without inheriting from them.

Example Usage:
    ```python
    class FirestoreBudgetStore:
        def get_expenses_by_period(self, period_id: str) -> list[ExpenseRecord]:
            ...

        def get_budget_by_period(self, period_id: str) -> Optional[Budget]:
            ...

        def save_periods(self, periods: list[Period]) -> None:
            ...

        def save_change_history(self, history: ResetDateChangeHistory) -> None:
            ...

    # FirestoreBudgetStore satisfies BudgetExpenseStore without subclassing it
    ```
"""

from typing import Optional, Protocol, runtime_checkable

from .models.budget import Budget, ExpenseRecord
from .models.period import Period, ResetConfig, ResetDateChangeHistory


@runtime_checkable
class ProfileSource(Protocol):
    """Supplies and updates the reset configuration of a user profile."""

    def get_reset_config(self, user_id: str) -> Optional[ResetConfig]:
        """Reset configuration of the user, or None if never set."""
        ...

    def set_reset_config(self, user_id: str, config: ResetConfig) -> None:
        """Store a new reset configuration on the user's profile."""
        ...


@runtime_checkable
class BudgetExpenseStore(Protocol):
    """Reads period data and persists reset-date transitions.

    Writes must be idempotent per period id: the transition plan is
    recomputed identically on retry, so saving the same periods twice must
    leave the store in the same state.
    """

    def get_expenses_by_period(self, period_id: str) -> list[ExpenseRecord]:
        """All expenses recorded in the period."""
        ...

    def get_budget_by_period(self, period_id: str) -> Optional[Budget]:
        """Budget of the period, or None if none was set up."""
        ...

    def save_periods(self, periods: list[Period]) -> None:
        """Upsert period records keyed by ``Period.id``."""
        ...

    def save_change_history(self, history: ResetDateChangeHistory) -> None:
        """Append an audit record of a reset-date change."""
        ...
