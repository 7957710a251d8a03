"""Budget and expense data consumed from the external store.

The period engine never owns or mutates these records. The store loads
them per period id and the insight calculators read them.
"""

from datetime import date as datetime_date
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator

# ``date`` is a field name on ExpenseRecord, so the type goes by an alias
ExpenseDate = Union[datetime, datetime_date]


class ExpenseRecord(BaseModel):
    """A single recorded expense."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "exp_001",
                    "amount": "45000",
                    "category": "makanan",
                    "description": "Nasi padang",
                    "date": "2025-10-18",
                }
            ]
        }
    }

    id: Optional[str] = Field(default=None, description="Store identifier")
    amount: Decimal = Field(description="Amount in Rupiah")
    category: str = Field(default="lainnya", description="Category id")
    description: str = Field(default="", description="Free-text description")
    user_id: str = Field(default="")
    date: ExpenseDate = Field(description="When the expense happened")

    @property
    def day(self) -> datetime_date:
        """Calendar day of the expense."""
        if isinstance(self.date, datetime):
            return self.date.date()
        return self.date

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal."""
        if isinstance(v, (str, float)):
            return Decimal(str(v))
        return v


class CategoryBudget(BaseModel):
    """Budget and spending of one category within a period."""

    budget: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))
    spent: Decimal = Field(default=Decimal("0"))
    carry_over: Optional[Decimal] = Field(
        default=None, description="Amount carried over from the previous period"
    )
    adjustments: Optional[Decimal] = Field(
        default=None, description="Manual adjustments"
    )

    @computed_field
    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent

    @computed_field
    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.budget


class Budget(BaseModel):
    """Per-category budget of one tracking period."""

    id: Optional[str] = None
    period_id: str = Field(description="Id of the period this budget belongs to")
    user_id: str = Field(default="")
    categories: dict[str, CategoryBudget] = Field(default_factory=dict)
    total_budget: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))
    total_spent: Decimal = Field(default=Decimal("0"))
    notes: Optional[str] = None


class PeriodData(BaseModel):
    """Expenses and budget loaded for a single period."""

    period_id: str
    expenses: list[ExpenseRecord] = Field(default_factory=list)
    budget: Optional[Budget] = None
    total_spent: Decimal = Field(default=Decimal("0"))
    total_budget: Decimal = Field(default=Decimal("0"))

    @classmethod
    def from_records(
        cls,
        period_id: str,
        expenses: list[ExpenseRecord],
        budget: Optional[Budget],
    ) -> "PeriodData":
        """Bundle store records and compute the period totals."""
        total_spent = sum((e.amount for e in expenses), Decimal("0"))
        total_budget = budget.total_budget if budget else Decimal("0")
        return cls(
            period_id=period_id,
            expenses=expenses,
            budget=budget,
            total_spent=total_spent,
            total_budget=total_budget,
        )


class PeriodSummary(BaseModel):
    """Headline numbers of a period."""

    total_expenses: int = Field(ge=0, description="Number of recorded expenses")
    total_spent: Decimal
    total_budget: Decimal
    remaining_budget: Decimal
    percentage_used: float
    categories_over_budget: list[str] = Field(default_factory=list)


class CategorySpending(BaseModel):
    """Spending statistics of one category within a period."""

    spent: Decimal
    budget: Decimal
    remaining: Decimal
    percentage: float


class TopCategory(BaseModel):
    """A category ranked by spending."""

    category_id: str
    spent: Decimal
    percentage: float = Field(description="Share of the period's total spending")


class BudgetSummary(BaseModel):
    """Budget totals aggregated over categories."""

    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    overall_percentage: int
    categories_count: int
    over_budget_count: int
    period: str = ""
