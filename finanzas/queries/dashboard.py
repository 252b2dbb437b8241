"""
Dashboard Read Model

Builds everything the user dashboard shows from a User: all-time totals,
budget status and a filtered transaction listing.

DESIGN DECISION: The summary figures (income, expense, balance, budget
status) are always all-time. Filters only narrow the listing. A user
filtering to one week still sees their real budget position.
"""

import datetime
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from finanzas.models.transaction import Transaction
from finanzas.models.user import BudgetStatus, User


ALL_CATEGORIES = "all"


class TransactionFilter(BaseModel):
    """
    Listing filter. Date bounds are inclusive and compare dates only.

    category None or "all" matches every category.
    """

    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    category: Optional[str] = None

    @model_validator(mode='after')
    def validate_range(self) -> 'TransactionFilter':
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to cannot be before date_from")
        return self

    def matches(self, transaction: Transaction) -> bool:
        if self.date_from and transaction.date < self.date_from:
            return False
        if self.date_to and transaction.date > self.date_to:
            return False
        if self.category and self.category != ALL_CATEGORIES:
            return transaction.category == self.category
        return True


class DashboardSnapshot(BaseModel):
    """Everything the dashboard renders, computed in one pass."""

    user_id: int
    name: str
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    budget: Decimal
    budget_status: BudgetStatus
    categories: list[str] = Field(default_factory=list)
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Filtered entries, newest date first"
    )


def filter_transactions(
    transactions: Iterable[Transaction],
    transaction_filter: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """
    Apply a filter and sort by date, newest first.

    Entries on the same date keep their ledger order.
    """
    transaction_filter = transaction_filter or TransactionFilter()
    selected = [t for t in transactions if transaction_filter.matches(t)]
    return sorted(selected, key=lambda t: t.date, reverse=True)


def build_dashboard(
    user: User,
    transaction_filter: Optional[TransactionFilter] = None,
) -> DashboardSnapshot:
    total_expense = user.total_expense()
    return DashboardSnapshot(
        user_id=user.id,
        name=user.name,
        total_income=user.total_income(),
        total_expense=total_expense,
        balance=user.balance(),
        budget=user.budget,
        budget_status=user.budget_status(total_expense),
        categories=list(user.categories),
        transactions=filter_transactions(user.transactions, transaction_filter),
    )
