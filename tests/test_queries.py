"""
Tests for the dashboard read model
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finanzas.models import BudgetTier, Transaction, User
from finanzas.queries import (
    ALL_CATEGORIES,
    TransactionFilter,
    build_dashboard,
    filter_transactions,
)


@pytest.fixture
def ledger() -> list[Transaction]:
    return [
        Transaction.create(1, 1000, "income", "Salario", "2024-01-01"),
        Transaction.create(2, 200, "expense", "Alimentación", "2024-01-15"),
        Transaction.create(3, 50, "expense", "Transporte", "2024-01-15"),
        Transaction.create(4, 650, "expense", "Vivienda", "2024-02-01"),
    ]


@pytest.fixture
def user(ledger) -> User:
    return User(
        id=100,
        name="Ana",
        email="ana@x.com",
        password="pw1",
        budget=Decimal(1000),
        transactions=ledger,
    )


class TestTransactionFilter:
    """Tests for listing filters."""

    def test_no_filter_returns_everything_newest_first(self, ledger):
        result = filter_transactions(ledger)
        assert [t.id for t in result] == [4, 2, 3, 1]

    def test_same_date_keeps_ledger_order(self, ledger):
        reordered = [ledger[2], ledger[1]]
        assert [t.id for t in filter_transactions(reordered)] == [3, 2]

    def test_date_bounds_are_inclusive(self, ledger):
        f = TransactionFilter(date_from="2024-01-15", date_to="2024-02-01")
        assert [t.id for t in filter_transactions(ledger, f)] == [4, 2, 3]

    def test_open_ended_bounds(self, ledger):
        assert [t.id for t in filter_transactions(ledger, TransactionFilter(date_to=date(2024, 1, 1)))] == [1]
        assert [t.id for t in filter_transactions(ledger, TransactionFilter(date_from=date(2024, 2, 1)))] == [4]

    def test_category_filter(self, ledger):
        f = TransactionFilter(category="Transporte")
        assert [t.id for t in filter_transactions(ledger, f)] == [3]

    def test_all_categories_sentinel(self, ledger):
        f = TransactionFilter(category=ALL_CATEGORIES)
        assert len(filter_transactions(ledger, f)) == 4

    def test_combined_filters(self, ledger):
        f = TransactionFilter(date_from="2024-01-10", date_to="2024-01-31", category="Alimentación")
        assert [t.id for t in filter_transactions(ledger, f)] == [2]

    def test_inverted_range_is_rejected(self):
        with pytest.raises(ValidationError):
            TransactionFilter(date_from="2024-02-01", date_to="2024-01-01")


class TestBuildDashboard:
    """Tests for the dashboard snapshot."""

    def test_totals_are_all_time(self, user):
        snapshot = build_dashboard(user, TransactionFilter(category="Salario"))

        assert snapshot.total_income == Decimal(1000)
        assert snapshot.total_expense == Decimal(900)
        assert snapshot.balance == Decimal(100)
        assert [t.id for t in snapshot.transactions] == [1]

    def test_budget_status_uses_all_time_expense(self, user):
        snapshot = build_dashboard(user, TransactionFilter(date_to="2024-01-01"))
        assert snapshot.budget_status.tier == BudgetTier.WARNING
        assert snapshot.budget_status.percentage == 90

    def test_unset_budget(self, user):
        user.set_budget(0)
        assert build_dashboard(user).budget_status.tier == BudgetTier.UNSET

    def test_snapshot_carries_identity_and_categories(self, user):
        snapshot = build_dashboard(user)
        assert snapshot.user_id == 100
        assert snapshot.name == "Ana"
        assert snapshot.categories == user.categories

    def test_empty_ledger(self):
        snapshot = build_dashboard(User(id=1, name="N", email="n@x.com", password="p"))
        assert snapshot.balance == 0
        assert snapshot.transactions == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
