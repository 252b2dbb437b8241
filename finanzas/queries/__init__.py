"""Dashboard queries package."""

from finanzas.queries.dashboard import (
    ALL_CATEGORIES,
    DashboardSnapshot,
    TransactionFilter,
    build_dashboard,
    filter_transactions,
)

__all__ = [
    "ALL_CATEGORIES",
    "DashboardSnapshot",
    "TransactionFilter",
    "build_dashboard",
    "filter_transactions",
]
