"""
Data Models Package

This package contains all Pydantic models used by Finanzas Personales.
Everything read from or written to storage passes through these schemas.
"""

from finanzas.models.errors import ErrorKind, LedgerError
from finanzas.models.transaction import (
    InvalidTransaction,
    Transaction,
    TransactionType,
    generate_record_id,
)
from finanzas.models.user import (
    DEFAULT_CATEGORIES,
    BudgetStatus,
    BudgetTier,
    InvalidBudget,
    InvalidCategory,
    InvalidUserRecord,
    User,
    UserRole,
    UserSummary,
)
from finanzas.models.results import AuthResult, OperationResult
from finanzas.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Errors
    "ErrorKind",
    "LedgerError",
    "InvalidTransaction",
    "InvalidBudget",
    "InvalidCategory",
    "InvalidUserRecord",
    # Ledger models
    "DEFAULT_CATEGORIES",
    "BudgetStatus",
    "BudgetTier",
    "Transaction",
    "TransactionType",
    "User",
    "UserRole",
    "UserSummary",
    "generate_record_id",
    # Results
    "AuthResult",
    "OperationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
