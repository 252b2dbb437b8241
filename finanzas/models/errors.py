"""
Error kinds shared by the ledger and session layers.

Every failure the core can report is locally recoverable. The model
layer raises a LedgerError subclass; the session and flow layers turn
those into structured result objects carrying an ErrorKind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure categories."""
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TRANSACTION = "invalid_transaction"
    INVALID_BUDGET = "invalid_budget"
    INVALID_CATEGORY = "invalid_category"
    MALFORMED_RECORD = "malformed_record"
    NOT_AUTHENTICATED = "not_authenticated"
    USER_NOT_FOUND = "user_not_found"


class LedgerError(Exception):
    """Base exception for ledger and session operations."""

    kind: ErrorKind = ErrorKind.MALFORMED_RECORD

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
