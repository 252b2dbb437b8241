"""
Structured operation results handed back to the view layer.

Failures the user can fix (duplicate email, wrong password, bad amount)
are reported as a result with success=False and an ErrorKind, never as
an exception escaping to the view.
"""

from typing import Optional

from pydantic import BaseModel, Field

from finanzas.models.errors import ErrorKind, LedgerError
from finanzas.models.user import User, UserSummary


class AuthResult(BaseModel):
    """Outcome of register or login."""

    success: bool
    message: str = Field(
        ...,
        description="Human-readable outcome, shown as-is to the user"
    )
    error: Optional[ErrorKind] = None
    user: Optional[UserSummary] = None


class OperationResult(BaseModel):
    """
    Outcome of a ledger mutation.

    On success, user is a fresh copy of the session user after the
    change was persisted, so the view can re-render from it.
    """

    success: bool
    message: str = ""
    error: Optional[ErrorKind] = None
    user: Optional[User] = None

    @classmethod
    def failed(cls, error: LedgerError) -> "OperationResult":
        return cls(success=False, message=error.message, error=error.kind)
