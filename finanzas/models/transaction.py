"""
Transaction Model

A Transaction is one ledger event: money coming in (income) or going
out (expense). The sign is carried by the type, never by the stored
amount.

DESIGN DECISION: Transactions are immutable once created. There is no
edit or delete operation; a user's ledger is append-only.
"""

import datetime
import time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from finanzas.models.errors import ErrorKind, LedgerError


class TransactionType(str, Enum):
    """Direction of a ledger event."""
    INCOME = "income"
    EXPENSE = "expense"


class InvalidTransaction(LedgerError):
    """Transaction input rejected (negative amount, unknown type, bad record)."""

    kind = ErrorKind.INVALID_TRANSACTION


def generate_record_id(existing_ids: Iterable[int] = ()) -> int:
    """
    Create a millisecond-timestamp id that is unique within existing_ids.

    If the clock has not moved past the highest existing id (two records
    created in the same millisecond, or seeded ids in the future), the
    id is bumped to one past the highest.
    """
    candidate = int(time.time() * 1000)
    highest = max(existing_ids, default=0)
    return candidate if candidate > highest else highest + 1


class Transaction(BaseModel):
    """
    An immutable income or expense entry.

    The category is a free-form label. Unknown categories are accepted
    so that entries keep their label even if the owner's vocabulary
    changes later.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        description="Identifier, unique within the owning user's ledger"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Positive magnitude; sign comes from the type"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    category: str = Field(
        ...,
        description="Category label at creation time"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the event (no time component)"
    )
    description: str = Field(
        default="",
        description="Free-form note, may be empty"
    )

    @field_validator('description', mode='before')
    @classmethod
    def blank_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator('date', mode='before')
    @classmethod
    def strip_time_component(cls, v: Any) -> Any:
        """Accept timestamps ("2024-01-05T10:30:00Z") by keeping the date part."""
        if isinstance(v, datetime.datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10 and v[10] in "T ":
            return v[:10]
        return v

    @classmethod
    def create(
        cls,
        id: int,
        amount: Any,
        type: Any,
        category: str,
        date: Any,
        description: str = "",
    ) -> "Transaction":
        """
        Build a validated transaction.

        Raises:
            InvalidTransaction: amount is negative, non-numeric or not
                finite, or type is not income/expense.
        """
        return cls.from_data({
            "id": id,
            "amount": amount,
            "type": type,
            "category": category,
            "date": date,
            "description": description or "",
        })

    @classmethod
    def from_data(cls, record: dict) -> "Transaction":
        """
        Rebuild a transaction from a plain record.

        Amounts stored as strings are coerced back to Decimal so storage
        layers that lose numeric types still round-trip.
        """
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            raise InvalidTransaction(f"Invalid transaction: {e}") from e

    def to_data(self) -> dict:
        """Convert to a JSON-serializable record."""
        return self.model_dump(mode="json")

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the type."""
        return self.amount if self.is_income else -self.amount
