"""
User Model

A User owns a ledger (ordered transaction history), a monthly budget and
a category vocabulary. Every financial figure shown for a user is
derived from the ledger on demand.

DESIGN DECISION: No balance or total is ever stored. Persisting a cached
balance would let it drift from the transactions it summarizes.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from finanzas.models.errors import ErrorKind, LedgerError
from finanzas.models.transaction import Transaction, generate_record_id


DEFAULT_CATEGORIES = [
    "Salario",
    "Alimentación",
    "Transporte",
    "Vivienda",
    "Servicios",
    "Salud",
    "Entretenimiento",
    "Educación",
    "Otros",
]

# Budget tier thresholds, as percentages of the budget
WARNING_THRESHOLD = Decimal(80)
EXCEEDED_THRESHOLD = Decimal(100)


class UserRole(str, Enum):
    """Access level of a roster member."""
    USER = "user"
    ADMIN = "admin"


class BudgetTier(str, Enum):
    """
    Classification of expense against budget.

    UNSET when no budget is defined; otherwise fixed 80% / 100% cut-offs.
    """
    UNSET = "unset"
    NORMAL = "normal"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class InvalidBudget(LedgerError):
    """Budget must be a non-negative number."""

    kind = ErrorKind.INVALID_BUDGET


class InvalidCategory(LedgerError):
    """Category names cannot be empty."""

    kind = ErrorKind.INVALID_CATEGORY


class InvalidUserRecord(LedgerError):
    """A persisted user record could not be rebuilt."""

    kind = ErrorKind.MALFORMED_RECORD


def _as_decimal(value: Any) -> Decimal:
    """Coerce a number or numeric string to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    return Decimal(str(value).strip())


class BudgetStatus(BaseModel):
    """
    Result of classifying an expense total against a budget.

    percentage is capped at 100 for display; ratio keeps the real value.
    Both are None when no budget is set.
    """

    tier: BudgetTier
    percentage: Optional[Decimal] = Field(
        default=None,
        description="Expense as a percentage of budget, capped at 100"
    )
    ratio: Optional[Decimal] = Field(
        default=None,
        description="Uncapped expense percentage"
    )


class UserSummary(BaseModel):
    """Identity fields safe to hand to the view layer."""

    id: int
    name: str
    email: str
    role: UserRole


class User(BaseModel):
    """
    A registered member of the roster.

    Mutations happen only through add_transaction, set_budget and
    add_category. None of them touch storage; persisting a changed user
    is the session authority's job.
    """

    id: int = Field(
        ...,
        description="Unique across the roster"
    )
    name: str
    email: str = Field(
        ...,
        description="Unique across the roster, compared case-sensitively"
    )
    password: str = Field(
        ...,
        description="Opaque credential, compared by exact equality"
    )
    role: UserRole = Field(default=UserRole.USER)
    budget: Decimal = Field(
        default=Decimal(0),
        ge=0,
        description="Monthly budget; 0 means no budget set"
    )
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    transactions: list[Transaction] = Field(default_factory=list)

    @field_validator("categories")
    @classmethod
    def default_and_dedupe_categories(cls, v: list[str]) -> list[str]:
        """Substitute the default vocabulary when empty; drop repeats, keep order."""
        if not v:
            return list(DEFAULT_CATEGORIES)
        return list(dict.fromkeys(v))

    # -------------------------------------------------------------------------
    # Derived aggregates
    # -------------------------------------------------------------------------

    def balance(self) -> Decimal:
        """Sum of income minus sum of expense, in any insertion order."""
        return sum(
            (t.signed_amount() for t in self.transactions),
            Decimal(0),
        )

    def total_income(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.is_income),
            Decimal(0),
        )

    def total_expense(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.is_expense),
            Decimal(0),
        )

    def budget_utilization(self) -> Optional[Decimal]:
        """Expense divided by budget, or None when no budget is set."""
        if self.budget <= 0:
            return None
        return self.total_expense() / self.budget

    def is_over_budget(self) -> bool:
        """Strictly more expense than budget (admin views and CSV export)."""
        return self.budget > 0 and self.total_expense() > self.budget

    def budget_status(self, total_expense: Any) -> BudgetStatus:
        """
        Classify an expense total against the budget.

        The expense total is supplied by the caller so it can choose an
        all-time or filtered basis; dashboards use all-time expense.

        Tiers: normal below 80%, warning from 80% up to 100%, exceeded
        at 100% or more. Unset when the budget is 0.
        """
        if self.budget <= 0:
            return BudgetStatus(tier=BudgetTier.UNSET)

        ratio = _as_decimal(total_expense) / self.budget * 100
        percentage = min(ratio, EXCEEDED_THRESHOLD)

        if percentage >= EXCEEDED_THRESHOLD:
            tier = BudgetTier.EXCEEDED
        elif percentage >= WARNING_THRESHOLD:
            tier = BudgetTier.WARNING
        else:
            tier = BudgetTier.NORMAL

        return BudgetStatus(tier=tier, percentage=percentage, ratio=ratio)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(self, transaction: Transaction) -> None:
        """Append to the ledger. Duplicate ids are a caller error, not checked."""
        self.transactions.append(transaction)

    def next_transaction_id(self) -> int:
        """Fresh id unique within this user's ledger."""
        return generate_record_id(t.id for t in self.transactions)

    def set_budget(self, amount: Any) -> None:
        """
        Replace the monthly budget.

        Raises:
            InvalidBudget: amount is negative, non-numeric or not finite.
        """
        try:
            value = _as_decimal(amount)
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidBudget(f"Budget must be a number, got {amount!r}")

        if not value.is_finite() or value < 0:
            raise InvalidBudget(f"Budget must be zero or positive, got {amount!r}")

        self.budget = value

    def add_category(self, name: str) -> None:
        """
        Add a category name if it is not already present.

        Raises:
            InvalidCategory: name is empty or whitespace only.
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidCategory("Category name cannot be empty")
        if cleaned not in self.categories:
            self.categories.append(cleaned)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @classmethod
    def from_data(cls, record: dict) -> "User":
        """
        Rebuild a user from a persisted record.

        Nested transactions go through Transaction validation, so amounts
        stored as strings come back as Decimal.
        """
        if not isinstance(record, dict):
            raise InvalidUserRecord(f"User record must be an object, got {type(record).__name__}")
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            raise InvalidUserRecord(f"Invalid user record: {e}") from e

    def to_data(self) -> dict:
        """Convert to a JSON-serializable record."""
        return self.model_dump(mode="json")

    def summary(self) -> UserSummary:
        return UserSummary(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
