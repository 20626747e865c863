"""
Core Data Models for Personal Ledger

These models define the strict schemas for every transaction flowing
through the system. They are designed to:
1. Enforce type safety at runtime
2. Keep income/expense classification consistent
3. Be serializable for the remote document store
4. Support the audit trail

DESIGN DECISION: The sign of ``amount`` is the single source of truth.
Negative amounts are expenses, everything else is income. The ``type``
field is a denormalized label that is always rewritten to agree with the
sign, so no derivation can disagree with another about what a record is.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionCategory(str, Enum):
    """
    Supported transaction categories.

    DESIGN DECISION: A fixed set keeps category totals and the statistics
    breakdown comparable across users and months.
    """
    HOUSING = "Housing"
    FOOD = "Food"
    TRANSPORT = "Transport"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    OTHER = "Other"


class TransactionType(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_amount(cls, amount: Decimal) -> "TransactionType":
        """Classify an amount by its sign."""
        return cls.EXPENSE if amount < 0 else cls.INCOME


class DateRange(str, Enum):
    """
    Reporting window for aggregate queries.

    Windows are rolling and end at "now": a Month is the last 30 days,
    not the current calendar month.
    """
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"
    ALL = "All"

    @property
    def window(self) -> Optional[timedelta]:
        """Length of the window, or None when unbounded."""
        return _RANGE_WINDOWS.get(self)

    @classmethod
    def from_str(cls, value: str) -> "DateRange":
        """Coerce arbitrary casing into a valid range."""
        try:
            return cls(value.strip().capitalize())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported date range: {value}") from error


_RANGE_WINDOWS = {
    DateRange.WEEK: timedelta(days=7),
    DateRange.MONTH: timedelta(days=30),
    DateRange.YEAR: timedelta(days=365),
}


def signed_amount(amount: Decimal, transaction_type: TransactionType) -> Decimal:
    """Return ``amount`` with the sign implied by ``transaction_type``."""
    magnitude = abs(amount)
    return -magnitude if transaction_type == TransactionType.EXPENSE else magnitude


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A persisted transaction owned by exactly one user.

    ``id`` is assigned by the remote store and ``date`` by the ledger at
    creation time; neither is ever supplied by the caller.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier assigned by the remote store"
    )
    user_id: str = Field(
        ...,
        min_length=1,
        description="Owning user"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount; negative means money out"
    )
    category: TransactionCategory = Field(
        ...,
        description="Transaction category"
    )
    description: str = Field(
        default="",
        description="Free-text label"
    )
    date: datetime = Field(
        ...,
        description="When the transaction was recorded (UTC)"
    )
    type: TransactionType = Field(
        default=TransactionType.INCOME,
        description="Derived from the sign of amount"
    )

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode='after')
    def derive_type(self) -> 'Transaction':
        """Rewrite the type label so it always agrees with the sign."""
        self.type = TransactionType.from_amount(self.amount)
        return self

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return not self.is_expense

    def to_document(self) -> dict[str, Any]:
        """
        Flatten to the document shape used by the remote store.

        The id is the document key and is not part of the payload.
        """
        return {
            "user_id": self.user_id,
            "amount": str(self.amount),
            "category": self.category.value,
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.type.value,
        }


# =============================================================================
# MUTATION INPUTS
# =============================================================================

class NewTransaction(BaseModel):
    """
    What a caller provides when adding a transaction.

    When ``type`` is given the amount's sign is normalized to it, so an
    entry form can collect a positive amount plus a direction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal
    category: TransactionCategory
    description: str = ""
    type: Optional[TransactionType] = None

    @model_validator(mode='after')
    def apply_type_to_sign(self) -> 'NewTransaction':
        if self.type is not None:
            self.amount = signed_amount(self.amount, self.type)
        self.type = TransactionType.from_amount(self.amount)
        return self

    def build(self, transaction_id: str, user_id: str, recorded_at: datetime) -> Transaction:
        """Create the persisted record once the store has assigned an id."""
        return Transaction(
            id=transaction_id,
            user_id=user_id,
            amount=self.amount,
            category=self.category,
            description=self.description,
            date=recorded_at,
        )


class TransactionUpdate(BaseModel):
    """
    Editable fields of an existing transaction.

    Only fields that are set are changed. Identity, owner and date are
    not editable.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Decimal] = None
    category: Optional[TransactionCategory] = None
    description: Optional[str] = None
    type: Optional[TransactionType] = None

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

    def apply_to(self, transaction: Transaction) -> Transaction:
        """Return a new, validated record with these changes applied."""
        data = transaction.model_dump()
        changes = self.model_dump(exclude_none=True)
        changes.pop("type", None)
        data.update(changes)

        if self.type is not None:
            data["amount"] = signed_amount(data["amount"], self.type)

        return Transaction(**data)


# =============================================================================
# REPORTING MODELS
# =============================================================================

class CategoryBreakdown(BaseModel):
    """Expense total for one category and its share of all expenses."""

    category: TransactionCategory
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Absolute expense total"
    )
    percentage: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of total expenses in the same window"
    )


class PeriodSummary(BaseModel):
    """Income, expenses and balance over one reporting window."""

    label: str = Field(
        ...,
        description="Range name or calendar month (YYYY-MM)"
    )
    income: Decimal = Field(ge=0)
    expenses: Decimal = Field(ge=0)
    balance: Decimal
    transaction_count: int = Field(ge=0)
