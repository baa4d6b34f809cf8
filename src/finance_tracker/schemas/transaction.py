"""Pydantic schemas for transaction requests, responses and summaries."""

import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker.config import settings
from finance_tracker.schemas.category import CategorySummary, EntryType


def to_minor_units(amount: Decimal, minor_unit: int | None = None) -> int:
    """Convert a decimal amount to integer minor units (e.g., 12.34 -> 1234)."""
    places = settings.currency_minor_unit if minor_unit is None else minor_unit
    scaled = (amount * (Decimal(10) ** places)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(scaled)


class MoneyMeta(BaseModel):
    """Metadata describing how monetary amounts are represented."""

    currency: str = Field(description="ISO currency code (e.g., EUR)")
    minor_unit: int = Field(description="Number of decimal places for the currency")


class TransactionCreate(BaseModel):
    """New transaction referencing a remote category by id.

    Amounts are in minor units (cents).
    """

    type: EntryType
    amount: int = Field(ge=0, description="Amount in minor units")
    date: datetime.date
    category_id: UUID
    comment: str | None = None

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @classmethod
    def from_decimal(
        cls,
        type: EntryType,
        amount_decimal: Decimal,
        date: datetime.date,
        category_id: UUID,
        comment: str | None = None,
    ) -> "TransactionCreate":
        """Create from a decimal amount (e.g., 12.34 -> 1234 cents)."""
        return cls(
            type=type,
            amount=to_minor_units(amount_decimal),
            date=date,
            category_id=category_id,
            comment=comment,
        )


class TransactionUpdate(BaseModel):
    """Partial transaction update. Only fields that are set are applied."""

    type: EntryType | None = None
    amount: int | None = Field(None, ge=0)
    date: datetime.date | None = None
    category_id: UUID | None = None
    comment: str | None = None


class TransactionResponse(BaseModel):
    """Transaction with its embedded category summary."""

    id: UUID
    type: EntryType
    amount: int = Field(description="Amount in minor units")
    date: datetime.date
    category_id: UUID
    category: CategorySummary | None = None
    comment: str | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TransactionListResult(BaseModel):
    """Transactions, newest first."""

    transactions: list[TransactionResponse]
    total: int
    money: MoneyMeta


class CategoryMonthlyBreakdown(BaseModel):
    """Per-month totals for one category plus the average of past months."""

    category: str
    months: dict[str, int] = Field(description="Totals keyed by YYYY-MM (minor units)")
    average: int = Field(description="Average of non-zero months up to the current one (minor units)")


class TransactionSummary(BaseModel):
    """Dashboard totals, all amounts in minor units."""

    total_income: int
    total_expense: int
    balance: int
    expense_by_category: dict[str, int]
    monthly_breakdown: list[CategoryMonthlyBreakdown]
    money: MoneyMeta
