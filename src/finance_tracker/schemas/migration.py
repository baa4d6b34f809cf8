"""Schemas for local snapshot records and migration results.

Local records come from browser local storage and keep its camelCase keys
(`categoryName`, `isDefault`); they reference categories by name or local
id, never by remote UUID.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.schemas.category import CategoryResponse, EntryType
from finance_tracker.schemas.transaction import TransactionResponse


class LocalCategory(BaseModel):
    """Custom category as stored locally."""

    id: str | int | None = None
    type: EntryType
    name: str
    description: str | None = None
    is_default: bool = Field(False, alias="isDefault")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LocalTransaction(BaseModel):
    """Transaction as stored locally; `category` holds a name or a local category id."""

    id: str | int | None = None
    type: EntryType
    amount: Decimal = Field(ge=0)
    date: datetime.date
    category: str
    category_name: str | None = Field(None, alias="categoryName")
    comment: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LocalSnapshot(BaseModel):
    """Both local collections, as posted by the browser or read from disk."""

    categories: list[LocalCategory] = Field(default_factory=list)
    transactions: list[LocalTransaction] = Field(default_factory=list)


class LocalDataStatus(BaseModel):
    """Whether any local data exists, with per-collection counts."""

    has_data: bool
    transaction_count: int = 0
    category_count: int = 0


class MigrationResult(BaseModel):
    """Outcome of one migration attempt."""

    success: bool
    categories_migrated: int = 0
    transactions_migrated: int = 0
    transactions_skipped: int = Field(0, description="Transactions dropped for unknown categories")
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
    error_code: str | None = None


class CloudSyncResult(BaseModel):
    """Remote categories and transactions fetched for a read sync."""

    categories: list[CategoryResponse] | None = None
    transactions: list[TransactionResponse] | None = None
    error: str | None = None
