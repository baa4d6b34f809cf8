"""Pydantic schemas for category requests and responses."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

EntryType = Literal["income", "expense"]


def normalize_category_name(name: str) -> str:
    """Canonical form of a category name, as stored and used for lookups."""
    return name.strip()


class CategoryCreate(BaseModel):
    """New category, as sent to a bulk or single insert."""

    type: EntryType = Field(description="'income' or 'expense'")
    name: str = Field(min_length=1, max_length=100, description="Category name (unique per type)")
    description: str | None = Field(None, max_length=255, description="Optional description")
    is_default: bool = Field(False, description="Built-in category flag")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        name = normalize_category_name(v)
        if not name:
            raise ValueError("Category name cannot be empty")
        return name

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: str | None) -> str | None:
        return v or None


class CategoryUpdate(BaseModel):
    """Partial category update; only name and description are editable."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)


class CategoryResponse(BaseModel):
    """Category data for API responses."""

    id: UUID
    type: EntryType
    name: str
    description: str | None = None
    is_default: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CategorySummary(BaseModel):
    """Category fields embedded in a transaction response."""

    id: UUID
    name: str
    type: EntryType

    model_config = ConfigDict(from_attributes=True)


class CategoryListResult(BaseModel):
    """List of categories ordered by type, then name."""

    categories: list[CategoryResponse]
    total: int = Field(description="Total number of categories")


class CategoryExistsResult(BaseModel):
    """Result of a (type, name) existence check."""

    exists: bool
    category_id: UUID | None = None
