"""Database models."""

from finance_tracker.models.base import Base, BaseModel
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction

__all__ = ["Base", "BaseModel", "Category", "Transaction"]
