"""Transaction repository with listing and aggregation queries."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model; the category is always eager-loaded."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_by_id(self, id: UUID) -> Transaction | None:
        result = await self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.category))
            .where(Transaction.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[Transaction]:
        """Get all transactions, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.category))
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_ids(self, ids: list[UUID]) -> list[Transaction]:
        """Reload transactions with their categories, newest first."""
        if not ids:
            return []
        result = await self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.category))
            .where(Transaction.id.in_(ids))
            .execution_options(populate_existing=True)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_by_category(self, category_id: UUID) -> int:
        """Number of transactions referencing a category."""
        result = await self.db.execute(
            select(func.count(Transaction.id)).where(Transaction.category_id == category_id)
        )
        return int(result.scalar_one())

    async def get_totals_by_type(self) -> dict[str, int]:
        """
        Aggregate total amount per transaction type.
        Returns dict of {type: total_amount}.
        """
        result = await self.db.execute(
            select(Transaction.type, func.sum(Transaction.amount).label("total"))
            .group_by(Transaction.type)
        )
        return {row.type: int(row.total or 0) for row in result}

    async def get_expense_by_category(self) -> dict[str, int]:
        """
        Aggregate expense totals by category name.
        Returns dict of {category_name: total_amount}.
        """
        result = await self.db.execute(
            select(Category.name, func.sum(Transaction.amount).label("total"))
            .join(Category, Transaction.category_id == Category.id)
            .where(Transaction.type == "expense")
            .group_by(Category.name)
        )
        return {row.name: int(row.total or 0) for row in result}
