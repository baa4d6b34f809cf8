"""Category repository with (type, name) lookups."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.models.category import Category
from finance_tracker.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_all(self, type: str | None = None) -> list[Category]:
        """Get all categories ordered by type, then name."""
        query = select(Category).order_by(Category.type, Category.name)
        if type is not None:
            query = query.where(Category.type == type)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_type_and_name(self, type: str, name: str) -> Category | None:
        """Find the category with this (type, name) key."""
        result = await self.db.execute(
            select(Category).where(Category.type == type, Category.name == name)
        )
        return result.scalar_one_or_none()
