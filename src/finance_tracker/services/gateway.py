"""Persistence gateway used by migration and sync.

The migration core only talks to a `PersistenceGateway`. `DatabaseGateway`
implements it on top of the SQLAlchemy repositories, opening a fresh session
per call so independent reads can run concurrently.
"""

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finance_tracker.core.exceptions import PersistenceError
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.repositories.category import CategoryRepository
from finance_tracker.repositories.transaction import TransactionRepository
from finance_tracker.schemas.category import CategoryCreate, CategoryResponse
from finance_tracker.schemas.transaction import TransactionCreate, TransactionResponse

logger = logging.getLogger(__name__)


class PersistenceGateway(Protocol):
    """Remote store the migration reads from and bulk-inserts into.

    Every method raises `PersistenceError` on failure.
    """

    async def list_categories(self) -> list[CategoryResponse]: ...

    async def list_transactions(self) -> list[TransactionResponse]: ...

    async def bulk_insert_categories(
        self, categories: list[CategoryCreate]
    ) -> list[CategoryResponse]: ...

    async def bulk_insert_transactions(
        self, transactions: list[TransactionCreate]
    ) -> list[TransactionResponse]: ...


class DatabaseGateway:
    """`PersistenceGateway` backed by the application database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_categories(self) -> list[CategoryResponse]:
        try:
            async with self.session_factory() as session:
                categories = await CategoryRepository(session).get_all()
                return [CategoryResponse.model_validate(c) for c in categories]
        except SQLAlchemyError as e:
            raise self._wrap("list_categories", e) from e

    async def list_transactions(self) -> list[TransactionResponse]:
        try:
            async with self.session_factory() as session:
                transactions = await TransactionRepository(session).get_all()
                return [TransactionResponse.model_validate(t) for t in transactions]
        except SQLAlchemyError as e:
            raise self._wrap("list_transactions", e) from e

    async def bulk_insert_categories(
        self, categories: list[CategoryCreate]
    ) -> list[CategoryResponse]:
        if not categories:
            return []
        try:
            async with self.session_factory() as session:
                created = await CategoryRepository(session).bulk_create(
                    [Category(**c.model_dump()) for c in categories]
                )
                return [CategoryResponse.model_validate(c) for c in created]
        except SQLAlchemyError as e:
            raise self._wrap("bulk_insert_categories", e) from e

    async def bulk_insert_transactions(
        self, transactions: list[TransactionCreate]
    ) -> list[TransactionResponse]:
        if not transactions:
            return []
        try:
            async with self.session_factory() as session:
                repo = TransactionRepository(session)
                created = await repo.bulk_create(
                    [Transaction(**t.model_dump()) for t in transactions]
                )
                reloaded = await repo.get_by_ids([t.id for t in created])
                return [TransactionResponse.model_validate(t) for t in reloaded]
        except SQLAlchemyError as e:
            raise self._wrap("bulk_insert_transactions", e) from e

    @staticmethod
    def _wrap(operation: str, exc: SQLAlchemyError) -> PersistenceError:
        # Do not log str(exc): it can include SQL + bound parameters.
        logger.error(
            f"Persistence operation failed: {operation}",
            extra={"error_code": "DB_001"},
        )
        return PersistenceError(
            "DB_001",
            details={"operation": operation, "error_type": type(exc).__name__},
        )
