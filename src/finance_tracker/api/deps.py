"""FastAPI dependency injection for database access and services."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finance_tracker.db.session import get_db, get_session_factory
from finance_tracker.services.category import CategoryService
from finance_tracker.services.gateway import DatabaseGateway
from finance_tracker.services.transaction import TransactionService


async def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


async def get_transaction_service(db: AsyncSession = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


async def get_gateway(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> DatabaseGateway:
    """
    Get the persistence gateway used by migration and sync.

    Args:
        session_factory: Factory opening one session per gateway call

    Returns:
        DatabaseGateway instance
    """
    return DatabaseGateway(session_factory)
