"""API version 1 routes."""

from fastapi import APIRouter

from finance_tracker.api.v1 import categories, migration, transactions

router = APIRouter(prefix="/api/v1")

router.include_router(categories.router)
router.include_router(transactions.router)
router.include_router(migration.router)
