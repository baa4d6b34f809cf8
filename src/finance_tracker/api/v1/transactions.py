"""Transaction endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from finance_tracker.api.deps import get_transaction_service
from finance_tracker.schemas.transaction import (
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionSummary,
    TransactionUpdate,
)
from finance_tracker.services.transaction import TransactionService, money_meta

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResult, summary="List transactions")
async def list_transactions(
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    """List all transactions, newest first, each with its category."""
    transactions = await service.list_transactions()
    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        total=len(transactions),
        money=money_meta(),
    )


@router.get("/summary", response_model=TransactionSummary, summary="Dashboard totals")
async def get_summary(
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionSummary:
    """
    Totals and breakdowns for the dashboard.

    All amounts are in minor units; see `money` for the currency.
    """
    return await service.get_summary()


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a transaction",
)
async def create_transaction(
    payload: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.create_transaction(payload)
    return TransactionResponse.model_validate(transaction)


@router.post(
    "/batch",
    response_model=list[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create several transactions at once",
)
async def batch_create_transactions(
    payload: list[TransactionCreate],
    service: TransactionService = Depends(get_transaction_service),
) -> list[TransactionResponse]:
    transactions = await service.bulk_create_transactions(payload)
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.get("/{transaction_id}", response_model=TransactionResponse, summary="Get a transaction")
async def get_transaction(
    transaction_id: UUID,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.get_transaction(transaction_id)
    return TransactionResponse.model_validate(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse, summary="Update a transaction")
async def update_transaction(
    transaction_id: UUID,
    payload: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.update_transaction(transaction_id, payload)
    return TransactionResponse.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: UUID,
    service: TransactionService = Depends(get_transaction_service),
) -> Response:
    await service.delete_transaction(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
