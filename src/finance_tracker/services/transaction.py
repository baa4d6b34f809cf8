"""Transaction service: CRUD plus dashboard summaries."""
import logging
from collections import defaultdict
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.config import settings
from finance_tracker.core.exceptions import FinanceTrackerError, NotFoundError
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.repositories.category import CategoryRepository
from finance_tracker.repositories.transaction import TransactionRepository
from finance_tracker.schemas.transaction import (
    CategoryMonthlyBreakdown,
    MoneyMeta,
    TransactionCreate,
    TransactionSummary,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)


def money_meta() -> MoneyMeta:
    return MoneyMeta(currency=settings.currency, minor_unit=settings.currency_minor_unit)


def month_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}"


def monthly_breakdown(
    transactions: list[Transaction], today: date | None = None
) -> list[CategoryMonthlyBreakdown]:
    """Expense totals per category and month, with the average of past months.

    The average only covers months up to the current one and skips months
    where the category has no spending.
    """
    current = month_key(today or date.today())
    breakdown: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    months: set[str] = set()

    for txn in transactions:
        if txn.type != "expense":
            continue
        key = month_key(txn.date)
        months.add(key)
        breakdown[txn.category.name][key] += txn.amount

    past_months = sorted(m for m in months if m <= current)
    result = []
    for category in sorted(breakdown):
        per_month = breakdown[category]
        past_values = [per_month[m] for m in past_months if per_month.get(m, 0) > 0]
        average = round(sum(past_values) / len(past_values)) if past_values else 0
        result.append(
            CategoryMonthlyBreakdown(category=category, months=dict(per_month), average=average)
        )
    return result


class TransactionService:
    """Service layer for transaction operations."""

    def __init__(self, db: AsyncSession):
        """Initialize transaction service with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.category_repo = CategoryRepository(db)

    async def _check_category(self, category_id: UUID, type: str) -> Category:
        category = await self.category_repo.get_by_id(category_id)
        if category is None:
            raise NotFoundError("API_001", details={"category_id": str(category_id)})
        if category.type != type:
            raise FinanceTrackerError(
                "API_005",
                details={"category_type": category.type, "transaction_type": type},
                http_status=400,
            )
        return category

    async def list_transactions(self) -> list[Transaction]:
        return await self.transaction_repo.get_all()

    async def get_transaction(self, transaction_id: UUID) -> Transaction:
        transaction = await self.transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError("API_002", details={"transaction_id": str(transaction_id)})
        return transaction

    async def create_transaction(self, data: TransactionCreate) -> Transaction:
        """Create a transaction in an existing category of the same type.

        Raises:
            NotFoundError: If the category does not exist
            FinanceTrackerError: If the category type differs (API_005)
        """
        await self._check_category(data.category_id, data.type)
        created = await self.transaction_repo.create(Transaction(**data.model_dump()))
        return await self.get_transaction(created.id)

    async def bulk_create_transactions(self, items: list[TransactionCreate]) -> list[Transaction]:
        """Insert several transactions in one commit (all-or-nothing)."""
        for category_id, type in {(i.category_id, i.type) for i in items}:
            await self._check_category(category_id, type)
        created = await self.transaction_repo.bulk_create(
            [Transaction(**item.model_dump()) for item in items]
        )
        return await self.transaction_repo.get_by_ids([t.id for t in created])

    async def update_transaction(self, transaction_id: UUID, data: TransactionUpdate) -> Transaction:
        """Apply the fields that are set; a blank comment clears it."""
        transaction = await self.get_transaction(transaction_id)
        changes = data.model_dump(exclude_unset=True)
        if "comment" in changes:
            changes["comment"] = (changes["comment"] or "").strip() or None
        changes = {k: v for k, v in changes.items() if v is not None or k == "comment"}

        if "type" in changes or "category_id" in changes:
            await self._check_category(
                changes.get("category_id", transaction.category_id),
                changes.get("type", transaction.type),
            )

        await self.transaction_repo.update(transaction_id, changes)
        return await self.get_transaction(transaction_id)

    async def delete_transaction(self, transaction_id: UUID) -> None:
        if not await self.transaction_repo.delete(transaction_id):
            raise NotFoundError("API_002", details={"transaction_id": str(transaction_id)})

    async def get_summary(self, today: date | None = None) -> TransactionSummary:
        """Totals, expense breakdown by category and monthly breakdown."""
        totals = await self.transaction_repo.get_totals_by_type()
        income = totals.get("income", 0)
        expense = totals.get("expense", 0)
        transactions = await self.transaction_repo.get_all()
        return TransactionSummary(
            total_income=income,
            total_expense=expense,
            balance=income - expense,
            expense_by_category=await self.transaction_repo.get_expense_by_category(),
            monthly_breakdown=monthly_breakdown(transactions, today),
            money=money_meta(),
        )
