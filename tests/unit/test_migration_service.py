"""Unit tests for MigrationService and sync_from_cloud."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from finance_tracker.core.errors import get_user_message
from finance_tracker.core.exceptions import PersistenceError, SnapshotError
from finance_tracker.schemas.category import CategoryResponse, CategorySummary
from finance_tracker.schemas.migration import LocalCategory, LocalSnapshot, LocalTransaction
from finance_tracker.schemas.transaction import TransactionResponse
from finance_tracker.services.category import DEFAULT_CATEGORIES
from finance_tracker.services.migration import MigrationService, MigrationState, sync_from_cloud
from finance_tracker.services.snapshot import StaticSnapshotSource


class InMemoryGateway:
    """Append-only remote store with switchable failures."""

    def __init__(self, categories=None):
        self.categories: list[CategoryResponse] = list(categories or [])
        self.transactions: list[TransactionResponse] = []
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise PersistenceError("DB_001", details={"operation": operation})

    async def list_categories(self):
        self._check("list_categories")
        return list(self.categories)

    async def list_transactions(self):
        self._check("list_transactions")
        return list(self.transactions)

    async def bulk_insert_categories(self, categories):
        self._check("bulk_insert_categories")
        created = [
            CategoryResponse(id=uuid4(), **c.model_dump()) for c in categories
        ]
        self.categories.extend(created)
        return created

    async def bulk_insert_transactions(self, transactions):
        self._check("bulk_insert_transactions")
        by_id = {c.id: c for c in self.categories}
        created = [
            TransactionResponse(
                id=uuid4(),
                category=CategorySummary.model_validate(by_id[t.category_id]),
                **t.model_dump(),
            )
            for t in transactions
        ]
        self.transactions.extend(created)
        return created


class BrokenSnapshot:
    def read_local_categories(self):
        raise SnapshotError("SNAP_001")

    def read_local_transactions(self):
        return []

    def clear_local_snapshot(self):
        pass


def snapshot(categories=(), transactions=()) -> StaticSnapshotSource:
    return StaticSnapshotSource(
        LocalSnapshot(categories=list(categories), transactions=list(transactions))
    )


def tx(category: str, type: str = "expense", amount: str = "12.00", **kwargs) -> LocalTransaction:
    return LocalTransaction(
        type=type, amount=Decimal(amount), date=date(2025, 1, 10), category=category, **kwargs
    )


@pytest.fixture
def food_snapshot():
    return snapshot(
        categories=[LocalCategory(id="food", type="expense", name="Food")],
        transactions=[tx("Food"), tx("food", amount="3.40")],
    )


class TestMigrate:
    async def test_successful_migration(self, food_snapshot):
        gateway = InMemoryGateway()
        service = MigrationService(gateway, food_snapshot)

        result = await service.migrate()

        assert result.success is True
        assert result.categories_migrated == 1
        assert result.transactions_migrated == 2
        assert result.transactions_skipped == 0
        assert result.error is None
        assert service.state == MigrationState.SUCCEEDED

        food = gateway.categories[0]
        assert food.name == "Food"
        assert food.is_default is False
        assert {t.category_id for t in gateway.transactions} == {food.id}
        assert sorted(t.amount for t in gateway.transactions) == [340, 1200]

    async def test_steps_run_in_order(self, food_snapshot):
        gateway = InMemoryGateway()

        await MigrationService(gateway, food_snapshot).migrate()

        assert gateway.calls == [
            "list_categories",
            "bulk_insert_categories",
            "bulk_insert_transactions",
        ]

    async def test_reuses_existing_remote_category(self, food_snapshot):
        existing = CategoryResponse(id=uuid4(), type="expense", name="Food", is_default=True)
        gateway = InMemoryGateway([existing])

        result = await MigrationService(gateway, food_snapshot).migrate()

        assert result.success is True
        assert result.categories_migrated == 0
        assert "bulk_insert_categories" not in gateway.calls
        assert {t.category_id for t in gateway.transactions} == {existing.id}

    async def test_unknown_category_is_skipped_not_fatal(self):
        """A single unresolvable transaction still yields a successful result."""
        gateway = InMemoryGateway()

        result = await MigrationService(gateway, snapshot(transactions=[tx("Unknown")])).migrate()

        assert result.success is True
        assert result.transactions_migrated == 0
        assert result.transactions_skipped == 1
        assert len(result.warnings) == 1
        assert "bulk_insert_transactions" not in gateway.calls

    async def test_transaction_import_failure_reports_committed_categories(self, food_snapshot):
        gateway = InMemoryGateway()
        gateway.fail_on.add("bulk_insert_transactions")
        service = MigrationService(gateway, food_snapshot)

        result = await service.migrate()

        assert result.success is False
        assert result.error_code == "SYNC_003"
        assert result.error == get_user_message("SYNC_003")
        assert result.categories_migrated == 1
        assert result.transactions_migrated == 0
        assert service.state == MigrationState.FAILED
        # No compensating rollback: the category stays remotely.
        assert [c.name for c in gateway.categories] == ["Food"]

    async def test_fetch_failure_aborts_immediately(self, food_snapshot):
        gateway = InMemoryGateway()
        gateway.fail_on.add("list_categories")

        result = await MigrationService(gateway, food_snapshot).migrate()

        assert result.success is False
        assert result.error_code == "SYNC_001"
        assert result.categories_migrated == 0
        assert gateway.calls == ["list_categories"]

    async def test_category_create_failure_aborts(self, food_snapshot):
        gateway = InMemoryGateway()
        gateway.fail_on.add("bulk_insert_categories")

        result = await MigrationService(gateway, food_snapshot).migrate()

        assert result.success is False
        assert result.error_code == "SYNC_002"
        assert result.categories_migrated == 0
        assert result.transactions_migrated == 0
        assert "bulk_insert_transactions" not in gateway.calls

    async def test_unreadable_snapshot_fails(self):
        gateway = InMemoryGateway()

        result = await MigrationService(gateway, BrokenSnapshot()).migrate()

        assert result.success is False
        assert result.error_code == "SNAP_001"
        assert gateway.calls == []

    async def test_unexpected_error_becomes_failed_result(self, food_snapshot):
        gateway = InMemoryGateway()

        async def boom():
            raise RuntimeError("connection reset")

        gateway.list_categories = boom

        result = await MigrationService(gateway, food_snapshot).migrate()

        assert result.success is False
        assert result.error_code == "SYS_001"
        assert result.error == get_user_message("SYS_001")
        assert "connection reset" not in result.error

    async def test_rerun_does_not_duplicate_categories(self, food_snapshot):
        gateway = InMemoryGateway()

        first = await MigrationService(gateway, food_snapshot).migrate()
        second = await MigrationService(gateway, food_snapshot).migrate()

        assert first.categories_migrated == 1
        assert second.categories_migrated == 0
        assert len(gateway.categories) == 1
        # Transactions are imported again; there is no transaction-level dedup.
        assert len(gateway.transactions) == 4

    async def test_padded_local_name_round_trips(self):
        source = snapshot(
            categories=[LocalCategory(id="custom-1", type="expense", name="Food ")],
            transactions=[tx("custom-1", categoryName="Food ")],
        )
        gateway = InMemoryGateway()

        result = await MigrationService(gateway, source).migrate()

        assert result.success is True
        assert result.categories_migrated == 1
        assert result.transactions_migrated == 1
        assert result.warnings == []
        assert [c.name for c in gateway.categories] == ["Food"]

    async def test_padded_local_name_reuses_remote_category(self):
        existing = CategoryResponse(id=uuid4(), type="expense", name="Food")
        gateway = InMemoryGateway([existing])
        source = snapshot(
            categories=[LocalCategory(id="custom-1", type="expense", name="Food ")],
            transactions=[tx("custom-1")],
        )

        result = await MigrationService(gateway, source).migrate()

        assert result.success is True
        assert result.categories_migrated == 0
        assert [c.name for c in gateway.categories] == ["Food"]
        assert {t.category_id for t in gateway.transactions} == {existing.id}

    async def test_blank_local_category_skipped_with_warning(self):
        source = snapshot(
            categories=[
                LocalCategory(id="blank", type="expense", name="   "),
                LocalCategory(id="golf", type="expense", name="Golf"),
            ],
            transactions=[tx("blank"), tx("golf")],
        )
        gateway = InMemoryGateway()

        result = await MigrationService(gateway, source).migrate()

        assert result.success is True
        assert result.categories_migrated == 1
        assert result.transactions_migrated == 1
        assert result.transactions_skipped == 1
        assert len(result.warnings) == 2
        assert result.warnings[0].startswith("Invalid local category skipped")

    async def test_resolves_against_seeded_defaults(self):
        defaults = [
            CategoryResponse(id=uuid4(), type=type, name=name, description=description, is_default=True)
            for type, entries in DEFAULT_CATEGORIES.items()
            for name, description in entries
        ]
        gateway = InMemoryGateway(defaults)
        source = snapshot(
            transactions=[
                tx("suministros", categoryName="Suministros"),
                tx("golf", categoryName="Golf"),
                tx("paycheck", type="income", amount="2000", categoryName="Paycheck"),
            ]
        )

        result = await MigrationService(gateway, source).migrate()

        assert result.success is True
        assert result.categories_migrated == 0
        assert result.transactions_migrated == 3
        assert result.transactions_skipped == 0
        by_id = {c.id: c.name for c in defaults}
        assert sorted(by_id[t.category_id] for t in gateway.transactions) == [
            "Golf",
            "Paycheck",
            "Suministros",
        ]

    async def test_does_not_clear_snapshot(self, food_snapshot):
        await MigrationService(InMemoryGateway(), food_snapshot).migrate()

        assert len(food_snapshot.read_local_transactions()) == 2


class TestSyncFromCloud:
    async def test_returns_both_collections(self):
        food = CategoryResponse(id=uuid4(), type="expense", name="Food")
        gateway = InMemoryGateway([food])

        result = await sync_from_cloud(gateway)

        assert result.error is None
        assert result.categories == [food]
        assert result.transactions == []
        assert set(gateway.calls) == {"list_categories", "list_transactions"}

    async def test_error_returns_message_only(self):
        gateway = InMemoryGateway()
        gateway.fail_on.add("list_transactions")

        result = await sync_from_cloud(gateway)

        assert result.categories is None
        assert result.transactions is None
        assert result.error == get_user_message("SYNC_001")
