"""Local-to-cloud migration and read sync.

This module orchestrates a one-shot migration of a local snapshot:
1. Read the local snapshot
2. Fetch remote categories
3. Reconcile categories (create the missing ones)
4. Remap transactions onto remote category ids
5. Bulk import the remapped transactions
6. Report a MigrationResult

Steps run strictly in sequence. There are no retries; a failed attempt must
be re-run from the top by the caller. Categories created in step 3 are not
rolled back when step 5 fails.
"""

import asyncio
import logging
from enum import Enum

from finance_tracker.core.errors import get_error, get_user_message
from finance_tracker.core.exceptions import (
    CategoryCreateError,
    FetchError,
    FinanceTrackerError,
    PersistenceError,
    TransactionCreateError,
)
from finance_tracker.schemas.migration import CloudSyncResult, MigrationResult
from finance_tracker.services.gateway import PersistenceGateway
from finance_tracker.services.reconciliation import reconcile_categories, remap_transactions
from finance_tracker.services.snapshot import SnapshotSource

logger = logging.getLogger(__name__)


class MigrationState(str, Enum):
    NOT_STARTED = "not_started"
    READING_SNAPSHOT = "reading_snapshot"
    RECONCILING_CATEGORIES = "reconciling_categories"
    REMAPPING_TRANSACTIONS = "remapping_transactions"
    IMPORTING = "importing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _error_message(exc: Exception) -> tuple[str, str]:
    """User-facing message and catalog code for a migration failure.

    Unexpected exceptions map to SYS_001; their text stays in the logs.
    """
    error_code = exc.error_code if isinstance(exc, FinanceTrackerError) else "SYS_001"
    return get_error(error_code)["user_message"], error_code


class MigrationService:
    """Moves a local snapshot into the remote store.

    One instance runs one migration attempt; `state` tracks its progress.
    """

    def __init__(self, gateway: PersistenceGateway, snapshot: SnapshotSource):
        self.gateway = gateway
        self.snapshot = snapshot
        self.state = MigrationState.NOT_STARTED
        self.categories_migrated = 0
        self.warnings: list[str] = []

    def _transition(self, state: MigrationState) -> None:
        logger.debug(f"Migration state {self.state.value} -> {state.value}")
        self.state = state

    async def migrate(self) -> MigrationResult:
        """Run the migration and report the outcome.

        Never raises: every failure is converted into an unsuccessful
        MigrationResult. `categories_migrated` counts categories actually
        committed, including when a later step failed.

        Returns:
            MigrationResult with migrated counts or the error message
        """
        try:
            self._transition(MigrationState.READING_SNAPSHOT)
            local_categories = self.snapshot.read_local_categories()
            local_transactions = self.snapshot.read_local_transactions()
            logger.info(
                f"Migrating {len(local_categories)} categories and "
                f"{len(local_transactions)} transactions"
            )

            self._transition(MigrationState.RECONCILING_CATEGORIES)
            try:
                remote_categories = await self.gateway.list_categories()
            except PersistenceError as e:
                raise FetchError("SYNC_001", details=e.details) from e

            try:
                reconciliation = await reconcile_categories(
                    self.gateway, remote_categories, local_categories
                )
            except PersistenceError as e:
                raise CategoryCreateError("SYNC_002", details=e.details) from e
            self.categories_migrated = len(reconciliation.created)
            self.warnings.extend(reconciliation.skipped)

            self._transition(MigrationState.REMAPPING_TRANSACTIONS)
            remap = remap_transactions(
                local_transactions, reconciliation.category_map, local_categories
            )

            self._transition(MigrationState.IMPORTING)
            migrated = []
            if remap.staged:
                try:
                    migrated = await self.gateway.bulk_insert_transactions(remap.staged)
                except PersistenceError as e:
                    raise TransactionCreateError("SYNC_003", details=e.details) from e

        except Exception as e:
            failed_at = self.state
            self._transition(MigrationState.FAILED)
            message, error_code = _error_message(e)
            logger.error(
                f"Error migrating data: {message}",
                extra={
                    "error_code": error_code,
                    "state": failed_at.value,
                    "categories_migrated": self.categories_migrated,
                    "error_type": type(e).__name__,
                },
                exc_info=not isinstance(e, FinanceTrackerError),
            )
            return MigrationResult(
                success=False,
                categories_migrated=self.categories_migrated,
                transactions_migrated=0,
                warnings=self.warnings,
                error=message,
                error_code=error_code,
            )

        self._transition(MigrationState.SUCCEEDED)
        result = MigrationResult(
            success=True,
            categories_migrated=self.categories_migrated,
            transactions_migrated=len(migrated),
            transactions_skipped=len(remap.unresolved),
            warnings=self.warnings + [u.reason for u in remap.unresolved],
        )
        logger.info(
            "Migration completed",
            extra={
                "categories_migrated": result.categories_migrated,
                "transactions_migrated": result.transactions_migrated,
                "transactions_skipped": result.transactions_skipped,
            },
        )
        return result


async def sync_from_cloud(gateway: PersistenceGateway) -> CloudSyncResult:
    """Fetch remote categories and transactions concurrently.

    Returns:
        CloudSyncResult with both collections, or only an error message
    """
    try:
        categories, transactions = await asyncio.gather(
            gateway.list_categories(),
            gateway.list_transactions(),
        )
    except FinanceTrackerError:
        message = get_user_message("SYNC_001")
        logger.error(f"Error syncing from cloud: {message}", extra={"error_code": "SYNC_001"})
        return CloudSyncResult(error=message)

    return CloudSyncResult(categories=categories, transactions=transactions)
