"""
Command-line migration of an exported local storage snapshot.

Usage:
    finance-tracker-migrate --snapshot local-storage.json [--backup] [--clear]

Reads the snapshot, migrates it into the configured database and prints the
MigrationResult as JSON. With --clear the snapshot is emptied and marked as
migrated, but only when the migration succeeded.
"""

import argparse
import asyncio
import logging
import sys

from finance_tracker.config import settings
from finance_tracker.core.errors import get_user_message
from finance_tracker.core.exceptions import SnapshotError
from finance_tracker.core.logging import setup_logging
from finance_tracker.schemas.migration import MigrationResult
from finance_tracker.services.gateway import DatabaseGateway, PersistenceGateway
from finance_tracker.services.migration import MigrationService
from finance_tracker.services.snapshot import LocalSnapshotStore

logger = logging.getLogger(__name__)


async def run(
    store: LocalSnapshotStore,
    gateway: PersistenceGateway,
    backup_dir: str | None = None,
    clear: bool = False,
    force: bool = False,
) -> MigrationResult:
    """Migrate one snapshot store through the given gateway."""
    try:
        if store.is_migration_completed() and not force:
            logger.info("Local snapshot already migrated; use --force to run again")
            return MigrationResult(success=True)
        status = store.check_for_local_data()
    except SnapshotError as e:
        logger.error(f"Local snapshot unreadable: {store.path}", extra={"error_code": e.error_code})
        return MigrationResult(
            success=False, error=get_user_message(e.error_code), error_code=e.error_code
        )
    if not status.has_data:
        logger.info("No local data to migrate")
        return MigrationResult(success=True)

    if backup_dir:
        store.backup(backup_dir)

    result = await MigrationService(gateway, store).migrate()

    if result.success and clear:
        store.clear_local_snapshot()
        store.mark_migration_completed()
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate local finance tracker data to the database")
    parser.add_argument("--snapshot", default=settings.snapshot_path, help="Local storage JSON export")
    parser.add_argument("--backup", action="store_true", help="Write a JSON backup before migrating")
    parser.add_argument("--backup-dir", default=settings.backup_dir, help="Directory for backups")
    parser.add_argument("--clear", action="store_true", help="Clear the snapshot after a successful migration")
    parser.add_argument("--force", action="store_true", help="Migrate even if already marked as migrated")

    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    # Imported here so --help works without a database driver configured.
    from finance_tracker.db.session import AsyncSessionLocal

    result = asyncio.run(
        run(
            LocalSnapshotStore(args.snapshot),
            DatabaseGateway(AsyncSessionLocal),
            backup_dir=args.backup_dir if args.backup else None,
            clear=args.clear,
            force=args.force,
        )
    )
    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
