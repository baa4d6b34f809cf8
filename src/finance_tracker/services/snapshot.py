"""Local snapshot sources.

A snapshot is the data a user entered before having a remote account: the
custom categories and transactions the browser kept in local storage.
`LocalSnapshotStore` reads an exported local storage document from disk;
`StaticSnapshotSource` wraps a snapshot already held in memory (e.g. the
body of a migration request).
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from finance_tracker.core.exceptions import SnapshotError
from finance_tracker.schemas.migration import (
    LocalCategory,
    LocalDataStatus,
    LocalSnapshot,
    LocalTransaction,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "finance-tracker-transactions"
CATEGORIES_KEY = "finance-tracker-categories"
MIGRATION_COMPLETED_KEY = "finance-tracker-migration-completed"

_transactions_adapter = TypeAdapter(list[LocalTransaction])
_categories_adapter = TypeAdapter(list[LocalCategory])


class SnapshotSource(Protocol):
    """Read side of a local snapshot, plus the caller-invoked clear."""

    def read_local_transactions(self) -> list[LocalTransaction]: ...

    def read_local_categories(self) -> list[LocalCategory]: ...

    def clear_local_snapshot(self) -> None: ...


def local_data_status(source: SnapshotSource) -> LocalDataStatus:
    """Report whether a snapshot holds any data, without modifying it."""
    transaction_count = len(source.read_local_transactions())
    category_count = len(source.read_local_categories())
    return LocalDataStatus(
        has_data=transaction_count > 0 or category_count > 0,
        transaction_count=transaction_count,
        category_count=category_count,
    )


class StaticSnapshotSource:
    """Snapshot held in memory; clearing empties it."""

    def __init__(self, snapshot: LocalSnapshot):
        self.snapshot = snapshot

    def read_local_transactions(self) -> list[LocalTransaction]:
        return list(self.snapshot.transactions)

    def read_local_categories(self) -> list[LocalCategory]:
        return list(self.snapshot.categories)

    def clear_local_snapshot(self) -> None:
        self.snapshot = LocalSnapshot()


class LocalSnapshotStore:
    """Exported browser local storage kept as a JSON document on disk.

    The document maps storage keys to values. Values are JSON-encoded strings
    as local storage holds them, or already-decoded JSON. A missing file or
    key means no data.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8").strip()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotError(
                "SNAP_001", details={"path": str(self.path), "reason": str(e)}
            ) from e
        if not isinstance(data, dict):
            raise SnapshotError(
                "SNAP_001", details={"path": str(self.path), "reason": "not a JSON object"}
            )
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _read_collection(self, key: str) -> list:
        value = self._load().get(key)
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else []
            except json.JSONDecodeError as e:
                raise SnapshotError("SNAP_001", details={"key": key, "reason": str(e)}) from e
        if not isinstance(value, list):
            raise SnapshotError("SNAP_001", details={"key": key, "reason": "not a list"})
        return value

    def read_local_transactions(self) -> list[LocalTransaction]:
        try:
            return _transactions_adapter.validate_python(self._read_collection(TRANSACTIONS_KEY))
        except ValidationError as e:
            raise SnapshotError(
                "SNAP_001", details={"key": TRANSACTIONS_KEY, "errors": e.error_count()}
            ) from e

    def read_local_categories(self) -> list[LocalCategory]:
        try:
            return _categories_adapter.validate_python(self._read_collection(CATEGORIES_KEY))
        except ValidationError as e:
            raise SnapshotError(
                "SNAP_001", details={"key": CATEGORIES_KEY, "errors": e.error_count()}
            ) from e

    def read_snapshot(self) -> LocalSnapshot:
        return LocalSnapshot(
            categories=self.read_local_categories(),
            transactions=self.read_local_transactions(),
        )

    def check_for_local_data(self) -> LocalDataStatus:
        return local_data_status(self)

    def clear_local_snapshot(self) -> None:
        """Remove both collections; other keys are left alone."""
        data = self._load()
        if TRANSACTIONS_KEY not in data and CATEGORIES_KEY not in data:
            return
        data.pop(TRANSACTIONS_KEY, None)
        data.pop(CATEGORIES_KEY, None)
        self._save(data)
        logger.info(f"Cleared local snapshot at {self.path}")

    def backup(self, backup_dir: str | Path) -> Path:
        """Write both collections to a timestamped JSON backup file.

        Returns:
            Path of the backup file
        """
        now = datetime.now(timezone.utc)
        backup = {
            "transactions": self._read_collection(TRANSACTIONS_KEY),
            "categories": self._read_collection(CATEGORIES_KEY),
            "timestamp": now.isoformat(),
        }
        target_dir = Path(backup_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"finance-tracker-backup-{int(now.timestamp() * 1000)}.json"
        target.write_text(json.dumps(backup, indent=2), encoding="utf-8")
        logger.info(f"Local snapshot backed up to {target}")
        return target

    def is_migration_completed(self) -> bool:
        return self._load().get(MIGRATION_COMPLETED_KEY) in ("true", True)

    def mark_migration_completed(self) -> None:
        data = self._load()
        data[MIGRATION_COMPLETED_KEY] = "true"
        self._save(data)

    def reset_migration_status(self) -> None:
        data = self._load()
        if data.pop(MIGRATION_COMPLETED_KEY, None) is not None:
            self._save(data)
