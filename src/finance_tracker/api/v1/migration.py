"""Local data migration and cloud sync endpoints.

The browser posts its local storage snapshot; the server reconciles it with
the stored categories and imports the transactions. Clearing local storage
after a successful migration is left to the client.
"""

from fastapi import APIRouter, Depends

from finance_tracker.api.deps import get_gateway
from finance_tracker.schemas.migration import (
    CloudSyncResult,
    LocalDataStatus,
    LocalSnapshot,
    MigrationResult,
)
from finance_tracker.services.gateway import DatabaseGateway
from finance_tracker.services.migration import MigrationService, sync_from_cloud
from finance_tracker.services.snapshot import StaticSnapshotSource, local_data_status

router = APIRouter(prefix="/migration", tags=["migration"])


@router.post("/local-data/status", response_model=LocalDataStatus, summary="Inspect a local snapshot")
async def check_local_data(snapshot: LocalSnapshot) -> LocalDataStatus:
    return local_data_status(StaticSnapshotSource(snapshot))


@router.post(
    "",
    response_model=MigrationResult,
    summary="Migrate a local snapshot",
    description="""
    Import locally stored categories and transactions.

    - Categories whose (type, name) already exist are reused, never duplicated
    - Transactions whose category cannot be resolved are skipped and listed in `warnings`
    - Failures are reported in the body (`success: false`), not as HTTP errors
    """,
)
async def migrate_local_data(
    snapshot: LocalSnapshot,
    gateway: DatabaseGateway = Depends(get_gateway),
) -> MigrationResult:
    return await MigrationService(gateway, StaticSnapshotSource(snapshot)).migrate()


@router.get("/sync", response_model=CloudSyncResult, summary="Fetch all remote data")
async def sync(gateway: DatabaseGateway = Depends(get_gateway)) -> CloudSyncResult:
    return await sync_from_cloud(gateway)
