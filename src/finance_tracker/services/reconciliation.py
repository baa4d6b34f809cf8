"""Category reconciliation and transaction remapping.

Remote categories are authoritative and identified by UUID. Local records
name their category instead. Reconciliation builds a `(type, name) -> id`
map from the remote side, creates the local categories the remote side is
missing, and remaps each local transaction onto a remote category id.

Names are compared in their normalized form (see `normalize_category_name`),
the same form `CategoryCreate` stores, so `"Food "` and `"Food"` are one key.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

from pydantic import ValidationError

from finance_tracker.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    normalize_category_name,
)
from finance_tracker.schemas.migration import LocalCategory, LocalTransaction
from finance_tracker.schemas.transaction import TransactionCreate
from finance_tracker.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

CategoryKey = tuple[str, str]


def category_key(type: str, name: str) -> CategoryKey:
    return (type, normalize_category_name(name))


@dataclass(frozen=True)
class LocalCategoryRef:
    """Category referenced by name, as local records do."""

    type: str
    name: str

    @property
    def key(self) -> CategoryKey:
        return category_key(self.type, self.name)


@dataclass(frozen=True)
class RemoteCategoryRef:
    """Category referenced by its remote identifier."""

    type: str
    category_id: UUID


@dataclass
class CategoryPlan:
    staged: list[CategoryCreate] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class ReconciliationResult:
    category_map: dict[CategoryKey, UUID]
    created: list[CategoryResponse] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class UnresolvedTransaction:
    transaction: LocalTransaction
    reason: str


@dataclass
class RemapResult:
    staged: list[TransactionCreate] = field(default_factory=list)
    unresolved: list[UnresolvedTransaction] = field(default_factory=list)


def build_category_map(categories: Iterable[CategoryResponse]) -> dict[CategoryKey, UUID]:
    """Map every category's (type, name) key to its id."""
    return {category_key(c.type, c.name): c.id for c in categories}


def plan_new_categories(
    local_categories: Iterable[LocalCategory], category_map: dict[CategoryKey, UUID]
) -> CategoryPlan:
    """Stage local categories whose key is absent from the map.

    Staged categories are always custom (`is_default=False`). A key that
    appears more than once locally is staged once. A local category that
    cannot be stored (blank or over-long name) is skipped with a warning;
    transactions pointing at it end up unresolved.
    """
    plan = CategoryPlan()
    staged_keys: set[CategoryKey] = set()
    for local in local_categories:
        key = LocalCategoryRef(local.type, local.name).key
        if key in category_map or key in staged_keys:
            continue
        try:
            category = CategoryCreate(
                type=local.type,
                name=key[1],
                description=local.description or None,
                is_default=False,
            )
        except ValidationError as e:
            reason = f"Invalid local category skipped: {local.name!r} ({local.type})"
            logger.warning(reason, extra={"error_count": e.error_count()})
            plan.skipped.append(reason)
            continue
        staged_keys.add(key)
        plan.staged.append(category)
    return plan


async def reconcile_categories(
    gateway: PersistenceGateway,
    remote_categories: Iterable[CategoryResponse],
    local_categories: Iterable[LocalCategory],
) -> ReconciliationResult:
    """Create missing local categories remotely and return the completed map.

    Errors from the bulk insert propagate unchanged.
    """
    category_map = build_category_map(remote_categories)
    plan = plan_new_categories(local_categories, category_map)

    if not plan.staged:
        logger.info("No local categories to create")
        return ReconciliationResult(category_map=category_map, skipped=plan.skipped)

    created = await gateway.bulk_insert_categories(plan.staged)
    category_map.update(build_category_map(created))
    logger.info(f"Created {len(created)} categories during reconciliation")
    return ReconciliationResult(category_map=category_map, created=created, skipped=plan.skipped)


def candidate_refs(
    transaction: LocalTransaction, local_categories_by_id: dict[str, LocalCategory]
) -> list[LocalCategoryRef]:
    """Names a local transaction may be referring to, most specific first.

    `category` is tried as a name, then as a local category id, then the
    transaction's own `categoryName`. Blank names are never candidates.
    """
    names = [transaction.category]
    local = local_categories_by_id.get(transaction.category)
    if local is not None:
        names.append(local.name)
    if transaction.category_name:
        names.append(transaction.category_name)

    refs: list[LocalCategoryRef] = []
    for name in names:
        normalized = normalize_category_name(name)
        if not normalized:
            continue
        ref = LocalCategoryRef(transaction.type, normalized)
        if ref not in refs:
            refs.append(ref)
    return refs


def resolve_category_ref(
    transaction: LocalTransaction,
    category_map: dict[CategoryKey, UUID],
    local_categories_by_id: dict[str, LocalCategory] | None = None,
) -> RemoteCategoryRef | None:
    """Convert a transaction's local category reference to a remote one."""
    for ref in candidate_refs(transaction, local_categories_by_id or {}):
        category_id = category_map.get(ref.key)
        if category_id is not None:
            return RemoteCategoryRef(type=ref.type, category_id=category_id)
    return None


def remap_transactions(
    local_transactions: Iterable[LocalTransaction],
    category_map: dict[CategoryKey, UUID],
    local_categories: Iterable[LocalCategory] = (),
) -> RemapResult:
    """Stage every transaction whose category resolves; drop the rest.

    A dropped transaction is logged as a warning and never aborts the remap.
    """
    by_id = {str(c.id): c for c in local_categories if c.id is not None}
    result = RemapResult()

    for local_tx in local_transactions:
        remote_ref = resolve_category_ref(local_tx, category_map, by_id)
        if remote_ref is None:
            reason = f"Category not found for transaction: {local_tx.category} ({local_tx.type})"
            logger.warning(reason)
            result.unresolved.append(UnresolvedTransaction(transaction=local_tx, reason=reason))
            continue

        result.staged.append(
            TransactionCreate.from_decimal(
                type=local_tx.type,
                amount_decimal=local_tx.amount,
                date=local_tx.date,
                category_id=remote_ref.category_id,
                comment=local_tx.comment,
            )
        )

    return result
