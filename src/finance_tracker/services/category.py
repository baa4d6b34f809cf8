"""Category service for business logic operations."""
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.core.exceptions import CategoryConflictError, NotFoundError
from finance_tracker.models.category import Category
from finance_tracker.repositories.category import CategoryRepository
from finance_tracker.repositories.transaction import TransactionRepository
from finance_tracker.schemas.category import (
    CategoryCreate,
    CategoryExistsResult,
    CategoryUpdate,
    normalize_category_name,
)

logger = logging.getLogger(__name__)

# Built-in categories every account starts with. Names must match the ones the
# browser app ships, since local transactions reference them by name.
DEFAULT_CATEGORIES: dict[str, list[tuple[str, str]]] = {
    "income": [
        ("Paycheck", "Primary income from work"),
        ("Other income", "Other income you get (birthday money, etc.)"),
    ],
    "expense": [
        ("Housing", "Rent, mortgage, property fixes, property taxes..."),
        ("Transportation", "Car payment, public transport, car fixes, gas..."),
        ("Suministros", "Electricity, garbage, water, heating, phone, wifi, cable..."),
        ("Grocery", "Groceries, pet food..."),
        ("Restaurants", "Restaurantes, comer fuera y pedir a domicilio"),
        ("Clothing", "Clothes and shoes"),
        ("Subscription", "Spotify, Netflix and other types of subscriptions"),
        ("Desarrollo personal", "Libros, cuota gym, suplementos..."),
        ("Otros gastos personales", "Cortes de pelo, cosméticos u otros gastos difícil de categorizar"),
        ("Gifts", "All types of gift giving"),
        ("Entertainment", "Games, movies, concerts..."),
        ("Vacation", "Vacation spendings or savings"),
        ("Drinks, Tapas, Tomar Algo", "Cervecillas y tomar algo por ahí"),
        ("Party", "Salir de fiesta, taxis, ubers de vuelta..."),
        ("Efectivo", "Sacar efectivo"),
        ("Planes finde", "Planes fin de semana (trenes, alojamientos...)"),
        ("Golf", "Gastos de golf"),
        ("Impuestos/multas", "Jodiendas a pagar"),
        ("Deporte", "Gastos relacionados con el deporte"),
        ("Glovo", "Glovos u otros caprichos como tartas de queso y demás"),
    ],
}


class CategoryService:
    """Service layer for category operations."""

    def __init__(self, db: AsyncSession):
        """Initialize category service with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def list_categories(self, type: str | None = None) -> list[Category]:
        return await self.category_repo.get_all(type)

    async def get_category(self, category_id: UUID) -> Category:
        category = await self.category_repo.get_by_id(category_id)
        if category is None:
            raise NotFoundError("API_001", details={"category_id": str(category_id)})
        return category

    async def create_category(self, data: CategoryCreate) -> Category:
        """Create a custom category.

        Raises:
            CategoryConflictError: If (type, name) is already taken
        """
        if await self.category_repo.get_by_type_and_name(data.type, data.name):
            raise CategoryConflictError(
                "API_004", details={"type": data.type, "name": data.name}, http_status=409
            )
        category = Category(
            type=data.type,
            name=data.name,
            description=data.description,
            is_default=False,
        )
        try:
            return await self.category_repo.create(category)
        except IntegrityError:
            await self.db.rollback()
            raise CategoryConflictError(
                "API_004", details={"type": data.type, "name": data.name}, http_status=409
            )

    async def bulk_create_categories(self, items: list[CategoryCreate]) -> list[Category]:
        """Insert several categories in one commit (all-or-nothing)."""
        categories = [Category(**item.model_dump()) for item in items]
        try:
            return await self.category_repo.bulk_create(categories)
        except IntegrityError:
            await self.db.rollback()
            raise CategoryConflictError("API_004", details={"count": len(items)}, http_status=409)

    async def update_category(self, category_id: UUID, data: CategoryUpdate) -> Category:
        """Rename or re-describe a custom category.

        Raises:
            NotFoundError: If the category does not exist
            CategoryConflictError: For default categories or a name clash
        """
        category = await self.get_category(category_id)
        if category.is_default:
            raise CategoryConflictError(
                "API_003", details={"category_id": str(category_id)}, http_status=403
            )

        changes = data.model_dump(exclude_unset=True)
        if "name" in changes:
            name = normalize_category_name(changes["name"] or "")
            if not name:
                changes.pop("name")
            else:
                changes["name"] = name
                clash = await self.category_repo.get_by_type_and_name(category.type, changes["name"])
                if clash is not None and clash.id != category.id:
                    raise CategoryConflictError(
                        "API_004",
                        details={"type": category.type, "name": changes["name"]},
                        http_status=409,
                    )
        if "description" in changes:
            changes["description"] = changes["description"] or None

        return await self.category_repo.update(category_id, changes)

    async def delete_category(self, category_id: UUID) -> None:
        """Delete a custom category.

        Raises:
            NotFoundError: If the category does not exist
            CategoryConflictError: For default categories or categories still in use
        """
        category = await self.get_category(category_id)
        if category.is_default:
            raise CategoryConflictError(
                "API_003", details={"category_id": str(category_id)}, http_status=403
            )
        in_use = await self.transaction_repo.count_by_category(category_id)
        if in_use:
            raise CategoryConflictError(
                "API_006",
                details={"category_id": str(category_id), "transactions": in_use},
                http_status=409,
            )
        await self.category_repo.delete(category_id)
        logger.info(f"Deleted category {category_id}")

    async def category_exists(self, type: str, name: str) -> CategoryExistsResult:
        category = await self.category_repo.get_by_type_and_name(
            type, normalize_category_name(name)
        )
        return CategoryExistsResult(
            exists=category is not None,
            category_id=category.id if category else None,
        )

    async def seed_default_categories(self) -> list[Category]:
        """Insert the built-in categories that are missing.

        Safe to run repeatedly; existing (type, name) keys are left untouched.

        Returns:
            The categories created by this call
        """
        existing = {(c.type, c.name) for c in await self.category_repo.get_all()}
        missing = [
            Category(type=type, name=name, description=description, is_default=True)
            for type, entries in DEFAULT_CATEGORIES.items()
            for name, description in entries
            if (type, name) not in existing
        ]
        created = await self.category_repo.bulk_create(missing)
        if created:
            logger.info(f"Seeded {len(created)} default categories")
        return created
