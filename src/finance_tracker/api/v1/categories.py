"""Category endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from finance_tracker.api.deps import get_category_service
from finance_tracker.schemas.category import (
    CategoryCreate,
    CategoryExistsResult,
    CategoryListResult,
    CategoryResponse,
    CategoryUpdate,
    EntryType,
)
from finance_tracker.services.category import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListResult, summary="List categories")
async def list_categories(
    type: Annotated[EntryType | None, Query(description="Filter by 'income' or 'expense'")] = None,
    service: CategoryService = Depends(get_category_service),
) -> CategoryListResult:
    """List all categories ordered by type, then name."""
    categories = await service.list_categories(type)
    return CategoryListResult(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        total=len(categories),
    )


@router.get("/exists", response_model=CategoryExistsResult, summary="Check a category name")
async def category_exists(
    type: Annotated[EntryType, Query(description="'income' or 'expense'")],
    name: Annotated[str, Query(min_length=1, description="Category name")],
    service: CategoryService = Depends(get_category_service),
) -> CategoryExistsResult:
    return await service.category_exists(type, name)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a custom category",
)
async def create_category(
    payload: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Create a custom category. `is_default` is always stored as false."""
    category = await service.create_category(payload)
    return CategoryResponse.model_validate(category)


@router.post(
    "/batch",
    response_model=list[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create several categories at once",
)
async def batch_create_categories(
    payload: list[CategoryCreate],
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    categories = await service.bulk_create_categories(payload)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/defaults",
    response_model=list[CategoryResponse],
    summary="Seed missing built-in categories",
)
async def seed_default_categories(
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    categories = await service.seed_default_categories()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.patch("/{category_id}", response_model=CategoryResponse, summary="Update a custom category")
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await service.update_category(category_id, payload)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a custom category",
)
async def delete_category(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    """Delete a custom category. Default categories cannot be deleted."""
    await service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
