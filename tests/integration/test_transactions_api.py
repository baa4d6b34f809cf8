"""Integration tests for transaction API endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.models.category import Category
from finance_tracker.repositories.category import CategoryRepository


@pytest.fixture
async def categories(db_session: AsyncSession) -> dict[str, Category]:
    """Setup one income and two expense categories."""
    repo = CategoryRepository(db_session)
    return {
        "paycheck": await repo.create(Category(type="income", name="Paycheck", is_default=True)),
        "grocery": await repo.create(Category(type="expense", name="Grocery", is_default=True)),
        "golf": await repo.create(Category(type="expense", name="Golf")),
    }


def payload(category: Category, amount: int = 1250, on: str = "2025-01-15", **kwargs) -> dict:
    return {
        "type": category.type,
        "amount": amount,
        "date": on,
        "category_id": str(category.id),
        **kwargs,
    }


async def test_create_embeds_category(client: AsyncClient, categories):
    response = await client.post(
        "/api/v1/transactions", json=payload(categories["grocery"], comment="  weekly shop ")
    )

    assert response.status_code == 201
    data = response.json()
    assert data["amount"] == 1250
    assert data["comment"] == "weekly shop"
    assert data["category"] == {
        "id": str(categories["grocery"].id),
        "name": "Grocery",
        "type": "expense",
    }


async def test_create_unknown_category(client: AsyncClient, categories):
    body = payload(categories["grocery"])
    body["category_id"] = str(uuid4())

    response = await client.post("/api/v1/transactions", json=body)

    assert response.status_code == 404
    assert response.json()["error_code"] == "API_001"


async def test_create_type_mismatch(client: AsyncClient, categories):
    body = payload(categories["paycheck"])
    body["type"] = "expense"

    response = await client.post("/api/v1/transactions", json=body)

    assert response.status_code == 400
    assert response.json()["error_code"] == "API_005"


async def test_negative_amount_rejected(client: AsyncClient, categories):
    response = await client.post("/api/v1/transactions", json=payload(categories["grocery"], amount=-1))

    assert response.status_code == 400
    assert response.json()["error_code"] == "VAL_001"


async def test_list_newest_first(client: AsyncClient, categories):
    await client.post("/api/v1/transactions", json=payload(categories["grocery"], on="2025-01-01"))
    await client.post("/api/v1/transactions", json=payload(categories["golf"], on="2025-03-01"))
    await client.post("/api/v1/transactions", json=payload(categories["paycheck"], on="2025-02-01"))

    response = await client.get("/api/v1/transactions")

    data = response.json()
    assert data["total"] == 3
    assert [t["date"] for t in data["transactions"]] == ["2025-03-01", "2025-02-01", "2025-01-01"]
    assert data["money"]["minor_unit"] == 2


async def test_update_and_get(client: AsyncClient, categories):
    created = (await client.post("/api/v1/transactions", json=payload(categories["grocery"], comment="x"))).json()

    response = await client.patch(
        f"/api/v1/transactions/{created['id']}",
        json={"amount": 999, "category_id": str(categories["golf"].id), "comment": ""},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["amount"] == 999
    assert updated["comment"] is None
    assert updated["category"]["name"] == "Golf"

    fetched = (await client.get(f"/api/v1/transactions/{created['id']}")).json()
    assert fetched == updated


async def test_update_keeps_unset_fields(client: AsyncClient, categories):
    created = (await client.post("/api/v1/transactions", json=payload(categories["grocery"], comment="keep"))).json()

    response = await client.patch(f"/api/v1/transactions/{created['id']}", json={"date": "2025-02-02"})

    assert response.json()["comment"] == "keep"
    assert response.json()["amount"] == 1250


async def test_delete(client: AsyncClient, categories):
    created = (await client.post("/api/v1/transactions", json=payload(categories["grocery"]))).json()

    assert (await client.delete(f"/api/v1/transactions/{created['id']}")).status_code == 204

    response = await client.get(f"/api/v1/transactions/{created['id']}")
    assert response.status_code == 404
    assert response.json()["error_code"] == "API_002"


async def test_batch_create(client: AsyncClient, categories):
    response = await client.post(
        "/api/v1/transactions/batch",
        json=[payload(categories["grocery"]), payload(categories["paycheck"], amount=300000)],
    )

    assert response.status_code == 201
    assert {t["category"]["name"] for t in response.json()} == {"Grocery", "Paycheck"}


async def test_summary(client: AsyncClient, categories):
    await client.post("/api/v1/transactions", json=payload(categories["paycheck"], amount=300000))
    await client.post("/api/v1/transactions", json=payload(categories["grocery"], amount=5000))
    await client.post("/api/v1/transactions", json=payload(categories["grocery"], amount=2500))
    await client.post("/api/v1/transactions", json=payload(categories["golf"], amount=4000))

    response = await client.get("/api/v1/transactions/summary")

    data = response.json()
    assert data["total_income"] == 300000
    assert data["total_expense"] == 11500
    assert data["balance"] == 288500
    assert data["expense_by_category"] == {"Grocery": 7500, "Golf": 4000}
    breakdown = {row["category"]: row for row in data["monthly_breakdown"]}
    assert breakdown["Grocery"]["months"] == {"2025-01": 7500}
