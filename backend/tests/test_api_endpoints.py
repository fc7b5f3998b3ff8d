"""
HTTP-level tests for the v1 routers against an in-memory database.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

from app.core.security import decode_token
from app.models.dining_table import DiningTable, TableStatus
from app.models.plan import Plan, PlanType
from app.models.subscription import SubscriptionStatus


@pytest.mark.asyncio
async def test_health_without_lifespan_reports_database_unavailable(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "unavailable"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_login_returns_token_for_valid_credentials(
    client: AsyncClient,
    tenant,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # Isolate tests from bcrypt backend differences in local environments.
    monkeypatch.setattr(
        "app.api.v1.endpoints.auth.verify_password",
        lambda plain_password, hashed_password: hashed_password == f"hashed::{plain_password}",
    )

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": tenant.manager.email, "password": "secret"},
    )
    wrong = await client.post(
        "/api/v1/auth/login",
        json={"email": tenant.manager.email, "password": "outra"},
    )

    assert response.status_code == 200, response.text
    payload = decode_token(response.json()["access_token"])
    assert payload["sub"] == str(tenant.manager.id)
    assert payload["role"] == "manager"
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_authentication(client: AsyncClient, tenant, login_as) -> None:
    anonymous = await client.get("/api/v1/auth/me")
    login_as(tenant.waiter)
    response = await client.get("/api/v1/auth/me")

    assert anonymous.status_code == 401
    assert response.status_code == 200
    assert response.json()["branch_id"] == str(tenant.branch.id)


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_subscribe_to_trial_and_read_trial_status(client, db_session, tenant, login_as) -> None:
    plan = Plan(name="Trial", type=PlanType.TRIAL.value, price=0, is_trial=True, trial_days=7)
    db_session.add(plan)
    await db_session.commit()
    login_as(tenant.admin)

    plans = await client.get("/api/v1/plans")
    created = await client.post("/api/v1/subscriptions", json={"plan_id": str(plan.id)})
    again = await client.post("/api/v1/subscriptions", json={"plan_id": str(plan.id)})
    trial = await client.get("/api/v1/subscriptions/trial-status")

    assert [p["name"] for p in plans.json()] == ["Trial"]
    assert created.status_code == 201, created.text
    assert created.json()["status"] == SubscriptionStatus.ACTIVE.value
    assert created.json()["plan"]["is_trial"] is True
    assert again.status_code == 409
    assert trial.status_code == 200
    assert trial.json()["days_remaining"] == 7
    assert trial.json()["is_expired"] is False


@pytest.mark.asyncio
async def test_waiter_cannot_subscribe(client, tenant, login_as) -> None:
    login_as(tenant.waiter)

    response = await client.post("/api/v1/subscriptions", json={"plan_id": str(uuid4())})
    current = await client.get("/api/v1/subscriptions/current")

    assert response.status_code == 403
    assert current.status_code == 404
    assert current.json()["detail"] == "Assinatura não encontrada"


# ---------------------------------------------------------------------------
# Branch-scoped resources
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_ingredient_flow_and_branch_isolation(client, tenant, other_tenant, login_as) -> None:
    login_as(tenant.manager)
    category = await client.post("/api/v1/ingredient-categories", json={"name": "Hortifruti"})
    ingredient = await client.post(
        "/api/v1/ingredients",
        json={"name": "Tomate", "unit": "kg", "category_id": category.json()["id"]},
    )
    ingredient_id = ingredient.json()["id"]
    movement = await client.post(
        "/api/v1/stock-movements",
        json={"type": "ENTRADA", "ingredient_id": ingredient_id, "variation": 4.5},
    )

    login_as(other_tenant.manager)
    foreign_read = await client.get(f"/api/v1/ingredients/{ingredient_id}")
    foreign_list = await client.get("/api/v1/stock-movements")

    login_as(tenant.manager)
    deleted = await client.delete(f"/api/v1/ingredients/{ingredient_id}")

    assert category.status_code == 201, category.text
    assert ingredient.status_code == 201, ingredient.text
    assert ingredient.json()["category"]["name"] == "Hortifruti"
    assert movement.status_code == 201, movement.text
    assert movement.json()["item_type"] == "INGREDIENT"
    assert movement.json()["item_name"] == "Tomate"
    assert movement.json()["quantity"] == 4.5
    assert foreign_read.status_code == 404
    assert foreign_list.json() == {"movements": []}
    assert deleted.json()["message"] == "Ingrediente excluído com sucesso"


@pytest.mark.asyncio
async def test_stock_movement_with_two_targets_is_rejected(client, tenant, login_as) -> None:
    login_as(tenant.manager)

    response = await client.post(
        "/api/v1/stock-movements",
        json={
            "type": "AJUSTE",
            "product_id": str(uuid4()),
            "ingredient_id": str(uuid4()),
            "variation": 1,
        },
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_waiter_reads_tables_but_cannot_create(client, db_session, tenant, login_as) -> None:
    db_session.add(DiningTable(branch_id=tenant.branch.id, number="7", status=TableStatus.OPEN.value))
    await db_session.commit()
    login_as(tenant.waiter)

    listing = await client.get("/api/v1/tables")
    forbidden = await client.post("/api/v1/tables", json={"number": "8"})

    assert listing.status_code == 200
    assert [t["number"] for t in listing.json()] == ["7"]
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_table_reservation_flow(client, tenant, login_as) -> None:
    login_as(tenant.manager)
    created = await client.post("/api/v1/tables", json={"number": "12"})
    table_id = created.json()["id"]

    reserved = await client.post(
        f"/api/v1/tables/{table_id}/reserve",
        json={
            "reservation_name": "Carla",
            "reserved_for": (datetime.utcnow() + timedelta(hours=2)).isoformat(),
        },
    )
    twice = await client.post(f"/api/v1/tables/{table_id}/reserve", json={"reservation_name": "Davi"})
    canceled = await client.delete(f"/api/v1/tables/{table_id}/reserve")

    assert created.status_code == 201, created.text
    assert created.json()["status"] == "AVAILABLE"
    assert reserved.json()["status"] == "RESERVED"
    assert twice.status_code == 400
    assert canceled.json()["status"] == "CLOSED"


@pytest.mark.asyncio
async def test_patch_with_null_required_fields_is_unprocessable(client, tenant, login_as) -> None:
    login_as(tenant.manager)
    table = await client.post("/api/v1/tables", json={"number": "15"})
    ingredient = await client.post("/api/v1/ingredients", json={"name": "Tomate", "unit": "kg"})

    null_number = await client.patch(f"/api/v1/tables/{table.json()['id']}", json={"number": None})
    null_unit = await client.patch(
        f"/api/v1/ingredients/{ingredient.json()['id']}",
        json={"unit": None},
    )
    fetched = await client.get(f"/api/v1/tables/{table.json()['id']}")

    assert null_number.status_code == 422
    assert null_unit.status_code == 422
    assert fetched.json()["number"] == "15"


@pytest.mark.asyncio
async def test_cash_register_endpoints(client, tenant, login_as) -> None:
    login_as(tenant.manager)
    opened = await client.post("/api/v1/cash-registers", json={"opening_amount": "100.00"})
    duplicate = await client.post("/api/v1/cash-registers", json={"opening_amount": "1.00"})
    sale = await client.post(
        "/api/v1/cash-registers/movements",
        json={"type": "SALE", "amount": "25.50", "payment_method": "CASH"},
    )
    balance = await client.get("/api/v1/cash-registers/expected-balance")
    closed = await client.post(
        f"/api/v1/cash-registers/{opened.json()['id']}/close",
        json={"withdraw_amount": "100.00"},
    )

    assert opened.status_code == 201, opened.text
    assert duplicate.status_code == 409
    assert sale.status_code == 201, sale.text
    assert float(balance.json()["expected_amount"]) == 125.5
    assert closed.status_code == 200, closed.text
    assert closed.json()["status"] == "CLOSED"
    assert float(closed.json()["closing_amount"]) == 25.5


@pytest.mark.asyncio
async def test_payment_catalog_is_master_only(client, tenant, master, login_as) -> None:
    login_as(tenant.admin)
    refused = await client.post("/api/v1/payment-methods", json={"name": "Pix"})

    login_as(master)
    created = await client.post("/api/v1/payment-methods", json={"name": "Pix"})

    login_as(tenant.admin)
    assigned = await client.put(
        "/api/v1/payment-methods/branch",
        json={"payments": [{"payment_method_id": created.json()["id"], "for_dine_in": True}]},
    )

    assert refused.status_code == 403
    assert created.status_code == 201, created.text
    assert assigned.status_code == 200, assigned.text
    assert assigned.json()[0]["payment_method"]["name"] == "Pix"


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_notification_read_endpoints(client, tenant, login_as) -> None:
    login_as(tenant.waiter)
    marked = await client.post(
        "/api/v1/notifications/read",
        json={"entity_type": "SYSTEM", "entity_id": "boas-vindas", "metadata": "{\"origem\": \"painel\"}"},
    )
    missing_order = await client.post(
        "/api/v1/notifications/read-multiple",
        json={"notifications": [{"entity_type": "ORDER", "entity_id": str(uuid4())}]},
    )
    status_read = await client.get(
        "/api/v1/notifications/read-status",
        params={"entity_type": "SYSTEM", "entity_id": "boas-vindas"},
    )
    status_unread = await client.get(
        "/api/v1/notifications/read-status",
        params={"entity_type": "SYSTEM", "entity_id": "outra"},
    )

    assert marked.status_code == 200, marked.text
    assert marked.json()["notification_read"]["metadata"] == "{\"origem\": \"painel\"}"
    assert missing_order.status_code == 404
    assert status_read.json()["is_read"] is True
    assert status_unread.json() == {"is_read": False, "read_at": None}
