"""Tests for projects and payments API endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient


async def create_project(api_client: AsyncClient, total: str = "1000.00") -> dict:
    client = (await api_client.post("/api/clients", json={"name": "Acme"})).json()
    response = await api_client.post(
        "/api/projects",
        json={
            "client_id": client["id"],
            "title": "Website",
            "total_amount": total,
            "start_date": "2024-03-01",
            "due_date": "2024-03-31",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_project_defaults(api_client: AsyncClient) -> None:
    project = await create_project(api_client)

    assert project["status"] == "active"
    assert Decimal(project["paid_amount"]) == Decimal("0")
    assert Decimal(project["pending_amount"]) == Decimal("1000")


@pytest.mark.asyncio
async def test_create_project_unknown_client_is_422(api_client: AsyncClient) -> None:
    response = await api_client.post(
        "/api/projects",
        json={
            "client_id": "nope",
            "title": "Orphan",
            "total_amount": "10.00",
            "start_date": "2024-03-01",
            "due_date": "2024-03-31",
        },
    )
    assert response.status_code == 422
    assert "nope" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_project_rejects_non_positive_total(api_client: AsyncClient) -> None:
    client = (await api_client.post("/api/clients", json={"name": "Acme"})).json()
    response = await api_client.post(
        "/api/projects",
        json={
            "client_id": client["id"],
            "title": "Free",
            "total_amount": "0",
            "start_date": "2024-03-01",
            "due_date": "2024-03-31",
        },
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_payment_flow_completes_project(api_client: AsyncClient) -> None:
    """Paying the full amount marks the project completed."""
    project = await create_project(api_client)

    first = await api_client.post(
        "/api/payments",
        json={"project_id": project["id"], "amount": "400.00", "payment_date": "2024-03-10"},
    )
    assert first.status_code == 201
    assert first.json()["client_id"] == project["client_id"]

    partial = (await api_client.get(f"/api/projects/{project['id']}")).json()
    assert partial["status"] == "active"
    assert Decimal(partial["pending_amount"]) == Decimal("600")

    await api_client.post(
        "/api/payments",
        json={"project_id": project["id"], "amount": "600.00", "payment_date": "2024-03-20"},
    )
    settled = (await api_client.get(f"/api/projects/{project['id']}")).json()
    assert settled["status"] == "completed"
    assert Decimal(settled["paid_amount"]) == Decimal("1000")

    # removing a payment does not reopen it
    delete_response = await api_client.delete(f"/api/payments/{first.json()['id']}")
    assert delete_response.status_code == 204
    after = (await api_client.get(f"/api/projects/{project['id']}")).json()
    assert after["status"] == "completed"
    assert Decimal(after["pending_amount"]) == Decimal("400")


@pytest.mark.asyncio
async def test_list_filters(api_client: AsyncClient) -> None:
    project = await create_project(api_client)
    await api_client.patch(f"/api/projects/{project['id']}", json={"status": "proposal"})
    await api_client.post(
        "/api/payments",
        json={"project_id": project["id"], "amount": "5.00", "payment_date": "2024-03-10"},
    )

    proposals = await api_client.get("/api/projects", params={"status": "proposal"})
    assert [p["id"] for p in proposals.json()] == [project["id"]]
    active = await api_client.get("/api/projects", params={"status": "active"})
    assert active.json() == []

    by_client = await api_client.get("/api/payments", params={"client_id": project["client_id"]})
    assert len(by_client.json()) == 1
    by_other = await api_client.get("/api/payments", params={"project_id": "other"})
    assert by_other.json() == []


@pytest.mark.asyncio
async def test_update_payment_amount(api_client: AsyncClient) -> None:
    project = await create_project(api_client)
    payment = (
        await api_client.post(
            "/api/payments",
            json={"project_id": project["id"], "amount": "5.00", "payment_date": "2024-03-10"},
        )
    ).json()

    response = await api_client.patch(
        f"/api/payments/{payment['id']}", json={"amount": "1000.00"}
    )
    assert response.status_code == 200
    assert Decimal(response.json()["amount"]) == Decimal("1000")

    settled = (await api_client.get(f"/api/projects/{project['id']}")).json()
    assert settled["status"] == "completed"


@pytest.mark.asyncio
async def test_delete_project_removes_payments(api_client: AsyncClient) -> None:
    project = await create_project(api_client)
    await api_client.post(
        "/api/payments",
        json={"project_id": project["id"], "amount": "5.00", "payment_date": "2024-03-10"},
    )

    response = await api_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 204
    assert (await api_client.get(f"/api/projects/{project['id']}")).status_code == 404
    assert (await api_client.get("/api/payments")).json() == []
