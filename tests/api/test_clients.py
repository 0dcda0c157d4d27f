"""Tests for clients API endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_get_client(api_client: AsyncClient) -> None:
    """Create client and fetch it by ID."""
    create_response = await api_client.post(
        "/api/clients",
        json={"name": "Alice Walker", "email": "alice@example.com", "tags": ["vip", "vip"]},
    )
    assert create_response.status_code == 201
    created = create_response.json()
    assert created["name"] == "Alice Walker"
    assert created["user_id"] == "user-1"
    assert created["tags"] == ["vip"]

    get_response = await api_client.get(f"/api/clients/{created['id']}")
    assert get_response.status_code == 200
    fetched = get_response.json()
    assert fetched["id"] == created["id"]
    assert Decimal(fetched["pending_amount"]) == Decimal("0")


@pytest.mark.asyncio
async def test_list_clients_with_search(api_client: AsyncClient) -> None:
    """Search matches name, company, email and tags."""
    await api_client.post("/api/clients", json={"name": "Alice Walker"})
    await api_client.post("/api/clients", json={"name": "Bob", "company": "Alicorp"})
    await api_client.post("/api/clients", json={"name": "Carol", "tags": ["retainer"]})

    response = await api_client.get("/api/clients", params={"search": "ali"})
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Alice Walker", "Bob"]

    tagged = await api_client.get("/api/clients", params={"search": "RETAIN"})
    assert [c["name"] for c in tagged.json()] == ["Carol"]

    everyone = await api_client.get("/api/clients")
    assert len(everyone.json()) == 3


@pytest.mark.asyncio
async def test_update_client_partial(api_client: AsyncClient) -> None:
    """Patch updates only the fields sent."""
    create_response = await api_client.post(
        "/api/clients",
        json={"name": "Client Name", "email": "old@example.com", "phone": "123"},
    )
    client_id = create_response.json()["id"]

    patch_response = await api_client.patch(
        f"/api/clients/{client_id}",
        json={"email": "new@example.com"},
    )
    assert patch_response.status_code == 200
    payload = patch_response.json()
    assert payload["name"] == "Client Name"
    assert payload["email"] == "new@example.com"
    assert payload["phone"] == "123"


@pytest.mark.asyncio
async def test_get_client_not_found(api_client: AsyncClient) -> None:
    """Unknown client ID returns 404."""
    response = await api_client.get("/api/clients/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


@pytest.mark.asyncio
async def test_update_unknown_client_is_404(api_client: AsyncClient) -> None:
    response = await api_client.patch("/api/clients/99999", json={"name": "X"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_client(api_client: AsyncClient) -> None:
    client_id = (await api_client.post("/api/clients", json={"name": "Gone"})).json()["id"]

    response = await api_client.delete(f"/api/clients/{client_id}")
    assert response.status_code == 204
    assert (await api_client.get(f"/api/clients/{client_id}")).status_code == 404


@pytest.mark.asyncio
async def test_create_client_requires_name(api_client: AsyncClient) -> None:
    response = await api_client.post("/api/clients", json={"email": "x@example.com"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_missing_identity_is_401(api_client: AsyncClient) -> None:
    response = await api_client.get("/api/clients", headers={"X-User-Id": ""})
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required."


@pytest.mark.asyncio
async def test_clients_are_isolated_per_user(api_client: AsyncClient) -> None:
    created = await api_client.post("/api/clients", json={"name": "Private"})
    client_id = created.json()["id"]

    other = await api_client.get("/api/clients", headers={"X-User-Id": "user-2"})
    assert other.json() == []

    stolen = await api_client.delete(
        f"/api/clients/{client_id}", headers={"X-User-Id": "user-2"}
    )
    assert stolen.status_code == 404
