"""Clients API endpoints."""

from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query, Response, status

from src.api.deps import StoreDep
from src.store.entities import Client, ClientCreate, ClientUpdate

router = APIRouter(prefix="/api/clients", tags=["clients"])


class ClientDetailResponse(Client):
    """Client with the money still owed across its projects."""

    pending_amount: Decimal


def _matches(client: Client, search: str) -> bool:
    needle = search.strip().lower()
    haystack = [client.name, client.company, client.email, *(client.tags or [])]
    return any(needle in value.lower() for value in haystack if value)


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientCreate, store: StoreDep) -> Client:
    """Create a new client."""
    return await store.add_client(payload)


@router.get("", response_model=list[Client])
async def list_clients(
    store: StoreDep,
    search: str | None = Query(default=None, min_length=1),
) -> list[Client]:
    """List clients, optionally filtered by name, company, email or tag."""
    clients = list(store.clients)
    if search:
        clients = [client for client in clients if _matches(client, search)]
    return clients


@router.get("/{client_id}", response_model=ClientDetailResponse)
async def get_client(client_id: str, store: StoreDep) -> ClientDetailResponse:
    """Get client by ID with its pending amount."""
    client = store.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return ClientDetailResponse(
        **client.model_dump(),
        pending_amount=store.pending_amount_for_client(client_id),
    )


@router.patch("/{client_id}", response_model=Client)
async def update_client(client_id: str, payload: ClientUpdate, store: StoreDep) -> Client:
    """Partially update client fields."""
    return await store.update_client(client_id, payload)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, store: StoreDep) -> Response:
    """Delete a client with all of its projects and payments."""
    await store.delete_client(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
