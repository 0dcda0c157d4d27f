"""Payments API endpoints."""

from fastapi import APIRouter, Query, Response, status

from src.api.deps import StoreDep
from src.store.entities import Payment, PaymentCreate, PaymentUpdate

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("", response_model=Payment, status_code=status.HTTP_201_CREATED)
async def create_payment(payload: PaymentCreate, store: StoreDep) -> Payment:
    """Record a payment. A project it completes is marked completed."""
    return await store.add_payment(payload)


@router.get("", response_model=list[Payment])
async def list_payments(
    store: StoreDep,
    project_id: str | None = Query(default=None),
    client_id: str | None = Query(default=None),
) -> list[Payment]:
    return [
        payment
        for payment in store.payments
        if (project_id is None or payment.project_id == project_id)
        and (client_id is None or payment.client_id == client_id)
    ]


@router.patch("/{payment_id}", response_model=Payment)
async def update_payment(payment_id: str, payload: PaymentUpdate, store: StoreDep) -> Payment:
    return await store.update_payment(payment_id, payload)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(payment_id: str, store: StoreDep) -> Response:
    """Delete a payment. Completed projects stay completed."""
    await store.delete_payment(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
