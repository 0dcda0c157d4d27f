"""Payment method and business profile endpoints."""

from fastapi import APIRouter, Response, status

from src.api.deps import StoreDep
from src.store.entities import (
    BusinessProfile,
    BusinessProfileUpdate,
    PaymentMethod,
    PaymentMethodCreate,
    PaymentMethodUpdate,
)

router = APIRouter(prefix="/api", tags=["account"])


@router.get("/payment-methods", response_model=list[PaymentMethod])
async def list_payment_methods(store: StoreDep) -> list[PaymentMethod]:
    return list(store.payment_methods)


@router.post(
    "/payment-methods", response_model=PaymentMethod, status_code=status.HTTP_201_CREATED
)
async def create_payment_method(payload: PaymentMethodCreate, store: StoreDep) -> PaymentMethod:
    return await store.add_payment_method(payload)


@router.patch("/payment-methods/{method_id}", response_model=PaymentMethod)
async def update_payment_method(
    method_id: str, payload: PaymentMethodUpdate, store: StoreDep
) -> PaymentMethod:
    return await store.update_payment_method(method_id, payload)


@router.post("/payment-methods/{method_id}/default", response_model=PaymentMethod)
async def set_default_payment_method(method_id: str, store: StoreDep) -> PaymentMethod:
    """Make this the only default method (best effort, not atomic)."""
    return await store.set_default_payment_method(method_id)


@router.delete("/payment-methods/{method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment_method(method_id: str, store: StoreDep) -> Response:
    await store.delete_payment_method(method_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/business-profile", response_model=BusinessProfile | None)
async def get_business_profile(store: StoreDep) -> BusinessProfile | None:
    """The caller's business profile, or null before the first save."""
    return store.business_profile


@router.put("/business-profile", response_model=BusinessProfile)
async def save_business_profile(
    payload: BusinessProfileUpdate, store: StoreDep
) -> BusinessProfile:
    """Create or update the business profile."""
    return await store.save_business_profile(payload)
