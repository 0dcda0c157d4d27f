"""Pydantic records mirrored in memory, plus create/update payloads.

Records are immutable snapshots of a gateway row. Optional attributes are
always present and explicitly ``None`` when absent.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from src.models.project import ProjectStatus


class Record(BaseModel):
    """Immutable in-memory copy of a persisted row."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str


def normalize_tags(value: Iterable[str] | None) -> list[str] | None:
    """Strip and dedupe tags while preserving order."""
    if value is None:
        return None
    tags: list[str] = []
    for raw in value:
        tag = raw.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


Tags = Annotated[list[str] | None, AfterValidator(normalize_tags)]


def patch_values(patch: BaseModel, *, required: Iterable[str] = ()) -> dict[str, Any]:
    """Return only the fields the caller set.

    Explicit ``None`` clears an optional field; for required fields it is
    ignored so a patch can never blank them.
    """
    values = patch.model_dump(exclude_unset=True)
    for name in required:
        if name in values and values[name] is None:
            del values[name]
    return values


# =============================================================================
# Clients
# =============================================================================


class ClientCreate(BaseModel):
    """Payload for creating a client."""

    name: str = Field(min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    tags: Tags = None
    notes: str | None = None


class ClientUpdate(BaseModel):
    """Partial client update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    tags: Tags = None
    notes: str | None = None


class Client(Record):
    user_id: str
    name: str
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    tags: list[str] | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Projects
# =============================================================================


class ProjectCreate(BaseModel):
    """Payload for creating a project. Status defaults to active."""

    client_id: str
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    notes: str | None = None
    total_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    start_date: date
    due_date: date
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdate(BaseModel):
    """Partial project update. Any status may be set manually.

    A project cannot move to another client; its payments carry the client.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    notes: str | None = None
    total_amount: Decimal | None = Field(
        default=None, gt=0, max_digits=12, decimal_places=2
    )
    start_date: date | None = None
    due_date: date | None = None
    status: ProjectStatus | None = None


PROJECT_REQUIRED_FIELDS = (
    "title",
    "total_amount",
    "start_date",
    "due_date",
    "status",
)


class Project(Record):
    user_id: str
    client_id: str
    title: str
    description: str | None = None
    notes: str | None = None
    total_amount: Decimal
    start_date: date
    due_date: date
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime


class ProjectWithCalculations(Project):
    """A project with its derived payment totals. Never persisted."""

    paid_amount: Decimal
    pending_amount: Decimal


# =============================================================================
# Payments
# =============================================================================


class PaymentCreate(BaseModel):
    """Payload for recording a payment.

    client_id may be omitted; it is always taken from the project.
    """

    project_id: str
    client_id: str | None = None
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    payment_date: date
    payment_method: str | None = Field(default=None, max_length=100)
    reference_id: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class PaymentUpdate(BaseModel):
    """Partial payment update. Moving to another project moves the client too."""

    project_id: str | None = None
    amount: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    payment_date: date | None = None
    payment_method: str | None = Field(default=None, max_length=100)
    reference_id: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class Payment(Record):
    user_id: str
    project_id: str
    client_id: str
    amount: Decimal
    payment_date: date
    payment_method: str | None = None
    reference_id: str | None = None
    notes: str | None = None
    created_at: datetime


# =============================================================================
# Payment methods and business profile
# =============================================================================


class PaymentMethodCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    details: str | None = None
    is_default: bool = False


class PaymentMethodUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    details: str | None = None
    is_default: bool | None = None


class PaymentMethod(Record):
    user_id: str
    name: str
    details: str | None = None
    is_default: bool = False
    created_at: datetime
    updated_at: datetime


class BusinessProfileUpdate(BaseModel):
    """Fields shown on invoices. All optional."""

    business_name: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=50)
    address: str | None = None
    website: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=500)
    tax_id: str | None = Field(default=None, max_length=50)


class BusinessProfile(Record):
    user_id: str
    business_name: str | None = None
    contact_email: str | None = None
    phone_number: str | None = None
    address: str | None = None
    website: str | None = None
    logo_url: str | None = None
    tax_id: str | None = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Snapshot
# =============================================================================


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of the store's collections.

    Attributes:
        clients: Clients in store order.
        projects: Projects in store order.
        payments: Payments in store order.
        payment_methods: Configured payment methods.
        business_profile: The owner's profile, if any.
    """

    clients: tuple[Client, ...] = ()
    projects: tuple[Project, ...] = ()
    payments: tuple[Payment, ...] = ()
    payment_methods: tuple[PaymentMethod, ...] = ()
    business_profile: BusinessProfile | None = field(default=None)
