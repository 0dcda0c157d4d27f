"""Project SQLAlchemy model and status enumeration."""

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, OwnedMixin, TimestampMixin

if TYPE_CHECKING:
    from src.models.client import Client
    from src.models.payment import Payment


class ProjectStatus(str, enum.Enum):
    """Enumeration of project statuses."""

    PROPOSAL = "proposal"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Project(Base, OwnedMixin, TimestampMixin):
    """A piece of billable work for a client."""

    __tablename__ = "projects"

    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(
            ProjectStatus,
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        default=ProjectStatus.ACTIVE,
        nullable=False,
    )

    # Relationships
    client: Mapped["Client"] = relationship(back_populates="projects")
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="project", passive_deletes=True
    )
