"""Client-related SQLAlchemy models."""

from typing import TYPE_CHECKING

from sqlalchemy import ARRAY, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, OwnedMixin, TimestampMixin

if TYPE_CHECKING:
    from src.models.project import Project


class Client(Base, OwnedMixin, TimestampMixin):
    """A freelancer's client."""

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    address: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str] | None] = mapped_column(
        ARRAY(String(50)).with_variant(JSON, "sqlite")
    )
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    projects: Mapped[list["Project"]] = relationship(
        back_populates="client", passive_deletes=True
    )
