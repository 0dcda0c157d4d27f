"""Campaign-panel SQLAlchemy models."""

import enum

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin, new_id


class CampaignStatus(str, enum.Enum):
    """Enumeration of campaign report statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    VERIFICATION = "verification"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdminOwnedMixin:
    """String UUID primary key and the owning admin's identity."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    admin_user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)


class Panel(Base, AdminOwnedMixin, TimestampMixin):
    """A campaign panel that users are assigned to."""

    __tablename__ = "panels"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    requires_panel3_credentials: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )


class PanelUser(Base, AdminOwnedMixin, TimestampMixin):
    """A user account on a panel."""

    __tablename__ = "panel_users"

    panel_id: Mapped[str] = mapped_column(
        ForeignKey("panels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Panel3Credential(Base, AdminOwnedMixin, TimestampMixin):
    """Login for the third-party "panel 3" system."""

    __tablename__ = "panel3_credentials"

    panel3_login_id: Mapped[str] = mapped_column(String(255), nullable=False)
    panel3_password_encrypted: Mapped[str] = mapped_column(Text, nullable=False)


class CampaignReport(Base, AdminOwnedMixin, TimestampMixin):
    """Progress record for an externally tracked campaign."""

    __tablename__ = "campaign_reports"

    campaign_id_external: Mapped[str] = mapped_column(String(255), nullable=False)
    campaign_name: Mapped[str] = mapped_column(String(255), nullable=False)
    panel_id: Mapped[str] = mapped_column(
        ForeignKey("panels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_panel_user_id: Mapped[str] = mapped_column(
        ForeignKey("panel_users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    panel3_credential_id: Mapped[str | None] = mapped_column(
        ForeignKey("panel3_credentials.id", ondelete="SET NULL")
    )
    status: Mapped[CampaignStatus] = mapped_column(
        Enum(
            CampaignStatus,
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        default=CampaignStatus.PENDING,
        nullable=False,
    )
    remarks: Mapped[str | None] = mapped_column(Text)
