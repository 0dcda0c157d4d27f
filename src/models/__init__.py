"""SQLAlchemy models for the Freelance Desk application."""

from src.models.base import Base
from src.models.campaign import (
    CampaignReport,
    CampaignStatus,
    Panel,
    Panel3Credential,
    PanelUser,
)
from src.models.client import Client
from src.models.log import AuditLog
from src.models.payment import Payment, PaymentMethod
from src.models.profile import BusinessProfile
from src.models.project import Project, ProjectStatus

__all__ = [
    "Base",
    "Client",
    "Project",
    "ProjectStatus",
    "Payment",
    "PaymentMethod",
    "BusinessProfile",
    "Panel",
    "PanelUser",
    "Panel3Credential",
    "CampaignReport",
    "CampaignStatus",
    "AuditLog",
]
