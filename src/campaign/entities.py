"""Pydantic records and payloads for the campaign-panel domain."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.campaign import CampaignStatus
from src.store.entities import Record


class PanelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    requires_panel3_credentials: bool = False


class PanelUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    requires_panel3_credentials: bool | None = None


class Panel(Record):
    admin_user_id: str
    name: str
    description: str | None = None
    requires_panel3_credentials: bool = False
    created_at: datetime
    updated_at: datetime


class PanelUserCreate(BaseModel):
    panel_id: str
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    is_active: bool = True


class PanelUserUpdate(BaseModel):
    panel_id: str | None = None
    username: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=3, max_length=255)
    is_active: bool | None = None


class PanelUser(Record):
    admin_user_id: str
    panel_id: str
    username: str
    email: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class Panel3CredentialCreate(BaseModel):
    """Login for the panel 3 system.

    The password is stored exactly as given; encrypting it is the
    caller's responsibility.
    """

    panel3_login_id: str = Field(min_length=1, max_length=255)
    panel3_password_encrypted: str = Field(min_length=1)


class Panel3CredentialUpdate(BaseModel):
    panel3_login_id: str | None = Field(default=None, min_length=1, max_length=255)
    panel3_password_encrypted: str | None = Field(default=None, min_length=1)


class Panel3Credential(Record):
    admin_user_id: str
    panel3_login_id: str
    panel3_password_encrypted: str
    created_at: datetime
    updated_at: datetime


class CampaignReportCreate(BaseModel):
    """New campaign report. Status always starts as pending."""

    campaign_id_external: str = Field(min_length=1, max_length=255)
    campaign_name: str = Field(min_length=1, max_length=255)
    panel_id: str
    assigned_panel_user_id: str
    panel3_credential_id: str | None = None
    remarks: str | None = None


class CampaignReportUpdate(BaseModel):
    campaign_id_external: str | None = Field(default=None, min_length=1, max_length=255)
    campaign_name: str | None = Field(default=None, min_length=1, max_length=255)
    panel_id: str | None = None
    assigned_panel_user_id: str | None = None
    panel3_credential_id: str | None = None
    status: CampaignStatus | None = None
    remarks: str | None = None


class CampaignReport(Record):
    admin_user_id: str
    campaign_id_external: str
    campaign_name: str
    panel_id: str
    assigned_panel_user_id: str
    panel3_credential_id: str | None = None
    status: CampaignStatus
    remarks: str | None = None
    created_at: datetime
    updated_at: datetime


class AuditLog(Record):
    user_id: str
    record_id: str
    table_name: str
    action: str
    old_value: str | None = None
    new_value: str | None = None
    timestamp: datetime
