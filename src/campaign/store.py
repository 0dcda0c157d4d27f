"""In-memory mirror of the campaign-panel admin data with an audit trail.

Same write-through shape as the freelancer store. Every successful mutation
is followed by an audit record; a failed audit write is logged and does not
undo or fail the mutation it describes.
"""

from __future__ import annotations

from typing import Any

import orjson
from pydantic import BaseModel

from src.campaign.entities import (
    AuditLog,
    CampaignReport,
    CampaignReportCreate,
    CampaignReportUpdate,
    Panel,
    Panel3Credential,
    Panel3CredentialCreate,
    Panel3CredentialUpdate,
    PanelCreate,
    PanelUpdate,
    PanelUser,
    PanelUserCreate,
    PanelUserUpdate,
)
from src.core.errors import PersistenceFailure
from src.core.logging import get_logger
from src.models.campaign import CampaignStatus
from src.store.base import WriteThroughStore, replace_record
from src.store.entities import patch_values
from src.store.gateway import PersistenceGateway
from src.store.session import SessionProvider

logger = get_logger(__name__)

PANELS = "panels"
PANEL_USERS = "panel_users"
PANEL3_CREDENTIALS = "panel3_credentials"
CAMPAIGN_REPORTS = "campaign_reports"
AUDIT_LOG = "audit_log"

REDACTED_FIELDS = frozenset({"panel3_password_encrypted"})

DEFAULT_AUDIT_LOG_LIMIT = 50


def _audit_json(value: BaseModel | dict[str, Any] | None) -> str | None:
    """Serialize a record for the audit log with secrets masked."""
    if value is None:
        return None
    data = value.model_dump(mode="json") if isinstance(value, BaseModel) else dict(value)
    for key in REDACTED_FIELDS & data.keys():
        data[key] = "***"
    return orjson.dumps(data).decode("utf-8")


class CampaignStore(WriteThroughStore):
    """Panels, panel users, panel 3 credentials, campaign reports, audit log."""

    owner_field = "admin_user_id"

    def __init__(
        self,
        gateway: PersistenceGateway,
        session: SessionProvider,
        *,
        audit_log_limit: int = DEFAULT_AUDIT_LOG_LIMIT,
    ) -> None:
        super().__init__(gateway, session)
        self.audit_log_limit = audit_log_limit
        self.panels: list[Panel] = []
        self.panel_users: list[PanelUser] = []
        self.panel3_credentials: list[Panel3Credential] = []
        self.campaign_reports: list[CampaignReport] = []
        self.audit_logs: list[AuditLog] = []

    def _clear(self) -> None:
        self.panels = []
        self.panel_users = []
        self.panel3_credentials = []
        self.campaign_reports = []
        self.audit_logs = []

    async def load_all(self) -> None:
        identity = self.identity
        if identity is None:
            self._clear()
            return

        self.loading = True
        try:
            panels = await self._gateway.list(PANELS, identity)
            panel_users = await self._gateway.list(PANEL_USERS, identity)
            credentials = await self._gateway.list(PANEL3_CREDENTIALS, identity)
            reports = await self._gateway.list(CAMPAIGN_REPORTS, identity)
            audit_rows = await self._gateway.list(
                AUDIT_LOG, identity, newest_first=True, limit=self.audit_log_limit
            )
        except PersistenceFailure:
            self._clear()
            logger.warning("campaign_data_load_failed", user_id=identity)
            raise
        finally:
            self.loading = False

        self.panels = [Panel.model_validate(row) for row in panels]
        self.panel_users = [PanelUser.model_validate(row) for row in panel_users]
        self.panel3_credentials = [Panel3Credential.model_validate(row) for row in credentials]
        self.campaign_reports = [CampaignReport.model_validate(row) for row in reports]
        self.audit_logs = [AuditLog.model_validate(row) for row in audit_rows]

    # -------------------------------------------------------------------------
    # Audit
    # -------------------------------------------------------------------------

    async def log_audit(
        self,
        record_id: str,
        table_name: str,
        action: str,
        old_value: BaseModel | dict[str, Any] | None = None,
        new_value: BaseModel | dict[str, Any] | None = None,
    ) -> AuditLog | None:
        """Write one audit record. Returns None if nothing was written."""
        identity = self.identity
        if identity is None:
            return None

        row = {
            "user_id": identity,
            "record_id": record_id,
            "table_name": table_name,
            "action": action,
            "old_value": _audit_json(old_value),
            "new_value": _audit_json(new_value),
        }
        try:
            saved = await self._gateway.insert(AUDIT_LOG, row)
        except PersistenceFailure as exc:
            logger.error(
                "audit_log_write_failed",
                record_id=record_id,
                table_name=table_name,
                action=action,
                error=str(exc),
            )
            return None

        entry = AuditLog.model_validate(saved)
        self.audit_logs = [entry, *self.audit_logs][: self.audit_log_limit]
        return entry

    # -------------------------------------------------------------------------
    # Panels
    # -------------------------------------------------------------------------

    async def add_panel(self, data: PanelCreate) -> Panel:
        panel = await self._insert(PANELS, Panel, data.model_dump())
        self.panels = [panel, *self.panels]
        await self.log_audit(panel.id, PANELS, "CREATE", None, panel)
        return panel

    async def update_panel(self, panel_id: str, patch: PanelUpdate) -> Panel:
        old = self.get_panel(panel_id)
        values = patch_values(patch, required=("name", "requires_panel3_credentials"))
        row = await self._update(PANELS, panel_id, values)
        self.panels = replace_record(self.panels, Panel, row)
        panel = self.get_panel(panel_id)
        await self.log_audit(panel_id, PANELS, "UPDATE", old, panel)
        return panel

    async def delete_panel(self, panel_id: str) -> None:
        """Delete a panel, its users and the reports filed against it."""
        await self._delete(PANELS, panel_id)
        removed_users = {u.id for u in self.panel_users if u.panel_id == panel_id}
        self.panels = [p for p in self.panels if p.id != panel_id]
        self.panel_users = [u for u in self.panel_users if u.panel_id != panel_id]
        self.campaign_reports = [
            r
            for r in self.campaign_reports
            if r.panel_id != panel_id and r.assigned_panel_user_id not in removed_users
        ]
        await self.log_audit(panel_id, PANELS, "DELETE", {"id": panel_id}, None)

    # -------------------------------------------------------------------------
    # Panel users
    # -------------------------------------------------------------------------

    async def add_panel_user(self, data: PanelUserCreate) -> PanelUser:
        panel_user = await self._insert(PANEL_USERS, PanelUser, data.model_dump())
        self.panel_users = [panel_user, *self.panel_users]
        await self.log_audit(panel_user.id, PANEL_USERS, "CREATE", None, panel_user)
        return panel_user

    async def update_panel_user(self, panel_user_id: str, patch: PanelUserUpdate) -> PanelUser:
        old = self.get_panel_user(panel_user_id)
        values = patch_values(
            patch, required=("panel_id", "username", "email", "is_active")
        )
        row = await self._update(PANEL_USERS, panel_user_id, values)
        self.panel_users = replace_record(self.panel_users, PanelUser, row)
        panel_user = self.get_panel_user(panel_user_id)
        await self.log_audit(panel_user_id, PANEL_USERS, "UPDATE", old, panel_user)
        return panel_user

    async def delete_panel_user(self, panel_user_id: str) -> None:
        """Delete a panel user and the reports assigned to them."""
        await self._delete(PANEL_USERS, panel_user_id)
        self.panel_users = [u for u in self.panel_users if u.id != panel_user_id]
        self.campaign_reports = [
            r for r in self.campaign_reports if r.assigned_panel_user_id != panel_user_id
        ]
        await self.log_audit(
            panel_user_id, PANEL_USERS, "DELETE", {"id": panel_user_id}, None
        )

    # -------------------------------------------------------------------------
    # Panel 3 credentials
    # -------------------------------------------------------------------------

    async def add_panel3_credential(self, data: Panel3CredentialCreate) -> Panel3Credential:
        credential = await self._insert(
            PANEL3_CREDENTIALS, Panel3Credential, data.model_dump()
        )
        self.panel3_credentials = [credential, *self.panel3_credentials]
        await self.log_audit(credential.id, PANEL3_CREDENTIALS, "CREATE", None, credential)
        return credential

    async def update_panel3_credential(
        self, credential_id: str, patch: Panel3CredentialUpdate
    ) -> Panel3Credential:
        old = self._get_credential(credential_id)
        values = patch_values(
            patch, required=("panel3_login_id", "panel3_password_encrypted")
        )
        row = await self._update(PANEL3_CREDENTIALS, credential_id, values)
        self.panel3_credentials = replace_record(
            self.panel3_credentials, Panel3Credential, row
        )
        credential = self._get_credential(credential_id)
        await self.log_audit(credential_id, PANEL3_CREDENTIALS, "UPDATE", old, credential)
        return credential

    async def delete_panel3_credential(self, credential_id: str) -> None:
        """Delete a credential and detach it from any report using it."""
        await self._delete(PANEL3_CREDENTIALS, credential_id)
        self.panel3_credentials = [
            c for c in self.panel3_credentials if c.id != credential_id
        ]
        self.campaign_reports = [
            r.model_copy(update={"panel3_credential_id": None})
            if r.panel3_credential_id == credential_id
            else r
            for r in self.campaign_reports
        ]
        await self.log_audit(
            credential_id, PANEL3_CREDENTIALS, "DELETE", {"id": credential_id}, None
        )

    # -------------------------------------------------------------------------
    # Campaign reports
    # -------------------------------------------------------------------------

    async def add_campaign_report(self, data: CampaignReportCreate) -> CampaignReport:
        values = {**data.model_dump(), "status": CampaignStatus.PENDING}
        report = await self._insert(CAMPAIGN_REPORTS, CampaignReport, values)
        self.campaign_reports = [report, *self.campaign_reports]
        await self.log_audit(report.id, CAMPAIGN_REPORTS, "CREATE", None, report)
        return report

    async def update_campaign_report(
        self, report_id: str, patch: CampaignReportUpdate
    ) -> CampaignReport:
        old = self._get_report(report_id)
        values = patch_values(
            patch,
            required=(
                "campaign_id_external",
                "campaign_name",
                "panel_id",
                "assigned_panel_user_id",
                "status",
            ),
        )
        row = await self._update(CAMPAIGN_REPORTS, report_id, values)
        self.campaign_reports = replace_record(self.campaign_reports, CampaignReport, row)
        report = self._get_report(report_id)
        await self.log_audit(report_id, CAMPAIGN_REPORTS, "UPDATE", old, report)
        return report

    async def delete_campaign_report(self, report_id: str) -> None:
        await self._delete(CAMPAIGN_REPORTS, report_id)
        self.campaign_reports = [r for r in self.campaign_reports if r.id != report_id]
        await self.log_audit(report_id, CAMPAIGN_REPORTS, "DELETE", {"id": report_id}, None)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_panel(self, panel_id: str) -> Panel | None:
        return next((p for p in self.panels if p.id == panel_id), None)

    def get_panel_user(self, panel_user_id: str) -> PanelUser | None:
        return next((u for u in self.panel_users if u.id == panel_user_id), None)

    def _get_credential(self, credential_id: str) -> Panel3Credential | None:
        return next((c for c in self.panel3_credentials if c.id == credential_id), None)

    def _get_report(self, report_id: str) -> CampaignReport | None:
        return next((r for r in self.campaign_reports if r.id == report_id), None)

    def panel_name(self, panel_id: str) -> str:
        panel = self.get_panel(panel_id)
        return panel.name if panel else "Unknown Panel"

    def panel_user_name(self, panel_user_id: str) -> str:
        panel_user = self.get_panel_user(panel_user_id)
        return panel_user.username if panel_user else "Unknown User"

    def panel3_login_id(self, credential_id: str) -> str:
        credential = self._get_credential(credential_id)
        return credential.panel3_login_id if credential else "N/A"
