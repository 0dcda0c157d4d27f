"""Campaign-panel admin endpoints."""

from datetime import datetime

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from src.api.deps import CampaignDep
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
from src.campaign.store import CampaignStore

router = APIRouter(prefix="/api/campaign", tags=["campaign"])


class CredentialResponse(BaseModel):
    """Panel 3 credential without its password."""

    id: str
    panel3_login_id: str
    created_at: datetime
    updated_at: datetime


class CampaignReportResponse(CampaignReport):
    """Campaign report with display names resolved."""

    panel_name: str
    panel_user_name: str
    panel3_login_id: str


def _credential(credential: Panel3Credential) -> CredentialResponse:
    return CredentialResponse.model_validate(credential.model_dump())


def _report(store: CampaignStore, report: CampaignReport) -> CampaignReportResponse:
    return CampaignReportResponse(
        **report.model_dump(),
        panel_name=store.panel_name(report.panel_id),
        panel_user_name=store.panel_user_name(report.assigned_panel_user_id),
        panel3_login_id=(
            store.panel3_login_id(report.panel3_credential_id)
            if report.panel3_credential_id
            else "N/A"
        ),
    )


# Panels


@router.get("/panels", response_model=list[Panel])
async def list_panels(store: CampaignDep) -> list[Panel]:
    return store.panels


@router.post("/panels", response_model=Panel, status_code=status.HTTP_201_CREATED)
async def create_panel(payload: PanelCreate, store: CampaignDep) -> Panel:
    return await store.add_panel(payload)


@router.patch("/panels/{panel_id}", response_model=Panel)
async def update_panel(panel_id: str, payload: PanelUpdate, store: CampaignDep) -> Panel:
    return await store.update_panel(panel_id, payload)


@router.delete("/panels/{panel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_panel(panel_id: str, store: CampaignDep) -> Response:
    """Delete a panel with its users and reports."""
    await store.delete_panel(panel_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Panel users


@router.get("/panel-users", response_model=list[PanelUser])
async def list_panel_users(store: CampaignDep) -> list[PanelUser]:
    return store.panel_users


@router.post("/panel-users", response_model=PanelUser, status_code=status.HTTP_201_CREATED)
async def create_panel_user(payload: PanelUserCreate, store: CampaignDep) -> PanelUser:
    return await store.add_panel_user(payload)


@router.patch("/panel-users/{panel_user_id}", response_model=PanelUser)
async def update_panel_user(
    panel_user_id: str, payload: PanelUserUpdate, store: CampaignDep
) -> PanelUser:
    return await store.update_panel_user(panel_user_id, payload)


@router.delete("/panel-users/{panel_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_panel_user(panel_user_id: str, store: CampaignDep) -> Response:
    await store.delete_panel_user(panel_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Panel 3 credentials


@router.get("/credentials", response_model=list[CredentialResponse])
async def list_credentials(store: CampaignDep) -> list[CredentialResponse]:
    return [_credential(c) for c in store.panel3_credentials]


@router.post(
    "/credentials", response_model=CredentialResponse, status_code=status.HTTP_201_CREATED
)
async def create_credential(
    payload: Panel3CredentialCreate, store: CampaignDep
) -> CredentialResponse:
    return _credential(await store.add_panel3_credential(payload))


@router.patch("/credentials/{credential_id}", response_model=CredentialResponse)
async def update_credential(
    credential_id: str, payload: Panel3CredentialUpdate, store: CampaignDep
) -> CredentialResponse:
    return _credential(await store.update_panel3_credential(credential_id, payload))


@router.delete("/credentials/{credential_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_credential(credential_id: str, store: CampaignDep) -> Response:
    await store.delete_panel3_credential(credential_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Campaign reports


@router.get("/reports", response_model=list[CampaignReportResponse])
async def list_reports(store: CampaignDep) -> list[CampaignReportResponse]:
    return [_report(store, r) for r in store.campaign_reports]


@router.post(
    "/reports", response_model=CampaignReportResponse, status_code=status.HTTP_201_CREATED
)
async def create_report(
    payload: CampaignReportCreate, store: CampaignDep
) -> CampaignReportResponse:
    """File a campaign report. It always starts as pending."""
    return _report(store, await store.add_campaign_report(payload))


@router.patch("/reports/{report_id}", response_model=CampaignReportResponse)
async def update_report(
    report_id: str, payload: CampaignReportUpdate, store: CampaignDep
) -> CampaignReportResponse:
    return _report(store, await store.update_campaign_report(report_id, payload))


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: str, store: CampaignDep) -> Response:
    await store.delete_campaign_report(report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/audit-log", response_model=list[AuditLog])
async def audit_log(store: CampaignDep) -> list[AuditLog]:
    """Most recent audit entries, newest first."""
    return store.audit_logs
