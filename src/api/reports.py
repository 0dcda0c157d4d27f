"""Dashboard and report endpoints over the derived financial values."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Query
from pydantic import BaseModel

from src.api.deps import StoreDep
from src.core.config import settings
from src.store.entities import Payment, Project

router = APIRouter(prefix="/api/reports", tags=["reports"])


class DashboardResponse(BaseModel):
    """Headline numbers for the dashboard."""

    total_income_this_month: Decimal
    total_pending_overall: Decimal
    total_active_projects: int
    overdue_projects_count: int


class MonthlyIncomeResponse(BaseModel):
    year: int
    month: int
    income: Decimal


class MonthlyReportResponse(BaseModel):
    """Detailed report for one month. See MonthlyReportSummary."""

    year: int
    month: int
    new_projects_count: int
    total_projects_amount: Decimal
    payments_for_new_projects: Decimal
    payments_for_other_projects: Decimal
    total_payments_received: Decimal
    total_pending_amount_for_month_projects: Decimal
    total_completed_amount_for_month_projects: Decimal
    new_projects: list[Project]
    payments_received: list[Payment]
    due_projects: list[Project]


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(store: StoreDep) -> DashboardResponse:
    today = date.today()
    return DashboardResponse(
        total_income_this_month=store.total_income_this_month(today),
        total_pending_overall=store.total_pending_overall(),
        total_active_projects=store.total_active_projects(),
        overdue_projects_count=len(store.overdue_projects(today)),
    )


@router.get("/income-by-month", response_model=list[MonthlyIncomeResponse])
async def income_by_month(
    store: StoreDep,
    months: int | None = Query(default=None, ge=1, le=60),
) -> list[MonthlyIncomeResponse]:
    """Income per calendar month, oldest first, zero-filled."""
    lookback = months or settings.income_lookback_months
    return [
        MonthlyIncomeResponse(year=entry.year, month=entry.month, income=entry.income)
        for entry in store.income_by_month(lookback)
    ]


@router.get("/overdue", response_model=list[Project])
async def overdue(store: StoreDep) -> list[Project]:
    """Active projects past due with money still pending."""
    return store.overdue_projects()


@router.get("/monthly", response_model=MonthlyReportResponse)
async def monthly_report(
    store: StoreDep,
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
) -> MonthlyReportResponse:
    summary = store.monthly_report_summary(year, month)
    return MonthlyReportResponse(
        year=summary.year,
        month=summary.month,
        new_projects_count=summary.new_projects_count,
        total_projects_amount=summary.total_projects_amount,
        payments_for_new_projects=summary.payments_for_new_projects,
        payments_for_other_projects=summary.payments_for_other_projects,
        total_payments_received=summary.total_payments_received,
        total_pending_amount_for_month_projects=summary.total_pending_amount_for_month_projects,
        total_completed_amount_for_month_projects=summary.total_completed_amount_for_month_projects,
        new_projects=list(summary.new_projects),
        payments_received=list(summary.payments_received),
        due_projects=list(summary.due_projects),
    )
