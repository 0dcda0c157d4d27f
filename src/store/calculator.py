"""Derived financial values over a store snapshot.

Pure functions; none of them mutate or raise:
- paid_amount / pending_amount: per-project payment totals
- project_with_calculations: project merged with both totals
- pending_amount_for_client / total_pending_overall: rolled-up pending
- total_income_this_month / income_by_month: income over calendar months
- overdue_projects / total_active_projects: dashboard counters
- monthly_report_summary: the detailed monthly report

All money arithmetic uses Decimal. Pending amounts are never clamped, so an
overpaid project has a negative pending amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from src.models.project import ProjectStatus
from src.store.entities import Payment, Project, ProjectWithCalculations, Snapshot

ZERO = Decimal("0")

DEFAULT_LOOKBACK_MONTHS = 6


# =============================================================================
# Result types
# =============================================================================


@dataclass(frozen=True)
class MonthlyIncome:
    """Income received in one calendar month."""

    year: int
    month: int
    income: Decimal


@dataclass(frozen=True)
class MonthlyReportSummary:
    """Detailed report for one calendar month.

    New-project metrics use the project's start date, pending/completed
    metrics use its due date, and payments received in the month are
    attributed by whether their project started in the month.

    Attributes:
        year: Report year.
        month: Report month (1-12).
        new_projects_count: Projects started in the month.
        total_projects_amount: Sum of total_amount of those projects.
        payments_for_new_projects: Payments in the month for projects
            started in the month.
        payments_for_other_projects: Payments in the month for every other
            project (including projects no longer in the snapshot).
        total_payments_received: Sum of the two payment buckets.
        total_pending_amount_for_month_projects: Pending amount of projects
            due in the month that are neither completed nor cancelled.
        total_completed_amount_for_month_projects: total_amount of
            completed projects due in the month.
        new_projects: Projects started in the month.
        payments_received: Payments dated in the month.
        due_projects: Projects due in the month.
    """

    year: int
    month: int
    new_projects_count: int
    total_projects_amount: Decimal
    payments_for_new_projects: Decimal
    payments_for_other_projects: Decimal
    total_payments_received: Decimal
    total_pending_amount_for_month_projects: Decimal
    total_completed_amount_for_month_projects: Decimal
    new_projects: tuple[Project, ...]
    payments_received: tuple[Payment, ...]
    due_projects: tuple[Project, ...]


# =============================================================================
# Helpers
# =============================================================================


def _find_project(snapshot: Snapshot, project_id: str) -> Project | None:
    for project in snapshot.projects:
        if project.id == project_id:
            return project
    return None


def _in_month(value: date, year: int, month: int) -> bool:
    return value.year == year and value.month == month


def _sum_payments(payments: list[Payment] | tuple[Payment, ...]) -> Decimal:
    return sum((payment.amount for payment in payments), ZERO)


def _months_back(today: date, count: int) -> list[tuple[int, int]]:
    """The last `count` (year, month) keys ending at today's month, oldest first."""
    keys: list[tuple[int, int]] = []
    year, month = today.year, today.month
    for _ in range(count):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    keys.reverse()
    return keys


# =============================================================================
# Per-project and per-client amounts
# =============================================================================


def paid_amount(snapshot: Snapshot, project_id: str) -> Decimal:
    """Sum of payments recorded against the project. 0 when there are none."""
    return _sum_payments(
        [payment for payment in snapshot.payments if payment.project_id == project_id]
    )


def pending_amount(snapshot: Snapshot, project_id: str) -> Decimal:
    """total_amount minus paid amount; 0 for an unknown project."""
    project = _find_project(snapshot, project_id)
    if project is None:
        return ZERO
    return project.total_amount - paid_amount(snapshot, project_id)


def project_with_calculations(
    snapshot: Snapshot, project_id: str
) -> ProjectWithCalculations | None:
    """Project merged with paid/pending amounts, or None if it does not exist."""
    project = _find_project(snapshot, project_id)
    if project is None:
        return None
    paid = paid_amount(snapshot, project_id)
    return ProjectWithCalculations(
        **project.model_dump(),
        paid_amount=paid,
        pending_amount=project.total_amount - paid,
    )


def pending_amount_for_client(snapshot: Snapshot, client_id: str) -> Decimal:
    return sum(
        (
            pending_amount(snapshot, project.id)
            for project in snapshot.projects
            if project.client_id == client_id
        ),
        ZERO,
    )


def total_pending_overall(snapshot: Snapshot) -> Decimal:
    return sum(
        (pending_amount(snapshot, project.id) for project in snapshot.projects),
        ZERO,
    )


# =============================================================================
# Dashboard
# =============================================================================


def total_income_this_month(snapshot: Snapshot, today: date | None = None) -> Decimal:
    """Sum of payments dated in the current calendar month."""
    today = today or date.today()
    return _sum_payments(
        [
            payment
            for payment in snapshot.payments
            if _in_month(payment.payment_date, today.year, today.month)
        ]
    )


def total_active_projects(snapshot: Snapshot) -> int:
    return sum(1 for project in snapshot.projects if project.status is ProjectStatus.ACTIVE)


def overdue_projects(snapshot: Snapshot, today: date | None = None) -> list[Project]:
    """Active projects past their due date that still have money pending.

    A project due today is not overdue. Returned in store order.
    """
    today = today or date.today()
    return [
        project
        for project in snapshot.projects
        if project.status is ProjectStatus.ACTIVE
        and project.due_date < today
        and pending_amount(snapshot, project.id) > ZERO
    ]


def income_by_month(
    snapshot: Snapshot,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
    today: date | None = None,
) -> list[MonthlyIncome]:
    """Income for each of the last N calendar months including the current one.

    Every month is present, oldest first, with 0 where nothing was received.
    """
    if lookback_months <= 0:
        return []
    today = today or date.today()
    keys = _months_back(today, lookback_months)
    totals = dict.fromkeys(keys, ZERO)
    for payment in snapshot.payments:
        key = (payment.payment_date.year, payment.payment_date.month)
        if key in totals:
            totals[key] += payment.amount
    return [MonthlyIncome(year=year, month=month, income=totals[(year, month)]) for year, month in keys]


# =============================================================================
# Monthly report
# =============================================================================


def monthly_report_summary(snapshot: Snapshot, year: int, month: int) -> MonthlyReportSummary:
    """Build the detailed report for (year, month)."""
    new_projects = tuple(
        project for project in snapshot.projects if _in_month(project.start_date, year, month)
    )
    new_project_ids = {project.id for project in new_projects}

    payments_received = tuple(
        payment for payment in snapshot.payments if _in_month(payment.payment_date, year, month)
    )
    payments_for_new = _sum_payments(
        [payment for payment in payments_received if payment.project_id in new_project_ids]
    )
    payments_for_other = _sum_payments(
        [payment for payment in payments_received if payment.project_id not in new_project_ids]
    )

    due_projects = tuple(
        project for project in snapshot.projects if _in_month(project.due_date, year, month)
    )
    completed_amount = sum(
        (
            project.total_amount
            for project in due_projects
            if project.status is ProjectStatus.COMPLETED
        ),
        ZERO,
    )
    pending_total = sum(
        (
            pending_amount(snapshot, project.id)
            for project in due_projects
            if project.status not in (ProjectStatus.COMPLETED, ProjectStatus.CANCELLED)
        ),
        ZERO,
    )

    return MonthlyReportSummary(
        year=year,
        month=month,
        new_projects_count=len(new_projects),
        total_projects_amount=sum((project.total_amount for project in new_projects), ZERO),
        payments_for_new_projects=payments_for_new,
        payments_for_other_projects=payments_for_other,
        total_payments_received=payments_for_new + payments_for_other,
        total_pending_amount_for_month_projects=pending_total,
        total_completed_amount_for_month_projects=completed_amount,
        new_projects=new_projects,
        payments_received=payments_received,
        due_projects=due_projects,
    )
