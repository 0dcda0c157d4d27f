"""Tests for derived financial values over snapshots."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from src.models.project import ProjectStatus
from src.store import calculator
from src.store.entities import Payment, Project, Snapshot

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def make_project(
    project_id: str,
    total: str,
    *,
    client_id: str = "c1",
    start: date = date(2024, 3, 1),
    due: date = date(2024, 3, 31),
    status: ProjectStatus = ProjectStatus.ACTIVE,
) -> Project:
    return Project(
        id=project_id,
        user_id="user-1",
        client_id=client_id,
        title=f"Project {project_id}",
        total_amount=Decimal(total),
        start_date=start,
        due_date=due,
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


def make_payment(
    payment_id: str,
    project_id: str,
    amount: str,
    *,
    client_id: str = "c1",
    on: date = date(2024, 3, 15),
) -> Payment:
    return Payment(
        id=payment_id,
        user_id="user-1",
        project_id=project_id,
        client_id=client_id,
        amount=Decimal(amount),
        payment_date=on,
        created_at=NOW,
    )


class TestProjectAmounts:
    """Tests for paid and pending amounts."""

    def test_paid_and_pending_sum_to_total(self) -> None:
        snapshot = Snapshot(
            projects=(make_project("p1", "5000"),),
            payments=(make_payment("x1", "p1", "1200"), make_payment("x2", "p1", "1300")),
        )
        paid = calculator.paid_amount(snapshot, "p1")
        pending = calculator.pending_amount(snapshot, "p1")

        assert paid == Decimal("2500")
        assert pending == Decimal("2500")
        assert paid + pending == Decimal("5000")

    def test_overpaid_project_has_negative_pending(self) -> None:
        snapshot = Snapshot(
            projects=(make_project("p1", "100"),),
            payments=(make_payment("x1", "p1", "150"),),
        )
        assert calculator.pending_amount(snapshot, "p1") == Decimal("-50")
        assert calculator.paid_amount(snapshot, "p1") + calculator.pending_amount(
            snapshot, "p1"
        ) == Decimal("100")

    def test_unknown_project_is_zero(self) -> None:
        snapshot = Snapshot(projects=(make_project("p1", "100"),))
        assert calculator.pending_amount(snapshot, "missing") == Decimal("0")
        assert calculator.paid_amount(snapshot, "missing") == Decimal("0")
        assert calculator.project_with_calculations(snapshot, "missing") is None

    def test_project_with_calculations(self) -> None:
        snapshot = Snapshot(
            projects=(make_project("p1", "800"),),
            payments=(make_payment("x1", "p1", "300"),),
        )
        project = calculator.project_with_calculations(snapshot, "p1")

        assert project is not None
        assert project.title == "Project p1"
        assert project.paid_amount == Decimal("300")
        assert project.pending_amount == Decimal("500")

    def test_client_pending_is_sum_of_its_projects(self) -> None:
        snapshot = Snapshot(
            projects=(
                make_project("p1", "1000"),
                make_project("p2", "400"),
                make_project("p3", "700", client_id="c2"),
            ),
            payments=(
                make_payment("x1", "p1", "250"),
                make_payment("x2", "p3", "700", client_id="c2"),
            ),
        )
        expected = calculator.pending_amount(snapshot, "p1") + calculator.pending_amount(
            snapshot, "p2"
        )

        assert calculator.pending_amount_for_client(snapshot, "c1") == expected
        assert calculator.pending_amount_for_client(snapshot, "c2") == Decimal("0")
        assert calculator.total_pending_overall(snapshot) == Decimal("1150")


class TestDashboard:
    """Tests for dashboard counters."""

    def test_website_scenario(self) -> None:
        """A half-paid project due this month, seen before and after its due date."""
        today = date(2024, 3, 20)
        snapshot = Snapshot(
            projects=(make_project("website", "5000", due=date(2024, 3, 25)),),
            payments=(make_payment("x1", "website", "2500", on=date(2024, 3, 5)),),
        )

        assert calculator.paid_amount(snapshot, "website") == Decimal("2500")
        assert calculator.pending_amount(snapshot, "website") == Decimal("2500")
        assert calculator.overdue_projects(snapshot, today) == []
        assert calculator.total_income_this_month(snapshot, today) >= Decimal("2500")

        later = date(2024, 3, 26)
        overdue = calculator.overdue_projects(snapshot, later)
        assert [project.id for project in overdue] == ["website"]

    def test_project_due_today_is_not_overdue(self) -> None:
        today = date(2024, 3, 31)
        snapshot = Snapshot(projects=(make_project("p1", "100", due=today),))
        assert calculator.overdue_projects(snapshot, today) == []

    def test_overdue_requires_active_and_pending(self) -> None:
        today = date(2024, 5, 1)
        snapshot = Snapshot(
            projects=(
                make_project("paid", "100"),
                make_project("proposal", "100", status=ProjectStatus.PROPOSAL),
                make_project("open", "100"),
            ),
            payments=(make_payment("x1", "paid", "100"),),
        )
        overdue = calculator.overdue_projects(snapshot, today)
        assert [project.id for project in overdue] == ["open"]

    def test_total_active_projects(self) -> None:
        snapshot = Snapshot(
            projects=(
                make_project("p1", "100"),
                make_project("p2", "100", status=ProjectStatus.COMPLETED),
                make_project("p3", "100"),
            )
        )
        assert calculator.total_active_projects(snapshot) == 2

    def test_income_this_month_ignores_other_months(self) -> None:
        snapshot = Snapshot(
            projects=(make_project("p1", "1000"),),
            payments=(
                make_payment("x1", "p1", "100", on=date(2024, 3, 1)),
                make_payment("x2", "p1", "200", on=date(2024, 2, 29)),
                make_payment("x3", "p1", "300", on=date(2023, 3, 10)),
            ),
        )
        assert calculator.total_income_this_month(snapshot, date(2024, 3, 31)) == Decimal("100")


class TestIncomeByMonth:
    """Tests for the monthly income series."""

    def test_zero_filled_oldest_first(self) -> None:
        result = calculator.income_by_month(Snapshot(), 6, date(2024, 3, 10))

        assert len(result) == 6
        assert [(entry.year, entry.month) for entry in result] == [
            (2023, 10),
            (2023, 11),
            (2023, 12),
            (2024, 1),
            (2024, 2),
            (2024, 3),
        ]
        assert all(entry.income == Decimal("0") for entry in result)

    def test_payments_bucketed_by_month(self) -> None:
        snapshot = Snapshot(
            projects=(make_project("p1", "5000"),),
            payments=(
                make_payment("x1", "p1", "100", on=date(2024, 1, 31)),
                make_payment("x2", "p1", "50", on=date(2024, 1, 2)),
                make_payment("x3", "p1", "75", on=date(2024, 3, 1)),
                make_payment("x4", "p1", "999", on=date(2023, 1, 1)),
            ),
        )
        result = calculator.income_by_month(snapshot, 3, date(2024, 3, 10))

        assert [entry.income for entry in result] == [
            Decimal("150"),
            Decimal("0"),
            Decimal("75"),
        ]

    @pytest.mark.parametrize("months", [0, -3])
    def test_non_positive_lookback_is_empty(self, months: int) -> None:
        assert calculator.income_by_month(Snapshot(), months, date(2024, 3, 10)) == []


class TestMonthlyReportSummary:
    """Tests for the detailed monthly report."""

    @pytest.fixture
    def snapshot(self) -> Snapshot:
        return Snapshot(
            projects=(
                # started and due in March
                make_project("new", "1000"),
                # started in January, due in March, completed
                make_project(
                    "done",
                    "600",
                    start=date(2024, 1, 10),
                    status=ProjectStatus.COMPLETED,
                ),
                # started in February, due in March, overpaid
                make_project("over", "200", start=date(2024, 2, 1)),
                # due in March but cancelled
                make_project(
                    "dropped",
                    "900",
                    start=date(2024, 2, 1),
                    status=ProjectStatus.CANCELLED,
                ),
                # not related to March
                make_project("later", "300", start=date(2024, 4, 1), due=date(2024, 5, 1)),
            ),
            payments=(
                make_payment("x1", "new", "400", on=date(2024, 3, 3)),
                make_payment("x2", "done", "600", on=date(2024, 3, 4)),
                make_payment("x3", "over", "250", on=date(2024, 2, 20)),
                make_payment("x4", "gone", "90", on=date(2024, 3, 9)),
                make_payment("x5", "later", "10", on=date(2024, 4, 2)),
            ),
        )

    def test_buckets(self, snapshot: Snapshot) -> None:
        summary = calculator.monthly_report_summary(snapshot, 2024, 3)

        assert summary.new_projects_count == 1
        assert summary.total_projects_amount == Decimal("1000")
        assert summary.payments_for_new_projects == Decimal("400")
        # payments for projects not in the snapshot count as other
        assert summary.payments_for_other_projects == Decimal("690")
        assert summary.total_payments_received == Decimal("1090")
        # new: 600 pending, over: -50 pending, done and dropped excluded
        assert summary.total_pending_amount_for_month_projects == Decimal("550")
        assert summary.total_completed_amount_for_month_projects == Decimal("600")
        assert [p.id for p in summary.due_projects] == ["new", "done", "over", "dropped"]
        assert [p.id for p in summary.payments_received] == ["x1", "x2", "x4"]

    def test_idempotent(self, snapshot: Snapshot) -> None:
        first = calculator.monthly_report_summary(snapshot, 2024, 3)
        second = calculator.monthly_report_summary(snapshot, 2024, 3)
        assert first == second

    def test_empty_month(self, snapshot: Snapshot) -> None:
        summary = calculator.monthly_report_summary(snapshot, 2020, 1)

        assert summary.new_projects_count == 0
        assert summary.total_payments_received == Decimal("0")
        assert summary.new_projects == ()
        assert summary.due_projects == ()
