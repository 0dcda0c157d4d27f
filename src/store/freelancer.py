"""In-memory mirror of a freelancer's clients, projects and payments.

One FreelancerStore is built per signed-in session and injected wherever it
is needed. Reads are synchronous over memory; every mutator is a single
gateway round trip followed by the matching in-memory change. Concurrent
mutators are not serialized: two overlapping updates to the same record
resolve as last-write-wins.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.core.errors import InvalidReference, PersistenceFailure
from src.core.logging import get_logger
from src.store import calculator
from src.store.base import WriteThroughStore, replace_record
from src.store.calculator import MonthlyIncome, MonthlyReportSummary
from src.store.entities import (
    PROJECT_REQUIRED_FIELDS,
    BusinessProfile,
    BusinessProfileUpdate,
    Client,
    ClientCreate,
    ClientUpdate,
    Payment,
    PaymentCreate,
    PaymentMethod,
    PaymentMethodCreate,
    PaymentMethodUpdate,
    PaymentUpdate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    ProjectWithCalculations,
    Snapshot,
    patch_values,
)
from src.store.gateway import PersistenceGateway
from src.store.reconciliation import reconcile_project_statuses
from src.store.session import SessionProvider

logger = get_logger(__name__)

CLIENTS = "clients"
PROJECTS = "projects"
PAYMENTS = "payments"
PAYMENT_METHODS = "payment_methods"
BUSINESS_PROFILES = "business_profiles"


class FreelancerStore(WriteThroughStore):
    """Clients, projects, payments, payment methods and business profile.

    Serves empty collections until the session provider binds an identity,
    and reloads everything whenever that identity changes.
    """

    def __init__(self, gateway: PersistenceGateway, session: SessionProvider) -> None:
        super().__init__(gateway, session)
        self._clients: list[Client] = []
        self._projects: list[Project] = []
        self._payments: list[Payment] = []
        self._payment_methods: list[PaymentMethod] = []
        self._business_profile: BusinessProfile | None = None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def clients(self) -> tuple[Client, ...]:
        return tuple(self._clients)

    @property
    def projects(self) -> tuple[Project, ...]:
        return tuple(self._projects)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    @property
    def payment_methods(self) -> tuple[PaymentMethod, ...]:
        return tuple(self._payment_methods)

    @property
    def business_profile(self) -> BusinessProfile | None:
        return self._business_profile

    def snapshot(self) -> Snapshot:
        return Snapshot(
            clients=self.clients,
            projects=self.projects,
            payments=self.payments,
            payment_methods=self.payment_methods,
            business_profile=self._business_profile,
        )

    def get_client(self, client_id: str) -> Client | None:
        return next((c for c in self._clients if c.id == client_id), None)

    def get_project(self, project_id: str) -> Project | None:
        return next((p for p in self._projects if p.id == project_id), None)

    def get_payment(self, payment_id: str) -> Payment | None:
        return next((p for p in self._payments if p.id == payment_id), None)

    # Calculator bound to the current snapshot

    def paid_amount(self, project_id: str) -> Decimal:
        return calculator.paid_amount(self.snapshot(), project_id)

    def pending_amount(self, project_id: str) -> Decimal:
        return calculator.pending_amount(self.snapshot(), project_id)

    def project_with_calculations(self, project_id: str) -> ProjectWithCalculations | None:
        return calculator.project_with_calculations(self.snapshot(), project_id)

    def pending_amount_for_client(self, client_id: str) -> Decimal:
        return calculator.pending_amount_for_client(self.snapshot(), client_id)

    def total_income_this_month(self, today: date | None = None) -> Decimal:
        return calculator.total_income_this_month(self.snapshot(), today)

    def total_pending_overall(self) -> Decimal:
        return calculator.total_pending_overall(self.snapshot())

    def total_active_projects(self) -> int:
        return calculator.total_active_projects(self.snapshot())

    def overdue_projects(self, today: date | None = None) -> list[Project]:
        return calculator.overdue_projects(self.snapshot(), today)

    def income_by_month(
        self,
        lookback_months: int = calculator.DEFAULT_LOOKBACK_MONTHS,
        today: date | None = None,
    ) -> list[MonthlyIncome]:
        return calculator.income_by_month(self.snapshot(), lookback_months, today)

    def monthly_report_summary(self, year: int, month: int) -> MonthlyReportSummary:
        return calculator.monthly_report_summary(self.snapshot(), year, month)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _clear(self) -> None:
        self._clients = []
        self._projects = []
        self._payments = []
        self._payment_methods = []
        self._business_profile = None

    async def load_all(self) -> None:
        """Replace every collection from the gateway for the bound identity.

        With no identity the collections are emptied. On failure they are
        emptied as well and the error is raised; there is no retry.
        """
        identity = self.identity
        if identity is None:
            self._clear()
            return

        self.loading = True
        try:
            clients = await self._gateway.list(CLIENTS, identity)
            projects = await self._gateway.list(PROJECTS, identity)
            payments = await self._gateway.list(PAYMENTS, identity)
            methods = await self._gateway.list(PAYMENT_METHODS, identity)
            profiles = await self._gateway.list(BUSINESS_PROFILES, identity, limit=1)
        except PersistenceFailure:
            self._clear()
            logger.warning("freelancer_data_load_failed", user_id=identity)
            raise
        finally:
            self.loading = False

        self._clients = [Client.model_validate(row) for row in clients]
        self._projects = [Project.model_validate(row) for row in projects]
        self._payments = [Payment.model_validate(row) for row in payments]
        self._payment_methods = [PaymentMethod.model_validate(row) for row in methods]
        self._business_profile = (
            BusinessProfile.model_validate(profiles[0]) if profiles else None
        )
        logger.info(
            "freelancer_data_loaded",
            user_id=identity,
            clients=len(self._clients),
            projects=len(self._projects),
            payments=len(self._payments),
        )

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    async def add_client(self, data: ClientCreate) -> Client:
        client = await self._insert(CLIENTS, Client, data.model_dump())
        self._clients.append(client)
        logger.info("client_added", client_id=client.id)
        return client

    async def update_client(self, client_id: str, patch: ClientUpdate) -> Client:
        row = await self._update(CLIENTS, client_id, patch_values(patch, required=("name",)))
        self._clients = replace_record(self._clients, Client, row)
        return self.get_client(client_id)

    async def delete_client(self, client_id: str) -> None:
        """Delete a client together with its projects and payments."""
        await self._delete(CLIENTS, client_id)
        self._clients = [c for c in self._clients if c.id != client_id]
        self._projects = [p for p in self._projects if p.client_id != client_id]
        self._payments = [p for p in self._payments if p.client_id != client_id]
        logger.info("client_deleted", client_id=client_id)

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def _require_client(self, client_id: str) -> Client:
        client = self.get_client(client_id)
        if client is None:
            raise InvalidReference(f"Unknown client: {client_id}")
        return client

    def _require_project(self, project_id: str) -> Project:
        project = self.get_project(project_id)
        if project is None:
            raise InvalidReference(f"Unknown project: {project_id}")
        return project

    async def add_project(self, data: ProjectCreate) -> Project:
        self._require_client(data.client_id)
        project = await self._insert(PROJECTS, Project, data.model_dump())
        self._projects.append(project)
        logger.info("project_added", project_id=project.id, client_id=project.client_id)
        return project

    async def update_project(self, project_id: str, patch: ProjectUpdate) -> Project:
        """Patch a project. Status can be set to anything manually."""
        values = patch_values(patch, required=PROJECT_REQUIRED_FIELDS)
        row = await self._update(PROJECTS, project_id, values)
        self._projects = replace_record(self._projects, Project, row)
        return self.get_project(project_id)

    async def delete_project(self, project_id: str) -> None:
        """Delete a project together with its payments."""
        await self._delete(PROJECTS, project_id)
        self._projects = [p for p in self._projects if p.id != project_id]
        self._payments = [p for p in self._payments if p.project_id != project_id]
        logger.info("project_deleted", project_id=project_id)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    async def add_payment(self, data: PaymentCreate) -> Payment:
        project = self._require_project(data.project_id)
        if data.client_id is not None and data.client_id != project.client_id:
            raise InvalidReference(
                f"Payment client {data.client_id} does not own project {project.id}"
            )
        values = {**data.model_dump(), "client_id": project.client_id}
        payment = await self._insert(PAYMENTS, Payment, values)
        self._payments.append(payment)
        logger.info(
            "payment_added",
            payment_id=payment.id,
            project_id=payment.project_id,
            amount=str(payment.amount),
        )
        await self._after_payments_changed()
        return payment

    async def update_payment(self, payment_id: str, patch: PaymentUpdate) -> Payment:
        values = patch_values(patch, required=("project_id", "amount", "payment_date"))
        if "project_id" in values:
            values["client_id"] = self._require_project(values["project_id"]).client_id
        # payments carry no updated_at
        row = await self._update(PAYMENTS, payment_id, values, stamp=False)
        self._payments = replace_record(self._payments, Payment, row)
        await self._after_payments_changed()
        return self.get_payment(payment_id)

    async def delete_payment(self, payment_id: str) -> None:
        await self._delete(PAYMENTS, payment_id)
        self._payments = [p for p in self._payments if p.id != payment_id]
        logger.info("payment_deleted", payment_id=payment_id)
        await self._after_payments_changed()

    async def _after_payments_changed(self) -> None:
        """Run reconciliation once the payment change is committed.

        A failed status write is logged and left for the next payment
        change; it does not fail the payment mutation that triggered it.
        """
        try:
            await reconcile_project_statuses(self)
        except PersistenceFailure as exc:
            logger.exception(
                "project_auto_complete_failed", user_id=self.identity, error=str(exc)
            )

    # -------------------------------------------------------------------------
    # Payment methods
    # -------------------------------------------------------------------------

    async def add_payment_method(self, data: PaymentMethodCreate) -> PaymentMethod:
        method = await self._insert(PAYMENT_METHODS, PaymentMethod, data.model_dump())
        self._payment_methods.append(method)
        return method

    async def update_payment_method(
        self, method_id: str, patch: PaymentMethodUpdate
    ) -> PaymentMethod:
        values = patch_values(patch, required=("name", "is_default"))
        row = await self._update(PAYMENT_METHODS, method_id, values)
        self._payment_methods = replace_record(self._payment_methods, PaymentMethod, row)
        return next(m for m in self._payment_methods if m.id == method_id)

    async def delete_payment_method(self, method_id: str) -> None:
        await self._delete(PAYMENT_METHODS, method_id)
        self._payment_methods = [m for m in self._payment_methods if m.id != method_id]

    async def set_default_payment_method(self, method_id: str) -> PaymentMethod:
        """Make one method the default.

        Other defaults are cleared one update at a time before the new one
        is set. This is not atomic: a failure part way, or a concurrent
        writer, can leave zero or two defaults.
        """
        for method in list(self._payment_methods):
            if method.id != method_id and method.is_default:
                await self.update_payment_method(
                    method.id, PaymentMethodUpdate(is_default=False)
                )
        return await self.update_payment_method(
            method_id, PaymentMethodUpdate(is_default=True)
        )

    # -------------------------------------------------------------------------
    # Business profile
    # -------------------------------------------------------------------------

    async def save_business_profile(self, patch: BusinessProfileUpdate) -> BusinessProfile:
        """Create the profile on first save, update it afterwards."""
        values = patch_values(patch)
        if self._business_profile is None:
            self._business_profile = await self._insert(
                BUSINESS_PROFILES, BusinessProfile, values
            )
        else:
            row = await self._update(BUSINESS_PROFILES, self._business_profile.id, values)
            self._business_profile = BusinessProfile.model_validate(
                {**self._business_profile.model_dump(), **row}
            )
        return self._business_profile
