"""Project status reconciliation.

After every payment change, any active project whose payments cover its
total is moved to completed through the store's normal update path.

The rule only ever moves active -> completed. It never reopens a completed
project when a payment is later removed; that is a manual edit. Because
it only looks at active projects, its own status writes cannot select the
same project again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.core.logging import get_logger
from src.models.project import ProjectStatus
from src.store.calculator import paid_amount
from src.store.entities import Project, ProjectUpdate, Snapshot

if TYPE_CHECKING:
    from src.store.freelancer import FreelancerStore

logger = get_logger(__name__)


def projects_to_complete(snapshot: Snapshot) -> list[Project]:
    """Active projects whose paid amount has reached their total."""
    return [
        project
        for project in snapshot.projects
        if project.status is ProjectStatus.ACTIVE
        and paid_amount(snapshot, project.id) >= project.total_amount
    ]


async def reconcile_project_statuses(store: "FreelancerStore") -> list[Project]:
    """Complete every fully paid active project.

    Args:
        store: Store whose current snapshot is examined and written through.

    Returns:
        The projects that were moved to completed.
    """
    completed: list[Project] = []
    for project in projects_to_complete(store.snapshot()):
        updated = await store.update_project(
            project.id, ProjectUpdate(status=ProjectStatus.COMPLETED)
        )
        logger.info(
            "project_auto_completed",
            project_id=project.id,
            total_amount=str(project.total_amount),
        )
        completed.append(updated)
    return completed
