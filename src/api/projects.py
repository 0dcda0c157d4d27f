"""Projects API endpoints."""

from fastapi import APIRouter, HTTPException, Query, Response, status

from src.api.deps import StoreDep
from src.models.project import ProjectStatus
from src.store.entities import ProjectCreate, ProjectUpdate, ProjectWithCalculations
from src.store.freelancer import FreelancerStore

router = APIRouter(prefix="/api/projects", tags=["projects"])


def _with_calculations(store: FreelancerStore, project_id: str) -> ProjectWithCalculations:
    project = store.project_with_calculations(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post(
    "", response_model=ProjectWithCalculations, status_code=status.HTTP_201_CREATED
)
async def create_project(payload: ProjectCreate, store: StoreDep) -> ProjectWithCalculations:
    """Create a project. Status defaults to active."""
    project = await store.add_project(payload)
    return _with_calculations(store, project.id)


@router.get("", response_model=list[ProjectWithCalculations])
async def list_projects(
    store: StoreDep,
    client_id: str | None = Query(default=None),
    project_status: ProjectStatus | None = Query(default=None, alias="status"),
) -> list[ProjectWithCalculations]:
    """List projects with paid and pending amounts."""
    return [
        _with_calculations(store, project.id)
        for project in store.projects
        if (client_id is None or project.client_id == client_id)
        and (project_status is None or project.status is project_status)
    ]


@router.get("/{project_id}", response_model=ProjectWithCalculations)
async def get_project(project_id: str, store: StoreDep) -> ProjectWithCalculations:
    """Get a project with paid and pending amounts."""
    return _with_calculations(store, project_id)


@router.patch("/{project_id}", response_model=ProjectWithCalculations)
async def update_project(
    project_id: str, payload: ProjectUpdate, store: StoreDep
) -> ProjectWithCalculations:
    """Partially update a project, including a manual status change."""
    await store.update_project(project_id, payload)
    return _with_calculations(store, project_id)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, store: StoreDep) -> Response:
    """Delete a project with its payments."""
    await store.delete_project(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
