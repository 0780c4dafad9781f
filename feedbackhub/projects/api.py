"""
API endpoints for the Projects component.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from feedbackhub.dependencies import get_datastore
from feedbackhub.projects.manager import ProjectManager
from feedbackhub.projects.models import (
    ProjectCreate,
    ProjectFind,
    ProjectFindResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUserRequest
)
from feedbackhub.storage import Datastore


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    responses={404: {"description": "Project not found"}}
)


def get_project_manager(datastore: Datastore = Depends(get_datastore)) -> ProjectManager:
    """Get a project manager instance."""
    return ProjectManager(datastore)


@router.post("")
async def create_project(
    project_data: ProjectCreate,
    manager: ProjectManager = Depends(get_project_manager)
) -> Dict[str, Any]:
    """
    Create a project.

    The project's fields are returned both under `project` and at the top
    level of the response.
    """
    project = await manager.create_project(
        name=project_data.name,
        owner_email=project_data.owner_email,
        description=project_data.description
    )
    data = project.model_dump(mode="json")
    return {"success": True, "project": data, **data}


@router.post("/find", response_model=ProjectFindResponse)
async def find_project(
    request: ProjectFind,
    manager: ProjectManager = Depends(get_project_manager)
):
    """
    Recover a project by its name and owner email.
    """
    project = await manager.find_project(request.name, request.email)
    return ProjectFindResponse(
        project=project,
        dashboard_url=f"/dashboard/{project.id}",
        feedback_url=f"/f/{project.slug}"
    )


@router.post("/user", response_model=ProjectListResponse)
async def list_user_projects(
    request: ProjectUserRequest,
    manager: ProjectManager = Depends(get_project_manager)
):
    """
    List the projects owned by an email, newest first.
    """
    projects = await manager.list_projects(request.email)
    return ProjectListResponse(projects=projects)


@router.get("/slug/{slug}", response_model=ProjectResponse)
async def get_project_by_slug(
    slug: str,
    manager: ProjectManager = Depends(get_project_manager)
):
    """
    Get the project behind a public feedback form.
    """
    project = await manager.get_project_by_slug(slug)
    return ProjectResponse(project=project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    manager: ProjectManager = Depends(get_project_manager)
):
    """
    Get a project for its dashboard.
    """
    project = await manager.get_project(project_id)
    return ProjectResponse(project=project)
