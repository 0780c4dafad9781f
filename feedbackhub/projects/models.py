"""
Data models for the Projects component.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    """
    Request body for creating a project.

    The owner email is accepted as either `ownerEmail` or `owner_email`.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    owner_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("ownerEmail", "owner_email")
    )


class Project(BaseModel):
    """A stored row of the projects table."""
    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    name: str
    slug: str
    owner_email: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectFind(BaseModel):
    """Request body for recovering a project by name and owner email."""
    name: Optional[str] = None
    email: Optional[str] = None


class ProjectUserRequest(BaseModel):
    """Request body for listing an owner's projects."""
    email: Optional[str] = None


class ProjectResponse(BaseModel):
    """Response wrapping a single project."""
    success: bool = True
    project: Project


class ProjectFindResponse(BaseModel):
    """Response for a project found by name and email."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    project: Project
    dashboard_url: str = Field(..., alias="dashboardUrl")
    feedback_url: str = Field(..., alias="feedbackUrl")


class ProjectListResponse(BaseModel):
    """Response for an owner's project list."""
    success: bool = True
    projects: List[Project] = Field(default_factory=list)
