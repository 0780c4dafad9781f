"""
Project Manager for creating and looking up feedback projects.

A project owns a public form, reachable by its slug, and a dashboard,
reachable by its id. Owners are identified by email only.
"""

import logging
import re
import secrets
import string
from typing import List, Optional, Union

from feedbackhub.projects.models import Project
from feedbackhub.storage import Datastore, PROJECTS_TABLE
from feedbackhub.utils.error_handling import NotFoundError, ValidationError


logger = logging.getLogger(__name__)

SLUG_ALPHABET = string.ascii_letters + string.digits + "_-"
SLUG_SUFFIX_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    """Lowercase and strip an owner email."""
    return (email or "").strip().lower()


def generate_slug(name: str) -> str:
    """
    Build a URL slug for a project name.

    The name is lowercased, whitespace runs become "-", and a random
    six-character suffix is appended so equal names get distinct slugs.
    """
    base = re.sub(r"\s+", "-", name.strip().lower())
    base = re.sub(r"[^a-z0-9_-]", "", base) or "project"
    suffix = "".join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))
    return f"{base}-{suffix}"


class ProjectManager:
    """
    Handles project creation and lookup.
    """

    def __init__(self, datastore: Datastore):
        self.datastore = datastore

    async def create_project(self,
                             name: Optional[str],
                             owner_email: Optional[str],
                             description: Optional[str] = None) -> Project:
        """
        Create a project with a fresh slug.

        Args:
            name: Project name
            owner_email: Owner's email, normalized before storage
            description: Optional description

        Returns:
            The stored project

        Raises:
            ValidationError: If the email or name is missing
            PersistenceError: If the insert fails
        """
        email = normalize_email(owner_email)
        if not email:
            raise ValidationError("Email is required", component="projects")
        if not name or not name.strip():
            raise ValidationError("Project name is required", component="projects")

        row = {
            "name": name.strip(),
            "slug": generate_slug(name),
            "description": description,
            "owner_email": email
        }
        stored = await self.datastore.insert(PROJECTS_TABLE, row)
        project = Project.model_validate(stored)

        logger.info(f"Created project {project.id} ({project.slug})")
        return project

    async def find_project(self, name: Optional[str], email: Optional[str]) -> Project:
        """
        Recover a project from its exact name and owner email.

        Raises:
            ValidationError: If name or email is missing
            NotFoundError: If no project matches
        """
        if not name or not name.strip() or not normalize_email(email):
            raise ValidationError("Project name and email are required", component="projects")

        row = await self.datastore.select_one(
            PROJECTS_TABLE,
            {"name": name.strip(), "owner_email": normalize_email(email)}
        )
        if row is None:
            raise NotFoundError(
                "Project not found. Please check your project name and email.",
                component="projects"
            )
        return Project.model_validate(row)

    async def list_projects(self, email: Optional[str]) -> List[Project]:
        """
        List an owner's projects, newest first.

        Raises:
            ValidationError: If email is missing
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required", component="projects")

        rows = await self.datastore.select(
            PROJECTS_TABLE,
            filters={"owner_email": email},
            order="created_at.desc"
        )
        return [Project.model_validate(row) for row in rows]

    async def get_project(self, project_id: Union[int, str]) -> Project:
        """Look up a project for its dashboard."""
        row = await self.datastore.select_one(PROJECTS_TABLE, {"id": str(project_id)})
        if row is None:
            raise NotFoundError("Project not found", component="projects")
        return Project.model_validate(row)

    async def get_project_by_slug(self, slug: str) -> Project:
        """Look up a project for its public feedback form."""
        row = await self.datastore.select_one(PROJECTS_TABLE, {"slug": slug})
        if row is None:
            raise NotFoundError("Project not found", component="projects")
        return Project.model_validate(row)
