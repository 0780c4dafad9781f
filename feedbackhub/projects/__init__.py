"""
Projects component.

Create projects and look them up for dashboards and public forms.
"""

from feedbackhub.projects.models import Project, ProjectCreate
from feedbackhub.projects.manager import ProjectManager, generate_slug, normalize_email

__all__ = [
    "Project",
    "ProjectCreate",
    "ProjectManager",
    "generate_slug",
    "normalize_email"
]
