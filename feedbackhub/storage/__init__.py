"""
Storage component.

Access to the relational datastore holding the projects and feedback tables.
"""

import logging
from typing import Optional

from feedbackhub.config import Settings, settings as default_settings
from feedbackhub.storage.base import Datastore, PROJECTS_TABLE, FEEDBACK_TABLE
from feedbackhub.storage.memory_store import InMemoryDatastore
from feedbackhub.storage.rest_store import RestDatastore
from feedbackhub.utils.error_handling import ConfigurationError


logger = logging.getLogger(__name__)


def create_datastore(config: Optional[Settings] = None) -> Datastore:
    """
    Build the datastore selected by DATASTORE_BACKEND.

    Raises:
        ConfigurationError: If the backend is unknown or incompletely configured
    """
    config = config or default_settings

    if config.datastore_backend == "memory":
        logger.info("Using in-memory datastore")
        return InMemoryDatastore()

    if config.datastore_backend == "rest":
        if not config.supabase_url or not config.supabase_key:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_KEY are required for the REST datastore",
                component="storage"
            )
        logger.info(f"Using REST datastore at {config.supabase_url}")
        return RestDatastore(
            config.supabase_url,
            config.supabase_key,
            timeout=config.datastore_timeout_seconds
        )

    raise ConfigurationError(f"Unknown datastore backend: {config.datastore_backend}", component="storage")


__all__ = [
    "Datastore",
    "InMemoryDatastore",
    "RestDatastore",
    "PROJECTS_TABLE",
    "FEEDBACK_TABLE",
    "create_datastore"
]
