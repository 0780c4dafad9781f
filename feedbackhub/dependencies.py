"""
Shared FastAPI dependencies.

The datastore and analysis client are built once per process from settings.
Tests replace them through `app.dependency_overrides`.
"""

import functools

from feedbackhub.analysis import AnalysisClient
from feedbackhub.storage import Datastore, create_datastore


@functools.lru_cache(maxsize=1)
def get_datastore() -> Datastore:
    """Get the process-wide datastore."""
    return create_datastore()


@functools.lru_cache(maxsize=1)
def get_analysis_client() -> AnalysisClient:
    """Get the process-wide analysis client."""
    return AnalysisClient.from_settings()


async def close_dependencies() -> None:
    """Close clients built by the providers above."""
    if get_datastore.cache_info().currsize:
        await get_datastore().close()
        get_datastore.cache_clear()
    get_analysis_client.cache_clear()
