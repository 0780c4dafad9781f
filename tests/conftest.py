"""
Shared fixtures for Feedback Hub tests.
"""

import os

# Keep tests away from real services
os.environ["DATASTORE_BACKEND"] = "memory"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from feedbackhub.analysis import AnalysisClient, FeedbackAnalysis, SentimentLabel
from feedbackhub.api_gateway.gateway import app
from feedbackhub.dependencies import get_analysis_client, get_datastore
from feedbackhub.feedback.manager import FeedbackManager
from feedbackhub.storage import InMemoryDatastore
from feedbackhub.utils.error_handling import AnalysisUnavailable


@pytest.fixture
def datastore():
    """Create an empty in-memory datastore."""
    return InMemoryDatastore()


@pytest.fixture
def sample_analysis():
    """A well-formed language-model analysis."""
    return FeedbackAnalysis(
        sentiment=0.8,
        sentiment_label=SentimentLabel.POSITIVE,
        categories=["praise"],
        keywords=["speed", "design"],
        priority="low",
        summary="User loves the new dashboard",
        action_required=False
    )


@pytest.fixture
def analysis_client(sample_analysis):
    """Mock analysis client that succeeds."""
    client = MagicMock(spec=AnalysisClient)
    client.available = True
    client.model = "gpt-3.5-turbo"
    client.analyze_feedback = AsyncMock(return_value=sample_analysis)
    client.generate_report = AsyncMock(return_value={})
    return client


@pytest.fixture
def failing_analysis_client():
    """Mock analysis client whose every call fails."""
    client = MagicMock(spec=AnalysisClient)
    client.available = False
    client.model = "gpt-3.5-turbo"
    client.analyze_feedback = AsyncMock(side_effect=AnalysisUnavailable("OpenAI client not initialized"))
    client.generate_report = AsyncMock(side_effect=AnalysisUnavailable("OpenAI client not initialized"))
    return client


@pytest.fixture
def feedback_manager(datastore, failing_analysis_client):
    """Feedback manager that always uses the rating-based fallback."""
    return FeedbackManager(datastore, failing_analysis_client)


@pytest.fixture
def client(datastore, failing_analysis_client):
    """Test client wired to the in-memory datastore and a failing analysis client."""
    app.dependency_overrides[get_datastore] = lambda: datastore
    app.dependency_overrides[get_analysis_client] = lambda: failing_analysis_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
