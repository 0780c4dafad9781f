"""
Shared utilities: error taxonomy and the OpenAI transport.
"""

from feedbackhub.utils.error_handling import (
    FeedbackHubError,
    ValidationError,
    NotFoundError,
    PersistenceError,
    ConfigurationError,
    AnalysisUnavailable,
    AsyncErrorContext,
    catch_and_log
)

__all__ = [
    "FeedbackHubError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "ConfigurationError",
    "AnalysisUnavailable",
    "AsyncErrorContext",
    "catch_and_log"
]
