"""
Feedback component.

Collect form submissions and serve them back with derived labels and
statistics.
"""

from feedbackhub.feedback.models import (
    FeedbackCreate,
    FeedbackRecord,
    EnrichedFeedback,
    SubmittedFeedback,
    AggregateStats
)
from feedbackhub.feedback.manager import FeedbackManager, compute_stats, enrich

__all__ = [
    "FeedbackCreate",
    "FeedbackRecord",
    "EnrichedFeedback",
    "SubmittedFeedback",
    "AggregateStats",
    "FeedbackManager",
    "compute_stats",
    "enrich"
]
