"""
Analysis component.

Language-model sentiment analysis of feedback, with a deterministic
rating-based fallback.
"""

from feedbackhub.analysis.models import (
    FeedbackAnalysis,
    AnalysisOutcome,
    AnalysisSource,
    SentimentLabel,
    Priority
)
from feedbackhub.analysis.fallback import fallback_analysis, sentiment_label
from feedbackhub.analysis.client import AnalysisClient

__all__ = [
    "FeedbackAnalysis",
    "AnalysisOutcome",
    "AnalysisSource",
    "SentimentLabel",
    "Priority",
    "fallback_analysis",
    "sentiment_label",
    "AnalysisClient"
]
