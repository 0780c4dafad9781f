"""
Rating-based fallback for feedback analysis.

Used whenever the language-model service cannot produce an analysis. Nothing
here does I/O, and every function is total.
"""

from typing import Optional

from feedbackhub.analysis.models import (
    FeedbackAnalysis,
    Priority,
    SentimentLabel,
    SUMMARY_MAX_LENGTH
)


POSITIVE_THRESHOLD = 0.3
NEGATIVE_THRESHOLD = -0.3


def sentiment_label(score: Optional[float]) -> SentimentLabel:
    """
    Bucket a stored sentiment score.

    Scores strictly above 0.3 are positive, strictly below -0.3 negative,
    everything else (including a missing score) neutral.
    """
    if score is None:
        return SentimentLabel.NEUTRAL
    if score > POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def rating_sentiment(rating: Optional[int]) -> float:
    """Map a 1-5 rating onto [-1, 1]; no rating maps to 0."""
    if rating is None:
        return 0.0
    return max(-1.0, min(1.0, (rating - 3) / 2))


def rating_label(rating: Optional[int]) -> SentimentLabel:
    """Label from the rating alone: 4-5 positive, 1-2 negative."""
    if rating is None:
        return SentimentLabel.NEUTRAL
    if rating >= 4:
        return SentimentLabel.POSITIVE
    if rating <= 2:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def fallback_analysis(content: str, rating: Optional[int] = None) -> FeedbackAnalysis:
    """
    Build an analysis from the rating alone.

    Args:
        content: Feedback text (only used for the summary)
        rating: Optional 1-5 rating

    Returns:
        Analysis with the same shape the language model produces
    """
    return FeedbackAnalysis(
        sentiment=rating_sentiment(rating),
        sentiment_label=rating_label(rating),
        categories=["general"],
        keywords=[],
        priority=Priority.MEDIUM,
        summary=(content or "")[:SUMMARY_MAX_LENGTH],
        action_required=False
    )
