"""
Data models for the Feedback component.

Stored records use the datastore's snake_case column names; derived analysis
and statistics are serialized in camelCase for the dashboard.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from feedbackhub.analysis.models import FeedbackAnalysis, SentimentLabel


class FeedbackCreate(BaseModel):
    """
    Request body for a form submission.

    Required fields are optional here so that a missing value is reported
    as a 400 with a readable message.
    """
    project_id: Optional[Union[int, str]] = None
    content: Optional[str] = None
    rating: Optional[int] = None
    email: Optional[str] = None


class FeedbackRecord(BaseModel):
    """
    A stored row of the feedback table.
    """
    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    project_id: Union[int, str]
    content: str
    rating: Optional[int] = None
    email: Optional[str] = None
    sentiment: Optional[float] = None
    created_at: Optional[datetime] = None


class EnrichedFeedback(FeedbackRecord):
    """A stored record plus its label, re-derived from the stored score."""
    sentiment_label: SentimentLabel


class SubmittedFeedback(EnrichedFeedback):
    """A freshly stored record with the full analysis attached (not persisted)."""
    ai_analysis: FeedbackAnalysis


class AggregateStats(BaseModel):
    """
    Statistics over a project's feedback, computed per query.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    needs_action: int = 0
    avg_sentiment: float = 0.0
    avg_rating: float = 0.0

    @property
    def sentiment_percentage(self) -> float:
        """Mean sentiment expressed as a percentage."""
        return self.avg_sentiment * 100

    def share(self, count: int) -> float:
        """Percentage of all records that `count` represents."""
        return (count / self.total) * 100 if self.total else 0.0


class FeedbackSubmitResponse(BaseModel):
    """Response for POST /feedback."""
    success: bool = True
    feedback: SubmittedFeedback
    analysis: FeedbackAnalysis


class FeedbackListResponse(BaseModel):
    """Response for GET /feedback."""
    success: bool = True
    feedback: List[EnrichedFeedback] = Field(default_factory=list)
    stats: AggregateStats
