"""
Data models for the Analysis component.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


SUMMARY_MAX_LENGTH = 100


class SentimentLabel(str, Enum):
    """Three-way bucketing of a sentiment score."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Priority(str, Enum):
    """Urgency of a piece of feedback."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AnalysisSource(str, Enum):
    """Where an analysis or report came from."""
    AI = "ai"
    FALLBACK = "fallback"
    TEMPLATE = "template"


class FeedbackAnalysis(BaseModel):
    """
    Structured metadata for one piece of feedback.

    Serialized with camelCase keys (sentimentLabel, actionRequired).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sentiment: float = Field(..., ge=-1.0, le=1.0)
    sentiment_label: SentimentLabel
    categories: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    priority: Priority = Priority.MEDIUM
    summary: str = ""
    action_required: bool = False

    @field_validator("sentiment_label", mode="before")
    @classmethod
    def _normalize_label(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("summary")
    @classmethod
    def _truncate_summary(cls, value: str) -> str:
        return value[:SUMMARY_MAX_LENGTH]


class AnalysisOutcome(BaseModel):
    """An analysis tagged with where it came from."""
    analysis: FeedbackAnalysis
    source: AnalysisSource

    @property
    def is_fallback(self) -> bool:
        return self.source == AnalysisSource.FALLBACK
