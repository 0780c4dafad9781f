"""
Feedback Manager for ingesting and querying project feedback.

Submissions are analyzed by the language model when it is available and by
the rating-based fallback otherwise. Only the sentiment score is stored;
labels are re-derived on every read.
"""

import logging
from typing import Any, List, Optional, Tuple, Union

from feedbackhub.config import settings
from feedbackhub.analysis import (
    AnalysisClient,
    AnalysisOutcome,
    AnalysisSource,
    SentimentLabel,
    fallback_analysis,
    sentiment_label
)
from feedbackhub.feedback.models import (
    AggregateStats,
    EnrichedFeedback,
    FeedbackRecord,
    SubmittedFeedback
)
from feedbackhub.storage import Datastore, FEEDBACK_TABLE
from feedbackhub.utils.error_handling import AnalysisUnavailable, ValidationError


logger = logging.getLogger(__name__)

NEWEST_FIRST = "created_at.desc"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def enrich(record: FeedbackRecord) -> EnrichedFeedback:
    """Attach the label derived from the stored sentiment score."""
    return EnrichedFeedback(
        **record.model_dump(),
        sentiment_label=sentiment_label(record.sentiment)
    )


def compute_stats(records: List[EnrichedFeedback]) -> AggregateStats:
    """
    Aggregate label counts and means over a project's feedback.

    Empty inputs yield zero means rather than NaN.
    """
    total = len(records)
    if total == 0:
        return AggregateStats()

    ratings = [f.rating for f in records if f.rating is not None]

    return AggregateStats(
        total=total,
        positive=sum(1 for f in records if f.sentiment_label == SentimentLabel.POSITIVE),
        negative=sum(1 for f in records if f.sentiment_label == SentimentLabel.NEGATIVE),
        neutral=sum(1 for f in records if f.sentiment_label == SentimentLabel.NEUTRAL),
        needs_action=0,
        avg_sentiment=sum(f.sentiment or 0.0 for f in records) / total,
        avg_rating=sum(ratings) / len(ratings) if ratings else 0.0
    )


class FeedbackManager:
    """
    Handles submission and retrieval of project feedback.
    """

    def __init__(self,
                 datastore: Datastore,
                 analysis_client: AnalysisClient,
                 max_length: int = settings.feedback_max_length):
        """
        Initialize the feedback manager.

        Args:
            datastore: Datastore holding the feedback table
            analysis_client: Language-model analysis client
            max_length: Maximum accepted content length
        """
        self.datastore = datastore
        self.analysis_client = analysis_client
        self.max_length = max_length

    async def analyze(self, content: str, rating: Optional[int] = None) -> AnalysisOutcome:
        """
        Analyze feedback, substituting the rating-based fallback on failure.

        Returns:
            The analysis tagged with its source
        """
        try:
            analysis = await self.analysis_client.analyze_feedback(content, rating)
            return AnalysisOutcome(analysis=analysis, source=AnalysisSource.AI)
        except AnalysisUnavailable as e:
            logger.warning(f"AI analysis failed, using rating-based defaults: {e}")
            return AnalysisOutcome(
                analysis=fallback_analysis(content, rating),
                source=AnalysisSource.FALLBACK
            )

    def _validate_submission(self,
                             project_id: Optional[Union[int, str]],
                             content: Optional[str],
                             rating: Optional[int]) -> None:
        if _is_blank(project_id) or _is_blank(content):
            raise ValidationError("Project ID and content are required", component="feedback")

        if len(content) > self.max_length:
            raise ValidationError(
                f"Feedback must be at most {self.max_length} characters",
                component="feedback",
                details={"reason": f"Received {len(content)} characters"}
            )

        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", component="feedback")

    async def submit_feedback(self,
                              project_id: Optional[Union[int, str]],
                              content: Optional[str],
                              rating: Optional[int] = None,
                              email: Optional[str] = None) -> Tuple[SubmittedFeedback, AnalysisOutcome]:
        """
        Validate, analyze and store one submission.

        Args:
            project_id: Owning project
            content: Feedback text
            rating: Optional 1-5 rating
            email: Optional contact email

        Returns:
            The stored record (with label and analysis attached) and the analysis outcome

        Raises:
            ValidationError: If a required field is missing or out of range
            PersistenceError: If the insert fails
        """
        self._validate_submission(project_id, content, rating)

        outcome = await self.analyze(content, rating)

        # Only the numeric score is persisted
        row = {
            "project_id": str(project_id),
            "content": content,
            "rating": rating,
            "email": email or None,
            "sentiment": outcome.analysis.sentiment
        }
        stored = await self.datastore.insert(FEEDBACK_TABLE, row)
        record = FeedbackRecord.model_validate(stored)

        logger.info(
            f"Stored feedback {record.id} for project {record.project_id} "
            f"(sentiment {outcome.analysis.sentiment:+.2f}, source {outcome.source.value})"
        )

        submitted = SubmittedFeedback(
            **record.model_dump(),
            sentiment_label=sentiment_label(record.sentiment),
            ai_analysis=outcome.analysis
        )
        return submitted, outcome

    async def get_project_feedback(self,
                                   project_id: Optional[Union[int, str]],
                                   limit: Optional[int] = None) -> List[EnrichedFeedback]:
        """
        Fetch a project's feedback, newest first, with derived labels.

        Raises:
            ValidationError: If project_id is missing
            PersistenceError: If the read fails
        """
        if _is_blank(project_id):
            raise ValidationError("Project ID is required", component="feedback")

        rows = await self.datastore.select(
            FEEDBACK_TABLE,
            filters={"project_id": str(project_id)},
            order=NEWEST_FIRST,
            limit=limit
        )
        return [enrich(FeedbackRecord.model_validate(row)) for row in rows]

    async def list_feedback(self,
                            project_id: Optional[Union[int, str]]) -> Tuple[List[EnrichedFeedback], AggregateStats]:
        """
        Fetch all feedback for a project together with aggregate statistics.
        """
        records = await self.get_project_feedback(project_id)
        logger.info(f"Fetched {len(records)} feedback entries for project {project_id}")
        return records, compute_stats(records)
