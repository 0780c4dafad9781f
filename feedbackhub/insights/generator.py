"""
Insight Generator for project dashboards.

Builds a single prompt from a project's full feedback corpus and asks the
language model for an actionable report. When the model is unavailable the
report is filled from locally computed statistics instead, so callers always
receive a complete report.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from feedbackhub.config import Settings, settings as default_settings
from feedbackhub.analysis import AnalysisClient, AnalysisSource
from feedbackhub.feedback.manager import FeedbackManager, compute_stats
from feedbackhub.feedback.models import AggregateStats, EnrichedFeedback
from feedbackhub.insights.models import InsightReport
from feedbackhub.utils.error_handling import AnalysisUnavailable, ValidationError


logger = logging.getLogger(__name__)


INSIGHTS_SYSTEM_MESSAGE = (
    "You are an expert product advisor. Analyze the feedback data and provide specific, "
    "actionable insights. Always return valid JSON. Be detailed and reference specific "
    "feedback when making recommendations."
)

DIGEST_SYSTEM_MESSAGE = (
    "You are a customer feedback analyst. Provide actionable insights from feedback data."
)


def overall_mood(avg_sentiment: float) -> str:
    if avg_sentiment > 0.3:
        return "Positive"
    if avg_sentiment < -0.3:
        return "Negative"
    return "Mixed"


def format_feedback_line(index: int, record: EnrichedFeedback, content_key: str = "Feedback") -> str:
    """Render one record as a numbered prompt line."""
    rating = record.rating if record.rating is not None else "N/A"
    return (
        f"{index}. Rating: {rating}/5, Sentiment: {record.sentiment_label.value}, "
        f"{content_key}: \"{record.content}\""
    )


def build_insight_prompt(records: List[EnrichedFeedback],
                         stats: AggregateStats,
                         question: Optional[str] = None) -> str:
    """
    Build the insight prompt for a project's feedback.

    Args:
        records: All feedback records for the project
        stats: Statistics computed over the same records
        question: Optional question from the project owner

    Returns:
        The user prompt
    """
    feedback_lines = "\n".join(
        format_feedback_line(i, record) for i, record in enumerate(records, start=1)
    )

    if question:
        task = f"USER'S SPECIFIC QUESTION: \"{question}\""
        answer_hint = "Detailed, specific answer to the user question based on the feedback data"
    else:
        task = "Task: Provide general improvement recommendations based on the feedback."
        answer_hint = "null"

    return f"""You are a product advisor analyzing customer feedback for actionable insights.

FEEDBACK STATISTICS:
- Total responses: {stats.total}
- Average rating: {stats.avg_rating:.1f}/5
- Sentiment breakdown: {stats.positive} positive, {stats.negative} negative, {stats.neutral} neutral
- Overall sentiment: {overall_mood(stats.avg_sentiment)}
- Overall sentiment score: {stats.sentiment_percentage:.0f}%

ALL FEEDBACK ENTRIES:
{feedback_lines}

{task}

Analyze all feedback carefully and provide a JSON response with these exact fields:
{{
  "summary": "2-3 sentence executive summary of overall feedback trends and key insights",
  "strengths": ["List 3 specific things users appreciate most, quote actual feedback when possible"],
  "improvements": ["List 5 specific, actionable improvements based on user complaints and suggestions"],
  "priorities": ["List 3 most urgent issues that need immediate attention, if any"],
  "opportunities": ["List 3 growth opportunities based on positive feedback patterns"],
  "userQuestionAnswer": "{answer_hint}",
  "nextSteps": ["List 3 specific actions the project owner should take this week"]
}}

Be specific, reference actual feedback, and make all recommendations actionable. If users mentioned specific issues, include them."""


def build_digest_prompt(records: List[EnrichedFeedback]) -> str:
    """Build the weekly digest prompt from recent feedback."""
    feedback_lines = "\n".join(
        format_feedback_line(i, record, content_key="Content") for i, record in enumerate(records, start=1)
    )

    return f"""Analyze this week's customer feedback and provide insights:

{feedback_lines}

Return a JSON object with:
1. topThemes: Array of 3 most common themes with description and count
2. sentimentTrend: "improving", "stable", or "declining" with explanation
3. criticalIssues: Array of urgent issues that need attention
4. recommendations: Array of 3 specific, actionable recommendations
5. positiveHighlights: What customers love most
6. summary: Executive summary in 2-3 sentences"""


def no_data_report() -> InsightReport:
    """Report returned before any feedback has been collected."""
    return InsightReport(
        summary="No feedback collected yet. Share your feedback link to start gathering insights!",
        strengths=[],
        improvements=[],
        priorities=[],
        opportunities=[],
        next_steps=[
            "Share your feedback link with users",
            "Collect at least 5-10 responses",
            "Come back for AI insights"
        ],
        user_question_answer="I need feedback data to answer your question. Please collect some feedback first!",
        has_data=False,
        is_manual=True,
        source=AnalysisSource.TEMPLATE
    )


def template_report(stats: AggregateStats, question: Optional[str] = None) -> InsightReport:
    """
    Build a report from statistics alone.

    Used when the language model cannot produce one. Content is generic, but
    every field is filled.
    """
    avg_rating = f"{stats.avg_rating:.1f}"
    has_negative = stats.negative > 0

    summary = (
        f"You have {stats.total} feedback entries with an average rating of {avg_rating}/5. "
        f"{stats.positive} users are satisfied ({stats.share(stats.positive):.0f}%), "
        f"while {stats.negative} users reported issues ({stats.share(stats.negative):.0f}%)."
    )

    if has_negative:
        priorities = [
            "Read through all negative feedback immediately",
            "Identify the most common complaint",
            "Create an action plan to address top issues"
        ]
    else:
        priorities = [
            "Collect more feedback for better insights",
            "Maintain current satisfaction levels",
            "Plan for future improvements"
        ]

    answer = None
    if question:
        verdict = "Users are generally satisfied" if stats.avg_rating > 3 else "There are significant issues to address"
        answer = (
            f"Based on {stats.total} feedback entries: {verdict}. "
            f"Please review the feedback manually for specific insights about: \"{question}\""
        )

    return InsightReport(
        summary=summary,
        strengths=[
            "Some users are satisfied with the product" if stats.positive > 0 else "Feedback collection is working",
            "Users are engaged enough to provide feedback",
            f"Average rating of {avg_rating}/5 shows decent satisfaction" if stats.avg_rating > 3
            else "Room for improvement identified"
        ],
        improvements=[
            "Review all negative feedback below for specific issues",
            "Address the most common complaints first",
            "Improve based on user suggestions",
            f"Fix issues reported by {stats.negative} unsatisfied users" if has_negative
            else "Continue collecting more feedback",
            "Consider reaching out to users who left negative feedback"
        ],
        priorities=priorities,
        opportunities=[
            "Build on what users love about your product",
            "Turn satisfied users into advocates",
            "Expand successful features"
        ],
        next_steps=[
            "Review all feedback entries below",
            "Contact unsatisfied users for more details" if has_negative
            else "Share feedback link with more users",
            "Implement quick fixes first"
        ],
        user_question_answer=answer,
        has_data=True,
        is_manual=True,
        source=AnalysisSource.TEMPLATE
    )


def parse_ai_report(result: Dict[str, Any]) -> InsightReport:
    """
    Validate a language-model reply as an insight report.

    Raises:
        pydantic.ValidationError: If required fields are missing or mistyped
    """
    payload = {**result, "hasData": True, "isManual": False, "source": AnalysisSource.AI.value}
    return InsightReport.model_validate(payload)


class InsightGenerator:
    """
    Generates dashboard insights for a project.
    """

    def __init__(self,
                 feedback_manager: FeedbackManager,
                 analysis_client: AnalysisClient,
                 config: Optional[Settings] = None):
        """
        Initialize the insight generator.

        Args:
            feedback_manager: Source of the project's feedback
            analysis_client: Language-model client used in report mode
            config: Settings for temperatures and token limits
        """
        self.feedback_manager = feedback_manager
        self.analysis_client = analysis_client
        self.config = config or default_settings

    async def generate(self,
                       project_id: Optional[Union[int, str]],
                       question: Optional[str] = None) -> Tuple[InsightReport, int]:
        """
        Generate an insight report for a project.

        Args:
            project_id: The project
            question: Optional free-text question from the owner

        Returns:
            The report and the number of feedback entries it covers

        Raises:
            ValidationError: If project_id is missing
            PersistenceError: If the feedback cannot be read
        """
        if project_id is None or not str(project_id).strip():
            raise ValidationError("Project ID is required", component="insights")

        question = question.strip() if question and question.strip() else None
        logger.info(f"Generating insights for project {project_id} (question: {question or 'general recommendations'})")

        records = await self.feedback_manager.get_project_feedback(project_id)
        if not records:
            logger.info(f"No feedback found for project {project_id}")
            return no_data_report(), 0

        stats = compute_stats(records)
        prompt = build_insight_prompt(records, stats, question)

        try:
            result = await self.analysis_client.generate_report(
                prompt,
                INSIGHTS_SYSTEM_MESSAGE,
                temperature=self.config.insights_temperature,
                max_tokens=self.config.insights_max_tokens
            )
            report = parse_ai_report(result)
            logger.info(f"Generated AI insights from {len(records)} feedback entries")
        except (AnalysisUnavailable, PydanticValidationError) as e:
            logger.warning(f"AI insights unavailable, falling back to statistics template: {e}")
            report = template_report(stats, question)

        return report, len(records)

    async def weekly_digest(self, project_id: Optional[Union[int, str]]) -> Tuple[Optional[Dict[str, Any]], int]:
        """
        Summarize the most recent feedback into a short digest.

        Returns:
            The digest (None when there is no feedback or the model fails) and
            the number of entries considered
        """
        if project_id is None or not str(project_id).strip():
            raise ValidationError("Project ID is required", component="insights")

        records = await self.feedback_manager.get_project_feedback(
            project_id, limit=self.config.digest_max_records
        )
        if not records:
            return None, 0

        try:
            digest = await self.analysis_client.generate_report(
                build_digest_prompt(records),
                DIGEST_SYSTEM_MESSAGE,
                temperature=self.config.digest_temperature,
                max_tokens=self.config.digest_max_tokens
            )
        except AnalysisUnavailable as e:
            logger.warning(f"Weekly digest generation failed: {e}")
            return None, len(records)

        return digest, len(records)
