"""
Tests for the Insight Generator component.
"""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from feedbackhub.analysis import AnalysisSource
from feedbackhub.config import settings
from feedbackhub.feedback import FeedbackManager, compute_stats
from feedbackhub.insights import InsightGenerator, build_insight_prompt, template_report
from feedbackhub.utils.error_handling import ValidationError


REPORT_FIELDS = ["summary", "strengths", "improvements", "priorities", "opportunities", "next_steps"]


@pytest_asyncio.fixture
async def seeded_manager(datastore, failing_analysis_client):
    """Feedback manager with three entries for project p1."""
    manager = FeedbackManager(datastore, failing_analysis_client)
    await manager.submit_feedback("p1", "Checkout keeps failing", rating=1)
    await manager.submit_feedback("p1", "Love the design", rating=5)
    await manager.submit_feedback("p1", "No rating here")
    return manager


@pytest.mark.asyncio
async def test_no_data_skips_language_model(feedback_manager, analysis_client):
    """With no feedback the fixed no-data report is returned without a model call."""
    generator = InsightGenerator(feedback_manager, analysis_client)

    report, count = await generator.generate("empty-project", "What should I fix?")

    assert count == 0
    assert report.has_data is False
    assert report.source == AnalysisSource.TEMPLATE
    assert report.summary.startswith("No feedback collected yet")
    assert report.next_steps == [
        "Share your feedback link with users",
        "Collect at least 5-10 responses",
        "Come back for AI insights"
    ]
    analysis_client.generate_report.assert_not_called()


@pytest.mark.asyncio
async def test_generate_requires_project(feedback_manager, analysis_client):
    """A missing project ID is a validation error."""
    generator = InsightGenerator(feedback_manager, analysis_client)

    with pytest.raises(ValidationError):
        await generator.generate(None)


@pytest.mark.asyncio
async def test_generate_ai_report(seeded_manager, analysis_client):
    """A valid model reply becomes an AI report."""
    analysis_client.generate_report = AsyncMock(return_value={
        "summary": "Checkout is the main pain point.",
        "strengths": ["Design is loved"],
        "improvements": [{"issue": "Fix checkout", "evidence": "Checkout keeps failing"}],
        "priorities": ["Checkout failures"],
        "opportunities": ["Promote the design"],
        "userQuestionAnswer": "null",
        "nextSteps": ["Reproduce the checkout bug"]
    })
    generator = InsightGenerator(seeded_manager, analysis_client)

    report, count = await generator.generate("p1")

    assert count == 3
    assert report.source == AnalysisSource.AI
    assert report.is_manual is False
    assert report.has_data is True
    assert report.improvements == ["Fix checkout - Checkout keeps failing"]
    assert report.user_question_answer is None

    args, kwargs = analysis_client.generate_report.call_args
    assert kwargs["temperature"] == settings.insights_temperature
    assert kwargs["max_tokens"] == settings.insights_max_tokens
    assert "Checkout keeps failing" in args[0]


@pytest.mark.asyncio
async def test_generate_falls_back_to_template(seeded_manager, failing_analysis_client):
    """A model failure still yields a complete report."""
    generator = InsightGenerator(seeded_manager, failing_analysis_client)

    report, count = await generator.generate("p1", "Why do users leave?")

    assert count == 3
    assert report.source == AnalysisSource.TEMPLATE
    assert report.is_manual is True
    for field in REPORT_FIELDS:
        assert getattr(report, field)
    assert "Why do users leave?" in report.user_question_answer
    assert report.summary.startswith("You have 3 feedback entries with an average rating of 3.0/5.")


@pytest.mark.asyncio
async def test_generate_falls_back_on_incomplete_reply(seeded_manager, analysis_client):
    """A reply missing required fields is treated as a failure."""
    analysis_client.generate_report = AsyncMock(return_value={"summary": "Only a summary"})
    generator = InsightGenerator(seeded_manager, analysis_client)

    report, _ = await generator.generate("p1")

    assert report.source == AnalysisSource.TEMPLATE
    assert report.user_question_answer is None


@pytest.mark.asyncio
async def test_prompt_contains_statistics_and_entries(seeded_manager):
    """The prompt lists every entry and the aggregate statistics."""
    records = await seeded_manager.get_project_feedback("p1")
    stats = compute_stats(records)

    prompt = build_insight_prompt(records, stats, "What do people like?")

    assert "- Total responses: 3" in prompt
    assert "- Average rating: 3.0/5" in prompt
    assert "1 positive, 1 negative, 1 neutral" in prompt
    assert '1. Rating: N/A/5, Sentiment: neutral, Feedback: "No rating here"' in prompt
    assert 'USER\'S SPECIFIC QUESTION: "What do people like?"' in prompt


@pytest.mark.asyncio
async def test_prompt_without_question(seeded_manager):
    """Without a question the model is asked for general recommendations."""
    records = await seeded_manager.get_project_feedback("p1")

    prompt = build_insight_prompt(records, compute_stats(records))

    assert "general improvement recommendations" in prompt
    assert '"userQuestionAnswer": "null"' in prompt


@pytest.mark.asyncio
async def test_template_report_without_negative_feedback(feedback_manager):
    """Priorities change when nobody complained."""
    await feedback_manager.submit_feedback("p1", "Great", rating=5)
    records = await feedback_manager.get_project_feedback("p1")

    report = template_report(compute_stats(records))

    assert report.priorities[0] == "Collect more feedback for better insights"
    assert report.user_question_answer is None
    assert report.strengths[2] == "Average rating of 5.0/5 shows decent satisfaction"


@pytest.mark.asyncio
async def test_weekly_digest(seeded_manager, analysis_client):
    """The digest is built from recent feedback with digest settings."""
    digest = {"summary": "Quiet week", "topThemes": []}
    analysis_client.generate_report = AsyncMock(return_value=digest)
    generator = InsightGenerator(seeded_manager, analysis_client)

    result, count = await generator.weekly_digest("p1")

    assert result == digest
    assert count == 3
    kwargs = analysis_client.generate_report.call_args.kwargs
    assert kwargs["temperature"] == settings.digest_temperature
    assert kwargs["max_tokens"] == settings.digest_max_tokens


@pytest.mark.asyncio
async def test_weekly_digest_failure_returns_none(seeded_manager, failing_analysis_client):
    """A failed digest is reported as absent."""
    generator = InsightGenerator(seeded_manager, failing_analysis_client)

    result, count = await generator.weekly_digest("p1")

    assert result is None
    assert count == 3


@pytest.mark.asyncio
async def test_weekly_digest_no_data(feedback_manager, analysis_client):
    """No feedback means no digest and no model call."""
    generator = InsightGenerator(feedback_manager, analysis_client)

    result, count = await generator.weekly_digest("p1")

    assert result is None
    assert count == 0
    analysis_client.generate_report.assert_not_called()
