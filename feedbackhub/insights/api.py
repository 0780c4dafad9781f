"""
API endpoints for the Insights component.
"""

import logging

from fastapi import APIRouter, Depends

from feedbackhub.analysis import AnalysisClient
from feedbackhub.dependencies import get_analysis_client
from feedbackhub.feedback.api import get_feedback_manager
from feedbackhub.feedback.manager import FeedbackManager
from feedbackhub.insights.generator import InsightGenerator
from feedbackhub.insights.models import (
    InsightRequest,
    InsightResponse,
    WeeklyDigestRequest,
    WeeklyDigestResponse
)


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/insights",
    tags=["insights"]
)


def get_insight_generator(
    manager: FeedbackManager = Depends(get_feedback_manager),
    analysis_client: AnalysisClient = Depends(get_analysis_client)
) -> InsightGenerator:
    """Get an insight generator instance."""
    return InsightGenerator(manager, analysis_client)


@router.post("", response_model=InsightResponse)
async def generate_insights(
    request: InsightRequest,
    generator: InsightGenerator = Depends(get_insight_generator)
):
    """
    Generate an insight report for a project.

    Always returns a complete report; `insights.source` tells whether it came
    from the language model or the statistics template.
    """
    report, count = await generator.generate(request.project_id, request.question)
    return InsightResponse(insights=report, feedback_count=count)


@router.post("/weekly", response_model=WeeklyDigestResponse)
async def weekly_digest(
    request: WeeklyDigestRequest,
    generator: InsightGenerator = Depends(get_insight_generator)
):
    """
    Summarize the most recent feedback. `digest` is null when unavailable.
    """
    digest, count = await generator.weekly_digest(request.project_id)
    return WeeklyDigestResponse(digest=digest, feedback_count=count)
