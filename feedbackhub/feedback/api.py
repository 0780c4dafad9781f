"""
API endpoints for the Feedback component.

This module provides FastAPI endpoints for submitting and listing feedback.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from feedbackhub.analysis import AnalysisClient
from feedbackhub.dependencies import get_analysis_client, get_datastore
from feedbackhub.feedback.manager import FeedbackManager
from feedbackhub.feedback.models import (
    FeedbackCreate,
    FeedbackListResponse,
    FeedbackSubmitResponse
)
from feedbackhub.storage import Datastore


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/feedback",
    tags=["feedback"],
    responses={400: {"description": "Missing required field"}}
)


def get_feedback_manager(
    datastore: Datastore = Depends(get_datastore),
    analysis_client: AnalysisClient = Depends(get_analysis_client)
) -> FeedbackManager:
    """Get a feedback manager instance."""
    return FeedbackManager(datastore, analysis_client)


@router.post("", response_model=FeedbackSubmitResponse)
async def submit_feedback(
    feedback: FeedbackCreate,
    manager: FeedbackManager = Depends(get_feedback_manager)
):
    """
    Submit feedback from the public form.

    The response carries the full analysis even though only the sentiment
    score is stored.
    """
    logger.info(f"Received feedback for project {feedback.project_id} (rating: {feedback.rating})")

    record, outcome = await manager.submit_feedback(
        project_id=feedback.project_id,
        content=feedback.content,
        rating=feedback.rating,
        email=feedback.email
    )

    return FeedbackSubmitResponse(feedback=record, analysis=outcome.analysis)


@router.get("", response_model=FeedbackListResponse)
async def list_feedback(
    project_id: Optional[str] = Query(None, alias="projectId", description="The project ID"),
    manager: FeedbackManager = Depends(get_feedback_manager)
):
    """
    List a project's feedback, newest first, with aggregate statistics.
    """
    records, stats = await manager.list_feedback(project_id)
    return FeedbackListResponse(feedback=records, stats=stats)
