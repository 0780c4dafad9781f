"""
Data models for the Insights component.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from feedbackhub.analysis.models import AnalysisSource


class InsightReport(BaseModel):
    """
    Dashboard insight report.

    Every field is always present, whether the report came from the
    language model or from the statistics template.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    strengths: List[str]
    improvements: List[str]
    priorities: List[str]
    opportunities: List[str]
    user_question_answer: Optional[str] = None
    next_steps: List[str]
    has_data: bool = True
    is_manual: bool = False
    source: AnalysisSource = AnalysisSource.AI

    @field_validator("strengths", "improvements", "priorities", "opportunities", "next_steps", mode="before")
    @classmethod
    def _flatten_items(cls, value):
        # Models sometimes return {"point": ..., "evidence": ...} objects instead of strings
        if not isinstance(value, list):
            return value
        items = []
        for item in value:
            if isinstance(item, dict):
                items.append(" - ".join(str(v) for v in item.values() if v))
            elif item is not None:
                items.append(str(item))
        return items

    @field_validator("user_question_answer", mode="before")
    @classmethod
    def _null_answer(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "null", "none"):
            return None
        return value


class InsightRequest(BaseModel):
    """Request body for POST /insights."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: Optional[Union[int, str]] = None
    question: Optional[str] = None


class InsightResponse(BaseModel):
    """Response for POST /insights."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    insights: InsightReport
    feedback_count: int = 0


class WeeklyDigestRequest(BaseModel):
    """Request body for POST /insights/weekly."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: Optional[Union[int, str]] = None


class WeeklyDigestResponse(BaseModel):
    """Response for POST /insights/weekly."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    digest: Optional[Dict[str, Any]] = None
    feedback_count: int = Field(0, description="Number of entries the digest was built from")
