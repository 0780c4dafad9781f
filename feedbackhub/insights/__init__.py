"""
Insights component.

AI-written dashboard reports with a statistics-based fallback.
"""

from feedbackhub.insights.models import InsightReport
from feedbackhub.insights.generator import (
    InsightGenerator,
    build_insight_prompt,
    template_report,
    no_data_report
)

__all__ = [
    "InsightReport",
    "InsightGenerator",
    "build_insight_prompt",
    "template_report",
    "no_data_report"
]
