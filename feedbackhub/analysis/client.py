"""
Analysis client for turning free-text feedback into structured metadata.

This module wraps the language-model service. Every failure is reported as
AnalysisUnavailable; callers decide what to substitute.
"""

import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from feedbackhub.config import Settings, settings as default_settings
from feedbackhub.analysis.models import FeedbackAnalysis
from feedbackhub.utils.error_handling import AnalysisUnavailable
from feedbackhub.utils.openai_client import create_openai_client, get_json_completion


logger = logging.getLogger(__name__)


ANALYSIS_SYSTEM_MESSAGE = "You are a feedback analysis expert. Always return valid JSON."

ANALYSIS_PROMPT = """Analyze this customer feedback and return a JSON object with:
- sentiment: number between -1 (very negative) and 1 (very positive)
- sentimentLabel: "positive", "neutral", or "negative"
- categories: array from ["bug", "feature-request", "praise", "complaint", "question", "suggestion", "other"]
- keywords: array of 3-5 key topics mentioned
- priority: "low", "medium", "high", or "critical" based on urgency
- summary: one sentence summary (max 100 chars)
- actionRequired: boolean, true if needs immediate attention

Feedback: "{content}"
{rating_line}"""


class AnalysisClient:
    """
    Client for the language-model analysis service.

    No retries are performed: one failed call raises immediately.
    """

    def __init__(self,
                 client: Optional[AsyncOpenAI],
                 model: str = default_settings.openai_model,
                 temperature: float = default_settings.analysis_temperature,
                 max_tokens: int = default_settings.analysis_max_tokens):
        """
        Initialize the analysis client.

        Args:
            client: AsyncOpenAI client, or None when the service is not configured
            model: Chat model name
            temperature: Sampling temperature for per-feedback analysis
            max_tokens: Token limit for per-feedback analysis
        """
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "AnalysisClient":
        """Build a client from application settings."""
        config = config or default_settings
        return cls(
            create_openai_client(config),
            model=config.openai_model,
            temperature=config.analysis_temperature,
            max_tokens=config.analysis_max_tokens
        )

    @property
    def available(self) -> bool:
        return self.client is not None

    async def _complete(self, prompt: str, system_message: str,
                        temperature: float, max_tokens: int) -> Dict[str, Any]:
        if self.client is None:
            raise AnalysisUnavailable("OpenAI client not initialized")

        try:
            return await get_json_completion(
                self.client,
                prompt=prompt,
                system_message=system_message,
                temperature=temperature,
                max_tokens=max_tokens,
                model=self.model
            )
        except Exception as e:
            raise AnalysisUnavailable(
                f"Language-model call failed: {e}",
                details={"original_error": e.__class__.__name__}
            ) from e

    async def analyze_feedback(self, content: str, rating: Optional[int] = None) -> FeedbackAnalysis:
        """
        Analyze a single piece of feedback.

        Args:
            content: Feedback text
            rating: Optional 1-5 rating

        Returns:
            Structured analysis

        Raises:
            AnalysisUnavailable: If the service fails or the reply does not fit the schema
        """
        prompt = ANALYSIS_PROMPT.format(
            content=content,
            rating_line=f"Rating: {rating}/5" if rating is not None else ""
        )

        result = await self._complete(prompt, ANALYSIS_SYSTEM_MESSAGE, self.temperature, self.max_tokens)

        try:
            analysis = FeedbackAnalysis.model_validate(result)
        except PydanticValidationError as e:
            raise AnalysisUnavailable(
                "Language-model reply did not match the analysis schema",
                details={"reason": str(e)}
            ) from e

        logger.debug(f"AI analysis complete: {analysis.sentiment_label.value} ({analysis.sentiment:+.2f})")
        return analysis

    async def generate_report(self,
                              prompt: str,
                              system_message: str,
                              temperature: float = default_settings.insights_temperature,
                              max_tokens: int = default_settings.insights_max_tokens) -> Dict[str, Any]:
        """
        Request a free-form JSON report.

        Args:
            prompt: Complete user prompt, including the required schema
            system_message: System message
            temperature: Sampling temperature
            max_tokens: Token limit

        Returns:
            The parsed JSON object; schema checks are left to the caller

        Raises:
            AnalysisUnavailable: If the service fails or returns no JSON object
        """
        return await self._complete(prompt, system_message, temperature, max_tokens)
