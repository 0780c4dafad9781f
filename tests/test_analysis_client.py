"""
Tests for the language-model analysis client.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from feedbackhub.analysis import AnalysisClient, Priority, SentimentLabel
from feedbackhub.utils.error_handling import AnalysisUnavailable
from feedbackhub.utils.openai_client import strip_markdown_json


def make_openai_client(content=None, side_effect=None):
    """Build a mock AsyncOpenAI client returning `content` as the reply."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]

    openai_client = MagicMock()
    openai_client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return openai_client


@pytest.mark.asyncio
async def test_analyze_feedback_parses_reply():
    """A well-formed reply is validated into a FeedbackAnalysis."""
    reply = {
        "sentiment": -0.7,
        "sentimentLabel": "Negative",
        "categories": ["bug"],
        "keywords": ["login", "crash"],
        "priority": "HIGH",
        "summary": "App crashes on login",
        "actionRequired": True
    }
    openai_client = make_openai_client(json.dumps(reply))
    client = AnalysisClient(openai_client, model="gpt-3.5-turbo", temperature=0.3, max_tokens=500)

    analysis = await client.analyze_feedback("It crashes every time I log in", rating=1)

    assert analysis.sentiment == -0.7
    assert analysis.sentiment_label == SentimentLabel.NEGATIVE
    assert analysis.priority == Priority.HIGH
    assert analysis.action_required is True

    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["temperature"] == 0.3
    assert kwargs["max_tokens"] == 500
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "Rating: 1/5" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_analyze_feedback_without_client():
    """An unconfigured client fails without making a request."""
    client = AnalysisClient(None)

    assert client.available is False
    with pytest.raises(AnalysisUnavailable):
        await client.analyze_feedback("Hello")


@pytest.mark.asyncio
async def test_analyze_feedback_service_error():
    """Transport errors surface as AnalysisUnavailable."""
    openai_client = make_openai_client(side_effect=RuntimeError("connection reset"))
    client = AnalysisClient(openai_client)

    with pytest.raises(AnalysisUnavailable):
        await client.analyze_feedback("Hello", rating=4)

    openai_client.chat.completions.create.assert_awaited_once()


@pytest.mark.asyncio
async def test_analyze_feedback_invalid_json():
    """Unparseable replies surface as AnalysisUnavailable."""
    client = AnalysisClient(make_openai_client("not json at all"))

    with pytest.raises(AnalysisUnavailable):
        await client.analyze_feedback("Hello")


@pytest.mark.asyncio
async def test_analyze_feedback_out_of_range_sentiment():
    """A sentiment outside [-1, 1] is rejected rather than stored."""
    reply = {"sentiment": 3.5, "sentimentLabel": "positive"}
    client = AnalysisClient(make_openai_client(json.dumps(reply)))

    with pytest.raises(AnalysisUnavailable):
        await client.analyze_feedback("Amazing")


@pytest.mark.asyncio
async def test_generate_report_passes_settings():
    """Report mode uses the temperature and token limit it is given."""
    openai_client = make_openai_client('```json\n{"summary": "ok"}\n```')
    client = AnalysisClient(openai_client)

    result = await client.generate_report("prompt", "system", temperature=0.7, max_tokens=2000)

    assert result == {"summary": "ok"}
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 2000
    assert kwargs["messages"][0] == {"role": "system", "content": "system"}


def test_strip_markdown_json():
    """Code fences around JSON replies are removed."""
    assert strip_markdown_json('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_markdown_json('{"a": 1}') == '{"a": 1}'
