"""
OpenAI client utilities.

This module builds the asynchronous OpenAI client from settings and wraps the
single JSON-mode chat completion used by the analysis client.
"""

from typing import Dict, Optional, Any
import json
import logging

from openai import AsyncOpenAI

from feedbackhub.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_openai_client(config: Optional[Settings] = None) -> Optional[AsyncOpenAI]:
    """
    Create an AsyncOpenAI client.

    Args:
        config: Settings to read the API key and timeout from

    Returns:
        The client, or None when no API key is configured
    """
    config = config or default_settings

    if not config.openai_api_key:
        logger.warning("OpenAI API key not configured, language-model calls are disabled")
        return None

    kwargs: Dict[str, Any] = {"api_key": config.openai_api_key}
    if config.openai_timeout_seconds:
        kwargs["timeout"] = config.openai_timeout_seconds

    return AsyncOpenAI(**kwargs)


def strip_markdown_json(content: str) -> str:
    """Strip markdown code fences wrapped around a JSON reply."""
    content = content.strip()
    if content.startswith("```"):
        # Drop the opening fence line (```json or ```)
        content = content.split("\n", 1)[1] if "\n" in content else content[3:]
    if content.endswith("```"):
        content = content.rsplit("```", 1)[0]
    return content.strip()


async def get_json_completion(
    client: AsyncOpenAI,
    prompt: str,
    system_message: str = "You are a helpful AI assistant.",
    temperature: float = 0.3,
    max_tokens: int = 500,
    model: str = default_settings.openai_model,
) -> Dict:
    """
    Get a JSON completion from the OpenAI API.

    A single request is made; errors propagate to the caller.

    Args:
        client: The OpenAI client
        prompt: The user prompt
        system_message: The system message
        temperature: Controls randomness (0-1)
        max_tokens: Maximum number of tokens to generate
        model: The OpenAI model to use

    Returns:
        The generated JSON as a Python dictionary

    Raises:
        ValueError: If the reply is empty or not a JSON object
    """
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_message},
            {"role": "user", "content": prompt}
        ],
        temperature=temperature,
        max_tokens=max_tokens,
        response_format={"type": "json_object"}
    )

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise ValueError("No response from OpenAI")

    result = json.loads(strip_markdown_json(content))
    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object, got {type(result).__name__}")

    return result
