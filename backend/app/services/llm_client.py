"""Thin async wrapper around the Anthropic Messages API."""

import json
import logging
import re
from typing import Any

from anthropic import APIConnectionError, APIError, APIStatusError, AsyncAnthropic

from app.config import get_settings
from app.errors import UpstreamServiceError

logger = logging.getLogger(__name__)
settings = get_settings()

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """
    Pull a JSON object out of a model reply.

    Accepts a bare object, an object wrapped in a ```json fence, or an object
    embedded in surrounding prose. Returns None if nothing parses to a dict.
    """
    candidate = _CODE_FENCE.sub("", text.strip())
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        start, end = candidate.find("{"), candidate.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


class LLMClient:
    """Send prompts to Claude and return the reply text."""

    def __init__(self):
        """Initialize Anthropic client."""
        self.client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            max_retries=settings.llm_max_retries,
            timeout=settings.llm_timeout_seconds,
        )

    async def complete(
        self,
        system: str,
        messages: list[dict],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Get a non-streaming response.

        Args:
            system: System prompt
            messages: Conversation as a list of {'role', 'content'} dicts,
                ending with the user turn
            model: Override for the configured chat model
            max_tokens: Override for the configured token limit
            temperature: Override for the configured temperature

        Returns:
            Full response text

        Raises:
            UpstreamServiceError: the API call failed or returned no text
        """
        try:
            message = await self.client.messages.create(
                model=model or settings.llm_model,
                max_tokens=max_tokens or settings.llm_max_tokens,
                temperature=settings.llm_temperature if temperature is None else temperature,
                system=system,
                messages=messages,
            )
        except APIStatusError as e:
            logger.error("Anthropic API returned status %s: %s", e.status_code, e.message)
            raise UpstreamServiceError(f"LLM request failed: {e.message}", provider="anthropic") from e
        except APIConnectionError as e:
            logger.error("Could not reach Anthropic API: %s", e)
            raise UpstreamServiceError("LLM service unreachable", provider="anthropic") from e
        except APIError as e:
            logger.error("Anthropic API error: %s", e)
            raise UpstreamServiceError(f"LLM request failed: {e}", provider="anthropic") from e

        text_blocks = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        if not text_blocks:
            raise UpstreamServiceError("LLM returned an empty reply", provider="anthropic")
        return "".join(text_blocks)


# Singleton instance
llm_client = LLMClient()
