"""Anthropic LLM provider implementation."""

import logging

from anthropic import Anthropic, AnthropicError, APIStatusError

from gh_assistant.config import LLMConfig
from gh_assistant.llm.provider import GenerationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
MAX_TOKENS = 256


class AnthropicProvider(LLMProvider):
    """Anthropic messages API provider."""

    provider_name = "anthropic"

    def __init__(self, config: LLMConfig, client: Anthropic | None = None) -> None:
        """Initialize the Anthropic provider.

        Raises:
            ValueError: If API key is not provided.
        """
        if not config.api_key and client is None:
            raise ValueError("Anthropic API key is required")

        self.config = config
        self.model = config.model or DEFAULT_MODEL
        self.client = client or Anthropic(api_key=config.api_key, timeout=config.timeout_seconds)

        logger.info(f"Anthropic provider initialized with model: {self.model}")

    def complete(self, prompt: str) -> str:
        logger.debug(f"Requesting message for prompt of {len(prompt)} characters")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIStatusError as e:
            raise GenerationError(
                f"Anthropic API error: {e.message}", status_code=e.status_code
            ) from e
        except AnthropicError as e:
            raise GenerationError(f"Anthropic request failed: {e}") from e

        for block in response.content:
            if block.type == "text":
                logger.debug(f"Generated {len(block.text)} characters")
                return block.text

        raise GenerationError("no response from anthropic")
