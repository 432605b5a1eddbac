"""OpenAI LLM provider implementation."""

import logging

from openai import APIStatusError, OpenAI, OpenAIError

from gh_assistant.config import LLMConfig
from gh_assistant.llm.provider import GenerationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider."""

    provider_name = "openai"

    def __init__(self, config: LLMConfig, client: OpenAI | None = None) -> None:
        """Initialize the OpenAI provider.

        Args:
            config: LLM configuration.
            client: Optional pre-built client (tests).

        Raises:
            ValueError: If API key is not provided.
        """
        if not config.api_key and client is None:
            raise ValueError("OpenAI API key is required")

        self.config = config
        self.model = config.model or DEFAULT_MODEL
        self.client = client or OpenAI(api_key=config.api_key, timeout=config.timeout_seconds)

        logger.info(f"OpenAI provider initialized with model: {self.model}")

    def complete(self, prompt: str) -> str:
        logger.debug(f"Requesting completion for prompt of {len(prompt)} characters")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIStatusError as e:
            raise GenerationError(f"OpenAI API error: {e.message}", status_code=e.status_code) from e
        except OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise GenerationError("no response from openai")

        content = response.choices[0].message.content or ""
        logger.debug(f"Generated {len(content)} characters")
        return content
