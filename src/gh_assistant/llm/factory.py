"""Factory for creating LLM providers."""

import logging

from gh_assistant.config import LLMConfig
from gh_assistant.llm.anthropic_provider import AnthropicProvider
from gh_assistant.llm.openai_provider import OpenAIProvider
from gh_assistant.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """Create an LLM provider based on configuration.

        Args:
            config: LLM configuration specifying the provider.

        Returns:
            Configured LLM provider instance.

        Raises:
            ValueError: If provider type is not supported or the API key is missing.
        """
        logger.info(f"Creating LLM provider: {config.provider}")

        if config.provider == "openai":
            return OpenAIProvider(config)
        elif config.provider == "anthropic":
            return AnthropicProvider(config)
        else:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")
