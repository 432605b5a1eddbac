"""LLM package initialization."""

from gh_assistant.llm.factory import LLMFactory
from gh_assistant.llm.provider import GenerationError, LLMProvider

__all__ = [
    "GenerationError",
    "LLMFactory",
    "LLMProvider",
]
