"""gh-assistant.

A local CLI that:
- summarizes pending git changes as a conventional commit message (OpenAI or Anthropic)
- asks for confirmation, commits and pushes
- opens a Jira ticket on the first push of a feature branch
"""

__version__ = "0.1.0"

from gh_assistant.config import AssistantSettings

__all__ = ["__version__", "AssistantSettings"]
