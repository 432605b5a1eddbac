"""Abstract base class for commit message backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

# Requests are bounded by a fixed character budget, never sampled.
MAX_DIFF_CHARS = 12000
TRUNCATION_MARKER = "\n... [diff truncated]"

_PROMPT_TEMPLATE = """You are an expert at writing clear, concise git commit messages following conventional commits format.

Analyze the following git diff and generate a meaningful commit message.
{files_context}
Git Diff:
{diff}

Rules for the commit message:
1. Use conventional commits format: type(scope): description
2. Types: feat, fix, docs, style, refactor, perf, test, build, ci, chore
3. Keep the first line under 72 characters
4. Be specific about what changed and why
5. If there are multiple unrelated changes, focus on the main one
6. Do NOT include any explanation, just the commit message
7. Do NOT wrap in quotes or code blocks

Respond with ONLY the commit message, nothing else."""


class GenerationError(Exception):
    """Raised when a commit message could not be produced."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)


def truncate_diff(diff: str, limit: int = MAX_DIFF_CHARS) -> str:
    """Cut `diff` to `limit` characters, appending a marker when shortened."""
    if len(diff) <= limit:
        return diff
    return diff[:limit] + TRUNCATION_MARKER


def build_commit_prompt(diff: str, changed_files: Sequence[str]) -> str:
    files_context = ""
    if changed_files:
        files_context = "\nChanged files:\n- " + "\n- ".join(changed_files) + "\n"
    return _PROMPT_TEMPLATE.format(files_context=files_context, diff=truncate_diff(diff))


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This interface allows pluggable backends (OpenAI, Anthropic). Subclasses
    only implement the raw completion call; prompt construction and response
    validation are shared.
    """

    provider_name: str = ""
    model: str = ""

    def generate(self, diff_text: str, changed_files: Sequence[str]) -> str:
        """Return exactly one commit message describing `diff_text`.

        Raises:
            GenerationError: If the diff is empty or the backend fails.
        """
        if not diff_text.strip():
            raise GenerationError("no diff provided")

        prompt = build_commit_prompt(diff_text, changed_files)
        message = self.complete(prompt).strip()
        if not message:
            raise GenerationError(f"no response from {self.provider_name or 'API'}")
        return message

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send a single-turn prompt and return the raw text reply.

        Args:
            prompt: The full user prompt.

        Returns:
            The model's text, possibly empty.

        Raises:
            GenerationError: On transport or API errors.
        """
        pass
