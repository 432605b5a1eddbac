"""Terminal states of a push run that are reported to the user as errors."""

from __future__ import annotations

from gh_assistant.git.repository import VcsMutationError


class WorkflowError(Exception):
    """Base class for workflow outcomes that end a run with a non-zero exit."""


class NoChangesError(WorkflowError):
    def __init__(self) -> None:
        super().__init__("No changes to commit or push")


class NoStagedChangesError(WorkflowError):
    def __init__(self) -> None:
        super().__init__(
            "You have unstaged changes. Use -a to stage everything, "
            "or stage files manually with 'git add'"
        )


class EmptyDiffError(WorkflowError):
    def __init__(self) -> None:
        super().__init__("No changes detected in the diff")


class PushError(WorkflowError):
    """Both the plain push and the upstream-setting push failed."""

    def __init__(self, plain: VcsMutationError, upstream: VcsMutationError) -> None:
        self.plain = plain
        self.upstream = upstream
        super().__init__(f"Failed to push: {upstream}")
