"""Git package initialization."""

from gh_assistant.git.repository import (
    CommitError,
    GitRepository,
    NoRemoteError,
    VcsError,
    VcsMutationError,
    VcsQueryError,
)

__all__ = [
    "CommitError",
    "GitRepository",
    "NoRemoteError",
    "VcsError",
    "VcsMutationError",
    "VcsQueryError",
]
