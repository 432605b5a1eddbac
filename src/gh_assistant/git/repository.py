"""Thin wrapper around the `git` executable.

Read operations never mutate the repository and raise `VcsQueryError` when git
exits non-zero. Mutations (stage, commit, push) raise `VcsMutationError` or one
of its subclasses. The absence of an upstream branch is a normal state here,
not an error: it is how a first push is recognised.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from gh_assistant.workflow.models import BranchContext, UnpushedCommit

logger = logging.getLogger(__name__)

# Hash of git's empty tree; diffing against it yields the full branch history.
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

MAIN_BRANCHES: frozenset[str] = frozenset({"main", "master"})
PREFERRED_REMOTE = "origin"

# Unit separator between short hash and subject in `git log` output.
_LOG_FIELD_SEP = "\x1f"


class VcsError(Exception):
    """A git command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], cause: str) -> None:
        self.command = tuple(command)
        self.cause = cause.strip()
        super().__init__(f"git {' '.join(self.command)} failed: {self.cause}")


class VcsQueryError(VcsError):
    """A read-only git query failed."""


class VcsMutationError(VcsError):
    """Staging, committing or pushing failed."""


class CommitError(VcsMutationError):
    """git refused to create the commit (nothing staged, empty message, hooks...)."""


class NoRemoteError(VcsMutationError):
    """The repository has no remote to push to."""

    def __init__(self) -> None:
        super().__init__(("remote",), "no remote configured")


@dataclass(frozen=True, slots=True)
class _GitOutput:
    ok: bool
    stdout: str
    stderr: str


class GitRepository:
    """Query and mutate a local git working tree."""

    def __init__(self, work_dir: Path | str | None = None, *, git_executable: str = "git") -> None:
        self._work_dir = Path(work_dir) if work_dir is not None else Path.cwd()
        self._git = git_executable

    @property
    def work_dir(self) -> Path:
        return self._work_dir

    def _exec(self, args: Sequence[str]) -> _GitOutput:
        logger.debug("Running git", extra={"git_args": list(args), "cwd": str(self._work_dir)})
        try:
            proc = subprocess.run(
                [self._git, *args],
                cwd=self._work_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            return _GitOutput(ok=False, stdout="", stderr=str(e))
        return _GitOutput(ok=proc.returncode == 0, stdout=proc.stdout.strip(), stderr=proc.stderr)

    def _query(self, *args: str) -> str:
        out = self._exec(args)
        if not out.ok:
            raise VcsQueryError(args, out.stderr)
        return out.stdout

    def _mutate(self, *args: str, error: type[VcsMutationError] = VcsMutationError) -> str:
        out = self._exec(args)
        if not out.ok:
            # git commit reports "nothing to commit" on stdout.
            raise error(args, out.stderr or out.stdout)
        return out.stdout

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def is_repo(self) -> bool:
        return self._exec(("rev-parse", "--git-dir")).ok

    def staged_diff(self) -> str:
        return self._query("diff", "--cached")

    def unstaged_diff(self) -> str:
        return self._query("diff")

    def all_diff(self) -> str:
        """Staged and unstaged changes against HEAD."""

        return self._query("diff", "HEAD")

    def has_staged_changes(self) -> bool:
        return self._query("diff", "--cached", "--name-only") != ""

    def has_unstaged_changes(self) -> bool:
        return self._query("diff", "--name-only") != ""

    def current_branch(self) -> str:
        return self._query("rev-parse", "--abbrev-ref", "HEAD")

    def upstream(self) -> str | None:
        """Return the upstream ref of the current branch, or None if it has none."""

        branch = self.current_branch()
        out = self._exec(("rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}"))
        if not out.ok or not out.stdout:
            return None
        return out.stdout

    def has_upstream(self) -> bool:
        return self.upstream() is not None

    def is_main_branch(self) -> bool:
        return self.current_branch() in MAIN_BRANCHES

    def branch_context(self) -> BranchContext:
        name = self.current_branch()
        return BranchContext(
            name=name,
            has_upstream=self.has_upstream(),
            is_main_branch=name in MAIN_BRANCHES,
        )

    def unpushed_commit_summaries(self) -> tuple[UnpushedCommit, ...]:
        """Commits on HEAD missing from the upstream, newest first.

        A branch without an upstream yields an empty tuple.
        """

        upstream = self.upstream()
        if upstream is None:
            return ()

        output = self._query("log", f"{upstream}..HEAD", f"--format=%h{_LOG_FIELD_SEP}%s")
        commits: list[UnpushedCommit] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            short_hash, _, subject = line.partition(_LOG_FIELD_SEP)
            commits.append(UnpushedCommit(short_hash=short_hash, subject=subject))
        return tuple(commits)

    def unpushed_diff(self) -> str:
        upstream = self.upstream()
        if upstream is None:
            return self._query("diff", f"{EMPTY_TREE_SHA}..HEAD")
        return self._query("diff", f"{upstream}..HEAD")

    def changed_files(self) -> tuple[str, ...]:
        out = self._exec(("diff", "--name-only", "HEAD"))
        if out.ok:
            output = out.stdout
        else:
            # No HEAD yet (initial commit): only the index can be compared.
            output = self._query("diff", "--cached", "--name-only")
        return tuple(line for line in output.splitlines() if line.strip())

    def remotes(self) -> list[str]:
        return [r for r in self._query("remote").splitlines() if r.strip()]

    def default_remote(self) -> str:
        remotes = self.remotes()
        if not remotes:
            raise NoRemoteError()
        if PREFERRED_REMOTE in remotes:
            return PREFERRED_REMOTE
        return remotes[0]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def stage_all(self) -> None:
        self._mutate("add", "-A")
        logger.info("Staged all changes")

    def commit(self, message: str) -> None:
        self._mutate("commit", "-m", message, error=CommitError)
        logger.info("Commit created", extra={"subject": message.splitlines()[0] if message else ""})

    def _push_target(self) -> tuple[str, str]:
        try:
            return self.default_remote(), self.current_branch()
        except VcsQueryError as e:
            raise VcsMutationError(("push",), e.cause) from e

    def push(self) -> None:
        # Does not set tracking: a new branch stays without an upstream until
        # push_set_upstream runs, so callers treat it as a first push again.
        remote, branch = self._push_target()
        self._mutate("push", remote, branch)
        logger.info("Pushed", extra={"remote": remote, "branch": branch})

    def push_set_upstream(self) -> None:
        remote, branch = self._push_target()
        self._mutate("push", "-u", remote, branch)
        logger.info("Pushed and set upstream", extra={"remote": remote, "branch": branch})
