"""GitRepository against real repositories in a temporary directory."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from gh_assistant.git.repository import (
    CommitError,
    GitRepository,
    NoRemoteError,
    VcsMutationError,
    VcsQueryError,
)
from gh_assistant.workflow.models import BranchContext

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _commit_file(run_git, work: Path, name: str, content: str, message: str) -> None:
    (work / name).write_text(content, encoding="utf-8")
    run_git(work, "add", name)
    run_git(work, "commit", "-q", "-m", message)


def test_is_repo(work_tree: Path, tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    assert GitRepository(work_tree).is_repo()
    assert not GitRepository(plain).is_repo()


def test_missing_executable_is_a_query_error(work_tree: Path) -> None:
    repo = GitRepository(work_tree, git_executable="definitely-not-git")

    assert not repo.is_repo()
    with pytest.raises(VcsQueryError):
        repo.staged_diff()


def test_staged_changes_before_first_commit(work_tree: Path) -> None:
    (work_tree / "app.py").write_text("print('hello')\n", encoding="utf-8")
    repo = GitRepository(work_tree)

    assert not repo.has_staged_changes()
    repo.stage_all()

    assert repo.has_staged_changes()
    assert "+print('hello')" in repo.staged_diff()
    assert repo.changed_files() == ("app.py",)


def test_commit_and_branch_facts(work_tree: Path, run_git) -> None:
    (work_tree / "app.py").write_text("x = 1\n", encoding="utf-8")
    repo = GitRepository(work_tree)
    repo.stage_all()

    repo.commit("feat: initial\n\nbody")

    assert run_git(work_tree, "log", "-1", "--format=%s") == "feat: initial"
    assert not repo.has_staged_changes()
    assert repo.branch_context() == BranchContext(
        name="main", has_upstream=False, is_main_branch=True
    )
    assert repo.upstream() is None
    assert repo.unpushed_commit_summaries() == ()


def test_commit_with_nothing_staged(work_tree: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")

    with pytest.raises(CommitError) as exc_info:
        GitRepository(work_tree).commit("chore: nothing")

    assert isinstance(exc_info.value, VcsMutationError)
    assert exc_info.value.command[0] == "commit"


def test_unstaged_and_all_diff(work_tree: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "one\n", "chore: a")
    (work_tree / "a.txt").write_text("two\n", encoding="utf-8")
    repo = GitRepository(work_tree)

    assert repo.has_unstaged_changes()
    assert not repo.has_staged_changes()
    assert "+two" in repo.unstaged_diff()
    assert "+two" in repo.all_diff()
    assert repo.changed_files() == ("a.txt",)


def test_feature_branch_is_not_main(work_tree: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")
    run_git(work_tree, "checkout", "-q", "-b", "feature/login")

    repo = GitRepository(work_tree)

    assert repo.current_branch() == "feature/login"
    assert not repo.is_main_branch()


def test_unpushed_diff_without_upstream_covers_whole_history(work_tree: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "alpha\n", "feat: a")
    _commit_file(run_git, work_tree, "b.txt", "beta\n", "feat: b")

    diff = GitRepository(work_tree).unpushed_diff()

    assert "+alpha" in diff
    assert "+beta" in diff


def test_push_without_remote(work_tree: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")
    repo = GitRepository(work_tree)

    with pytest.raises(NoRemoteError):
        repo.push()
    with pytest.raises(VcsMutationError):
        repo.push_set_upstream()


def test_push_and_track_upstream(work_tree: Path, bare_remote: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")
    run_git(work_tree, "remote", "add", "origin", str(bare_remote))
    repo = GitRepository(work_tree)

    repo.push()
    assert run_git(bare_remote, "rev-parse", "main") == run_git(work_tree, "rev-parse", "HEAD")
    assert not repo.has_upstream()

    repo.push_set_upstream()
    assert repo.upstream() == "origin/main"
    assert repo.branch_context().has_upstream


def test_unpushed_commits_newest_first(work_tree: Path, bare_remote: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")
    run_git(work_tree, "remote", "add", "origin", str(bare_remote))
    repo = GitRepository(work_tree)
    repo.push_set_upstream()

    _commit_file(run_git, work_tree, "b.txt", "b\n", "feat: b")
    _commit_file(run_git, work_tree, "c.txt", "c\n", "fix: c - with dash")

    commits = repo.unpushed_commit_summaries()

    assert [c.subject for c in commits] == ["fix: c - with dash", "feat: b"]
    assert commits[0].short_hash == run_git(work_tree, "rev-parse", "--short", "HEAD")
    diff = repo.unpushed_diff()
    assert "+b" in diff and "+c" in diff
    assert "a.txt" not in diff


def test_default_remote_prefers_origin(work_tree: Path, bare_remote: Path, run_git) -> None:
    run_git(work_tree, "remote", "add", "backup", str(bare_remote))
    repo = GitRepository(work_tree)
    assert repo.default_remote() == "backup"

    run_git(work_tree, "remote", "add", "origin", str(bare_remote))
    assert repo.default_remote() == "origin"


def test_non_utf8_content_is_decoded_with_replacement(work_tree: Path, run_git) -> None:
    (work_tree / "legacy.txt").write_bytes("caf\xe9 na\xefve\n".encode("latin-1"))
    run_git(work_tree, "add", "legacy.txt")
    repo = GitRepository(work_tree)

    diff = repo.staged_diff()

    assert "+caf\ufffd na\ufffdve" in diff
    assert repo.changed_files() == ("legacy.txt",)


def test_plain_push_does_not_set_tracking(work_tree: Path, bare_remote: Path, run_git) -> None:
    _commit_file(run_git, work_tree, "a.txt", "a\n", "chore: a")
    run_git(work_tree, "checkout", "-q", "-b", "feature/x")
    run_git(work_tree, "remote", "add", "origin", str(bare_remote))
    repo = GitRepository(work_tree)

    repo.push()

    assert run_git(bare_remote, "rev-parse", "feature/x") == run_git(work_tree, "rev-parse", "HEAD")
    assert repo.branch_context() == BranchContext(
        name="feature/x", has_upstream=False, is_main_branch=False
    )
