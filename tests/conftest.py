"""Test configuration and fixtures."""

import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest

from gh_assistant.git.repository import GitRepository
from gh_assistant.workflow.models import BranchContext

_SETTINGS_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GH_ASSISTANT_PROVIDER",
    "GH_ASSISTANT_API_KEY",
    "GH_ASSISTANT_MODEL",
    "GH_ASSISTANT_JIRA_URL",
    "GH_ASSISTANT_JIRA_EMAIL",
    "GH_ASSISTANT_JIRA_TOKEN",
    "GH_ASSISTANT_JIRA_PROJECT",
    "GH_ASSISTANT_LOG_LEVEL",
)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point settings at an isolated YAML file and a clean environment."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    path = tmp_path / "gh-assistant.yaml"
    monkeypatch.setenv("GH_ASSISTANT_CONFIG", str(path))
    return path


@pytest.fixture
def repo() -> Mock:
    """A repository with staged changes on a never-pushed feature branch."""
    mock = Mock(spec=GitRepository)
    mock.has_staged_changes.return_value = True
    mock.has_unstaged_changes.return_value = False
    mock.unpushed_commit_summaries.return_value = ()
    mock.staged_diff.return_value = "diff --git a/api.py b/api.py\n+def login(): ...\n"
    mock.changed_files.return_value = ("api.py",)
    mock.branch_context.return_value = BranchContext(
        name="feature/x", has_upstream=False, is_main_branch=False
    )
    return mock


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run real git with no user or system configuration."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text("", encoding="utf-8")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return proc.stdout.strip()


@pytest.fixture
def work_tree(tmp_path: Path, git_env: None) -> Path:
    """An empty repository whose unborn branch is `main`."""
    path = tmp_path / "work"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    return path


@pytest.fixture
def bare_remote(tmp_path: Path, git_env: None) -> Path:
    path = tmp_path / "remote.git"
    path.mkdir()
    git(path, "init", "-q", "--bare")
    return path


@pytest.fixture
def run_git(git_env: None):
    """Run a git command in a directory and return its stdout."""
    return git
