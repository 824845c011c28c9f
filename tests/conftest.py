"""Shared test fixtures for branch-workflow."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

GitFn = Callable[..., str]


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def _configure(repo: Path) -> None:
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")


@pytest.fixture
def git() -> GitFn:
    """Run a git command in a repo and return stdout: git(repo, 'status')."""
    return _git


@pytest.fixture
def commit_file() -> Callable[[Path, str, str], None]:
    """Write a file and commit it: commit_file(repo, 'a.txt', 'content')."""

    def _commit(repo: Path, name: str, content: str) -> None:
        (repo / name).write_text(content)
        _git(repo, "add", name)
        _git(repo, "commit", "-m", f"Update {name}")

    return _commit


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit on 'main'."""
    repo = tmp_path / "test-repo"
    repo.mkdir()
    _git(repo, "init")
    # Independent of the machine's init.defaultBranch
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _configure(repo)
    (repo / "README.md").write_text("# Test Repo\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "Initial commit")
    return repo


@pytest.fixture
def cloned_repo(tmp_path: Path, tmp_git_repo: Path) -> Path:
    """Clone of a bare 'origin', so remote-tracking refs and origin/HEAD exist."""
    origin = tmp_path / "origin.git"
    _git(tmp_path, "clone", "--bare", str(tmp_git_repo), str(origin))
    clone = tmp_path / "clone"
    _git(tmp_path, "clone", str(origin), str(clone))
    _configure(clone)
    return clone


@pytest.fixture
def mock_subprocess_run(mocker: Any) -> MagicMock:
    """Mock subprocess.run for testing git commands without a real repo."""
    return mocker.patch("subprocess.run")
