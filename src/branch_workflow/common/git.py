"""Git operations shared across branch workflow commands."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import NamedTuple

import click

from branch_workflow.common.ui import style_error

DEFAULT_REMOTE = "origin"


class GitCommandError(Exception):
    """Raised when a git invocation exits non-zero."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        self.git_args = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        command = " ".join(["git", *args])
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"'{command}' failed with exit code {returncode}{detail}")


class DirtyWorkingTreeError(Exception):
    """Raised when a clean working tree is required but changes are present."""

    def __init__(self, changes: list[str]) -> None:
        self.changes = changes
        super().__init__(
            f"Working tree has uncommitted changes ({len(changes)} path(s))"
        )


class CleanCheck(NamedTuple):
    """Result of a working-tree cleanliness check."""

    is_clean: bool
    changes: list[str]


def run_git(*args: str, capture: bool = True, cwd: Path | None = None) -> str | None:
    """Run a git command and return stdout, or None on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=capture,
            text=True,
            cwd=cwd,
            check=True,
        )
        return result.stdout.strip() if capture else None
    except subprocess.CalledProcessError:
        return None


def call_git(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a git command without checking the exit code."""
    return subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        check=False,
    )


def check_git(*args: str, cwd: Path | None = None, strip: bool = True) -> str:
    """Run a git command and return stdout. Raises GitCommandError on failure."""
    result = call_git(*args, cwd=cwd)
    if result.returncode != 0:
        raise GitCommandError(list(args), result.returncode, result.stderr)
    return result.stdout.strip() if strip else result.stdout


def find_repo_root(cwd: Path | None = None) -> Path | None:
    """Find the top level of the current working tree."""
    toplevel = run_git("rev-parse", "--show-toplevel", cwd=cwd)
    if not toplevel:
        return None
    return Path(toplevel).resolve()


def require_repo() -> Path:
    """Get repo root or exit with error."""
    repo_root = find_repo_root()
    if not repo_root:
        click.echo(style_error("Not in a git repository"), err=True)
        sys.exit(1)
    return repo_root


def get_default_branch(repo_root: Path, remote: str = DEFAULT_REMOTE) -> str:
    """Detect the default branch (main/master/etc)."""
    # Try to get from remote HEAD
    prefix = f"refs/remotes/{remote}/"
    result = run_git("symbolic-ref", f"{prefix}HEAD", cwd=repo_root)
    if result and result.startswith(prefix):
        return result[len(prefix) :]

    # Check common names
    for branch in ["main", "master"]:
        if run_git("rev-parse", "--verify", f"refs/heads/{branch}", cwd=repo_root):
            return branch

    return "main"  # fallback


def get_current_branch(repo_root: Path | None = None) -> str | None:
    """Get the current branch name, or None on a detached HEAD."""
    return run_git("branch", "--show-current", cwd=repo_root) or None


def get_upstream(branch: str, repo_root: Path) -> str | None:
    """Get the upstream of a local branch, e.g. 'origin/main'."""
    return run_git(
        "rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}", cwd=repo_root
    )


def list_branches(repo_root: Path, *, include_remote: bool = True) -> list[str]:
    """List all branches."""
    patterns = ["refs/heads"]
    if include_remote:
        patterns.append("refs/remotes")

    result = run_git("for-each-ref", "--format=%(refname)", *patterns, cwd=repo_root)
    if not result:
        return []

    branches: list[str] = []
    for line in result.split("\n"):
        ref = line.strip()
        # Skip symbolic refs like refs/remotes/origin/HEAD
        if not ref or ref.endswith("/HEAD"):
            continue
        if ref.startswith("refs/heads/"):
            branches.append(ref[len("refs/heads/") :])
        elif ref.startswith("refs/remotes/"):
            branches.append(ref[len("refs/remotes/") :])

    return sorted(set(branches))


def check_clean_working(repo_root: Path) -> CleanCheck:
    """Check the working tree for uncommitted or untracked changes."""
    # Porcelain lines start with a significant space, so keep them intact
    status = check_git("status", "--porcelain", cwd=repo_root, strip=False)
    changes = [line for line in status.split("\n") if line.strip()]
    return CleanCheck(is_clean=not changes, changes=changes)


def require_clean_working(repo_root: Path) -> CleanCheck:
    """Strict variant of check_clean_working. Raises DirtyWorkingTreeError."""
    check = check_clean_working(repo_root)
    if not check.is_clean:
        raise DirtyWorkingTreeError(check.changes)
    return check


def is_repo_dirty(repo_path: Path) -> bool:
    """Check if a repository has uncommitted changes."""
    return not check_clean_working(repo_path).is_clean


def commit_all(repo_root: Path, message: str) -> bool:
    """Stage everything and commit. Returns False if there was nothing to commit."""
    if check_clean_working(repo_root).is_clean:
        return False
    check_git("add", "-A", cwd=repo_root)
    check_git("commit", "-m", message, cwd=repo_root)
    return True


def commit_merge(repo_root: Path) -> bool:
    """Commit an in-progress merge with git's prepared message.

    Returns False when no merge is in progress (e.g. "Already up to date").
    """
    if run_git("rev-parse", "-q", "--verify", "MERGE_HEAD", cwd=repo_root) is None:
        return False
    check_git("commit", "--no-edit", cwd=repo_root)
    return True


def discard_changes(repo_root: Path, *, include_untracked: bool = True) -> None:
    """Reset tracked files to HEAD and optionally remove untracked files."""
    check_git("reset", "--hard", "HEAD", cwd=repo_root)
    if include_untracked:
        check_git("clean", "-fd", cwd=repo_root)


def fetch_remote(repo_root: Path, remote: str = DEFAULT_REMOTE) -> None:
    """Fetch from a remote. Raises GitCommandError on failure."""
    check_git("fetch", remote, cwd=repo_root)
