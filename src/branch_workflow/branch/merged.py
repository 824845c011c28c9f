"""Merge-status checks: is a branch tip reachable from another branch?"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from branch_workflow.common.git import GitCommandError, call_git, check_git

# Leading markers in `git branch` output: current branch, other worktree
_BRANCH_MARKERS = ("* ", "+ ")


class MergeStatus(NamedTuple):
    """Whether a branch's tip is contained in some other branch."""

    branch: str
    is_merged: bool
    merged_into: list[str]


def parse_branch_list(output: str) -> list[str]:
    """Parse plain `git branch` output into branch names."""
    branches: list[str] = []
    for line in output.split("\n"):
        entry = line.rstrip()
        for marker in _BRANCH_MARKERS:
            if entry.startswith(marker):
                entry = entry[len(marker) :]
                break
        entry = entry.strip()
        # "(HEAD detached at abc123)" is not a branch
        if not entry or entry.startswith("("):
            continue
        branches.append(entry)
    return branches


def branches_containing(name: str, repo_root: Path) -> list[str]:
    """List local branches whose history contains NAME's tip commit."""
    output = check_git("branch", "--contains", name, cwd=repo_root)
    return parse_branch_list(output)


def merge_status(
    name: str, repo_root: Path, *, into: str | None = None
) -> MergeStatus:
    """Compute merge status of NAME.

    Without INTO, the branch counts as merged when any other local branch
    contains its tip. With INTO, it is merged when its tip is an ancestor of INTO.
    """
    if into is not None:
        result = call_git("merge-base", "--is-ancestor", name, into, cwd=repo_root)
        # Exit code 1 means "not an ancestor"; anything else is an error
        if result.returncode not in (0, 1):
            raise GitCommandError(
                ["merge-base", "--is-ancestor", name, into],
                result.returncode,
                result.stderr,
            )
        merged = result.returncode == 0
        return MergeStatus(
            branch=name, is_merged=merged, merged_into=[into] if merged else []
        )

    others = [
        branch
        for branch in branches_containing(name, repo_root)
        if branch.casefold() != name.casefold()
    ]
    return MergeStatus(branch=name, is_merged=bool(others), merged_into=others)


def is_merged(name: str, repo_root: Path) -> bool:
    """Check whether NAME's tip is reachable from any other local branch."""
    return merge_status(name, repo_root).is_merged
