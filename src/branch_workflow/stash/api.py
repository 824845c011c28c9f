"""Stash operations: save, list, apply, pop, drop."""

from __future__ import annotations

import re
from pathlib import Path
from typing import NamedTuple

from branch_workflow.common.git import check_git, run_git
from branch_workflow.common.validate import validate_stash_index

_STASH_REF_RE = re.compile(r"^stash@\{(\d+)\}$")


class StashEntry(NamedTuple):
    """A saved stash, newest first."""

    index: int
    ref: str  # stash@{N}
    message: str


def _stash_tip(repo_root: Path) -> str | None:
    return run_git("rev-parse", "-q", "--verify", "refs/stash", cwd=repo_root)


def stash_ref(index: int | str) -> str:
    """Build the stash@{N} selector for a validated index."""
    return f"stash@{{{validate_stash_index(index)}}}"


def stash_save(
    repo_root: Path, message: str | None = None, *, include_untracked: bool = False
) -> bool:
    """Stash working-tree and index changes. Returns False if nothing was saved."""
    args = ["stash", "push"]
    if include_untracked:
        args.append("--include-untracked")
    if message:
        args.extend(["-m", message])

    before = _stash_tip(repo_root)
    check_git(*args, cwd=repo_root)
    return _stash_tip(repo_root) != before


def parse_stash_list(output: str) -> list[StashEntry]:
    """Parse `git stash list --format=%gd%x00%s` output."""
    entries: list[StashEntry] = []
    for line in output.split("\n"):
        if not line:
            continue
        ref, _, message = line.partition("\x00")
        match = _STASH_REF_RE.match(ref)
        if not match:
            continue
        entries.append(StashEntry(index=int(match.group(1)), ref=ref, message=message))
    return entries


def list_stashes(repo_root: Path) -> list[StashEntry]:
    """List stashes, newest first."""
    output = check_git("stash", "list", "--format=%gd%x00%s", cwd=repo_root)
    return parse_stash_list(output)


def stash_apply(repo_root: Path, index: int = 0) -> None:
    """Apply a stash, keeping it in the list."""
    check_git("stash", "apply", stash_ref(index), cwd=repo_root)


def stash_pop(repo_root: Path, index: int = 0) -> None:
    """Apply a stash and drop it."""
    check_git("stash", "pop", stash_ref(index), cwd=repo_root)


def stash_drop(repo_root: Path, index: int = 0) -> None:
    """Drop a stash without applying it."""
    check_git("stash", "drop", stash_ref(index), cwd=repo_root)
