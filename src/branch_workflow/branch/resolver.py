"""Branch existence and scope resolution over the ref list."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NamedTuple

from branch_workflow.common.git import check_git

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"


class InvalidArgumentError(ValueError):
    """Raised when mutually exclusive options are combined."""

    pass


class RefScope(Enum):
    LOCAL = "local"
    REMOTE = "remote"


class BranchLocation(Enum):
    LOCAL = "local"
    REMOTE_ONLY = "remote-only"
    NOT_FOUND = "not-found"


class BranchRef(NamedTuple):
    """A branch ref as reported by git for-each-ref."""

    ref: str  # e.g. refs/remotes/origin/fix-1
    name: str  # e.g. fix-1
    scope: RefScope
    remote: str | None


def parse_ref(ref: str) -> BranchRef | None:
    """Parse a full ref path. Returns None for non-branch or symbolic HEAD refs."""
    if ref.startswith(LOCAL_PREFIX):
        name = ref[len(LOCAL_PREFIX) :]
        return BranchRef(ref=ref, name=name, scope=RefScope.LOCAL, remote=None)

    if ref.startswith(REMOTE_PREFIX):
        remote, _, name = ref[len(REMOTE_PREFIX) :].partition("/")
        # refs/remotes/origin/HEAD points at the default branch, not a branch
        if not name or name == "HEAD":
            return None
        return BranchRef(ref=ref, name=name, scope=RefScope.REMOTE, remote=remote)

    return None


def list_refs(repo_root: Path) -> list[BranchRef]:
    """List local heads and remote-tracking branches. Always re-queries git."""
    output = check_git(
        "for-each-ref",
        "--format=%(refname)",
        "refs/heads",
        "refs/remotes",
        cwd=repo_root,
    )

    refs: list[BranchRef] = []
    for line in output.split("\n"):
        parsed = parse_ref(line.strip())
        if parsed is not None:
            refs.append(parsed)
    return refs


def name_matches(query: str, branch_name: str) -> bool:
    """Whole-component, case-insensitive match against the end of a branch name.

    'feature-x' matches 'Feature-X' and 'team/feature-x' but 'feature' does not
    match 'feature-x'.
    """
    wanted = query.casefold().strip("/").split("/")
    parts = branch_name.casefold().split("/")
    if not wanted or len(wanted) > len(parts):
        return False
    return parts[-len(wanted) :] == wanted


def _scopes(*, local_only: bool, remote_only: bool) -> set[RefScope]:
    if local_only and remote_only:
        raise InvalidArgumentError("local_only and remote_only are mutually exclusive")
    if local_only:
        return {RefScope.LOCAL}
    if remote_only:
        return {RefScope.REMOTE}
    return {RefScope.LOCAL, RefScope.REMOTE}


def find_branch(
    name: str,
    repo_root: Path,
    *,
    local_only: bool = False,
    remote_only: bool = False,
) -> list[BranchRef]:
    """Return the refs whose branch name matches NAME in the requested scope."""
    scopes = _scopes(local_only=local_only, remote_only=remote_only)
    return [
        ref
        for ref in list_refs(repo_root)
        if ref.scope in scopes and name_matches(name, ref.name)
    ]


def select_ref(name: str, refs: list[BranchRef]) -> BranchRef:
    """Pick the single ref NAME refers to among matches from find_branch.

    An exact (case-insensitive) name wins; otherwise the match must be unique.
    """
    if not refs:
        raise InvalidArgumentError(f"No branch matches {name!r}")

    exact = [ref for ref in refs if ref.name.casefold() == name.casefold()]
    candidates = exact or refs
    names = sorted({ref.name for ref in candidates})
    if len(names) > 1:
        raise InvalidArgumentError(
            f"Branch name {name!r} is ambiguous: {', '.join(names)}"
        )
    return candidates[0]


def branch_exists(
    name: str,
    repo_root: Path,
    *,
    local_only: bool = False,
    remote_only: bool = False,
) -> bool:
    """Check whether a branch exists locally, on a remote, or either."""
    return bool(
        find_branch(name, repo_root, local_only=local_only, remote_only=remote_only)
    )


def resolve_branch(name: str, repo_root: Path) -> BranchLocation:
    """Classify a branch as local, remote-only, or missing."""
    refs = find_branch(name, repo_root)
    if any(ref.scope is RefScope.LOCAL for ref in refs):
        return BranchLocation.LOCAL
    if refs:
        return BranchLocation.REMOTE_ONLY
    return BranchLocation.NOT_FOUND
