"""Manual two-branch merge emulating a hosted pull request's merge button."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple

from branch_workflow.branch.resolver import (
    BranchRef,
    InvalidArgumentError,
    RefScope,
    find_branch,
    select_ref,
)
from branch_workflow.common.git import (
    DEFAULT_REMOTE,
    GitCommandError,
    call_git,
    check_clean_working,
    check_git,
    commit_merge,
    fetch_remote,
    get_upstream,
    require_clean_working,
)
from branch_workflow.common.ui import Confirm
from branch_workflow.common.validate import validate_branch_name, validate_remote_name

# Finishes an in-progress merge on the checked-out branch
CommitFn = Callable[[Path], bool]


class BranchNotFoundError(Exception):
    """Raised when a branch exists neither locally nor on any remote."""

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found locally or on any remote")


class MergeConflictError(Exception):
    """Raised by MergeResult.raise_for_conflicts when a merge needs a human."""

    def __init__(self, head: str, base: str, conflicts: list[str]) -> None:
        self.head = head
        self.base = base
        self.conflicts = conflicts
        super().__init__(
            f"Merging '{base}' into '{head}' left conflicts in "
            f"{len(conflicts)} path(s); resolve, commit, and re-run"
        )


class MergeState(Enum):
    MERGED = "merged"
    CONFLICT_PENDING = "conflict-pending"


class MergeResult(NamedTuple):
    """Outcome of merge_pull_request."""

    state: MergeState
    head: str
    base: str
    conflicts: list[str]
    pushed: bool = False

    def raise_for_conflicts(self) -> MergeResult:
        """Return self, or raise MergeConflictError if conflicts are pending."""
        if self.state is MergeState.CONFLICT_PENDING:
            raise MergeConflictError(self.head, self.base, self.conflicts)
        return self


def _resolve_ref(name: str, repo_root: Path, remote: str) -> BranchRef:
    refs = find_branch(name, repo_root)
    if not refs:
        raise BranchNotFoundError(name)

    # An exact name beats a trailing-component match in either scope
    exact = [ref for ref in refs if ref.name.casefold() == name.casefold()]
    candidates = exact or refs

    local = [ref for ref in candidates if ref.scope is RefScope.LOCAL]
    if local:
        return select_ref(name, local)

    # Prefer the configured remote when several remotes carry the branch
    preferred = [ref for ref in candidates if ref.remote == remote]
    return select_ref(name, preferred or candidates)


def _prepare_branch(ref: BranchRef, repo_root: Path) -> str:
    """Bring a branch up to date locally. Returns the local branch name."""
    if ref.scope is RefScope.LOCAL:
        check_git("checkout", ref.name, cwd=repo_root)
        if get_upstream(ref.name, repo_root):
            check_git("pull", "--ff-only", cwd=repo_root)
    else:
        check_git(
            "checkout",
            "-b",
            ref.name,
            "--track",
            f"{ref.remote}/{ref.name}",
            cwd=repo_root,
        )
    return ref.name


def unmerged_paths(repo_root: Path) -> list[str]:
    """Paths with unresolved merge conflicts."""
    output = check_git("diff", "--name-only", "--diff-filter=U", cwd=repo_root)
    return [line for line in output.split("\n") if line]


def merge_pull_request(
    head: str,
    base: str,
    repo_root: Path,
    *,
    remote_name: str = DEFAULT_REMOTE,
    push: bool = False,
    confirm: Confirm | None = None,
    commit: CommitFn = commit_merge,
) -> MergeResult:
    """Merge HEAD into BASE the way a pull request merge button would.

    BASE is first merged into HEAD so conflicts surface on the feature side.
    If that leaves the tree dirty, the merge stops in CONFLICT_PENDING and the
    user resolves and re-runs. Otherwise HEAD is merged into BASE and COMMIT
    finishes the merge. With PUSH, BASE is pushed once CONFIRM agrees.

    Raises:
        DirtyWorkingTreeError: The tree has changes before anything runs
        BranchNotFoundError: HEAD or BASE exists nowhere
        GitCommandError: Any other git failure
    """
    validate_branch_name(head)
    validate_branch_name(base)
    validate_remote_name(remote_name)
    if head.casefold() == base.casefold():
        raise InvalidArgumentError(f"Cannot merge '{head}' into itself")

    require_clean_working(repo_root)

    fetch_remote(repo_root, remote_name)

    head_ref = _resolve_ref(head, repo_root, remote_name)
    base_ref = _resolve_ref(base, repo_root, remote_name)

    head_branch = _prepare_branch(head_ref, repo_root)
    base_branch = _prepare_branch(base_ref, repo_root)

    # Bring BASE into HEAD first so conflicts land on the feature branch
    check_git("checkout", head_branch, cwd=repo_root)
    result = call_git("merge", "--no-edit", base_branch, cwd=repo_root)

    if not check_clean_working(repo_root).is_clean:
        return MergeResult(
            state=MergeState.CONFLICT_PENDING,
            head=head_branch,
            base=base_branch,
            conflicts=unmerged_paths(repo_root),
        )
    if result.returncode != 0:
        raise GitCommandError(
            ["merge", "--no-edit", base_branch], result.returncode, result.stderr
        )

    check_git("checkout", base_branch, cwd=repo_root)
    check_git("merge", "--no-ff", "--no-commit", head_branch, cwd=repo_root)
    commit(repo_root)

    pushed = False
    question = f"Push '{base_branch}' to {remote_name}?"
    if push and (confirm is None or confirm(question)):
        check_git("push", remote_name, base_branch, cwd=repo_root)
        pushed = True

    return MergeResult(
        state=MergeState.MERGED,
        head=head_branch,
        base=base_branch,
        conflicts=[],
        pushed=pushed,
    )
