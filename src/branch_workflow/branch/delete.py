"""Safe branch deletion gated on merge status."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NamedTuple

from branch_workflow.branch.merged import is_merged
from branch_workflow.branch.resolver import find_branch, select_ref
from branch_workflow.common.git import DEFAULT_REMOTE, check_git, get_default_branch
from branch_workflow.common.ui import Confirm
from branch_workflow.common.validate import validate_branch_name, validate_remote_name


class ProtectedBranchError(Exception):
    """Raised when asked to delete the default branch."""

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(f"Refusing to delete the default branch '{branch}'")


class DeleteReason(Enum):
    SUCCESS = "success"
    NOT_FOUND = "not-found"
    UNMERGED_BLOCKED = "unmerged-blocked"
    FORCED = "forced"


class DeleteOutcome(NamedTuple):
    """What a delete_branch call did."""

    branch: str  # the branch actually resolved, e.g. Feature-X for feature-x
    local_deleted: bool
    remote_deleted: bool
    reason: DeleteReason
    remote_blocked: bool = False


def _remote_branch_name(name: str, repo_root: Path, remote: str) -> str:
    """Spell NAME the way the remote-tracking ref does, if there is one."""
    refs = [
        ref
        for ref in find_branch(name, repo_root, remote_only=True)
        if ref.remote == remote and ref.name.casefold() == name.casefold()
    ]
    return refs[0].name if refs else name


def _guard_default(name: str, main: str) -> None:
    if name.casefold() == main.casefold():
        raise ProtectedBranchError(main)


def delete_branch(
    name: str,
    repo_root: Path,
    *,
    force: bool = False,
    remote: bool = False,
    switch: bool = True,
    remote_name: str = DEFAULT_REMOTE,
    confirm: Confirm | None = None,
) -> DeleteOutcome:
    """Delete a local branch (and optionally its remote copy) if it is safe.

    The default branch is never deleted. An unmerged branch is left alone unless
    FORCE is set; that is reported as UNMERGED_BLOCKED rather than raised. A
    branch missing locally counts as merged, so its remote copy may still go.

    Args:
        name: Branch to delete
        repo_root: Repository to operate on
        force: Delete even if unmerged (git branch -D)
        remote: Also delete the branch on REMOTE_NAME
        switch: Check out the default branch first
        remote_name: Remote used for the default branch and remote delete
        confirm: Asked before the remote delete; None means no prompt
    """
    main = get_default_branch(repo_root, remote_name)
    _guard_default(name, main)

    validate_branch_name(name)
    validate_remote_name(remote_name)

    # Resolve what would actually be deleted before touching anything
    local_refs = find_branch(name, repo_root, local_only=True)
    branch = select_ref(name, local_refs) if local_refs else None
    resolved = branch.name if branch else name
    _guard_default(resolved, main)

    target: str | None = None
    if remote:
        target = _remote_branch_name(resolved, repo_root, remote_name)
        _guard_default(target, main)

    if switch:
        check_git("checkout", main, cwd=repo_root)

    local_deleted = False
    if branch is None:
        # Nothing local to lose
        reason = DeleteReason.NOT_FOUND
        safe_for_remote = True
    else:
        if force:
            reason = DeleteReason.FORCED
        elif is_merged(branch.name, repo_root):
            reason = DeleteReason.SUCCESS
        else:
            reason = DeleteReason.UNMERGED_BLOCKED

        # Gate already passed; -d would also demand a merge into HEAD
        if reason is not DeleteReason.UNMERGED_BLOCKED:
            check_git("branch", "-D", branch.name, cwd=repo_root)
            local_deleted = True
        safe_for_remote = local_deleted

    remote_deleted = False
    remote_blocked = False
    if target is not None:
        question = f"Delete '{target}' on {remote_name}?"
        if not safe_for_remote or (confirm is not None and not confirm(question)):
            remote_blocked = True
        else:
            # Full ref: a same-named tag must not match
            check_git(
                "push", remote_name, "--delete", f"refs/heads/{target}", cwd=repo_root
            )
            remote_deleted = True

    return DeleteOutcome(
        branch=target if branch is None and target else resolved,
        local_deleted=local_deleted,
        remote_deleted=remote_deleted,
        reason=reason,
        remote_blocked=remote_blocked,
    )
