"""Tests for safe branch deletion."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import call

import pytest

from branch_workflow.branch.delete import (
    DeleteOutcome,
    DeleteReason,
    ProtectedBranchError,
    delete_branch,
)
from branch_workflow.common.git import get_current_branch, run_git

GitFn = Callable[..., str]
CommitFile = Callable[[Path, str, str], None]


def local_branch_exists(repo: Path, name: str) -> bool:
    return run_git("rev-parse", "--verify", f"refs/heads/{name}", cwd=repo) is not None


def origin_has_branch(repo: Path, git: GitFn, name: str) -> bool:
    return bool(git(repo, "ls-remote", "--heads", "origin", name))


@pytest.fixture
def merged_branch(cloned_repo: Path, git: GitFn, commit_file: CommitFile) -> str:
    """'feature-a' merged into main, checked out, and pushed to origin."""
    git(cloned_repo, "checkout", "-b", "feature-a")
    commit_file(cloned_repo, "a.txt", "a\n")
    git(cloned_repo, "push", "origin", "feature-a")
    git(cloned_repo, "checkout", "main")
    git(cloned_repo, "merge", "--no-edit", "feature-a")
    git(cloned_repo, "checkout", "feature-a")
    return "feature-a"


@pytest.fixture
def unmerged_branch(cloned_repo: Path, git: GitFn, commit_file: CommitFile) -> str:
    """'feature-b' with a commit main doesn't have, pushed to origin."""
    git(cloned_repo, "checkout", "-b", "feature-b")
    commit_file(cloned_repo, "b.txt", "b\n")
    git(cloned_repo, "push", "origin", "feature-b")
    git(cloned_repo, "checkout", "main")
    return "feature-b"


class TestProtectedBranch:
    """The default branch is never deleted."""

    @pytest.mark.parametrize("name", ["main", "MAIN", "Main"])
    @pytest.mark.parametrize("force", [False, True])
    @pytest.mark.parametrize("remote", [False, True])
    def test_default_branch_rejected(
        self,
        cloned_repo: Path,
        git: GitFn,
        mocker: Any,
        name: str,
        force: bool,
        remote: bool,
    ) -> None:
        """Any flag combination fails before git is asked to do anything."""
        git(cloned_repo, "checkout", "-b", "elsewhere")
        check_git = mocker.patch("branch_workflow.branch.delete.check_git")

        with pytest.raises(ProtectedBranchError, match="default branch 'main'"):
            delete_branch(name, cloned_repo, force=force, remote=remote)

        check_git.assert_not_called()
        assert get_current_branch(cloned_repo) == "elsewhere"
        assert local_branch_exists(cloned_repo, "main")

    def test_follows_remote_head(self, cloned_repo: Path, git: GitFn) -> None:
        """Protection follows origin/HEAD, not the name 'main'."""
        git(cloned_repo, "checkout", "-b", "trunk")
        git(cloned_repo, "push", "origin", "trunk")
        git(
            cloned_repo,
            "symbolic-ref",
            "refs/remotes/origin/HEAD",
            "refs/remotes/origin/trunk",
        )

        with pytest.raises(ProtectedBranchError):
            delete_branch("trunk", cloned_repo)

    @pytest.mark.parametrize("force", [False, True])
    def test_slash_named_default_branch(
        self, cloned_repo: Path, git: GitFn, force: bool
    ) -> None:
        """'main' resolving to the default 'release/main' is still refused."""
        git(cloned_repo, "checkout", "-b", "release/main")
        git(cloned_repo, "push", "origin", "release/main")
        git(
            cloned_repo,
            "symbolic-ref",
            "refs/remotes/origin/HEAD",
            "refs/remotes/origin/release/main",
        )
        git(cloned_repo, "checkout", "-b", "elsewhere")
        git(cloned_repo, "branch", "-D", "main")

        with pytest.raises(ProtectedBranchError, match="release/main"):
            delete_branch("main", cloned_repo, force=force, switch=False)

        assert local_branch_exists(cloned_repo, "release/main")
        assert get_current_branch(cloned_repo) == "elsewhere"


class TestLocalDelete:
    """Local deletion gated on merge status."""

    def test_merged_branch_deleted(self, cloned_repo: Path, merged_branch: str) -> None:
        """A merged branch is deleted after switching to main."""
        outcome = delete_branch(merged_branch, cloned_repo)

        assert outcome == DeleteOutcome(
            branch="feature-a",
            local_deleted=True,
            remote_deleted=False,
            reason=DeleteReason.SUCCESS,
        )
        assert get_current_branch(cloned_repo) == "main"
        assert not local_branch_exists(cloned_repo, "feature-a")

    def test_unmerged_branch_blocked(
        self, cloned_repo: Path, unmerged_branch: str
    ) -> None:
        """An unmerged branch is kept and reported, not raised."""
        outcome = delete_branch(unmerged_branch, cloned_repo)

        assert outcome.reason is DeleteReason.UNMERGED_BLOCKED
        assert outcome.local_deleted is False
        assert local_branch_exists(cloned_repo, "feature-b")

    def test_unmerged_branch_forced(
        self, cloned_repo: Path, unmerged_branch: str
    ) -> None:
        outcome = delete_branch(unmerged_branch, cloned_repo, force=True)

        assert outcome.reason is DeleteReason.FORCED
        assert outcome.local_deleted is True
        assert not local_branch_exists(cloned_repo, "feature-b")

    def test_force_on_merged_branch_reports_forced(
        self, cloned_repo: Path, merged_branch: str
    ) -> None:
        outcome = delete_branch(merged_branch, cloned_repo, force=True)
        assert outcome.reason is DeleteReason.FORCED

    def test_case_insensitive_name(
        self, cloned_repo: Path, git: GitFn, commit_file: CommitFile
    ) -> None:
        """'feature-x' finds and deletes 'Feature-X'."""
        git(cloned_repo, "checkout", "-b", "Feature-X")
        commit_file(cloned_repo, "x.txt", "x\n")
        git(cloned_repo, "checkout", "main")
        git(cloned_repo, "merge", "--no-edit", "Feature-X")

        outcome = delete_branch("feature-x", cloned_repo)

        assert outcome.reason is DeleteReason.SUCCESS
        assert outcome.branch == "Feature-X"
        assert not local_branch_exists(cloned_repo, "Feature-X")

    def test_merged_into_other_branch_only(
        self, cloned_repo: Path, git: GitFn, unmerged_branch: str
    ) -> None:
        """Contained in a branch other than main still counts as merged."""
        git(cloned_repo, "branch", "backup", unmerged_branch)

        outcome = delete_branch(unmerged_branch, cloned_repo)

        assert outcome.reason is DeleteReason.SUCCESS
        assert outcome.local_deleted is True
        assert not local_branch_exists(cloned_repo, "feature-b")
        assert local_branch_exists(cloned_repo, "backup")

    def test_missing_branch(self, cloned_repo: Path) -> None:
        outcome = delete_branch("nope", cloned_repo)

        assert outcome.reason is DeleteReason.NOT_FOUND
        assert outcome.local_deleted is False
        assert outcome.remote_deleted is False

    def test_prefix_does_not_match(
        self, cloned_repo: Path, merged_branch: str
    ) -> None:
        """'feature' must not delete 'feature-a'."""
        outcome = delete_branch("feature", cloned_repo)

        assert outcome.reason is DeleteReason.NOT_FOUND
        assert local_branch_exists(cloned_repo, "feature-a")

    def test_rerun_converges(self, cloned_repo: Path, merged_branch: str) -> None:
        """A second run after success finds nothing left to do."""
        delete_branch(merged_branch, cloned_repo)
        outcome = delete_branch(merged_branch, cloned_repo)
        assert outcome.reason is DeleteReason.NOT_FOUND


class TestRemoteDelete:
    """Remote deletion follows the local outcome."""

    def test_merged_branch_deleted_on_origin(
        self, cloned_repo: Path, git: GitFn, merged_branch: str
    ) -> None:
        outcome = delete_branch(merged_branch, cloned_repo, remote=True)

        assert outcome.local_deleted is True
        assert outcome.remote_deleted is True
        assert not origin_has_branch(cloned_repo, git, "feature-a")

    def test_same_named_tag_left_alone(
        self, cloned_repo: Path, git: GitFn, merged_branch: str
    ) -> None:
        git(cloned_repo, "tag", "feature-a", "main")
        git(cloned_repo, "push", "origin", "refs/tags/feature-a")

        outcome = delete_branch(merged_branch, cloned_repo, remote=True)

        assert outcome.remote_deleted is True
        assert not origin_has_branch(cloned_repo, git, "feature-a")
        assert git(cloned_repo, "ls-remote", "--tags", "origin", "feature-a")

    def test_unmerged_branch_kept_on_origin(
        self, cloned_repo: Path, git: GitFn, unmerged_branch: str
    ) -> None:
        outcome = delete_branch(unmerged_branch, cloned_repo, remote=True)

        assert outcome.reason is DeleteReason.UNMERGED_BLOCKED
        assert outcome.remote_deleted is False
        assert outcome.remote_blocked is True
        assert origin_has_branch(cloned_repo, git, "feature-b")

    def test_forced_branch_deleted_on_origin(
        self, cloned_repo: Path, git: GitFn, unmerged_branch: str
    ) -> None:
        outcome = delete_branch(
            unmerged_branch, cloned_repo, force=True, remote=True
        )

        assert outcome.remote_deleted is True
        assert not origin_has_branch(cloned_repo, git, "feature-b")

    def test_remote_only_branch_still_deleted(
        self, cloned_repo: Path, git: GitFn, commit_file: CommitFile
    ) -> None:
        """Absence locally counts as merged, so the remote copy goes."""
        git(cloned_repo, "checkout", "-b", "feature-c")
        commit_file(cloned_repo, "c.txt", "c\n")
        git(cloned_repo, "push", "origin", "feature-c")
        git(cloned_repo, "checkout", "main")
        git(cloned_repo, "branch", "-D", "feature-c")

        outcome = delete_branch("feature-c", cloned_repo, remote=True)

        assert outcome.reason is DeleteReason.NOT_FOUND
        assert outcome.local_deleted is False
        assert outcome.remote_deleted is True
        assert not origin_has_branch(cloned_repo, git, "feature-c")

    def test_declined_confirmation_keeps_remote(
        self, cloned_repo: Path, git: GitFn, merged_branch: str
    ) -> None:
        questions: list[str] = []

        def decline(question: str) -> bool:
            questions.append(question)
            return False

        outcome = delete_branch(
            merged_branch, cloned_repo, remote=True, confirm=decline
        )

        assert questions == ["Delete 'feature-a' on origin?"]
        assert outcome.local_deleted is True
        assert outcome.remote_blocked is True
        assert origin_has_branch(cloned_repo, git, "feature-a")


class TestCommandSequence:
    """The exact git commands issued, with git itself mocked out."""

    @pytest.fixture
    def fake_git(self, mocker: Any) -> Any:
        mocker.patch(
            "branch_workflow.branch.delete.get_default_branch", return_value="main"
        )
        mocker.patch("branch_workflow.branch.delete.find_branch", return_value=[])
        return mocker.patch("branch_workflow.branch.delete.check_git", return_value="")

    def test_missing_locally_skips_local_delete(self, fake_git: Any) -> None:
        """No 'git branch -d/-D' when the branch isn't local; push still runs."""
        repo = Path("/repo")

        outcome = delete_branch("feature-c", repo, remote=True)

        assert fake_git.call_args_list == [
            call("checkout", "main", cwd=repo),
            call("push", "origin", "--delete", "refs/heads/feature-c", cwd=repo),
        ]
        assert outcome.remote_deleted is True

    def test_no_switch(self, fake_git: Any) -> None:
        delete_branch("feature-c", Path("/repo"), switch=False)
        fake_git.assert_not_called()

    def test_custom_remote(self, fake_git: Any) -> None:
        repo = Path("/repo")

        delete_branch("feature-c", repo, remote=True, remote_name="upstream")

        assert call(
            "push", "upstream", "--delete", "refs/heads/feature-c", cwd=repo
        ) in (
            fake_git.call_args_list
        )
