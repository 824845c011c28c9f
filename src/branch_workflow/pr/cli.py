"""Pull-request style merge of two branches, done locally."""

from __future__ import annotations

import sys

import click

from branch_workflow.branch.resolver import InvalidArgumentError
from branch_workflow.common import (
    DirtyWorkingTreeError,
    GitCommandError,
    ValidationError,
    get_confirm,
    remote_option,
    require_repo,
    style_dim,
    style_error,
    style_info,
    style_success,
    style_warn,
    yes_option,
)
from branch_workflow.pr.merge import (
    BranchNotFoundError,
    MergeConflictError,
    merge_pull_request,
)


@click.group()
def cli() -> None:
    """Merge branches the way a pull request would.

    EXAMPLES:
        branch-workflow pr merge fix-1 main          # Merge fix-1 into main
        branch-workflow pr merge fix-1 main --push   # ...and push main
    """


@cli.command()
@click.argument("head")
@click.argument("base")
@click.option("--push", is_flag=True, help="Push BASE after merging")
@remote_option
@yes_option
def merge(
    head: str, base: str, remote_name: str, *, push: bool, assume_yes: bool
) -> None:
    """Merge HEAD into BASE.

    Requires a clean working tree. BASE is merged into HEAD first; if that
    conflicts, resolve the conflicts, commit, and run the command again.

    EXAMPLES:
        branch-workflow pr merge feature-x main
    """
    repo_root = require_repo()

    click.echo(style_info(f"Merging '{head}' into '{base}'..."))
    try:
        result = merge_pull_request(
            head,
            base,
            repo_root,
            remote_name=remote_name,
            push=push,
            confirm=get_confirm(assume_yes=assume_yes),
        ).raise_for_conflicts()
    except DirtyWorkingTreeError as e:
        click.echo(style_error(str(e)), err=True)
        for change in e.changes:
            click.echo(style_dim(f"  {change}"), err=True)
        click.echo(style_dim("  Commit, stash, or discard changes first."), err=True)
        sys.exit(1)
    except MergeConflictError as e:
        click.echo(style_warn(str(e)), err=True)
        for path in e.conflicts:
            click.echo(style_dim(f"  {path}"), err=True)
        sys.exit(1)
    except (
        BranchNotFoundError,
        InvalidArgumentError,
        ValidationError,
        GitCommandError,
    ) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    click.echo(style_success(f"Merged '{result.head}' into '{result.base}'"))
    if result.pushed:
        click.echo(style_success(f"Pushed '{result.base}' to {remote_name}"))
