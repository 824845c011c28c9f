"""Branch commands: existence checks, merge status, and safe delete."""

from __future__ import annotations

import sys

import click

from branch_workflow.branch.delete import (
    DeleteReason,
    ProtectedBranchError,
    delete_branch,
)
from branch_workflow.branch.merged import merge_status
from branch_workflow.branch.resolver import (
    InvalidArgumentError,
    RefScope,
    branch_exists,
    list_refs,
)
from branch_workflow.common import (
    CYAN,
    DIM,
    GREEN,
    GitCommandError,
    ValidationError,
    get_confirm,
    get_current_branch,
    get_default_branch,
    list_branches,
    remote_option,
    require_repo,
    select_from_menu,
    style_dim,
    style_error,
    style_info,
    style_success,
    style_warn,
    yes_option,
)


@click.group()
def cli() -> None:
    """Branch helpers with merge-status guardrails.

    EXAMPLES:
        branch-workflow branch exists feature-x      # Local or remote?
        branch-workflow branch merged feature-x      # Contained in another branch?
        branch-workflow branch delete feature-x -r   # Delete locally and on origin
        branch-workflow branch delete                # Interactive picker

    ALIASES:
        ls  = list
        rm  = delete
        del = delete
    """


@cli.command()
@click.argument("name")
@click.option("--local", "local_only", is_flag=True, help="Only local branches")
@click.option("--remote", "remote_only", is_flag=True, help="Only remote branches")
def exists(name: str, *, local_only: bool, remote_only: bool) -> None:
    """Check whether a branch exists. Exits 1 if it does not.

    Matching is case-insensitive on whole path components, so 'feature'
    does not match 'feature-x'.

    EXAMPLES:
        branch-workflow branch exists fix-1 --remote
    """
    repo_root = require_repo()
    try:
        found = branch_exists(
            name, repo_root, local_only=local_only, remote_only=remote_only
        )
    except InvalidArgumentError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(2)

    if found:
        click.echo(style_success(f"Branch '{name}' exists"))
    else:
        click.echo(style_dim(f"Branch '{name}' not found"))
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.option("--into", help="Check against this ref instead of all branches")
def merged(name: str, into: str | None) -> None:
    """Check whether a branch has been merged. Exits 1 if it has not.

    EXAMPLES:
        branch-workflow branch merged feature-x
        branch-workflow branch merged feature-x --into main
    """
    repo_root = require_repo()
    try:
        status = merge_status(name, repo_root, into=into)
    except GitCommandError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(2)

    if status.is_merged:
        targets = ", ".join(status.merged_into)
        click.echo(style_success(f"'{name}' is merged into {targets}"))
    else:
        click.echo(style_warn(f"'{name}' is not merged"))
        sys.exit(1)


@cli.command("list")
@remote_option
def list_cmd(remote_name: str) -> None:
    """List branches, marking the current and default ones.

    EXAMPLES:
        branch-workflow branch list
        branch-workflow br ls
    """
    repo_root = require_repo()
    current = get_current_branch(repo_root)
    default = get_default_branch(repo_root, remote_name)

    refs = list_refs(repo_root)
    if not refs:
        click.echo(style_dim("No branches found."))
        return

    for ref in refs:
        if ref.scope is RefScope.LOCAL:
            marker = "*" if ref.name == current else " "
            name_styled = click.style(ref.name, fg=GREEN, bold=ref.name == current)
        else:
            marker = " "
            name_styled = click.style(f"{ref.remote}/", fg=DIM) + click.style(
                ref.name, fg=CYAN
            )
        suffix = style_dim(" (default)") if ref.name == default else ""
        click.echo(f"{marker} {name_styled}{suffix}")


@cli.command()
@click.argument("name", required=False)
@click.option("-f", "--force", is_flag=True, help="Delete even if not merged")
@click.option(
    "-r", "--remote-delete", "remote", is_flag=True, help="Also delete on the remote"
)
@click.option(
    "--no-switch",
    is_flag=True,
    help="Don't check out the default branch first",
)
@remote_option
@yes_option
def delete(
    name: str | None,
    remote_name: str,
    *,
    force: bool,
    remote: bool,
    no_switch: bool,
    assume_yes: bool,
) -> None:
    """Delete a branch if it is merged.

    Switches to the default branch first. The default branch itself is
    never deleted. Unmerged branches are kept unless -f is given.

    EXAMPLES:
        branch-workflow branch delete feature-x       # Safe delete
        branch-workflow branch delete feature-x -f    # Even if unmerged
        branch-workflow branch delete feature-x -r    # Also on origin
    """
    repo_root = require_repo()

    if name is None:
        default = get_default_branch(repo_root, remote_name)
        candidates = [
            b for b in list_branches(repo_root, include_remote=False) if b != default
        ]
        name = select_from_menu("Select branch to delete", candidates)
        if name is None:
            click.echo(style_dim("Cancelled."))
            return

    if force and not assume_yes:
        if not click.confirm(
            style_warn(f"Force delete '{name}' even if unmerged?"), default=False
        ):
            click.echo(style_dim("Cancelled."))
            return

    try:
        outcome = delete_branch(
            name,
            repo_root,
            force=force,
            remote=remote,
            switch=not no_switch,
            remote_name=remote_name,
            confirm=get_confirm(assume_yes=assume_yes),
        )
    except (
        ProtectedBranchError,
        ValidationError,
        InvalidArgumentError,
        GitCommandError,
    ) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    branch = outcome.branch
    if outcome.reason is DeleteReason.SUCCESS:
        click.echo(style_success(f"Deleted branch '{branch}'"))
    elif outcome.reason is DeleteReason.FORCED:
        click.echo(style_success(f"Force deleted branch '{branch}'"))
    elif outcome.reason is DeleteReason.NOT_FOUND:
        click.echo(style_info(f"No local branch '{name}'"))
    else:
        click.echo(style_warn(f"Branch '{branch}' is not fully merged."))
        click.echo(style_dim("  Re-run with -f to delete it anyway."))

    if outcome.remote_deleted:
        click.echo(style_success(f"Deleted '{branch}' on {remote_name}"))
    elif outcome.remote_blocked:
        click.echo(style_dim(f"  Kept '{branch}' on {remote_name}"))


# Short aliases for frequently used commands
cli.add_command(list_cmd, name="ls")
cli.add_command(delete, name="rm")
cli.add_command(delete, name="del")
