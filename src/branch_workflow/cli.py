"""Unified CLI for branch workflows: branch, pr, stash, commit."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import click

from branch_workflow.branch.cli import cli as branch_cli
from branch_workflow.common import (
    GitCommandError,
    require_repo,
    style_dim,
    style_error,
    style_info,
    style_success,
    style_warn,
    yes_option,
)
from branch_workflow.common.git import check_clean_working, commit_all, discard_changes
from branch_workflow.pr.cli import cli as pr_cli
from branch_workflow.stash.cli import cli as stash_cli

# Shorthand shell functions: (name, subcommand)
SHELL_ALIASES: list[tuple[str, str]] = [
    ("bw", ""),
    ("gbl", "branch list"),
    ("gbd", "branch delete"),
    ("gbm", "branch merged"),
    ("gpm", "pr merge"),
    ("gss", "stash save"),
    ("gsl", "stash list"),
    ("gsp", "stash pop"),
    ("gca", "commit -m"),
    ("gnuke", "discard"),
]

INSTALL_MARKER = "branch-workflow install --print"


@click.group()
@click.version_option(package_name="branch-workflow")
def cli() -> None:
    """Git branch workflows with guardrails.

    COMMANDS:
        branch   Existence, merge status, and safe delete
        pr       Merge two branches like a pull request
        stash    Save and restore work in progress
        commit   Stage everything and commit
        discard  Throw away all local changes

    EXAMPLES:
        branch-workflow branch delete feature-x
        branch-workflow pr merge feature-x main
        branch-workflow stash pop
        branch-workflow install      # Install shell aliases

    After installing shell integration, use short aliases:
        gbd, gpm, gss, gsp, gca, ...
    """


# Add subcommand groups
cli.add_command(branch_cli, name="branch")
cli.add_command(pr_cli, name="pr")
cli.add_command(stash_cli, name="stash")
cli.add_command(branch_cli, name="br")
cli.add_command(stash_cli, name="st")


@cli.command()
@click.option("-m", "--message", required=True, help="Commit message")
def commit(message: str) -> None:
    """Stage all changes (including untracked files) and commit.

    EXAMPLES:
        branch-workflow commit -m "Fix typo"
    """
    repo_root = require_repo()
    try:
        committed = commit_all(repo_root, message)
    except GitCommandError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    if committed:
        click.echo(style_success("Committed all changes"))
    else:
        click.echo(style_dim("Nothing to commit."))


@cli.command()
@click.option(
    "--keep-untracked", is_flag=True, help="Leave untracked files in place"
)
@yes_option
def discard(*, keep_untracked: bool, assume_yes: bool) -> None:
    """Reset to HEAD and delete untracked files.

    EXAMPLES:
        branch-workflow discard            # Asks first
        branch-workflow discard -y         # No questions
    """
    repo_root = require_repo()
    check = check_clean_working(repo_root)
    if check.is_clean:
        click.echo(style_dim("Working tree is already clean."))
        return

    for change in check.changes:
        click.echo(style_dim(f"  {change}"))
    if not assume_yes and not click.confirm(
        style_warn(f"Discard {len(check.changes)} change(s)? This cannot be undone."),
        default=False,
    ):
        click.echo(style_dim("Cancelled."))
        return

    try:
        discard_changes(repo_root, include_untracked=not keep_untracked)
    except GitCommandError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    click.echo(style_success("Discarded local changes"))


@cli.command()
@click.option(
    "--shell",
    type=click.Choice(["zsh", "bash", "auto"]),
    default="auto",
    help="Shell type (default: auto-detect)",
)
@click.option(
    "--print",
    "print_only",
    is_flag=True,
    help="Print shell script instead of installing",
)
def install(shell: str, *, print_only: bool) -> None:
    """Install shell aliases.

    EXAMPLES:
        branch-workflow install              # Auto-detect shell
        branch-workflow install --shell zsh  # Install for zsh
        branch-workflow install --print      # Print script only
    """
    if shell == "auto":
        shell_path = os.environ.get("SHELL", "")
        if "zsh" in shell_path:
            shell = "zsh"
        elif "bash" in shell_path:
            shell = "bash"
        else:
            click.echo(
                style_error(f"Unknown shell: {shell_path}. Use --shell to specify."),
                err=True,
            )
            sys.exit(1)

    if print_only:
        click.echo(get_shell_aliases(_find_binary()))
        return

    home = Path.home()
    config_file = home / ".zshrc" if shell == "zsh" else home / ".bashrc"
    install_block = f"""# branch-workflow shell integration
eval "$({INSTALL_MARKER})\""""

    source_cmd = f"source {config_file}"
    if config_file.exists() and INSTALL_MARKER in config_file.read_text():
        click.echo(style_info(f"Already installed in {config_file}"))
        click.echo(style_dim(f"  Restart your shell or run: {source_cmd}"))
        return

    with config_file.open("a") as f:
        f.write(f"\n{install_block}\n")

    click.echo(style_success(f"Installed to {config_file}"))
    click.echo(style_dim(f"  Restart your shell or run: {source_cmd}"))


def get_shell_aliases(binary: str) -> str:
    """Shell functions for the shorthand aliases (same for zsh and bash)."""
    lines = ["", "# branch-workflow shell integration"]
    for name, subcommand in SHELL_ALIASES:
        command = f'"{binary}" {subcommand}'.rstrip()
        lines.append(f'{name}() {{ {command} "$@"; }}')
    return "\n".join(lines) + "\n"


def _find_binary() -> str:
    """Find the branch-workflow binary location."""
    result = subprocess.run(
        ["which", "branch-workflow"], capture_output=True, text=True, check=False
    )
    if result.returncode == 0:
        return result.stdout.strip()
    return "branch-workflow"


if __name__ == "__main__":
    cli()
