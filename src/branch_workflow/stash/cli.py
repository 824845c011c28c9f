"""Stash shortcuts with an interactive picker."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import click

from branch_workflow.common import (
    CYAN,
    GitCommandError,
    ValidationError,
    fuzzy_select,
    require_repo,
    style_dim,
    style_error,
    style_info,
    style_success,
)
from branch_workflow.stash.api import (
    list_stashes,
    stash_apply,
    stash_drop,
    stash_pop,
    stash_save,
)


def pick_stash(repo_root: Path, action: str) -> int | None:
    """Interactive stash picker. Returns the stash index or None if cancelled."""
    entries = list_stashes(repo_root)
    if not entries:
        click.echo(style_dim("No stashes found."))
        return None

    options = [f"{entry.ref} {entry.message}" for entry in entries]
    index = fuzzy_select(options, f"Select stash to {action}")
    if index is None:
        click.echo(style_dim("Cancelled."))
        return None
    return entries[index].index


@click.group()
def cli() -> None:
    """Save and restore work in progress.

    EXAMPLES:
        branch-workflow stash save -m "wip"     # Stash tracked changes
        branch-workflow stash save -u           # Include untracked files
        branch-workflow stash list              # Show stashes
        branch-workflow stash pop               # Interactive: pick a stash
        branch-workflow stash apply 2           # Apply stash@{2}

    ALIASES:
        ls = list
    """


@cli.command()
@click.option("-m", "--message", help="Stash message")
@click.option(
    "-u", "--include-untracked", is_flag=True, help="Also stash untracked files"
)
def save(message: str | None, *, include_untracked: bool) -> None:
    """Stash current changes."""
    repo_root = require_repo()
    try:
        saved = stash_save(repo_root, message, include_untracked=include_untracked)
    except GitCommandError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    if saved:
        click.echo(style_success("Saved changes to stash@{0}"))
    else:
        click.echo(style_dim("No local changes to save."))


@cli.command("list")
def list_cmd() -> None:
    """List stashes, newest first."""
    repo_root = require_repo()
    try:
        entries = list_stashes(repo_root)
    except GitCommandError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    if not entries:
        click.echo(style_dim("No stashes found."))
        return

    for entry in entries:
        ref_styled = click.style(f"{entry.ref:12}", fg=CYAN)
        click.echo(f"  {ref_styled} {entry.message}")


def _run_on_stash(
    index: int | None, action: str, operation: Callable[[Path, int], None]
) -> None:
    repo_root = require_repo()
    if index is None:
        index = pick_stash(repo_root, action)
        if index is None:
            return

    click.echo(style_info(f"{action.capitalize()} stash@{{{index}}}..."))
    try:
        operation(repo_root, index)
    except (GitCommandError, ValidationError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    click.echo(style_success(f"Done: {action} stash@{{{index}}}"))


@cli.command()
@click.argument("index", type=int, required=False)
def apply(index: int | None) -> None:
    """Apply a stash and keep it. Without INDEX, shows a picker."""
    _run_on_stash(index, "apply", stash_apply)


@cli.command()
@click.argument("index", type=int, required=False)
def pop(index: int | None) -> None:
    """Apply a stash and drop it. Without INDEX, shows a picker."""
    _run_on_stash(index, "pop", stash_pop)


@cli.command()
@click.argument("index", type=int, required=False)
def drop(index: int | None) -> None:
    """Drop a stash without applying it. Without INDEX, shows a picker."""
    _run_on_stash(index, "drop", stash_drop)


# Short aliases for frequently used commands
cli.add_command(list_cmd, name="ls")
