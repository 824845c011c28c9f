"""Terminal output and prompts: colors, message styles, confirmations, pickers."""

from __future__ import annotations

from typing import Callable

import click
from InquirerPy import inquirer
from InquirerPy.base.control import Choice

# Colors using click.style
CYAN = "cyan"
GREEN = "green"
YELLOW = "yellow"
RED = "red"
DIM = "bright_black"
BOLD = "bold"

# Injected yes/no prompt: receives the question, returns the answer
Confirm = Callable[[str], bool]


def style_error(msg: str) -> str:
    """Failure line, e.g. a git command that exited non-zero."""
    return click.style(f"✗ {msg}", fg=RED)


def style_success(msg: str) -> str:
    """Completed-action line."""
    return click.style(f"✓ {msg}", fg=GREEN)


def style_info(msg: str) -> str:
    """Progress line printed before a step runs."""
    return click.style(f"→ {msg}", fg=CYAN)


def style_warn(msg: str) -> str:
    """Something the user should look at: unmerged work, prompts."""
    return click.style(f"! {msg}", fg=YELLOW)


def style_dim(msg: str) -> str:
    return click.style(msg, fg=DIM)


def always_yes(_question: str) -> bool:
    return True


def click_confirm(question: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no."""
    return click.confirm(style_warn(question), default=False)


def get_confirm(*, assume_yes: bool) -> Confirm:
    """Pick the confirmation strategy for a CLI invocation."""
    return always_yes if assume_yes else click_confirm


def fuzzy_select(options: list[str], message: str) -> int | None:
    """Fuzzy picker over OPTIONS. Returns the chosen position, None if cancelled.

    Matching is exact-substring, so typing 'fix' narrows to entries that
    contain 'fix'. Positions are returned directly, so repeated labels
    (two stashes with the same message) stay distinguishable.
    """
    choices = [Choice(value=i, name=label) for i, label in enumerate(options)]
    try:
        prompt = inquirer.fuzzy(  # type: ignore[attr-defined]
            message=message,
            choices=choices,
            match_exact=True,
        )
        return prompt.execute()
    except KeyboardInterrupt:
        return None


def select_from_menu(title: str, options: list[str]) -> str | None:
    """Pick one of OPTIONS by name, or None if there is nothing to pick."""
    if not options:
        click.echo(style_error("Nothing to choose from."), err=True)
        return None

    index = fuzzy_select(options, title)
    if index is None:
        return None
    return options[index]
