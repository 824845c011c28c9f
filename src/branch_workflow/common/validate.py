"""Input validation for names passed to git."""

from __future__ import annotations

import re


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def validate_branch_name(branch: str) -> str:
    """Validate git branch name per git-check-ref-format rules.

    Returns the branch name or raises ValidationError.
    """
    if not branch:
        raise ValidationError("Branch name cannot be empty")

    # Would be parsed as an option by git
    if branch.startswith("-"):
        raise ValidationError("Branch name cannot start with -")

    # Common dangerous patterns
    forbidden = ["..", "~", "^", ":", "\\", " ", "\t", "\n", "?", "*", "[", "@{"]
    for char in forbidden:
        if char in branch:
            raise ValidationError(f"Invalid branch name: contains {char!r}")

    # Must not start/end with slash or dot
    if branch.startswith("/") or branch.endswith("/"):
        raise ValidationError("Branch name cannot start or end with /")
    if branch.startswith(".") or branch.endswith("."):
        raise ValidationError("Branch name cannot start or end with .")
    if branch.endswith(".lock"):
        raise ValidationError("Branch name cannot end with .lock")

    # No consecutive slashes
    if "//" in branch:
        raise ValidationError("Branch name cannot contain consecutive slashes")

    return branch


def validate_remote_name(remote: str) -> str:
    """Validate a git remote name (e.g. 'origin', 'upstream').

    Returns the remote name or raises ValidationError.
    """
    if not remote:
        raise ValidationError("Remote name cannot be empty")

    if not re.match(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$", remote):
        raise ValidationError(f"Invalid remote name: {remote!r}")

    return remote


def validate_stash_index(index: int | str) -> int:
    """Validate a stash index is a non-negative integer.

    Returns validated int or raises ValidationError.
    """
    try:
        num = int(index)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid stash index: {index!r}") from e

    if num < 0:
        raise ValidationError(f"Stash index cannot be negative: {num}")

    return num
