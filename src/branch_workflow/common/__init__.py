"""Shared utilities for branch workflow commands."""

from branch_workflow.common.git import (
    DEFAULT_REMOTE,
    CleanCheck,
    DirtyWorkingTreeError,
    GitCommandError,
    check_clean_working,
    check_git,
    find_repo_root,
    get_current_branch,
    get_default_branch,
    list_branches,
    require_clean_working,
    require_repo,
    run_git,
)
from branch_workflow.common.options import remote_option, yes_option
from branch_workflow.common.ui import (
    BOLD,
    CYAN,
    DIM,
    GREEN,
    RED,
    YELLOW,
    Confirm,
    fuzzy_select,
    get_confirm,
    select_from_menu,
    style_dim,
    style_error,
    style_info,
    style_success,
    style_warn,
)
from branch_workflow.common.validate import (
    ValidationError,
    validate_branch_name,
    validate_remote_name,
    validate_stash_index,
)

__all__ = [
    "BOLD",
    "CYAN",
    "DEFAULT_REMOTE",
    "DIM",
    "GREEN",
    "RED",
    "YELLOW",
    "CleanCheck",
    "Confirm",
    "DirtyWorkingTreeError",
    "GitCommandError",
    "ValidationError",
    "check_clean_working",
    "check_git",
    "find_repo_root",
    "fuzzy_select",
    "get_confirm",
    "get_current_branch",
    "get_default_branch",
    "list_branches",
    "remote_option",
    "require_clean_working",
    "require_repo",
    "run_git",
    "select_from_menu",
    "style_dim",
    "style_error",
    "style_info",
    "style_success",
    "style_warn",
    "validate_branch_name",
    "validate_remote_name",
    "validate_stash_index",
    "yes_option",
]
