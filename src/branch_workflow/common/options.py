"""Click options shared by commands, with environment-variable fallbacks."""

from __future__ import annotations

import click

from branch_workflow.common.git import DEFAULT_REMOTE

remote_option = click.option(
    "--remote",
    "remote_name",
    default=DEFAULT_REMOTE,
    envvar="BW_REMOTE",
    show_default=True,
    help="Remote holding the default branch (env: BW_REMOTE)",
)

yes_option = click.option(
    "-y",
    "--yes",
    "assume_yes",
    is_flag=True,
    envvar="BW_ASSUME_YES",
    help="Answer yes to all prompts (env: BW_ASSUME_YES)",
)
