"""Standardized CLI option definitions.

Keeps option names, shorthands and environment variables in one place.
"""

import typer

from ..config import DEFAULT_PROJECT

CACHE_OPTION = typer.Option(
    None,
    "--cache",
    "-c",
    envvar="ISSUE_PULSE_CACHE",
    help="Cached project data directory (default ~/.issue-pulse)",
)

UPDATE_OPTION = typer.Option(
    False, "--update", "-u", help="Refresh cached project data from GitHub"
)

PROJECT_OPTION = typer.Option(
    DEFAULT_PROJECT, "--project", "-p", help="GitHub owner/repo name"
)

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    envvar="ISSUE_PULSE_TOKEN_FILE",
    help="Read GitHub personal access token from this file "
    "(default $HOME/.github-issue-token)",
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug logging")
