"""Main CLI entry point."""

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import ConfigurationError, PulseConfig
from ..github_client.client import GitHubClient, GitHubClientError
from ..stats import age_summary, project_summary
from ..storage.manager import CacheCorruptionError, CacheManager
from ..store.project import Project
from ..sync.orchestrator import SyncOrchestrator
from ..sync.policies import RetryForever
from .options import (
    CACHE_OPTION,
    PROJECT_OPTION,
    TOKEN_OPTION,
    UPDATE_OPTION,
    VERBOSE_OPTION,
)

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="issue-pulse",
    help="Mirror a GitHub project's issues locally and report on them",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def setup_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # Keep PyGithub/urllib3 request chatter out of the default output.
    for name in ("github", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def show_summary(project: Project, storage: CacheManager) -> None:
    summary = project_summary(project)
    cache_stats = storage.get_storage_stats()

    table = Table(title=f"{project.full_name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Users", str(summary.users))
    table.add_row("Milestones", str(summary.milestones))
    table.add_row("Issues", str(summary.issues))
    table.add_row("Pull requests", str(summary.pull_requests))
    table.add_row("Cached issues", str(cache_stats["total_issues"]))
    table.add_row("Cache size (MB)", str(cache_stats["total_size_mb"]))
    console.print(table)

    for milestone in summary.open_milestones:
        console.print(
            f"{milestone.title}: {milestone.open_issues}/{milestone.closed_issues}"
        )

    ages = age_summary(project.all_issues())
    console.print(f"age: mean={ages.mean:0.1f} stddev={ages.stddev:0.1f}")


@app.command()
def main(
    cache: Path | None = CACHE_OPTION,
    update: bool = UPDATE_OPTION,
    project: str = PROJECT_OPTION,
    token: Path | None = TOKEN_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Load the cached project, optionally refresh it, and print statistics.

    Examples:
        issue-pulse -p cockroachdb/cockroach -u
        issue-pulse -c /tmp/pulse-cache -p myorg/myrepo
    """
    setup_logging(verbose)

    try:
        config = PulseConfig.from_options(
            project, cache_dir=cache, token_file=token, refresh=update
        )
        mirror = Project(config.owner, config.repo)
        storage = CacheManager(config.cache_dir)
        storage.load_all(mirror)

        if config.refresh:
            client = GitHubClient(config.load_token(), per_page=config.per_page)
            orchestrator = SyncOrchestrator(
                mirror,
                client,
                storage,
                listing_policy=RetryForever(delay=config.retry_delay),
            )
            result = orchestrator.refresh()
            logging.getLogger(__name__).info(
                "Refresh: %d issues listed, %d backfilled, %d retries in %.1fs",
                result.issues_listed,
                result.issues_backfilled,
                result.retries,
                result.duration_seconds,
            )
    except (ConfigurationError, CacheCorruptionError) as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except GitHubClientError as e:
        console.print(f"❌ [red]GitHub error: {escape(str(e))}[/red]")
        console.print("Progress made so far is cached; rerun to resume.")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print()
    show_summary(mirror, storage)


if __name__ == "__main__":
    app()
