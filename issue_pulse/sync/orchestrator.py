"""Incremental sync of a project's issues, timelines and commits.

A refresh runs two phases:

1. Issue listing: every issue updated since the last refresh is listed and
   saved; re-listed issues lose their cached timeline and commits. The
   watermark then moves to the time the listing *started*, so anything that
   changed while it ran is listed again next time.
2. Backfill: newest issue first, fetch the commits of pull requests and the
   timeline of every issue that has none cached. Each issue is saved as soon
   as it is complete.
"""

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import TypeVar

from pydantic import BaseModel
from rich.console import Console

from ..github_client.client import GitHubClient, Page
from ..github_client.models import GitHubIssue
from ..storage.manager import CacheManager
from ..store.project import Project
from .policies import FailFast, FetchPolicy, RetryForever

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncResult:
    """Counts and timing of one refresh."""

    pages_listed: int = 0
    issues_listed: int = 0
    issues_backfilled: int = 0
    retries: int = 0
    duration_seconds: float = 0.0


class SyncOrchestrator:
    """Drives a refresh of ``project`` through ``client`` into ``cache``."""

    def __init__(
        self,
        project: Project,
        client: GitHubClient,
        cache: CacheManager,
        listing_policy: FetchPolicy | None = None,
        backfill_policy: FetchPolicy | None = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.project = project
        self.client = client
        self.cache = cache
        self.listing_policy = listing_policy or RetryForever()
        self.backfill_policy = backfill_policy or FailFast()
        self.now = now

    def refresh(self) -> SyncResult:
        """Run the listing phase, then the backfill phase.

        Raises:
            GitHubClientError: If a backfill request fails
        """
        result = SyncResult()
        start = time.monotonic()

        self.client.check_rate_limit()
        self.list_issues(result)
        self.backfill(result)

        result.retries = self.listing_policy.retries + self.backfill_policy.retries
        result.duration_seconds = time.monotonic() - start
        return result

    def _paginate(
        self,
        request: Callable[[int], Page[T]],
        policy: FetchPolicy,
        what: str,
    ) -> Iterator[Page[T]]:
        """Yield pages until the reported next page does not advance."""
        page = 1
        while True:
            response = policy.fetch(partial(request, page), f"{what} page {page}")
            yield response
            if response.next_page <= page:
                break
            page = response.next_page

    def list_issues(self, result: SyncResult | None = None) -> None:
        """List issues changed since the watermark and advance it."""
        result = result or SyncResult()
        project = self.project
        since = project.refreshed_at

        if since is not None:
            console.print(f"refreshing issues since @ {since.strftime(TIME_FORMAT)}")
        else:
            console.print("loading issues")

        started_at = self.now()
        request = partial(self.client.list_issues, project.owner, project.repo, since)
        for response in self._paginate(request, self.listing_policy, "issues"):
            result.pages_listed += 1
            issues = response.items
            if issues:
                console.print(
                    f"  {len(issues):3d}: {issues[0].number}-{issues[-1].number}"
                )
            for issue in issues:
                stored = project.upsert_issue(issue)
                project.intern_issue(stored)
                self.cache.save_issue(stored)
            result.issues_listed += len(issues)

        project.refreshed_at = started_at
        self.cache.save_meta(project)
        console.print("  done")

    def _fetch_all(self, request: Callable[[int], Page[T]], what: str) -> list[T]:
        items: list[T] = []
        for response in self._paginate(request, self.backfill_policy, what):
            items.extend(response.items)
        return items

    def backfill_issue(self, issue: GitHubIssue) -> bool:
        """Fetch whatever commits/timeline ``issue`` is missing.

        Returns:
            True if anything was fetched
        """
        owner, repo = self.project.owner, self.project.repo
        changed = False

        if issue.is_pull_request and issue.commits is None:
            issue.commits = self._fetch_all(
                partial(self.client.list_pr_commits, owner, repo, issue.number),
                f"commits of #{issue.number}",
            )
            changed = True

        if issue.timeline is None:
            issue.timeline = self._fetch_all(
                partial(self.client.list_timeline, owner, repo, issue.number),
                f"timeline of #{issue.number}",
            )
            changed = True

        return changed

    def backfill(self, result: SyncResult | None = None) -> None:
        """Backfill timelines and commits, newest issue first."""
        result = result or SyncResult()
        console.print("refreshing timelines")

        for number in reversed(self.project.sorted_issue_numbers()):
            issue = self.project.issues[number]
            if not self.backfill_issue(issue):
                continue
            console.print(
                f"  {number} ({len(issue.commits or [])} commits, "
                f"{len(issue.timeline or [])} events)"
            )
            self.project.intern_issue(issue)
            self.cache.save_issue(issue)
            result.issues_backfilled += 1

        console.print("  done")
