"""GitHub API client using PyGitHub."""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar
from urllib.parse import parse_qs, urlparse

import requests
from github import Auth, Github
from github.GithubException import GithubException
from pydantic import BaseModel, ValidationError
from rich.console import Console

from .models import GitHubCommit, GitHubIssue, TimelineEvent

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


class GitHubClientError(Exception):
    """A GitHub request failed (network error or API error response)."""


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing.

    ``next_page`` is the number of the page to request next, taken from the
    response's Link header; 0 means there is no next page.
    """

    items: list[T] = field(default_factory=list)
    page: int = 1
    next_page: int = 0


def parse_next_page(link_header: str | None) -> int:
    """Extract the ``rel="next"`` page number from a Link header."""
    if not link_header:
        return 0
    for url, rel in _LINK_RE.findall(link_header):
        if rel != "next":
            continue
        pages = parse_qs(urlparse(url).query).get("page")
        if pages and pages[0].isdigit():
            return int(pages[0])
    return 0


class GitHubClient:
    """GitHub API client exposing the paginated listings used for syncing."""

    def __init__(self, token: str, per_page: int = 100):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token.
            per_page: Page size used for every listing request.
        """
        if not token:
            raise ValueError("GitHub token is required.")

        self.token = token
        self.per_page = per_page
        self.github = Github(auth=Auth.Token(token), per_page=per_page)

    def check_rate_limit(self) -> None:
        """Check rate limit and sleep if necessary."""
        try:
            # Fetches /rate_limit on first use, then tracks response headers.
            remaining, _ = self.github.rate_limiting
            logger.info("GitHub API rate limit: %d requests remaining", remaining)

            if remaining < 10:
                reset_time = self.github.rate_limiting_resettime
                sleep_time = reset_time - time.time() + 1
                console.print(
                    f"Rate limit low, sleeping for {sleep_time:.1f} seconds..."
                )
                time.sleep(max(sleep_time, 0))

        except (GithubException, requests.RequestException) as e:
            # Not critical: listing requests report their own failures.
            logger.info("Could not check rate limit: %s", e)

    def _get_page(
        self, path: str, model: type[T], page: int, params: dict[str, Any]
    ) -> Page[T]:
        """Request one page of a listing endpoint and validate its items."""
        parameters = dict(params, page=page, per_page=self.per_page)
        try:
            headers, data = self.github.requester.requestJsonAndCheck(
                "GET", path, parameters=parameters
            )
        except (GithubException, requests.RequestException) as e:
            raise GitHubClientError(f"GET {path} page {page}: {e}") from e

        try:
            items = [model.model_validate(item) for item in data or []]
        except ValidationError as e:
            raise GitHubClientError(
                f"GET {path} page {page}: unexpected response: {e}"
            ) from e
        return Page(items, page, parse_next_page(headers.get("link")))

    def list_issues(
        self,
        owner: str,
        repo: str,
        since: datetime | None = None,
        page: int = 1,
    ) -> Page[GitHubIssue]:
        """List issues and pull requests of a repository, oldest first.

        Args:
            owner: Repository owner
            repo: Repository name
            since: Only issues updated at or after this time (all when None)
            page: Page number, starting at 1

        Returns:
            Page of GitHubIssue objects
        """
        params: dict[str, Any] = {"state": "all", "direction": "asc"}
        if since is not None:
            if since.tzinfo is not None:
                since = since.astimezone(timezone.utc)
            params["since"] = since.strftime("%Y-%m-%dT%H:%M:%SZ")
        return self._get_page(
            f"/repos/{owner}/{repo}/issues", GitHubIssue, page, params
        )

    def list_timeline(
        self, owner: str, repo: str, number: int, page: int = 1
    ) -> Page[TimelineEvent]:
        """List one page of an issue's event timeline."""
        return self._get_page(
            f"/repos/{owner}/{repo}/issues/{number}/timeline", TimelineEvent, page, {}
        )

    def list_pr_commits(
        self, owner: str, repo: str, number: int, page: int = 1
    ) -> Page[GitHubCommit]:
        """List one page of a pull request's commits."""
        return self._get_page(
            f"/repos/{owner}/{repo}/pulls/{number}/commits", GitHubCommit, page, {}
        )
