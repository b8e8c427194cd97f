"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from issue_pulse.github_client.client import GitHubClientError, Page
from issue_pulse.github_client.models import (
    GitHubCommit,
    GitHubIssue,
    TimelineEvent,
)
from issue_pulse.storage.manager import CacheManager
from issue_pulse.store.project import Project


def user_data(user_id: int, login: str | None = None) -> dict[str, Any]:
    return {"id": user_id, "login": login or f"user{user_id}", "type": "User"}


def milestone_data(milestone_id: int, title: str = "v1.0") -> dict[str, Any]:
    return {
        "id": milestone_id,
        "number": milestone_id,
        "title": title,
        "state": "open",
        "open_issues": 3,
        "closed_issues": 7,
    }


def issue_data(
    number: int,
    *,
    title: str | None = None,
    state: str = "open",
    author: int = 1,
    assignees: tuple[int, ...] = (),
    milestone: int | None = None,
    pull_request: bool = False,
    created_at: str = "2024-01-01T00:00:00Z",
    closed_at: str | None = None,
) -> dict[str, Any]:
    """Issue payload shaped like the GitHub REST API's."""
    data: dict[str, Any] = {
        "id": 1000 + number,
        "number": number,
        "title": title or f"Issue {number}",
        "body": "body",
        "state": state,
        "comments": 0,
        "labels": [{"id": 5, "name": "bug", "color": "ff0000"}],
        "user": user_data(author),
        "assignee": user_data(assignees[0]) if assignees else None,
        "assignees": [user_data(a) for a in assignees],
        "milestone": milestone_data(milestone) if milestone else None,
        "created_at": created_at,
        "updated_at": created_at,
        "closed_at": closed_at,
        "node_id": "ignored",
    }
    if pull_request:
        data["pull_request"] = {
            "url": f"https://api.github.com/repos/o/r/pulls/{number}",
            "html_url": f"https://github.com/o/r/pull/{number}",
        }
    return data


def event_data(event_id: int, actor: int, event: str = "labeled") -> dict[str, Any]:
    return {
        "id": event_id,
        "event": event,
        "actor": user_data(actor),
        "created_at": "2024-01-02T00:00:00Z",
    }


def commit_data(sha: str, author: int, committer: int) -> dict[str, Any]:
    return {
        "sha": sha,
        "commit": {
            "message": f"commit {sha}",
            "author": {"name": "A", "email": "a@example.com"},
        },
        "author": user_data(author),
        "committer": user_data(committer),
    }


def make_issue(number: int, **kwargs: Any) -> GitHubIssue:
    return GitHubIssue.model_validate(issue_data(number, **kwargs))


class FakeGitHubClient:
    """Stands in for GitHubClient, serving scripted pages.

    ``issue_pages`` is a list of pages of issue payloads; ``timelines`` and
    ``commits`` map issue numbers to lists of pages. Any entry can be an
    exception instance, which is raised when that page is requested.
    """

    def __init__(
        self,
        issue_pages: list[Any] | None = None,
        timelines: dict[int, list[Any]] | None = None,
        commits: dict[int, list[Any]] | None = None,
    ):
        self.issue_pages = issue_pages or [[]]
        self.timelines = timelines or {}
        self.commits = commits or {}
        self.calls: list[tuple[Any, ...]] = []
        self.rate_limit_checks = 0

    def check_rate_limit(self) -> None:
        self.rate_limit_checks += 1

    def _serve(
        self, pages: list[Any], page: int, build: Callable[[Any], Any]
    ) -> Page[Any]:
        if not pages:
            return Page([], page, 0)
        entry = pages[page - 1]
        if isinstance(entry, Exception):
            # Fail only once, then serve the page after it on retry.
            pages.pop(page - 1)
            raise entry
        next_page = page + 1 if page < len(pages) else 0
        return Page([build(item) for item in entry], page, next_page)

    def list_issues(
        self, owner: str, repo: str, since: datetime | None = None, page: int = 1
    ) -> Page[GitHubIssue]:
        self.calls.append(("issues", since, page))
        return self._serve(self.issue_pages, page, GitHubIssue.model_validate)

    def list_timeline(
        self, owner: str, repo: str, number: int, page: int = 1
    ) -> Page[TimelineEvent]:
        self.calls.append(("timeline", number, page))
        return self._serve(
            self.timelines.get(number, []), page, TimelineEvent.model_validate
        )

    def list_pr_commits(
        self, owner: str, repo: str, number: int, page: int = 1
    ) -> Page[GitHubCommit]:
        self.calls.append(("commits", number, page))
        return self._serve(
            self.commits.get(number, []), page, GitHubCommit.model_validate
        )


def transient_error() -> GitHubClientError:
    return GitHubClientError("GET /repos/o/r/issues page 1: 502 Bad Gateway")


@pytest.fixture
def project() -> Project:
    return Project("testorg", "testrepo")


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_dir: Path) -> CacheManager:
    return CacheManager(cache_dir)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
