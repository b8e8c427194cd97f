"""In-memory entity store for one mirrored project.

A ``Project`` owns every issue of the mirror plus the users, milestones and
repositories those issues refer to. Entities shared between issues are
interned: each ID maps to exactly one instance, and every reference to that
ID in any issue, timeline event or commit is that same object.
"""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import TypeVar

from ..github_client.models import (
    GitHubIssue,
    GitHubMilestone,
    GitHubRepository,
    GitHubUser,
    ProjectMeta,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", GitHubUser, GitHubMilestone, GitHubRepository)

# Fields replaced wholesale when an issue is listed again.
_LISTING_FIELDS = tuple(
    name for name in GitHubIssue.model_fields if name not in ("timeline", "commits")
)


class Project:
    """Canonical state of one owner/repo mirror."""

    def __init__(self, owner: str, repo: str):
        self.owner = owner
        self.repo = repo
        self.refreshed_at: datetime | None = None

        self.issues: dict[int, GitHubIssue] = {}
        self.users: dict[int, GitHubUser] = {}
        self.milestones: dict[int, GitHubMilestone] = {}
        self.repos: dict[int, GitHubRepository] = {}

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def meta(self) -> ProjectMeta:
        """Scalar fields, as persisted in the cache metadata file."""
        return ProjectMeta(
            owner=self.owner, repo=self.repo, refreshed_at=self.refreshed_at
        )

    # Issues

    def get_issue(self, number: int) -> GitHubIssue | None:
        return self.issues.get(number)

    def add_issue(self, issue: GitHubIssue) -> GitHubIssue:
        """Store an issue as-is, replacing any record with the same number."""
        self.issues[issue.number] = issue
        return issue

    def upsert_issue(self, issue: GitHubIssue) -> GitHubIssue:
        """Insert a freshly listed issue or update the stored one in place.

        Listing fields of an existing record are overwritten and its timeline
        and commits are cleared, so the next backfill rebuilds them.

        Returns:
            The stored record
        """
        existing = self.issues.get(issue.number)
        if existing is None:
            issue.timeline = None
            issue.commits = None
            self.issues[issue.number] = issue
            return issue

        for name in _LISTING_FIELDS:
            setattr(existing, name, getattr(issue, name))
        existing.timeline = None
        existing.commits = None
        return existing

    def sorted_issue_numbers(self) -> list[int]:
        """Issue numbers in ascending order."""
        return sorted(self.issues)

    def all_issues(self) -> Iterator[GitHubIssue]:
        return iter(self.issues.values())

    # Interning

    def _intern(self, table: dict[int, E], entity: E | None) -> E | None:
        if entity is None or not entity.id:
            return entity
        existing = table.get(entity.id)
        if existing is not None:
            return existing
        table[entity.id] = entity
        return entity

    def intern_user(self, user: GitHubUser | None) -> GitHubUser | None:
        """Return the canonical instance for ``user``, registering it if new."""
        return self._intern(self.users, user)

    def intern_milestone(
        self, milestone: GitHubMilestone | None
    ) -> GitHubMilestone | None:
        """Return the canonical instance for ``milestone``."""
        return self._intern(self.milestones, milestone)

    def intern_repo(self, repo: GitHubRepository | None) -> GitHubRepository | None:
        """Return the canonical instance for ``repo``."""
        return self._intern(self.repos, repo)

    def intern_issue(self, issue: GitHubIssue) -> None:
        """Point every entity reference inside ``issue`` at its canonical instance.

        Covers the issue's own user, assignee(s), closer, milestone and
        repository, then every timeline event and commit. Safe to repeat.
        """
        issue.user = self.intern_user(issue.user)
        issue.assignee = self.intern_user(issue.assignee)
        issue.closed_by = self.intern_user(issue.closed_by)
        issue.assignees = [self.intern_user(a) for a in issue.assignees]
        issue.milestone = self.intern_milestone(issue.milestone)
        issue.repository = self.intern_repo(issue.repository)

        for event in issue.timeline or ():
            event.actor = self.intern_user(event.actor)
            event.assignee = self.intern_user(event.assignee)
            event.milestone = self.intern_milestone(event.milestone)

        for commit in issue.commits or ():
            commit.author = self.intern_user(commit.author)
            commit.committer = self.intern_user(commit.committer)
