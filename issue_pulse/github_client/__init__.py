"""GitHub client package for API interaction."""

from .client import GitHubClient, GitHubClientError, Page
from .models import (
    GitHubCommit,
    GitHubIssue,
    GitHubLabel,
    GitHubMilestone,
    GitHubRepository,
    GitHubUser,
    ProjectMeta,
    PullRequestLinks,
    TimelineEvent,
)

__all__ = [
    "GitHubClient",
    "GitHubClientError",
    "Page",
    "GitHubUser",
    "GitHubMilestone",
    "GitHubRepository",
    "GitHubLabel",
    "GitHubCommit",
    "GitHubIssue",
    "ProjectMeta",
    "PullRequestLinks",
    "TimelineEvent",
]
