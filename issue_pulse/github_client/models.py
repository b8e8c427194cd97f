"""Pydantic models for GitHub data structures.

These models map directly to GitHub's REST API v3 response structures, so raw
API payloads validate without conversion. Unknown fields are ignored.
API Reference: https://docs.github.com/en/rest/issues
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GitHubModel(BaseModel):
    """Base for models built from GitHub API payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GitHubUser(GitHubModel):
    """GitHub user model representing a user account.

    Maps to GitHub REST API User object.
    API Reference: https://docs.github.com/en/rest/users/users
    """

    id: int = Field(0, description="Unique user identifier (integer)")
    login: str | None = Field(None, description="GitHub username/login (string)")
    type: str | None = Field(None, description="Account type: 'User', 'Bot', ...")
    site_admin: bool = Field(False, description="Whether the user is a site admin")
    html_url: str | None = Field(None, description="Profile URL")


class GitHubMilestone(GitHubModel):
    """GitHub milestone model.

    API Reference: https://docs.github.com/en/rest/issues/milestones
    """

    id: int = Field(0, description="Unique milestone identifier (integer)")
    number: int | None = Field(None, description="Milestone number in the repo")
    title: str | None = Field(None, description="Milestone title")
    state: str | None = Field(None, description="'open' or 'closed'")
    description: str | None = None
    open_issues: int = Field(0, description="Number of open issues")
    closed_issues: int = Field(0, description="Number of closed issues")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    due_on: datetime | None = None


class GitHubRepository(GitHubModel):
    """GitHub repository model (the subset embedded in issue payloads)."""

    id: int = Field(0, description="Unique repository identifier (integer)")
    name: str | None = None
    full_name: str | None = None
    private: bool = False
    html_url: str | None = None


class GitHubLabel(GitHubModel):
    """GitHub label model representing repository labels.

    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    id: int | None = None
    name: str = Field(..., description="Name of the label (string)")
    color: str | None = Field(
        None, description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string, max 100 characters)"
    )


class PullRequestLinks(GitHubModel):
    """Pull-request linkage present on issues that are pull requests."""

    url: str | None = None
    html_url: str | None = None
    diff_url: str | None = None
    patch_url: str | None = None
    merged_at: datetime | None = None


class TimelineEvent(GitHubModel):
    """One event of an issue timeline.

    API Reference: https://docs.github.com/en/rest/issues/timeline
    """

    id: int | None = None
    event: str | None = Field(None, description="Event type, e.g. 'labeled'")
    actor: GitHubUser | None = None
    assignee: GitHubUser | None = None
    milestone: GitHubMilestone | None = None
    label: GitHubLabel | None = None
    commit_id: str | None = None
    created_at: datetime | None = None


class CommitIdentity(GitHubModel):
    """Name/email/date recorded in the git commit object."""

    name: str | None = None
    email: str | None = None
    date: datetime | None = None


class GitCommit(GitHubModel):
    """The git-level part of a repository commit."""

    message: str | None = None
    author: CommitIdentity | None = None
    committer: CommitIdentity | None = None


class GitHubCommit(GitHubModel):
    """One commit on a pull request.

    API Reference: https://docs.github.com/en/rest/pulls/pulls#list-commits-on-a-pull-request
    """

    sha: str | None = None
    html_url: str | None = None
    commit: GitCommit | None = None
    author: GitHubUser | None = None
    committer: GitHubUser | None = None


class GitHubIssue(GitHubModel):
    """GitHub issue model representing repository issues and pull requests.

    Maps to GitHub REST API Issue object, extended with the issue's timeline
    and, for pull requests, its commits. ``None`` for either means the data
    has not been fetched yet; an empty list means it was fetched and empty.
    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    number: int = Field(..., description="Issue number within the repository (integer)")
    id: int | None = None
    title: str = Field("", description="Short description/title of the issue (string)")
    body: str | None = Field(
        None, description="Detailed description of the issue in markdown (string)"
    )
    state: str | None = Field(None, description="Current state: 'open', 'closed'")
    locked: bool = False
    html_url: str | None = None
    comments: int = Field(0, description="Number of comments")
    labels: list[GitHubLabel] = Field(default_factory=list)
    user: GitHubUser | None = Field(None, description="Creator/author of the issue")
    assignee: GitHubUser | None = None
    assignees: list[GitHubUser] = Field(default_factory=list)
    closed_by: GitHubUser | None = None
    milestone: GitHubMilestone | None = None
    repository: GitHubRepository | None = None
    pull_request: PullRequestLinks | None = Field(
        None, description="Set when the issue is a pull request"
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None

    timeline: list[TimelineEvent] | None = Field(None, alias="Timeline")
    commits: list[GitHubCommit] | None = Field(None, alias="Commits")

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class ProjectMeta(GitHubModel):
    """Scalar project fields as stored in the cache ``meta`` file."""

    owner: str = Field(..., alias="Owner")
    repo: str = Field(..., alias="Repo")
    refreshed_at: datetime | None = Field(None, alias="RefreshedAt")
