"""Aggregate statistics over a mirrored project."""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta

import pandas as pd

from .github_client.models import GitHubIssue, GitHubMilestone
from .store.project import Project

DAY = timedelta(days=1)


@dataclass
class AgeSummary:
    """Distribution of closed pull-request ages, in days."""

    count: int = 0
    mean: float = 0.0
    stddev: float = 0.0


@dataclass
class ProjectSummary:
    users: int = 0
    milestones: int = 0
    issues: int = 0
    pull_requests: int = 0
    open_milestones: list[GitHubMilestone] = field(default_factory=list)


def closed_pr_ages(issues: Iterable[GitHubIssue]) -> list[int]:
    """Days from creation to close of each closed pull request.

    Partial days round up and every PR counts as at least one day. Plain
    issues and PRs without a close time are skipped.
    """
    ages = []
    for issue in issues:
        if not issue.is_pull_request:
            continue
        if issue.closed_at is None or issue.created_at is None:
            continue
        age = math.ceil((issue.closed_at - issue.created_at) / DAY)
        ages.append(max(age, 1))
    return ages


def age_summary(issues: Iterable[GitHubIssue]) -> AgeSummary:
    """Mean and population standard deviation of closed PR ages."""
    ages = pd.Series(closed_pr_ages(issues), dtype="float64")
    if ages.empty:
        return AgeSummary()
    return AgeSummary(
        count=int(ages.count()),
        mean=float(ages.mean()),
        stddev=float(ages.std(ddof=0)),
    )


def project_summary(project: Project) -> ProjectSummary:
    """Entity counts and open milestones of ``project``."""
    pull_requests = sum(1 for i in project.all_issues() if i.is_pull_request)
    open_milestones = sorted(
        (m for m in project.milestones.values() if m.state == "open"),
        key=lambda m: m.title or "",
    )
    return ProjectSummary(
        users=len(project.users),
        milestones=len(project.milestones),
        issues=len(project.issues) - pull_requests,
        pull_requests=pull_requests,
        open_milestones=open_milestones,
    )
