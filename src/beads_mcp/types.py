"""Data types for bd operations.

Request parameters are frozen dataclasses built by the dispatch layer.
Result records are TypedDicts describing bd's JSON output; the core never
constructs them, it only checks top-level shape before handing them back.
"""

from dataclasses import dataclass, field
from typing import Literal, NotRequired, TypedDict

IssueStatus = Literal["open", "in_progress", "blocked", "closed"]
IssueType = Literal["bug", "feature", "task", "epic", "chore"]
DependencyType = Literal["blocks", "related", "parent-child", "discovered-from"]


class IssueBase(TypedDict):
    id: str
    title: str
    status: IssueStatus
    priority: int
    issue_type: IssueType
    created_at: str
    updated_at: str
    description: NotRequired[str]
    design: NotRequired[str | None]
    acceptance_criteria: NotRequired[str | None]
    notes: NotRequired[str | None]
    external_ref: NotRequired[str | None]
    closed_at: NotRequired[str | None]
    assignee: NotRequired[str | None]
    labels: NotRequired[list[str]]
    dependency_count: NotRequired[int]
    dependent_count: NotRequired[int]


class LinkedIssue(IssueBase):
    """Issue nested under another issue's dependencies/dependents."""

    dependency_type: NotRequired[DependencyType | None]


class Issue(IssueBase):
    dependencies: NotRequired[list[LinkedIssue]]
    dependents: NotRequired[list[LinkedIssue]]


class BlockedIssue(Issue):
    blocked_by_count: int
    blocked_by: list[str]


class Stats(TypedDict):
    total_issues: int
    open_issues: int
    in_progress_issues: int
    closed_issues: int
    blocked_issues: int
    ready_issues: int
    average_lead_time_hours: float


@dataclass(frozen=True)
class ReadyWorkParams:
    limit: int | None = None
    priority: int | None = None
    assignee: str | None = None


@dataclass(frozen=True)
class ListIssuesParams:
    status: IssueStatus | None = None
    priority: int | None = None
    issue_type: IssueType | None = None
    assignee: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class ShowIssueParams:
    issue_id: str


@dataclass(frozen=True)
class CreateIssueParams:
    """Parameters for `bd create`.

    Attributes:
        labels: Passed as one `-l` flag per label
        deps: Passed as a single comma-joined `--deps` value
    """

    title: str
    description: str | None = None
    design: str | None = None
    acceptance: str | None = None
    external_ref: str | None = None
    priority: int | None = None
    issue_type: IssueType | None = None
    assignee: str | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    id: str | None = None
    deps: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UpdateIssueParams:
    issue_id: str
    status: IssueStatus | None = None
    priority: int | None = None
    assignee: str | None = None
    title: str | None = None
    description: str | None = None
    design: str | None = None
    acceptance_criteria: str | None = None
    notes: str | None = None
    external_ref: str | None = None


@dataclass(frozen=True)
class CloseIssueParams:
    issue_id: str
    reason: str


@dataclass(frozen=True)
class ReopenIssueParams:
    issue_ids: tuple[str, ...]
    reason: str | None = None


@dataclass(frozen=True)
class AddDependencyParams:
    issue_id: str
    depends_on_id: str
    dep_type: DependencyType = "blocks"


@dataclass(frozen=True)
class InitParams:
    prefix: str | None = None
