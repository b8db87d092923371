"""Core data models for jtix."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

JIRA_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a Jira timestamp such as ``2024-03-01T09:30:00.000+0000``.

    Returns:
        An aware datetime, or None if the value is missing or unparseable.
    """
    if not value:
        return None
    try:
        return datetime.strptime(value, JIRA_TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _name(value: Any, key: str = "name") -> str | None:
    if isinstance(value, dict):
        return value.get(key)
    return None


@dataclass
class Comment:
    """A comment on an issue. ``body`` is the raw document tree (or string)."""

    id: str
    author: str
    body: Any
    created: datetime | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=str(data.get("id", "")),
            author=_name(data.get("author"), "displayName") or "Unknown",
            body=data.get("body"),
            created=parse_timestamp(data.get("created")),
        )


@dataclass
class Issue:
    """A Jira issue as returned by the issue and search endpoints."""

    key: str
    summary: str
    status: str
    issue_type: str
    project_key: str | None = None
    project_name: str | None = None
    status_category: str | None = None
    priority: str | None = None
    assignee: str | None = None
    reporter: str | None = None
    created: datetime | None = None
    updated: datetime | None = None
    labels: list[str] = field(default_factory=list)
    description: Any = None
    comments: list[Comment] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Issue":
        fields = data.get("fields") or {}
        status = fields.get("status") or {}
        project = fields.get("project") or {}
        comment_page = fields.get("comment") or {}
        return cls(
            key=data.get("key", ""),
            summary=fields.get("summary") or "",
            status=status.get("name") or "Unknown",
            status_category=_name(status.get("statusCategory")),
            issue_type=_name(fields.get("issuetype")) or "Unknown",
            project_key=project.get("key"),
            project_name=project.get("name"),
            priority=_name(fields.get("priority")),
            assignee=_name(fields.get("assignee"), "displayName"),
            reporter=_name(fields.get("reporter"), "displayName"),
            created=parse_timestamp(fields.get("created")),
            updated=parse_timestamp(fields.get("updated")),
            labels=list(fields.get("labels") or []),
            description=fields.get("description"),
            comments=[Comment.from_api(c) for c in comment_page.get("comments") or []],
        )


@dataclass
class SearchResult:
    """A page of issues from a JQL search."""

    issues: list[Issue]
    total: int | None = None
    max_results: int | None = None
    start_at: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchResult":
        return cls(
            issues=[Issue.from_api(i) for i in data.get("issues") or []],
            total=data.get("total"),
            max_results=data.get("maxResults"),
            start_at=data.get("startAt") or 0,
        )


@dataclass
class Transition:
    """A workflow transition available on an issue."""

    id: str
    name: str


@dataclass
class Status:
    """A workflow status and its category (To Do, In Progress, Done)."""

    id: str
    name: str
    category: str = "Other"


@dataclass
class Project:
    """A Jira project."""

    id: str
    key: str
    name: str


@dataclass
class User:
    """A Jira user account."""

    account_id: str
    display_name: str
    email: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "User":
        return cls(
            account_id=str(data.get("accountId", "")),
            display_name=data.get("displayName") or "Unknown",
            email=data.get("emailAddress"),
        )


@dataclass
class Worklog:
    """Time logged against an issue. ``comment`` is the raw document tree (or string)."""

    id: str
    author: str
    time_spent: str
    started: datetime | None
    comment: Any = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Worklog":
        return cls(
            id=str(data.get("id", "")),
            author=_name(data.get("author"), "displayName") or "Unknown",
            time_spent=data.get("timeSpent") or "",
            started=parse_timestamp(data.get("started")),
            comment=data.get("comment"),
        )
