"""Jira REST API client."""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from jtix.config import JiraConfig
from jtix.exceptions import JiraError
from jtix.models import Issue, Project, SearchResult, Status, Transition, User, Worklog

logger = logging.getLogger(__name__)

API_VERSION = "3"
DEFAULT_TIMEOUT_S = 30.0
USER_SEARCH_LIMIT = 20
ASSIGNABLE_USER_LIMIT = 50
WORKLOG_STARTED_FORMAT = "%Y-%m-%dT%H:%M:%S.000%z"

ISSUE_FIELDS = (
    "summary,description,status,priority,assignee,reporter,"
    "created,updated,issuetype,project,labels,comment"
)
SEARCH_FIELDS = "summary,status,priority,assignee,issuetype,project,created,updated"

_STATUS_MESSAGES = {
    401: "Authentication failed. Check your email and API token.",
    403: "Access denied. Your API token may not have sufficient permissions.",
    404: "Resource not found. Check your Jira URL and issue key.",
    410: "API endpoint deprecated. Please update jtix.",
}


def error_message(response: httpx.Response) -> str:
    """Build a human-readable message for a failed response."""
    status = response.status_code
    if status in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status]

    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        messages = data.get("errorMessages")
        if messages:
            return ", ".join(str(m) for m in messages)
        if data.get("message"):
            return str(data["message"])

    return f"Request failed with status {status}"


def text_document(text: str) -> dict[str, Any]:
    """Wrap plain text in a one-paragraph document tree."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": text}]},
        ],
    }


class JiraClient:
    """Thin wrapper around the Jira Cloud REST API."""

    def __init__(
        self,
        config: JiraConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection settings; base URL, email and token are required.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config
        self._client = httpx.Client(
            base_url=f"{config.base_url}/rest/api/{API_VERSION}",
            auth=(config.email, config.api_token),
            headers={"Accept": "application/json"},
            timeout=DEFAULT_TIMEOUT_S,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug(f"{method} {path}")
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise JiraError(f"Could not reach Jira: {e}") from e

        if response.is_error:
            raise JiraError(error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise JiraError(f"Invalid JSON from Jira: {e}") from e

    def browse_url(self, issue_key: str) -> str:
        """Return the web URL for an issue."""
        return f"{self._config.base_url}/browse/{issue_key}"

    def get_issue(self, issue_key: str) -> Issue:
        """Fetch one issue with its description and comments.

        Raises:
            JiraError: If the request fails.
        """
        data = self._request("GET", f"/issue/{issue_key}", params={"fields": ISSUE_FIELDS})
        return Issue.from_api(data)

    def search_issues(
        self, jql: str, max_results: int = 20, start_at: int = 0
    ) -> SearchResult:
        """Run a JQL search.

        Args:
            jql: The JQL query
            max_results: Page size
            start_at: Index of the first result

        Returns:
            The page of matching issues.
        """
        data = self._request(
            "GET",
            "/search/jql",
            params={
                "jql": jql,
                "maxResults": max_results,
                "startAt": start_at,
                "fields": SEARCH_FIELDS,
            },
        )
        return SearchResult.from_api(data or {})

    def get_projects(self) -> list[Project]:
        data = self._request("GET", "/project") or []
        return [Project(id=str(p["id"]), key=p["key"], name=p["name"]) for p in data]

    def get_statuses(self, project_key: str | None = None) -> list[Status]:
        """List statuses, optionally only those used by one project.

        Project statuses are reported per issue type; duplicates are removed
        while keeping first-seen order.
        """
        if project_key is None:
            data = self._request("GET", "/status") or []
            return [
                Status(
                    id=str(s["id"]),
                    name=s["name"],
                    category=(s.get("statusCategory") or {}).get("name") or "Other",
                )
                for s in data
            ]

        data = self._request("GET", f"/project/{project_key}/statuses") or []
        statuses: list[Status] = []
        seen: set[str] = set()
        for issue_type in data:
            for s in issue_type.get("statuses") or []:
                status_id = str(s["id"])
                if status_id in seen:
                    continue
                seen.add(status_id)
                statuses.append(
                    Status(
                        id=status_id,
                        name=s["name"],
                        category=(s.get("statusCategory") or {}).get("name") or "Other",
                    )
                )
        return statuses

    def add_comment(self, issue_key: str, text: str) -> None:
        self._request("POST", f"/issue/{issue_key}/comment", json={"body": text_document(text)})

    def get_transitions(self, issue_key: str) -> list[Transition]:
        data = self._request("GET", f"/issue/{issue_key}/transitions") or {}
        return [
            Transition(id=str(t["id"]), name=t["name"])
            for t in data.get("transitions") or []
        ]

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        self._request(
            "POST",
            f"/issue/{issue_key}/transitions",
            json={"transition": {"id": transition_id}},
        )

    def create_issue(
        self,
        project_key: str,
        summary: str,
        issue_type: str,
        description: str | None = None,
    ) -> str:
        """Create an issue and return its key."""
        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": issue_type},
        }
        if description:
            fields["description"] = text_document(description)
        data = self._request("POST", "/issue", json={"fields": fields}) or {}
        return data.get("key", "")

    def update_issue(self, issue_key: str, fields: dict[str, Any]) -> None:
        self._request("PUT", f"/issue/{issue_key}", json={"fields": fields})

    def get_current_user(self) -> User:
        return User.from_api(self._request("GET", "/myself") or {})

    def search_users(self, query: str) -> list[User]:
        data = self._request(
            "GET", "/user/search", params={"query": query, "maxResults": USER_SEARCH_LIMIT}
        )
        return [User.from_api(u) for u in data or []]

    def get_assignable_users(self, issue_key: str) -> list[User]:
        data = self._request(
            "GET",
            "/user/assignable/search",
            params={"issueKey": issue_key, "maxResults": ASSIGNABLE_USER_LIMIT},
        )
        return [User.from_api(u) for u in data or []]

    def assign_issue(self, issue_key: str, account_id: str | None) -> None:
        """Assign an issue, or unassign it when ``account_id`` is None."""
        self._request("PUT", f"/issue/{issue_key}/assignee", json={"accountId": account_id})

    def get_watchers(self, issue_key: str) -> list[str]:
        """Return the display names of an issue's watchers."""
        data = self._request("GET", f"/issue/{issue_key}/watchers") or {}
        return [_display_name(w) for w in data.get("watchers") or []]

    def watch_issue(self, issue_key: str) -> None:
        """Add the current user as a watcher.

        The endpoint takes a bare JSON string holding the account id.
        """
        me = self.get_current_user()
        self._request("POST", f"/issue/{issue_key}/watchers", json=me.account_id)

    def unwatch_issue(self, issue_key: str) -> None:
        me = self.get_current_user()
        self._request(
            "DELETE", f"/issue/{issue_key}/watchers", params={"accountId": me.account_id}
        )

    def add_labels(self, issue_key: str, labels: list[str]) -> None:
        self._update_labels(issue_key, "add", labels)

    def remove_labels(self, issue_key: str, labels: list[str]) -> None:
        self._update_labels(issue_key, "remove", labels)

    def _update_labels(self, issue_key: str, operation: str, labels: list[str]) -> None:
        self._request(
            "PUT",
            f"/issue/{issue_key}",
            json={"update": {"labels": [{operation: label} for label in labels]}},
        )

    def add_worklog(
        self,
        issue_key: str,
        time_spent: str,
        comment: str | None = None,
        started: datetime | None = None,
    ) -> None:
        """Log work on an issue.

        Args:
            issue_key: The issue to log against
            time_spent: Jira duration such as ``2h`` or ``1d 4h``
            comment: Optional plain-text comment
            started: When the work started; defaults to now
        """
        started = started or datetime.now(timezone.utc)
        body: dict[str, Any] = {
            "timeSpent": time_spent,
            "started": started.astimezone(timezone.utc).strftime(WORKLOG_STARTED_FORMAT),
        }
        if comment:
            body["comment"] = text_document(comment)
        self._request("POST", f"/issue/{issue_key}/worklog", json=body)

    def get_worklogs(self, issue_key: str) -> list[Worklog]:
        data = self._request("GET", f"/issue/{issue_key}/worklog") or {}
        return [Worklog.from_api(w) for w in data.get("worklogs") or []]


def _display_name(user: Any) -> str:
    if isinstance(user, dict):
        return user.get("displayName") or "Unknown"
    return "Unknown"
