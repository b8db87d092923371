"""Shared pytest fixtures."""

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from jtix.config import JiraConfig


class TagStyler:
    """Styler that wraps text in visible tags, for checking composition order."""

    def text(self, text: str) -> str:
        return text

    def bold(self, text: str) -> str:
        return f"<b>{text}</b>"

    def italic(self, text: str) -> str:
        return f"<i>{text}</i>"

    def underline(self, text: str) -> str:
        return f"<u>{text}</u>"

    def strike(self, text: str) -> str:
        return f"<s>{text}</s>"

    def inline_code(self, text: str) -> str:
        return f"<code>{text}</code>"

    def link(self, text: str) -> str:
        return f"<a>{text}</a>"

    def highlight(self, text: str) -> str:
        return f"<hl>{text}</hl>"

    def dim(self, text: str) -> str:
        return f"<dim>{text}</dim>"

    def accent(self, text: str) -> str:
        return f"<acc>{text}</acc>"

    def code(self, text: str) -> str:
        return f"<pre>{text}</pre>"

    def color(self, text: str, name: str) -> str:
        return f"<{name}>{text}</{name}>"


@pytest.fixture
def tag_styler() -> TagStyler:
    return TagStyler()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test-local resources."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point jtix at an isolated config file with no credentials in the environment."""
    path = temp_dir / "config.json"
    monkeypatch.setenv("JTIX_CONFIG_PATH", str(path))
    for var in ("JTIX_BASE_URL", "JTIX_EMAIL", "JTIX_API_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    return path


@pytest.fixture
def configured(config_path: Path) -> JiraConfig:
    """Write a complete config file and return it."""
    config = JiraConfig(
        base_url="https://example.atlassian.net",
        email="dev@example.com",
        api_token="secret-token",
    )
    config_path.write_text(json.dumps({
        "base_url": config.base_url,
        "email": config.email,
        "api_token": config.api_token,
        "saved_queries": {},
    }))
    return config


Routes = dict[tuple[str, str], Any]


@pytest.fixture
def make_transport() -> Callable[[Routes], httpx.MockTransport]:
    """Build a MockTransport answering (method, path) routes.

    A route value is JSON data (answered with 200), an ``httpx.Response``,
    or a callable taking the request. Requests are recorded on
    ``transport.requests``.
    """

    def factory(routes: Routes) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            route = routes.get((request.method, request.url.path))
            if route is None:
                return httpx.Response(404, json={"errorMessages": ["no route"]})
            if callable(route):
                return route(request)
            if isinstance(route, httpx.Response):
                return route
            return httpx.Response(200, json=route)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return factory


def adf(*content: dict[str, Any]) -> dict[str, Any]:
    """Build a document tree from block nodes."""
    return {"type": "doc", "version": 1, "content": list(content)}


def paragraph(*content: dict[str, Any]) -> dict[str, Any]:
    return {"type": "paragraph", "content": list(content)}


def text(value: str, *marks: str) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "text", "text": value}
    if marks:
        node["marks"] = [{"type": mark} for mark in marks]
    return node


@pytest.fixture
def issue_payload() -> dict[str, Any]:
    """A Jira issue as returned by GET /issue/{key}."""
    return {
        "id": "10001",
        "key": "PROJ-7",
        "fields": {
            "summary": "Login page shows [object Object]",
            "description": adf(
                paragraph(text("The login "), text("button", "strong"), text(" is broken.")),
                {
                    "type": "codeBlock",
                    "attrs": {"language": "python"},
                    "content": [text("print('hi')")],
                },
            ),
            "status": {"name": "In Progress", "statusCategory": {"name": "In Progress"}},
            "priority": {"name": "High"},
            "assignee": {"displayName": "Ada Lovelace", "emailAddress": "ada@example.com"},
            "reporter": {"displayName": "Grace Hopper", "emailAddress": "grace@example.com"},
            "created": "2024-03-01T09:30:00.000+0000",
            "updated": "2024-03-02T10:00:00.000+0000",
            "issuetype": {"name": "Bug"},
            "project": {"key": "PROJ", "name": "Project X"},
            "labels": ["frontend", "urgent"],
            "comment": {
                "comments": [
                    {
                        "id": "1",
                        "author": {"displayName": "Ada Lovelace"},
                        "body": adf(paragraph(text("First look done."))),
                        "created": "2024-03-01T10:00:00.000+0000",
                    },
                    {
                        "id": "2",
                        "author": {"displayName": "Grace Hopper"},
                        "body": adf(paragraph(text("Fixed in "), text("main", "code"))),
                        "created": "2024-03-02T10:00:00.000+0000",
                    },
                ]
            },
        },
    }
