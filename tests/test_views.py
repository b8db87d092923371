"""Tests for template-based views."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from conftest import adf, paragraph, text
from rich.text import Text

from jtix.models import Comment, Issue, SearchResult, Status, Worklog
from jtix.styles import PLAIN
from jtix.views import (
    category_color,
    generate_edit_template,
    parse_edited_content,
    priority_color,
    relative_time,
    render_body,
    render_comments,
    render_issue_list,
    render_issue_view,
    render_saved_queries,
    render_search_results,
    render_statuses,
    render_worklogs,
    shorten,
    status_color,
)

BROWSE_URL = "https://example.atlassian.net/browse/PROJ-7"


def plain(markup: str) -> str:
    """Strip rich markup, failing if it is malformed."""
    return Text.from_markup(markup).plain


def ago(**kwargs: Any) -> datetime:
    return datetime.now(timezone.utc) - timedelta(**kwargs)


class TestRelativeTime:
    @pytest.mark.parametrize(
        "delta,expected",
        [
            ({"seconds": 10}, "just now"),
            ({"minutes": 1, "seconds": 5}, "1 minute ago"),
            ({"minutes": 5, "seconds": 5}, "5 minutes ago"),
            ({"hours": 3, "seconds": 5}, "3 hours ago"),
            ({"hours": 30}, "yesterday"),
            ({"days": 3, "seconds": 5}, "3 days ago"),
        ],
    )
    def test_recent(self, delta: dict[str, int], expected: str) -> None:
        assert relative_time(ago(**delta)) == expected

    def test_old_dates_are_absolute(self) -> None:
        assert relative_time(datetime(2020, 1, 2, tzinfo=timezone.utc)) == "2020-01-02"

    def test_naive_datetime_is_utc(self) -> None:
        naive = (datetime.now(timezone.utc) - timedelta(hours=2, seconds=5)).replace(tzinfo=None)
        assert relative_time(naive) == "2 hours ago"

    def test_missing(self) -> None:
        assert relative_time(None) == "unknown"


class TestFilters:
    def test_status_color(self) -> None:
        assert status_color("Done") == "green"
        assert status_color("In Progress") == "yellow"
        assert status_color("Code Review") == "yellow"
        assert status_color("To Do") == "blue"
        assert status_color("Resolved") == "green"
        assert status_color("Blocked") == "red"
        assert status_color("On Hold") == "red"
        assert status_color(None) == "blue"

    def test_category_color(self) -> None:
        assert category_color("Done") == "green"
        assert category_color("Mystery") == "dim"

    def test_priority_color(self) -> None:
        assert priority_color("Highest") == "red"
        assert priority_color("Medium") == "yellow"
        assert priority_color("Low") == "dim"
        assert priority_color(None) == "dim"

    def test_shorten(self) -> None:
        assert shorten("short", 10) == "short"
        assert shorten("a" * 20, 10) == "aaaaaaa..."


class TestRenderBody:
    def test_document(self) -> None:
        assert render_body(adf(paragraph(text("Hello", "strong")))) == "[bold]Hello[/bold]"

    def test_plain_string_shown_as_is(self) -> None:
        assert plain(render_body("[b]raw[/b] text")) == "[b]raw[/b] text"

    def test_missing_body_uses_sentinel(self) -> None:
        assert render_body(None, styler=PLAIN) == "(empty)"
        assert render_body("   ", "No description", styler=PLAIN) == "No description"


class TestIssueView:
    def test_view(self, issue_payload: dict[str, Any]) -> None:
        issue = Issue.from_api(issue_payload)
        output = plain(render_issue_view(issue, BROWSE_URL))

        assert "PROJ-7" in output
        assert "Project X" in output
        assert "Login page shows [object Object]" in output
        assert "In Progress" in output
        assert "Ada Lovelace" in output
        assert "frontend" in output
        assert "  The login button is broken." in output
        assert "print('hi')" in output
        assert "python" in output
        assert BROWSE_URL in output
        assert "Comments" not in output

    def test_view_with_comments(self, issue_payload: dict[str, Any]) -> None:
        issue = Issue.from_api(issue_payload)
        output = plain(render_issue_view(issue, BROWSE_URL, show_comments=True))
        assert "Comments (2)" in output
        assert "    First look done." in output
        assert "Fixed in" in output

    def test_view_without_description(self) -> None:
        issue = Issue(key="X-1", summary="s", status="To Do", issue_type="Task")
        output = plain(render_issue_view(issue, "https://x/browse/X-1", show_comments=True))
        assert "No description" in output
        assert "No comments" in output
        assert "Unassigned" in output

    def test_view_with_string_description(self) -> None:
        issue = Issue(key="X-1", summary="s", status="To Do", issue_type="Task", description="legacy text")
        assert "  legacy text" in plain(render_issue_view(issue, "https://x"))


class TestComments:
    def _comments(self, count: int) -> list[Comment]:
        return [
            Comment(id=str(i), author=f"User {i}", body=adf(paragraph(text(f"note {i}"))), created=None)
            for i in range(count)
        ]

    def test_no_comments(self) -> None:
        output = plain(render_comments("PROJ-7", []))
        assert "0 comments" in output
        assert "No comments yet." in output
        assert 'jtix comment PROJ-7 -m "Your comment"' in output

    def test_singular(self) -> None:
        assert "1 comment" in plain(render_comments("PROJ-7", self._comments(1)))

    def test_limit_shows_newest(self) -> None:
        output = plain(render_comments("PROJ-7", self._comments(5), limit=2))
        assert "5 comments" in output
        assert "3 earlier comments hidden" in output
        assert "note 0" not in output
        assert "note 3" in output
        assert "note 4" in output

    def test_empty_body_sentinel(self) -> None:
        comments = [Comment(id="1", author="A", body=None, created=None)]
        assert "(empty)" in plain(render_comments("PROJ-7", comments))


class TestListings:
    def _result(self) -> SearchResult:
        return SearchResult(
            issues=[
                Issue(key="PROJ-1", summary="First [bug]", status="Done", issue_type="Bug",
                      priority="High", assignee="Ada"),
                Issue(key="PROJ-2", summary="x" * 80, status="To Do", issue_type="Task"),
            ],
            total=12,
        )

    def test_issue_list(self) -> None:
        output = plain(render_issue_list(self._result()))
        assert "KEY" in output and "SUMMARY" in output
        assert "First [bug]" in output
        assert "Unassigned" in output
        assert "x" * 47 + "..." in output
        assert "Showing 2 of 12 issues" in output

    def test_search_results(self) -> None:
        output = plain(render_search_results(self._result()))
        assert "Found 12 issues (showing 2):" in output
        assert "Done | Bug | Ada" in output

    def test_statuses_grouped_by_category(self) -> None:
        statuses = [
            Status(id="1", name="To Do", category="To Do"),
            Status(id="2", name="Done", category="Done"),
            Status(id="3", name="Backlog", category="To Do"),
        ]
        lines = plain(render_statuses(statuses)).split("\n")
        todo = lines.index("  To Do:")
        assert lines[todo + 1:todo + 3] == ["    • To Do", "    • Backlog"]
        assert '  Use with: jtix list -s "To Do"' in lines

    def test_saved_queries(self) -> None:
        output = plain(render_saved_queries({"mine": "assignee = currentUser() AND labels = [x]"}))
        assert "mine" in output
        assert "assignee = currentUser() AND labels = [x]" in output


class TestWorklogs:
    def test_worklogs_render_comment_documents(self) -> None:
        worklogs = [
            Worklog(id="1", author="Ada", time_spent="2h", started=ago(hours=3, seconds=5),
                    comment=adf(paragraph(text("Paired on "), text("[auth]", "strong")))),
            Worklog(id="2", author="Grace", time_spent="30m", started=None),
        ]
        output = plain(render_worklogs("PROJ-7", worklogs))
        assert "Work Logs for PROJ-7:" in output
        assert "2h - Ada (3 hours ago)" in output
        assert "    Paired on [auth]" in output
        assert "30m - Grace (unknown)" in output

    def test_plain_string_comment(self) -> None:
        worklogs = [Worklog(id="1", author="Ada", time_spent="1h", started=None, comment="legacy")]
        assert "    legacy" in plain(render_worklogs("PROJ-7", worklogs))


class TestEditTemplate:
    def test_round_trip(self) -> None:
        template = generate_edit_template("Fix login", "Steps:\n1. open page")
        assert template.startswith("Fix login\n# jtix:")
        assert parse_edited_content(template) == ("Fix login", "Steps:\n1. open page")

    def test_without_description(self) -> None:
        template = generate_edit_template("Fix login", None)
        assert parse_edited_content(template) == ("Fix login", None)

    def test_edited_values(self) -> None:
        assert parse_edited_content("New title\n\n  body text  \n# jtix: ignored\n") == (
            "New title",
            "body text",
        )

    def test_empty_content_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            parse_edited_content("# jtix: only comments\n\n")
