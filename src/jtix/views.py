"""Jinja template rendering for human-readable output.

Templates produce rich console markup; the CLI prints them through a
``rich.console.Console``. Every value that comes from Jira goes through the
``esc`` filter so that brackets in summaries or names are shown literally.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from jtix.models import Comment, Issue, SearchResult, Status, Worklog
from jtix.render import EMPTY_BODY, NO_DESCRIPTION, render_document
from jtix.styles import MARKUP, Styler, escape_markup

_TEMPLATE_DIR = Path(__file__).parent / "templates"
_env = Environment(loader=FileSystemLoader(_TEMPLATE_DIR), trim_blocks=True, lstrip_blocks=True)


def relative_time(dt: datetime | None) -> str:
    """Convert a datetime to a human-readable relative time string.

    Args:
        dt: The datetime to convert

    Returns:
        A human-readable relative time string like "3 hours ago" or "2 days ago"
    """
    if dt is None:
        return "unknown"

    now = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    seconds = (now - dt).total_seconds()

    if seconds < 60:
        return "just now"
    elif seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    elif seconds < 86400:
        hours = int(seconds / 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    elif seconds < 172800:
        return "yesterday"
    elif seconds < 604800:
        days = int(seconds / 86400)
        return f"{days} days ago"
    else:
        return dt.strftime("%Y-%m-%d")


def status_color(status: str | None) -> str:
    """Pick a color for a status name."""
    name = (status or "").lower()
    if "done" in name or "closed" in name or "resolved" in name:
        return "green"
    if "blocked" in name or "hold" in name:
        return "red"
    if "progress" in name or "dev" in name or "review" in name:
        return "yellow"
    return "blue"


def category_color(category: str) -> str:
    """Pick a color for a status category."""
    return {"To Do": "blue", "In Progress": "yellow", "Done": "green"}.get(category, "dim")


def priority_color(priority: str | None) -> str:
    """Pick a color for a priority name."""
    name = (priority or "").lower()
    if "highest" in name or "high" in name or "urgent" in name:
        return "red"
    if "medium" in name:
        return "yellow"
    return "dim"


def pad(value: Any, width: int) -> str:
    return str(value if value is not None else "").ljust(width)


def shorten(value: str, width: int) -> str:
    """Cut text longer than ``width`` and end it with an ellipsis."""
    if len(value) <= width:
        return value
    return value[: width - 3] + "..."


def render_body(body: Any, empty: str = EMPTY_BODY, styler: Styler = MARKUP) -> str:
    """Render a description or comment body.

    Older API versions return plain strings, which are shown as-is; document
    trees go through the document renderer. Anything else is the sentinel.
    """
    if isinstance(body, str) and body.strip():
        return styler.text(body)
    return render_document(body, styler=styler, empty=empty)


_env.filters["esc"] = lambda value: escape_markup(str(value if value is not None else ""))
_env.filters["relative_time"] = relative_time
_env.filters["status_color"] = status_color
_env.filters["category_color"] = category_color
_env.filters["priority_color"] = priority_color
_env.filters["pad"] = pad
_env.filters["shorten"] = shorten
_env.filters["body"] = render_body


def render_issue_view(issue: Issue, browse_url: str, show_comments: bool = False) -> str:
    """Render a single issue with metadata, description and optional comments.

    Args:
        issue: The issue to render
        browse_url: Web URL for the issue, shown as the footer
        show_comments: Whether to include the comment thread

    Returns:
        Rich markup for the issue view
    """
    template = _env.get_template("view.txt.j2")
    return template.render(
        issue=issue,
        browse_url=browse_url,
        show_comments=show_comments,
        no_description=NO_DESCRIPTION,
        empty_body=EMPTY_BODY,
    )


def render_comments(issue_key: str, comments: list[Comment], limit: int = 10) -> str:
    """Render the latest ``limit`` comments of an issue.

    Args:
        issue_key: Key shown in the header
        comments: All comments, oldest first
        limit: How many of the newest comments to show

    Returns:
        Rich markup for the comment thread
    """
    shown = comments[-limit:] if limit > 0 else []
    template = _env.get_template("comments.txt.j2")
    return template.render(
        issue_key=issue_key,
        comments=comments,
        shown=shown,
        hidden=len(comments) - len(shown),
        empty_body=EMPTY_BODY,
    )


def render_issue_list(result: SearchResult) -> str:
    """Render issues as an aligned table with status and priority colors."""
    template = _env.get_template("list.txt.j2")
    return template.render(result=result)


def render_search_results(result: SearchResult) -> str:
    """Render JQL search results as a two-line-per-issue listing."""
    template = _env.get_template("search.txt.j2")
    return template.render(result=result)


def render_statuses(statuses: list[Status]) -> str:
    """Render statuses grouped by category, in first-seen order."""
    grouped: dict[str, list[Status]] = {}
    for status in statuses:
        grouped.setdefault(status.category or "Other", []).append(status)
    template = _env.get_template("statuses.txt.j2")
    return template.render(grouped=grouped, example=statuses[0].name if statuses else "")


def render_saved_queries(queries: dict[str, str]) -> str:
    template = _env.get_template("saved_queries.txt.j2")
    return template.render(queries=queries)


def render_worklogs(issue_key: str, worklogs: list[Worklog]) -> str:
    """Render the work logged on an issue, with each comment as a document body."""
    template = _env.get_template("worklogs.txt.j2")
    return template.render(issue_key=issue_key, worklogs=worklogs)


EDIT_COMMENT_PREFIX = "# jtix:"


def generate_edit_template(summary: str, description: str | None) -> str:
    """Generate the editor buffer for changing an issue's summary and description.

    Args:
        summary: The current summary
        description: The current description as plain text (may be None)

    Returns:
        Text with the summary on the first line, the description below it,
        and instruction lines that are ignored when parsed back
    """
    lines = [summary or "<summary>"]
    lines.append(f"{EDIT_COMMENT_PREFIX} Enter the issue summary on the first line above")
    lines.append("")
    if description:
        lines.append(description.strip())
    lines.append(f"{EDIT_COMMENT_PREFIX} Enter the description above; it is saved as plain text")
    lines.append(f"{EDIT_COMMENT_PREFIX} Lines starting with '{EDIT_COMMENT_PREFIX}' will be ignored")
    return "\n".join(lines) + "\n"


def parse_edited_content(content: str) -> tuple[str, str | None]:
    """Parse an edited buffer back into summary and description.

    Raises:
        ValueError: If nothing but instruction lines and whitespace remain
    """
    lines = [line for line in content.split("\n") if not line.startswith(EDIT_COMMENT_PREFIX)]
    content = "\n".join(lines).strip()

    if not content:
        raise ValueError("Content cannot be empty")

    summary, _, rest = content.partition("\n")
    rest = rest.strip()
    return summary.strip(), rest if rest else None
