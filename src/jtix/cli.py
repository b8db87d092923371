"""CLI entry point for jtix."""

import json
import logging
from typing import Any

import click
import questionary
from questionary import Style
from rich.console import Console
from rich.logging import RichHandler

from jtix import __version__
from jtix.client import JiraClient, text_document
from jtix.config import (
    clear_config,
    get_config_path,
    is_configured,
    load_config,
    require_config,
    save_config,
)
from jtix.exceptions import JiraError, JtixError
from jtix.models import Issue, User
from jtix.render import EMPTY_BODY, NO_DESCRIPTION, document_to_text
from jtix.styles import escape_markup
from jtix.views import (
    generate_edit_template,
    parse_edited_content,
    render_comments,
    render_issue_list,
    render_issue_view,
    render_saved_queries,
    render_search_results,
    render_statuses,
    render_worklogs,
    status_color,
)

logger = logging.getLogger(__name__)

ISSUE_TYPES = ["Task", "Bug", "Story", "Epic", "Sub-task"]

PROMPT_STYLE = Style([
    ("highlighted", "fg:white bg:blue bold"),
    ("pointer", "fg:cyan bold"),
    ("answer", "fg:cyan bold"),
])


def get_client(ctx: click.Context) -> JiraClient:
    """Get a configured JiraClient for this invocation.

    Raises:
        ConfigError: If credentials are missing.
    """
    return JiraClient(require_config(), transport=ctx.obj.get("transport"))


def _fail(ctx: click.Context, error: Exception) -> None:
    click.echo(f"error: {error}", err=True)
    ctx.exit(1)


def _print(ctx: click.Context, markup: str) -> None:
    console: Console = ctx.obj["stdout"]
    console.print(markup, highlight=False, soft_wrap=True)


def _plain_body(body: Any, empty: str) -> str:
    if isinstance(body, str) and body.strip():
        return body
    return document_to_text(body, empty=empty)


def issue_to_dict(issue: Issue, include_comments: bool = False) -> dict[str, Any]:
    """Convert an issue to JSON-ready data, with its description as plain text."""
    output: dict[str, Any] = {
        "key": issue.key,
        "summary": issue.summary,
        "status": issue.status,
        "type": issue.issue_type,
        "priority": issue.priority,
        "assignee": issue.assignee,
        "reporter": issue.reporter,
        "project": issue.project_key,
        "labels": issue.labels,
        "created": issue.created.isoformat() if issue.created else None,
        "updated": issue.updated.isoformat() if issue.updated else None,
        "description": _plain_body(issue.description, NO_DESCRIPTION),
    }
    if include_comments:
        output["comments"] = [
            {
                "id": comment.id,
                "author": comment.author,
                "created": comment.created.isoformat() if comment.created else None,
                "body": _plain_body(comment.body, EMPTY_BODY),
            }
            for comment in issue.comments
        ]
    return output


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option(
    "--color",
    type=click.Choice(["always", "never", "auto"]),
    default="auto",
    help="Control color output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    json_output: bool,
    color: str,
) -> None:
    """jtix - manage Jira tickets from the terminal."""
    ctx.ensure_object(dict)

    if color == "always":
        stdout_console = Console(force_terminal=True)
        stderr_console = Console(stderr=True, force_terminal=True)
    elif color == "never":
        stdout_console = Console(no_color=True, force_terminal=False)
        stderr_console = Console(stderr=True, no_color=True, force_terminal=False)
    else:  # auto
        stdout_console = Console()
        stderr_console = Console(stderr=True)

    handlers = [RichHandler(console=stderr_console, rich_tracebacks=verbose)]
    if verbose:
        logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
        logging.getLogger("httpcore").setLevel(logging.INFO)
    elif quiet or json_output:
        logging.basicConfig(level=logging.ERROR, handlers=handlers, force=True)
    else:
        logging.basicConfig(level=logging.INFO, handlers=handlers, force=True)

    ctx.obj["json"] = json_output
    ctx.obj["stdout"] = stdout_console
    ctx.obj["stderr"] = stderr_console

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.group()
def config() -> None:
    """Configure Jira credentials."""


def _validate_url(value: str) -> str:
    if not value.startswith("http"):
        raise click.BadParameter("URL must start with http:// or https://")
    return value


def _validate_email(value: str) -> str:
    if "@" not in value:
        raise click.BadParameter("Please enter a valid email")
    return value


@config.command("set")
@click.pass_context
def config_set(ctx: click.Context) -> None:
    """Set up Jira configuration and verify it."""
    try:
        current = load_config(apply_env=False)
    except JtixError as e:
        _fail(ctx, e)
        return

    current.base_url = click.prompt(
        "Jira base URL (e.g., https://yourcompany.atlassian.net)",
        default=current.base_url or None,
        value_proc=_validate_url,
    ).rstrip("/")
    current.email = click.prompt(
        "Your Jira email",
        default=current.email or None,
        value_proc=_validate_email,
    )
    current.api_token = click.prompt(
        "API token (from https://id.atlassian.com/manage-profile/security/api-tokens)",
        hide_input=True,
    )
    path = save_config(current)
    logger.info(f"Configuration saved to {path}")

    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]
    try:
        with stderr.status("Verifying credentials..."):
            with JiraClient(current, transport=ctx.obj.get("transport")) as client:
                client.get_projects()
    except JiraError as e:
        console.print(f"[red]Failed to verify credentials: {escape_markup(str(e))}[/red]")
        console.print("[yellow]Credentials saved but could not be verified.[/yellow]")
        console.print("[yellow]Please check your URL, email, and API token.[/yellow]")
        return

    console.print("[green]Configuration saved and verified![/green]")
    console.print("[dim]Try: jtix list[/dim]")


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    console: Console = ctx.obj["stdout"]
    if not is_configured():
        console.print('[yellow]Jira is not configured. Run "jtix config set" to set up.[/yellow]')
        return

    cfg = load_config()
    if ctx.obj["json"]:
        click.echo(json.dumps({
            "base_url": cfg.base_url,
            "email": cfg.email,
            "api_token": "*" * 20,
            "path": str(get_config_path()),
        }, indent=2))
        return

    console.print("\n[bold]Current Configuration:[/bold]\n")
    console.print(f"  [dim]Base URL:[/dim]  {escape_markup(cfg.base_url)}")
    console.print(f"  [dim]Email:[/dim]     {escape_markup(cfg.email)}")
    console.print(f"  [dim]API Token:[/dim] {'*' * 20}")


@config.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def config_clear(ctx: click.Context, yes: bool) -> None:
    """Clear all configuration."""
    console: Console = ctx.obj["stdout"]
    if not yes and not click.confirm(
        "Are you sure you want to clear all configuration?", default=False
    ):
        console.print("[dim]Cancelled.[/dim]")
        return
    clear_config()
    console.print("[green]Configuration cleared.[/green]")


@main.command()
@click.argument("issue_key")
@click.option("--comments", "-c", "show_comments", is_flag=True, help="Show comments")
@click.pass_context
def view(ctx: click.Context, issue_key: str, show_comments: bool) -> None:
    """View details of a Jira issue."""
    key = issue_key.upper()
    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status(f"Fetching {key}..."):
            issue = client.get_issue(key)
            browse_url = client.browse_url(issue.key or key)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps(issue_to_dict(issue, include_comments=show_comments), indent=2))
        return

    _print(ctx, render_issue_view(issue, browse_url, show_comments=show_comments))


@main.command()
@click.argument("issue_key")
@click.option("--limit", "-n", default=10, type=int, help="Number of comments to show")
@click.pass_context
def comments(ctx: click.Context, issue_key: str, limit: int) -> None:
    """View comments on a Jira issue."""
    key = issue_key.upper()
    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status(f"Fetching comments for {key}..."):
            issue = client.get_issue(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps(issue_to_dict(issue, include_comments=True)["comments"], indent=2))
        return

    _print(ctx, render_comments(key, issue.comments, limit=limit))


@main.command()
@click.argument("issue_key")
@click.option("--message", "-m", default=None, help="Comment message (opens $EDITOR if omitted)")
@click.pass_context
def comment(ctx: click.Context, issue_key: str, message: str | None) -> None:
    """Add a comment to a Jira issue."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]

    if not message:
        edited = click.edit(f"\n# Enter comment for {key}. Lines starting with # are ignored.\n")
        if edited:
            message = "\n".join(
                line for line in edited.splitlines() if not line.startswith("#")
            ).strip()

    if not message:
        console.print("[yellow]No comment provided. Cancelled.[/yellow]")
        return

    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status(f"Adding comment to {key}..."):
            client.add_comment(key, message)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "action": "commented"}))
    else:
        console.print(f"[green]Comment added to [bold]{escape_markup(key)}[/bold][/green]")


def build_list_jql(
    reporter: bool,
    watching: bool,
    all_issues: bool,
    project: str | None,
    status: str | None,
) -> str:
    """Build the JQL for the list command's filters.

    Defaults to issues assigned to the current user.
    """
    conditions: list[str] = []
    if reporter:
        conditions.append("reporter = currentUser()")
    elif watching:
        conditions.append("watcher = currentUser()")
    elif not all_issues:
        conditions.append("assignee = currentUser()")

    if project:
        conditions.append(f'project = "{project}"')
    if status:
        conditions.append(f'status = "{status}"')

    return " AND ".join(conditions) + " ORDER BY updated DESC"


@main.command("list")
@click.option("--reporter", "-r", is_flag=True, help="Show issues I reported")
@click.option("--watching", "-w", is_flag=True, help="Show issues I'm watching")
@click.option("--all", "-a", "all_issues", is_flag=True, help="Show all issues (requires -p)")
@click.option("--project", "-p", default=None, help="Filter by project key")
@click.option("--status", "-s", default=None, help="Filter by status")
@click.option("--query", "-q", "jql", default=None, help="Custom JQL query")
@click.option("--limit", "-n", default=50, type=int, help="Max results to show")
@click.pass_context
def list_issues(
    ctx: click.Context,
    reporter: bool,
    watching: bool,
    all_issues: bool,
    project: str | None,
    status: str | None,
    jql: str | None,
    limit: int,
) -> None:
    """List Jira issues (assigned to you by default)."""
    console: Console = ctx.obj["stdout"]

    if jql is None:
        if all_issues and not project and not (reporter or watching):
            console.print("[yellow]Using --all requires a project filter (-p PROJECT_KEY).[/yellow]")
            console.print("[dim]Example: jtix list --all -p MYPROJECT[/dim]")
            return
        jql = build_list_jql(reporter, watching, all_issues, project, status)

    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status("Fetching issues..."):
            result = client.search_issues(jql, max_results=limit)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps([issue_to_dict(i) for i in result.issues], indent=2))
        return

    if not result.issues:
        console.print("[yellow]No issues found.[/yellow]")
        return

    _print(ctx, render_issue_list(result))


@main.command()
@click.argument("jql", required=False, default=None)
@click.option("--max", "-n", "max_results", default=20, type=int, help="Maximum results")
@click.option("--save", "-s", "save_name", default=None, help="Save this query with a name")
@click.option("--run", "-r", "run_name", default=None, help="Run a saved query")
@click.option("--list-saved", "-l", is_flag=True, help="List saved queries")
@click.option("--delete", "-d", "delete_name", default=None, help="Delete a saved query")
@click.pass_context
def search(
    ctx: click.Context,
    jql: str | None,
    max_results: int,
    save_name: str | None,
    run_name: str | None,
    list_saved: bool,
    delete_name: str | None,
) -> None:
    """Search issues with JQL, and manage saved queries."""
    console: Console = ctx.obj["stdout"]
    try:
        cfg = load_config(apply_env=False)
    except JtixError as e:
        _fail(ctx, e)
        return
    saved = cfg.saved_queries

    if list_saved:
        if ctx.obj["json"]:
            click.echo(json.dumps(saved, indent=2))
        elif not saved:
            console.print("[yellow]No saved queries.[/yellow]")
        else:
            _print(ctx, render_saved_queries(saved))
        return

    if delete_name:
        if delete_name not in saved:
            _fail(ctx, JtixError(f'Query "{delete_name}" not found.'))
            return
        del saved[delete_name]
        save_config(cfg)
        console.print(f'[green]Query "{escape_markup(delete_name)}" deleted.[/green]')
        return

    query = jql
    if run_name:
        if run_name not in saved:
            available = ", ".join(saved) or "none"
            _fail(ctx, JtixError(f'Query "{run_name}" not found. Available: {available}'))
            return
        query = saved[run_name]

    if not query:
        console.print("[yellow]Please provide a JQL query or use --run <name> to run a saved query.[/yellow]")
        console.print("[dim]\nExamples:[/dim]")
        console.print('[dim]  jtix search "project = PROJ AND status = Open"[/dim]')
        console.print("[dim]  jtix search --run my-query[/dim]")
        return

    if save_name and jql:
        saved[save_name] = jql
        save_config(cfg)
        console.print(f'[green]Query saved as "{escape_markup(save_name)}"[/green]')

    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status("Searching..."):
            result = client.search_issues(query, max_results=max_results)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps([issue_to_dict(i) for i in result.issues], indent=2))
        return

    if not result.issues:
        console.print("[yellow]No issues found.[/yellow]")
        return

    _print(ctx, render_search_results(result))


@main.command()
@click.argument("issue_key")
@click.option("--status", "-s", "status_name", default=None, help="Target status name")
@click.option("--pick", "-p", is_flag=True, help="Pick from available transitions")
@click.option("--list", "-l", "list_only", is_flag=True, help="List available transitions")
@click.pass_context
def transition(
    ctx: click.Context,
    issue_key: str,
    status_name: str | None,
    pick: bool,
    list_only: bool,
) -> None:
    """Change the status of a Jira issue (default: next status)."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    try:
        with get_client(ctx) as client:
            with stderr.status(f"Fetching available transitions for {key}..."):
                transitions = client.get_transitions(key)

            if not transitions:
                console.print(f"[yellow]No transitions available for {escape_markup(key)}.[/yellow]")
                return

            names = ", ".join(t.name for t in transitions)

            if list_only:
                if ctx.obj["json"]:
                    click.echo(json.dumps([{"id": t.id, "name": t.name} for t in transitions]))
                    return
                console.print(f"\n[bold]  Available transitions for {escape_markup(key)}:[/bold]\n")
                for t in transitions:
                    console.print(f"    [cyan]•[/cyan] {escape_markup(t.name)}")
                return

            if status_name:
                selected = next(
                    (t for t in transitions if t.name.lower() == status_name.lower()),
                    None,
                )
                if selected is None:
                    _fail(ctx, JtixError(f'Status "{status_name}" not available. Available: {names}'))
                    return
            elif pick:
                selected = questionary.select(
                    f"Select new status for {key}:",
                    choices=[questionary.Choice(title=t.name, value=t) for t in transitions],
                    style=PROMPT_STYLE,
                ).ask()
                if selected is None:
                    return
            else:
                selected = transitions[0]
                console.print(f"[dim]Available: {escape_markup(names)}[/dim]")

            with stderr.status(f'Transitioning {key} to "{selected.name}"...'):
                client.transition_issue(key, selected.id)
    except JtixError as e:
        _fail(ctx, e)
        return

    logger.debug(f"Transitioned {key} via transition {selected.id}")
    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "status": selected.name}))
    else:
        console.print(
            f"[green][bold]{escape_markup(key)}[/bold] transitioned to [bold]{escape_markup(selected.name)}[/bold][/green]"
        )


@main.command("open")
@click.argument("issue_key")
@click.pass_context
def open_issue(ctx: click.Context, issue_key: str) -> None:
    """Open a Jira issue in the browser."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    try:
        with get_client(ctx) as client:
            url = client.browse_url(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    console.print(f"[dim]Opening {escape_markup(url)}...[/dim]")
    if click.launch(url) != 0:
        console.print("[yellow]\nCould not open browser automatically.[/yellow]")
        console.print(f"[cyan]\n  {escape_markup(url)}\n[/cyan]")
        console.print("[dim]Copy the URL above to open in your browser.[/dim]")
    else:
        console.print("[green]Opened in browser.[/green]")


@main.command()
@click.pass_context
def projects(ctx: click.Context) -> None:
    """List Jira projects you can see."""
    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status("Fetching projects..."):
            result = client.get_projects()
    except JtixError as e:
        _fail(ctx, e)
        return

    console: Console = ctx.obj["stdout"]
    if ctx.obj["json"]:
        click.echo(json.dumps([{"id": p.id, "key": p.key, "name": p.name} for p in result], indent=2))
        return

    if not result:
        console.print("[yellow]No projects found.[/yellow]")
        return

    console.print("\n[bold]  Projects:[/bold]\n")
    for project in result:
        console.print(f"    [cyan]{escape_markup(project.key.ljust(12))}[/cyan] {escape_markup(project.name)}")
    console.print()


@main.command()
@click.option("--project", "-p", default=None, help="Filter statuses by project")
@click.pass_context
def statuses(ctx: click.Context, project: str | None) -> None:
    """List available Jira statuses."""
    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status("Fetching statuses..."):
            result = client.get_statuses(project.upper() if project else None)
    except JtixError as e:
        _fail(ctx, e)
        return

    console: Console = ctx.obj["stdout"]
    if ctx.obj["json"]:
        click.echo(json.dumps(
            [{"id": s.id, "name": s.name, "category": s.category} for s in result],
            indent=2,
        ))
        return

    if not result:
        console.print("[yellow]\nNo statuses found.[/yellow]")
        return

    _print(ctx, render_statuses(result))


@main.command("status")
@click.argument("issue_key")
@click.pass_context
def show_status(ctx: click.Context, issue_key: str) -> None:
    """Show the current status of a Jira issue."""
    key = issue_key.upper()
    try:
        stderr: Console = ctx.obj["stderr"]
        with get_client(ctx) as client, stderr.status(f"Fetching {key}..."):
            issue = client.get_issue(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({
            "key": issue.key,
            "summary": issue.summary,
            "status": issue.status,
            "category": issue.status_category,
        }, indent=2))
        return

    color = status_color(issue.status)
    console: Console = ctx.obj["stdout"]
    console.print(f"\n  [bold cyan]{escape_markup(issue.key)}[/bold cyan] • {escape_markup(issue.summary)}\n")
    console.print(f"  [dim]Status:[/dim]   [{color}]{escape_markup(issue.status)}[/{color}]")
    console.print(f"  [dim]Category:[/dim] {escape_markup(issue.status_category or 'Unknown')}\n")


def _pick_user(message: str, users: list[User]) -> User | None:
    return questionary.select(
        message,
        choices=[
            questionary.Choice(
                title=f"{u.display_name} ({u.email})" if u.email else u.display_name,
                value=u,
            )
            for u in users
        ],
        style=PROMPT_STYLE,
    ).ask()


@main.command()
@click.argument("issue_key")
@click.option("--user", "-u", "user_query", default=None, help="Search for a user by name or email")
@click.option("--me", "-m", is_flag=True, help="Assign to yourself")
@click.option("--remove", "-r", is_flag=True, help="Unassign the issue")
@click.pass_context
def assign(
    ctx: click.Context,
    issue_key: str,
    user_query: str | None,
    me: bool,
    remove: bool,
) -> None:
    """Assign or unassign a Jira issue."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    try:
        with get_client(ctx) as client:
            if remove:
                with stderr.status(f"Unassigning {key}..."):
                    client.assign_issue(key, None)
                if ctx.obj["json"]:
                    click.echo(json.dumps({"key": key, "assignee": None}))
                else:
                    console.print(f"[green][bold]{escape_markup(key)}[/bold] unassigned[/green]")
                return

            if me:
                with stderr.status(f"Assigning {key} to yourself..."):
                    selected: User | None = client.get_current_user()
            else:
                with stderr.status(f"Fetching assignable users for {key}..."):
                    if user_query:
                        users = client.search_users(user_query)
                    else:
                        users = client.get_assignable_users(key)
                if not users:
                    console.print("[yellow]No assignable users found.[/yellow]")
                    return
                selected = _pick_user(f"Select user to assign {key}:", users)
                if selected is None:
                    return

            with stderr.status(f"Assigning {key} to {selected.display_name}..."):
                client.assign_issue(key, selected.account_id)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "assignee": selected.display_name}))
    else:
        console.print(
            f"[green][bold]{escape_markup(key)}[/bold] assigned to "
            f"[bold]{escape_markup(selected.display_name)}[/bold][/green]"
        )


def _required(value: str) -> str:
    if not value.strip():
        raise click.BadParameter("Summary is required")
    return value.strip()


@main.command()
@click.option("--project", "-p", default=None, help="Project key")
@click.option("--type", "-t", "issue_type", default=None, help="Issue type (e.g., Task, Bug, Story)")
@click.option("--summary", "-s", default=None, help="Issue summary")
@click.option("--description", "-d", default=None, help="Issue description (opens $EDITOR if omitted)")
@click.pass_context
def create(
    ctx: click.Context,
    project: str | None,
    issue_type: str | None,
    summary: str | None,
    description: str | None,
) -> None:
    """Create a new Jira issue, prompting for anything not given."""
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    try:
        with get_client(ctx) as client:
            if not project:
                with stderr.status("Fetching projects..."):
                    projects = client.get_projects()
                if not projects:
                    console.print("[yellow]No projects found.[/yellow]")
                    return
                project = questionary.select(
                    "Select a project:",
                    choices=[
                        questionary.Choice(title=f"{p.key} - {p.name}", value=p.key)
                        for p in projects
                    ],
                    style=PROMPT_STYLE,
                ).ask()
                if project is None:
                    return

            if not issue_type:
                issue_type = questionary.select(
                    "Select issue type:", choices=ISSUE_TYPES, style=PROMPT_STYLE
                ).ask()
                if issue_type is None:
                    return

            if not summary:
                summary = click.prompt("Issue summary", value_proc=_required)

            if description is None:
                edited = click.edit("\n# Enter a description (optional). Lines starting with # are ignored.\n")
                if edited:
                    description = "\n".join(
                        line for line in edited.splitlines() if not line.startswith("#")
                    ).strip() or None

            with stderr.status("Creating issue..."):
                key = client.create_issue(project.upper(), summary, issue_type, description)
                browse_url = client.browse_url(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    logger.debug(f"Created {key} in {project}")
    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "url": browse_url}))
        return

    console.print(f"[green]Created issue: [bold]{escape_markup(key)}[/bold][/green]")
    console.print(f"[dim]  View: {escape_markup(browse_url)}[/dim]")


@main.command()
@click.argument("issue_key")
@click.option("--summary", "-s", default=None, help="New summary")
@click.option("--description", "-d", default=None, help="New description")
@click.option("--interactive", "-i", is_flag=True, help="Edit summary and description in $EDITOR")
@click.pass_context
def edit(
    ctx: click.Context,
    issue_key: str,
    summary: str | None,
    description: str | None,
    interactive: bool,
) -> None:
    """Edit the summary or description of a Jira issue."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    if not (summary or description or interactive):
        console.print("[yellow]No changes specified. Use --summary, --description, or --interactive.[/yellow]")
        return

    try:
        with get_client(ctx) as client:
            fields: dict[str, Any] = {}
            if interactive:
                with stderr.status(f"Fetching {key}..."):
                    issue = client.get_issue(key)
                edited = click.edit(
                    generate_edit_template(issue.summary, _plain_body(issue.description, "")),
                    extension=".txt",
                )
                if edited is None:
                    console.print("[yellow]No changes made.[/yellow]")
                    return
                try:
                    new_summary, new_description = parse_edited_content(edited)
                except ValueError as e:
                    _fail(ctx, JtixError(str(e)))
                    return
                fields["summary"] = new_summary
                fields["description"] = text_document(new_description) if new_description else None
            else:
                if summary:
                    fields["summary"] = summary
                if description:
                    fields["description"] = text_document(description)

            with stderr.status(f"Updating {key}..."):
                client.update_issue(key, fields)
    except JtixError as e:
        _fail(ctx, e)
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "updated": sorted(fields)}))
    else:
        console.print(f"[green][bold]{escape_markup(key)}[/bold] updated successfully[/green]")


@main.command()
@click.argument("issue_key")
@click.option("--remove", "-r", is_flag=True, help="Stop watching the issue")
@click.option("--list", "-l", "list_only", is_flag=True, help="List watchers")
@click.pass_context
def watch(ctx: click.Context, issue_key: str, remove: bool, list_only: bool) -> None:
    """Watch or unwatch a Jira issue."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    try:
        with get_client(ctx) as client:
            if list_only:
                with stderr.status(f"Fetching watchers for {key}..."):
                    watchers = client.get_watchers(key)
            elif remove:
                with stderr.status(f"Removing watch from {key}..."):
                    client.unwatch_issue(key)
            else:
                with stderr.status(f"Watching {key}..."):
                    client.watch_issue(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    if list_only:
        if ctx.obj["json"]:
            click.echo(json.dumps(watchers, indent=2))
            return
        console.print(f"\n[bold]  Watchers for {escape_markup(key)} ({len(watchers)}):[/bold]\n")
        if not watchers:
            console.print("[dim]    No watchers[/dim]")
        for name in watchers:
            console.print(f"    [cyan]•[/cyan] {escape_markup(name)}")
        console.print()
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "watching": not remove}))
    elif remove:
        console.print(f"[green]Stopped watching [bold]{escape_markup(key)}[/bold][/green]")
    else:
        console.print(f"[green]Now watching [bold]{escape_markup(key)}[/bold][/green]")


@main.command()
@click.argument("issue_key")
@click.option("--add", "-a", "to_add", multiple=True, help="Label to add (repeatable)")
@click.option("--remove", "-r", "to_remove", multiple=True, help="Label to remove (repeatable)")
@click.option("--list", "-l", "list_only", is_flag=True, help="List labels (the default)")
@click.pass_context
def labels(
    ctx: click.Context,
    issue_key: str,
    to_add: tuple[str, ...],
    to_remove: tuple[str, ...],
    list_only: bool,
) -> None:
    """List, add or remove labels on a Jira issue."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]
    changing = bool(to_add or to_remove) and not list_only

    try:
        with get_client(ctx) as client:
            if changing:
                if to_add:
                    with stderr.status(f"Adding labels to {key}..."):
                        client.add_labels(key, list(to_add))
                if to_remove:
                    with stderr.status(f"Removing labels from {key}..."):
                        client.remove_labels(key, list(to_remove))
            else:
                with stderr.status(f"Fetching labels for {key}..."):
                    issue = client.get_issue(key)
    except JtixError as e:
        _fail(ctx, e)
        return

    if changing:
        if ctx.obj["json"]:
            click.echo(json.dumps({"key": key, "added": list(to_add), "removed": list(to_remove)}))
            return
        if to_add:
            console.print(f"[green]Added labels to [bold]{escape_markup(key)}[/bold]: {escape_markup(', '.join(to_add))}[/green]")
        if to_remove:
            console.print(f"[green]Removed labels from [bold]{escape_markup(key)}[/bold]: {escape_markup(', '.join(to_remove))}[/green]")
        return

    if ctx.obj["json"]:
        click.echo(json.dumps(issue.labels, indent=2))
        return
    console.print(f"\n[bold]  Labels for {escape_markup(key)}:[/bold]\n")
    if not issue.labels:
        console.print("[dim]    No labels[/dim]")
    for label in issue.labels:
        console.print(f"    [cyan]•[/cyan] {escape_markup(label)}")
    console.print()


@main.command()
@click.argument("issue_key")
@click.option("--time", "-t", "time_spent", default=None, help="Time spent (e.g., 2h, 30m, 1d)")
@click.option("--comment", "-c", default=None, help="Work log comment")
@click.option("--list", "-l", "list_only", is_flag=True, help="List work logs")
@click.pass_context
def worklog(
    ctx: click.Context,
    issue_key: str,
    time_spent: str | None,
    comment: str | None,
    list_only: bool,
) -> None:
    """Log work on a Jira issue, or list logged work."""
    key = issue_key.upper()
    console: Console = ctx.obj["stdout"]
    stderr: Console = ctx.obj["stderr"]

    if not list_only and not time_spent:
        console.print("[yellow]Please specify time with --time (e.g., --time 2h)[/yellow]")
        console.print("[dim]\nExamples:[/dim]")
        console.print("[dim]  jtix worklog PROJ-123 --time 2h[/dim]")
        console.print('[dim]  jtix worklog PROJ-123 --time 30m -c "Code review"[/dim]')
        console.print("[dim]  jtix worklog PROJ-123 --list[/dim]")
        return

    try:
        with get_client(ctx) as client:
            if list_only:
                with stderr.status(f"Fetching work logs for {key}..."):
                    worklogs = client.get_worklogs(key)
            else:
                with stderr.status(f"Logging {time_spent} on {key}..."):
                    client.add_worklog(key, time_spent, comment)
    except JtixError as e:
        _fail(ctx, e)
        return

    if list_only:
        if ctx.obj["json"]:
            click.echo(json.dumps([
                {
                    "id": w.id,
                    "author": w.author,
                    "time_spent": w.time_spent,
                    "started": w.started.isoformat() if w.started else None,
                    "comment": _plain_body(w.comment, "") or None,
                }
                for w in worklogs
            ], indent=2))
        elif not worklogs:
            console.print(f"[yellow]No work logs for {escape_markup(key)}.[/yellow]")
        else:
            _print(ctx, render_worklogs(key, worklogs))
        return

    if ctx.obj["json"]:
        click.echo(json.dumps({"key": key, "time_spent": time_spent}))
    else:
        console.print(f"[green]Logged [bold]{escape_markup(time_spent)}[/bold] on [bold]{escape_markup(key)}[/bold][/green]")


if __name__ == "__main__":
    main()
