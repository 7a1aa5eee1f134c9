"""CLI interface for extractum."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from extractum import __version__
from extractum.config import Config, get_config
from extractum.exceptions import ExtractumError, InvalidRepositoryURLError
from extractum.output.console import Console as OutputConsole
from extractum.output.json_writer import build_report, write_json_report
from extractum.services.github_rest_client import GitHubRestClient
from extractum.utils.repo_url import parse_repo_url
from extractum.utils.text import with_parsed_body

app = typer.Typer(
    name="extractum",
    help="Extract issues, pull requests and comments from GitHub repositories",
    add_completion=False,
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"extractum version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """extractum - Extract issues, pull requests and comments from GitHub repositories."""
    pass


@app.command()
def fetch(
    repo_url: str = typer.Argument(..., help="Repository URL (https or ssh form)"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output JSON file path",
    ),
    state: str = typer.Option(
        "all",
        "--state",
        help="Issue state: open, closed or all",
    ),
    pr_state: str = typer.Option(
        "closed",
        "--pr-state",
        help="Pull request state: open, closed or all",
    ),
    merged: bool = typer.Option(
        False,
        "--merged",
        help="Only keep merged pull requests",
    ),
    comments: bool = typer.Option(
        False,
        "--comments",
        help="Fetch comments for every issue (one request per issue)",
    ),
    summary_only: bool = typer.Option(
        False,
        "--summary-only",
        help="Print summary only, don't save JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output",
    ),
):
    """Fetch a repository's metadata, issues and pull requests.

    Examples:
        extractum fetch https://github.com/octocat/hello-world
        extractum fetch git@github.com:octocat/hello-world.git --merged --comments
    """
    setup_logging(verbose)
    output_console = OutputConsole(verbose=verbose, quiet=quiet)

    try:
        owner, repo = parse_repo_url(repo_url)
    except InvalidRepositoryURLError as e:
        output_console.print_error(str(e))
        raise typer.Exit(1)

    try:
        config = get_config()
        asyncio.run(
            _run_fetch(
                config=config,
                output_console=output_console,
                owner=owner,
                repo=repo,
                output_path=output,
                state=state,
                pr_state=pr_state,
                merged=merged,
                include_comments=comments,
                summary_only=summary_only,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Fetch cancelled[/yellow]")
        raise typer.Exit(1)
    except ExtractumError as e:
        output_console.print_error(str(e))
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


async def _run_fetch(
    config: Config,
    output_console: OutputConsole,
    owner: str,
    repo: str,
    output_path: Optional[Path],
    state: str,
    pr_state: str,
    merged: bool,
    include_comments: bool,
    summary_only: bool,
):
    """Run the fetch asynchronously."""
    output_console.print_header(owner, repo)

    if not config.is_authenticated:
        output_console.print_warning(
            "No GitHub token found. Using unauthenticated access (60 requests/hour).\n"
            "Set GITHUB_TOKEN environment variable for higher rate limits."
        )
        output_console.print()

    async with GitHubRestClient(config=config) as client:
        with output_console.create_progress() as progress:
            repo_task = progress.add_task("Fetching repository...", total=None)
            repository = await client.fetch_repository(owner, repo)
            progress.update(repo_task, completed=True)

            issue_task = progress.add_task("Fetching issues...", total=None)
            issues = await client.fetch_issues(owner, repo, state=state)
            issues = [with_parsed_body(issue) for issue in issues]
            progress.update(issue_task, completed=True)

            pr_task = progress.add_task("Fetching pull requests...", total=None)
            pull_requests = await client.fetch_pull_requests(
                owner, repo, state=pr_state, merged=merged
            )
            progress.update(pr_task, completed=True)

            issue_details = None
            if include_comments:
                comment_task = progress.add_task("Fetching comments...", total=len(issues))
                issue_details = []
                for issue in issues:
                    details = await client.fetch_issue_details(owner, repo, issue)
                    details.comments = [with_parsed_body(c) for c in details.comments]
                    issue_details.append(details)
                    progress.advance(comment_task)

    report = build_report(repository, issues, pull_requests, issue_details)
    output_console.print_report_summary(report)

    if not summary_only:
        output_file = write_json_report(report, output_path)
        output_console.print_output_path(str(output_file))

    output_console.print_success("\nExtraction complete!")


@app.command()
def rate_limit(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show the current rate limit for the configured token."""
    setup_logging(verbose)
    output_console = OutputConsole(verbose=verbose)

    async def _check(config: Config) -> dict:
        async with GitHubRestClient(config=config) as client:
            return await client.fetch_rate_limit()

    try:
        config = get_config()
        status = asyncio.run(_check(config))
    except ExtractumError as e:
        output_console.print_error(str(e))
        raise typer.Exit(1)

    output_console.print_rate_limit(status, config.is_authenticated)


@app.command()
def check_token():
    """Check GitHub token configuration."""
    try:
        config = get_config()
    except ExtractumError as e:
        OutputConsole().print_error(str(e))
        raise typer.Exit(1)

    if config.is_authenticated:
        console.print("[green]GitHub token is configured[/green]")
        console.print("Rate limit: 5000 requests/hour")
    else:
        console.print("[yellow]No GitHub token configured[/yellow]")
        console.print("Rate limit: 60 requests/hour")
        console.print()
        console.print("To configure a token:")
        console.print("  export GITHUB_TOKEN=your_token_here")
        console.print()
        console.print("Create a token at: https://github.com/settings/tokens")
        console.print("No special scopes needed for public data access.")


if __name__ == "__main__":
    app()
