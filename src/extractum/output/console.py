"""Rich console output for extraction results."""

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from extractum.output.json_writer import RepositoryReport
from extractum.utils.rate_limiter import format_reset_time, format_time_remaining


class Console:
    """Wrapper for rich console output."""

    def __init__(self, verbose: bool = False, quiet: bool = False):
        self.console = RichConsole()
        self.verbose = verbose
        self.quiet = quiet

    def print(self, *args, **kwargs):
        """Print to console (respects quiet mode)."""
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def print_error(self, message: str):
        """Print error message."""
        self.console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str):
        """Print warning message."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str):
        """Print success message."""
        if not self.quiet:
            self.console.print(f"[green]{message}[/green]")

    def create_progress(self) -> Progress:
        """Create a spinner progress context."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            disable=self.quiet,
        )

    def print_header(self, owner: str, repo: str):
        """Print extraction header."""
        if self.quiet:
            return

        self.console.print()
        self.console.print(
            Panel(
                f"[bold blue]GitHub Repository Extraction[/bold blue]\n[dim]{owner}/{repo}[/dim]",
                expand=False,
            )
        )
        self.console.print()

    def print_report_summary(self, report: RepositoryReport):
        """Print repository metadata and stats."""
        if self.quiet:
            return

        repo = report.repository
        table = Table(title=repo.full_name, show_header=False, expand=False)
        table.add_column("Field", style="dim")
        table.add_column("Value")

        description = repo.description or "-"
        if len(description) > 60:
            description = description[:60] + "..."
        table.add_row("Description", description)
        table.add_row("Language", repo.language or "-")
        table.add_row("Stars", str(repo.stars))
        table.add_row("Forks", str(repo.forks))
        table.add_row("Open Issues", str(repo.open_issues))
        table.add_row("Issues Fetched", str(report.stats.total_issues))
        table.add_row("Merged PRs", str(report.stats.merged_prs))
        if report.stats.total_comments:
            table.add_row("Comments", str(report.stats.total_comments))

        self.console.print(table)
        self.console.print()

    def print_rate_limit(self, status: dict, is_authenticated: bool):
        """Print the client's view of the rate limit."""
        remaining = status.get("remaining")
        reset_time = status.get("reset_time")

        if remaining is None:
            self.console.print("[yellow]Rate limit headers were not returned[/yellow]")
            return

        color = "red" if remaining == 0 else "yellow" if remaining < 10 else "green"
        self.console.print(f"[{color}]{remaining} requests remaining[/{color}]")
        if reset_time is not None:
            self.console.print(
                f"Resets in: {format_time_remaining(status.get('reset_in') or 0)} "
                f"(at {format_reset_time(reset_time)})"
            )
        if not is_authenticated:
            self.console.print(
                "[dim]Tip: Set GITHUB_TOKEN for 5,000 requests/hour instead of 60[/dim]"
            )

    def print_output_path(self, path: str):
        """Print output file path."""
        if not self.quiet:
            self.console.print(f"\n[green]Report saved to:[/green] {path}")
