"""Rich-powered console output for quickpr."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.status import Status
from rich.table import Table

from quickpr.analysis.models import ClassificationResult, SeverityLevel

SEVERITY_COLORS = {
    SeverityLevel.LOW: "green",
    SeverityLevel.MEDIUM: "yellow",
    SeverityLevel.HIGH: "red",
    SeverityLevel.CRITICAL: "bold red",
}


class Console:
    """Terminal output for quickpr using Rich."""

    def __init__(self, console: RichConsole | None = None, stderr: bool = False) -> None:
        self.console = console or RichConsole(stderr=stderr)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def tips(self, title: str, lines: list[str]) -> None:
        """Print a hint heading followed by dimmed suggestions."""
        self.console.print(f"\n[yellow]{title}[/yellow]")
        for line in lines:
            self.console.print(f"   [dim]{line}[/dim]", highlight=False)

    def status(self, message: str) -> Status:
        """Spinner shown while git and gh are working."""
        return self.console.status(message, spinner="dots")

    def show_description(self, description: str) -> None:
        """Print a generated PR body between two rules."""
        self.console.rule(style="dim")
        self.console.print(description, markup=False, highlight=False)
        self.console.rule(style="dim")

    def show_classification(self, result: ClassificationResult) -> None:
        """Display a classification as a severity panel and metrics table."""
        color = SEVERITY_COLORS[result.severity]
        self.console.print(
            Panel(
                f"[bold]Severity:[/bold] [{color}]{result.severity.value}[/{color}]\n"
                f"[bold]Reasoning:[/bold] {result.reasoning}",
                title="[bold]Change Analysis[/bold]",
                border_style=color,
            )
        )

        table = Table(border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right", style="cyan")
        table.add_row("Lines Changed", str(result.metrics.lines_changed))
        table.add_row("Files Modified", str(result.metrics.files_changed))
        table.add_row("Insertions", f"+{result.metrics.insertions}")
        table.add_row("Deletions", f"-{result.metrics.deletions}")
        self.console.print(table)

        self.console.print("\n[bold]Impact areas:[/bold]")
        for area in result.impact_areas:
            self.console.print(f"  {area}", markup=False)

    def confirm(self, message: str) -> bool:
        """Ask for user confirmation."""
        response = self.console.input(f"\n{message} \\[y/N] ")
        return response.lower().strip() in ("y", "yes")
