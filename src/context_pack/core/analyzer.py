"""Reporter for displaying scan and analysis results."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from context_pack.core.classifier import LARGE_FILE_THRESHOLD
from context_pack.core.results import AnalysisResult, percent_of
from context_pack.core.scanner import PROJECT_IGNORE_FILE, ScanResult, format_size

BAR_WIDTH = 30

PRIORITY_STYLES = {
    "critical": "red",
    "high": "yellow",
    "medium": "cyan",
    "low": "dim",
}


@dataclass(frozen=True)
class Grade:
    """Letter grade for how much of the context is bloat."""

    label: str
    style: str
    note: str


def grade_context(bloat_percent: int) -> Grade:
    """Grade context health from the bloat percentage."""
    if bloat_percent == 0:
        return Grade("A+", "green", "Perfect")
    if bloat_percent < 5:
        return Grade("A", "green", "Very clean")
    if bloat_percent < 15:
        return Grade("B", "cyan", "Some bloat")
    if bloat_percent < 30:
        return Grade("C", "yellow", "Notable bloat")
    if bloat_percent < 50:
        return Grade("D", "red", "Significant bloat")
    return Grade("F", "bold red", "Critical bloat, fix immediately")


def format_tokens(count: int) -> str:
    """Format a token count with a K or M suffix."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}K"
    return str(count)


def bar(fraction: float, width: int = BAR_WIDTH) -> Text:
    """Render a horizontal bar for a fraction between 0 and 1."""
    filled = round(min(max(fraction, 0.0), 1.0) * width)
    text = Text()
    text.append("█" * filled, style="magenta")
    text.append("░" * (width - filled), style="dim")
    return text


class Analyzer:
    """Renders scan, suggestion and comparison reports."""

    def __init__(
        self,
        console: Console | None = None,
        top_files: int = 15,
        large_file_threshold: int = LARGE_FILE_THRESHOLD,
    ):
        self.console = console or Console()
        self.top_files = top_files
        self.large_file_threshold = large_file_threshold

    def display_scan_report(self, scan: ScanResult, result: AnalysisResult) -> None:
        """Display project summary, context size and the largest files."""
        found = "[green]found[/green]"
        project_status = found if scan.has_project_ignore else "[yellow]not found[/yellow]"
        git_status = found if scan.has_gitignore else "[dim]not found[/dim]"

        summary = Panel(
            f"[bold]Root:[/bold] {scan.root_path}\n"
            f"[bold]Files scanned:[/bold] {len(scan.files):,}\n"
            f"[bold]Ignored:[/bold] {scan.ignored_count:,}\n"
            f"[bold]Binary:[/bold] {scan.binary_count:,} [dim](excluded from tokens)[/dim]\n"
            f"[bold]{PROJECT_IGNORE_FILE}:[/bold] {project_status}\n"
            f"[bold].gitignore:[/bold] {git_status}",
            title="Project",
            border_style="blue",
        )
        self.console.print(summary)
        self.console.print()

        self.console.print("[bold]Context Size[/bold]")
        self.console.print(
            f"  Total tokens: [bold]{format_tokens(result.total_tokens)}[/bold] "
            f"[dim](~{scan.total_size_human})[/dim]"
        )

        if result.bloat_tokens > 0:
            clean_percent = percent_of(result.clean_tokens, result.total_tokens)
            self.console.print()
            self.console.print(Text("  ").append_text(bar(1.0)))
            self.console.print(
                f"  [green]Clean:[/green] [bold]{format_tokens(result.clean_tokens)}[/bold] "
                f"[dim]({clean_percent}%)[/dim]"
            )
            self.console.print(
                f"  [red]Bloat:[/red] [bold]{format_tokens(result.bloat_tokens)}[/bold] "
                f"[dim]({result.reduction_percent}%) could be eliminated[/dim]"
            )
            grade = grade_context(result.reduction_percent)
        else:
            grade = Grade("A+", "green", "No bloat detected, great shape!")

        self.console.print()
        self.console.print(
            f"  Context grade: [{grade.style}]{grade.label}[/{grade.style}]  [dim]{grade.note}[/dim]"
        )
        self.console.print()

        top = [f for f in scan.files if not f.is_binary and f.tokens > 0][: self.top_files]
        if top:
            table = Table(
                title="Largest Files",
                show_header=True,
                header_style="bold magenta",
            )
            table.add_column("Path", overflow="ellipsis", max_width=50)
            table.add_column("Tokens", justify="right", style="cyan", width=8)
            table.add_column("Share", width=17)

            max_tokens = top[0].tokens
            for f in top:
                is_bloat = result.is_bloat(f.rel_path)
                table.add_row(
                    Text(f.rel_path, style="red" if is_bloat else "white"),
                    format_tokens(f.tokens),
                    bar(f.tokens / max_tokens, 15).append(" ✗" if is_bloat else "", style="red"),
                )
            self.console.print(table)
            self.console.print()

        if scan.scan_errors:
            self.console.print(
                f"[yellow]Skipped {len(scan.scan_errors)} unreadable entries.[/yellow]"
            )

        if result.suggestions:
            self.console.print("[dim]Run [white]context-pack suggest[/white] to see what to ignore.[/dim]")
            self.console.print(
                f"[dim]Run [white]context-pack generate[/white] to create {PROJECT_IGNORE_FILE} + CLAUDE.md.[/dim]"
            )

    def display_suggestions(self, result: AnalysisResult, show_all: bool = False) -> None:
        """Display ignore suggestions and large files for manual review."""
        if not result.suggestions:
            self.console.print("[green]No bloat detected. Your context is clean![/green]")
            return

        summary = Panel(
            f"[bold]Patterns to add:[/bold] {len(result.suggestions)}\n"
            f"[bold]Potential savings:[/bold] {format_tokens(result.bloat_tokens)} tokens "
            f"({result.reduction_percent}% reduction)",
            title="Suggestions",
            border_style="blue",
        )
        self.console.print(summary)
        self.console.print()

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", style="dim", width=4)
        table.add_column("Pattern", style="yellow")
        table.add_column("Priority", width=9)
        table.add_column("Saves", justify="right", style="cyan", width=8)
        table.add_column("Files", justify="right", width=6)
        table.add_column("Reason", style="dim")

        for i, s in enumerate(result.suggestions, 1):
            style = PRIORITY_STYLES.get(s.priority, "dim")
            table.add_row(
                str(i),
                s.pattern,
                f"[{style}]{s.priority}[/{style}]",
                format_tokens(s.token_savings) if s.token_savings > 0 else "-",
                str(s.file_count),
                s.reason,
            )
        self.console.print(table)

        if result.large_files:
            limit = len(result.large_files) if show_all else 10
            self.console.print(
                f"\n[bold]Large files (>{format_size(self.large_file_threshold)}, review manually):[/bold]"
            )
            for f in result.large_files[:limit]:
                self.console.print(
                    f"  [cyan]{f.rel_path:<45}[/cyan] {format_tokens(f.tokens):>7} [dim]({f.size_human})[/dim]"
                )

        self.console.print(
            "\n[dim]Run [white]context-pack generate[/white] to apply all suggestions.[/dim]"
        )

    def display_comparison(self, before: ScanResult, after: ScanResult) -> None:
        """Display context size before and after applying ignore rules."""
        saved = before.total_tokens - after.total_tokens
        percent = percent_of(saved, before.total_tokens) if saved > 0 else 0

        table = Table(title="Before vs After", show_header=True, header_style="bold magenta")
        table.add_column("", style="dim", width=7)
        table.add_column("Tokens", justify="right", style="cyan")
        table.add_column("Files", justify="right")
        table.add_column("Size", justify="right")
        table.add_column("")

        after_fraction = after.total_tokens / before.total_tokens if before.total_tokens else 0.0
        table.add_row(
            "Before",
            format_tokens(before.total_tokens),
            str(len(before.files)),
            format_size(before.total_size),
            bar(1.0),
        )
        table.add_row(
            "After",
            format_tokens(after.total_tokens),
            str(len(after.files)),
            format_size(after.total_size),
            bar(after_fraction),
        )
        self.console.print(table)
        self.console.print()

        if saved > 0:
            self.console.print(
                f"[green]Saved:[/green] [bold]{format_tokens(saved)}[/bold] tokens ({percent}% reduction)"
            )
        elif saved == 0:
            self.console.print("[dim]No change in context size.[/dim]")
        else:
            self.console.print(f"[yellow]Context grew by {format_tokens(-saved)} tokens.[/yellow]")
