"""Context Pack CLI - Main entry point."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from context_pack import __version__
from context_pack.config import (
    DEFAULT_CONFIG_TEMPLATE,
    Config,
    get_config_paths,
    load_config,
    load_config_from_file,
)
from context_pack.core.analyzer import Analyzer
from context_pack.core.exporter import ExportFormat, export_result
from context_pack.core.generator import (
    NOTES_FILE,
    generate_ignore_file,
    generate_notes,
    write_files,
)
from context_pack.core.results import AnalysisResult, analyze
from context_pack.core.scanner import PROJECT_IGNORE_FILE, Scanner, ScanError, ScanResult
from context_pack.ui.console import (
    create_console,
    print_banner,
    print_error,
    print_success,
    print_warning,
    setup_logging,
)
from context_pack.ui.prompts import confirm_overwrite, select_suggestions

app = typer.Typer(
    name="context-pack",
    help="Measure AI context size, detect bloat, generate .claudeignore + CLAUDE.md.",
    no_args_is_help=True,
)
console = create_console()


class State:
    """Global state container for CLI."""

    def __init__(self) -> None:
        self.config: Config = Config()  # Default until loaded


state = State()


def _print_config_locations(xdg_path: Path, cwd_path: Path, *, verbose: bool = False) -> None:
    """Print config file locations and their status.

    Args:
        xdg_path: Path to the global XDG config file.
        cwd_path: Path to the local CWD config file.
        verbose: If True, use detailed format with spacing (for config_path).
                 If False, use compact format (for config_show).
    """
    if verbose:
        console.print("[bold]Config file locations:[/bold]\n")

        xdg_status = "[green]exists[/green]" if xdg_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Global (XDG): {xdg_path}")
        console.print(f"                {xdg_status}\n")

        cwd_status = (
            "[green]exists (overrides global)[/green]"
            if cwd_path.exists()
            else "[dim]not found[/dim]"
        )
        console.print(f"  Local (CWD):  {cwd_path}")
        console.print(f"                {cwd_status}")
    else:
        console.print("\n[bold]Config locations:[/bold]")
        xdg_status = "[green]exists[/green]" if xdg_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Global: {xdg_path} ({xdg_status})")

        cwd_status = "[green]exists[/green]" if cwd_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Local:  {cwd_path} ({cwd_status})")


PATH_ARGUMENT = typer.Argument(
    Path("."),
    help="Project directory to analyze",
    resolve_path=True,
)


def _make_scanner(*, use_project_ignore: bool = True, extra: list[str] | None = None) -> Scanner:
    """Build a Scanner from the active config."""
    scan_config = state.config.scan
    return Scanner(
        console=console,
        respect_gitignore=scan_config.respect_gitignore,
        use_project_ignore=use_project_ignore,
        extra_ignore=list(scan_config.extra_ignore) + (extra or []),
    )


def _run_scan(path: Path, scanner: Scanner | None = None) -> ScanResult:
    """Scan a root, exit with error if it cannot be scanned."""
    scanner = scanner or _make_scanner()
    try:
        return scanner.scan(path)
    except ScanError as e:
        print_error(console, str(e))
        raise typer.Exit(1) from e


def _scan_and_analyze(path: Path) -> tuple[ScanResult, AnalysisResult]:
    """Scan a root and classify what was found."""
    results = _run_scan(path)
    analysis = analyze(
        results, large_file_threshold=state.config.scan.large_file_threshold_bytes
    )
    return results, analysis


def _make_analyzer() -> Analyzer:
    return Analyzer(
        console=console,
        top_files=state.config.report.top_files,
        large_file_threshold=state.config.scan.large_file_threshold_bytes,
    )


@app.command()
def scan(
    path: Path = PATH_ARGUMENT,
    export: Path | None = typer.Option(
        None,
        "--export",
        "-e",
        help="Write the analysis to a file",
        dir_okay=False,
    ),
    export_format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Export format: json or csv",
    ),
) -> None:
    """Scan a project and show its context size breakdown."""
    print_banner(console)

    if export_format not in ("json", "csv"):
        console.print(f"[red]Invalid export format: {export_format}[/red]")
        console.print("[dim]Valid options: json, csv[/dim]")
        raise typer.Exit(1)

    results, analysis = _scan_and_analyze(path)
    _make_analyzer().display_scan_report(results, analysis)

    if export is not None:
        fmt: ExportFormat = "csv" if export_format == "csv" else "json"
        try:
            export_result(results, analysis, export, fmt)
        except OSError as e:
            console.print(f"[red]Could not write {export}: {e}[/red]")
            raise typer.Exit(1) from e
        console.print(f"\n[green]Exported {fmt.upper()} to[/green] {export}")


@app.command()
def suggest(
    path: Path = PATH_ARGUMENT,
    show_all: bool | None = typer.Option(
        None,
        "--all/--top",
        "-a",
        help="Show every large file, not just the top 10",
    ),
) -> None:
    """Show recommended ignore patterns without writing anything."""
    print_banner(console)

    _, analysis = _scan_and_analyze(path)
    if show_all is None:
        show_all = state.config.report.show_all
    _make_analyzer().display_suggestions(analysis, show_all=show_all)


@app.command()
def generate(
    path: Path = PATH_ARGUMENT,
    overwrite: bool | None = typer.Option(
        None,
        "--overwrite/--keep-existing",
        help="Replace existing files (default: keep existing)",
    ),
    claudeignore: bool | None = typer.Option(
        None,
        "--claudeignore/--no-claudeignore",
        help=f"Write {PROJECT_IGNORE_FILE}",
    ),
    claudemd: bool | None = typer.Option(
        None,
        "--claudemd/--no-claudemd",
        help=f"Write {NOTES_FILE}",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Pick which suggestions to include",
    ),
) -> None:
    """Write .claudeignore and CLAUDE.md to the project root."""
    print_banner(console)

    gen_config = state.config.generate
    overwrite = gen_config.overwrite if overwrite is None else overwrite
    claudeignore = gen_config.claudeignore if claudeignore is None else claudeignore
    claudemd = gen_config.claudemd if claudemd is None else claudemd

    results, analysis = _scan_and_analyze(path)

    if interactive and claudeignore and analysis.suggestions:
        selected = select_suggestions(list(analysis.suggestions))
        if not selected:
            print_warning(console, "No patterns selected.")
        analysis = dataclasses.replace(analysis, suggestions=tuple(selected))

    files = {
        PROJECT_IGNORE_FILE: generate_ignore_file(analysis, results) if claudeignore else None,
        NOTES_FILE: generate_notes(results, analysis) if claudemd else None,
    }

    if interactive and not overwrite:
        existing = [n for n, c in files.items() if c is not None and (path / n).exists()]
        if existing and confirm_overwrite(existing):
            overwrite = True

    try:
        written, skipped = write_files(path, files, overwrite=overwrite)
    except OSError as e:
        console.print(f"[red]Could not write files in {path}: {e}[/red]")
        raise typer.Exit(1) from e

    console.print()
    for name in written:
        print_success(console, f"✓ {name} written")
    for name in skipped:
        print_warning(console, f"⊘ {name} already exists (use --overwrite to replace)")
    if not written and not skipped:
        console.print("[dim]Nothing to write.[/dim]")


@app.command()
def compare(
    path: Path = PATH_ARGUMENT,
) -> None:
    """Compare context size before and after applying ignore rules."""
    print_banner(console)

    before = _run_scan(path, _make_scanner(use_project_ignore=False))

    if before.has_project_ignore:
        console.print(f"[dim]Using existing {PROJECT_IGNORE_FILE}[/dim]\n")
        after = _run_scan(path)
    else:
        analysis = analyze(
            before, large_file_threshold=state.config.scan.large_file_threshold_bytes
        )
        patterns = [s.pattern for s in analysis.suggestions]
        console.print(
            f"[dim]No {PROJECT_IGNORE_FILE} found, applying {len(patterns)} suggested patterns[/dim]\n"
        )
        after = _run_scan(path, _make_scanner(extra=patterns))

    _make_analyzer().display_comparison(before, after)


@app.command()
def info() -> None:
    """Show the active ignore defaults and bloat rule table."""
    from context_pack.core.matcher import DEFAULT_IGNORE
    from context_pack.patterns import get_all_rules

    print_banner(console)
    console.print(f"[bold]Built-in ignore rules:[/bold] {', '.join(DEFAULT_IGNORE)}\n")

    table = Table(title="Bloat Rules", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Match", style="yellow")
    table.add_column("Category", style="cyan")
    table.add_column("Priority")
    table.add_column("Reason", style="dim")
    for i, rule in enumerate(get_all_rules(), 1):
        table.add_row(str(i), rule.pattern.pattern, rule.category, rule.priority, rule.reason)
    console.print(table)


# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage Context Pack configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app)


@config_app.command("init")
def config_init(
    global_config: bool = typer.Option(
        True,
        "--global/--local",
        help="Create in XDG config (--global) or current directory (--local)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing config file",
    ),
) -> None:
    """Generate a default configuration file with comments."""
    xdg_path, cwd_path = get_config_paths()
    target = xdg_path if global_config else cwd_path

    if target.exists() and not force:
        console.print(f"[yellow]Config already exists: {target}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_TEMPLATE)
    except OSError as e:
        console.print(f"[red]Permission denied: {target}[/red]")
        console.print(f"[dim]Check write permissions for {target.parent}[/dim]")
        raise typer.Exit(1) from e

    location = "global" if global_config else "local"
    console.print(f"[green]Created {location} config:[/green] {target}")


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        True,
        "--resolved/--raw",
        help="Show merged config (--resolved) or raw file (--raw)",
    ),
) -> None:
    """Display the active configuration and its source."""
    config = state.config
    xdg_path, cwd_path = get_config_paths()

    source_text = str(config._source) if config._source else "[dim]defaults only[/dim]"
    console.print(
        Panel.fit(
            f"[bold]Active config:[/bold] {source_text}",
            title="Configuration Source",
        )
    )

    if resolved:
        table = Table(title="Resolved Configuration", show_header=True)
        table.add_column("Section", style="cyan")
        table.add_column("Key", style="green")
        table.add_column("Value")

        for section_name in ["scan", "report", "generate"]:
            section = getattr(config, section_name)
            for key, value in vars(section).items():
                if not key.startswith("_"):
                    table.add_row(section_name, key, str(value))

        console.print(table)
    else:
        if config._source and config._source.exists():
            console.print(config._source.read_text())
        else:
            console.print("[dim]No config file found[/dim]")

    _print_config_locations(xdg_path, cwd_path, verbose=False)


@config_app.command("path")
def config_path() -> None:
    """Show configuration file locations and status."""
    xdg_path, cwd_path = get_config_paths()
    _print_config_locations(xdg_path, cwd_path, verbose=True)


def _version_callback(value: bool) -> None:
    """Print the version and exit before any command runs."""
    if value:
        console.print(f"Context Pack v{__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (overrides default locations)",
        exists=True,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log skipped entries and scan details",
    ),
) -> None:
    """Context Pack - see what your AI assistant reads, trim what it shouldn't."""
    setup_logging(console, verbose=verbose)

    try:
        if config_file:
            state.config = load_config_from_file(config_file)
        else:
            state.config = load_config()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
