"""
Shared helpers for CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

import click
from rich.console import Console
from rich.table import Table

from ..core.applier import ApplyReport
from ..core.config import FormatConfig, load_config
from ..core.diff_parser import ChangeRequest, parse_diff, parse_diff_text
from ..core.errors import DiffFormatError
from ..core.formatter import ClangFormatFormatter, Formatter
from ..core.git import git_diff, repo_root
from ..languages import SyntaxGuard

logger = logging.getLogger(__name__)

# Shared console instance
console = Console()

EXIT_OK = 0
EXIT_FORMAT_FAILED = 1
EXIT_SAVE_FAILED = 2
EXIT_BAD_DIFF = 3


def formatting_options(command):
    """Options shared by every command that formats files."""
    options = [
        click.option(
            "--extension",
            "-e",
            "extensions",
            multiple=True,
            help="Supported file suffix (repeatable, replaces the default .cs/.vb set)",
        ),
        click.option("--clang-format", "clang_format", default=None, help="clang-format binary to run"),
        click.option("--style", default=None, help="clang-format style (default: file)"),
        click.option("--no-syntax-guard", is_flag=True, help="Do not check formatted files for new syntax errors"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_config(
    start_path: Path,
    repo_path: Path,
    extensions=(),
    clang_format: Optional[str] = None,
    style: Optional[str] = None,
    no_syntax_guard: bool = False,
) -> FormatConfig:
    """Project config file first, then command line overrides."""
    config = load_config(start_path, repo_path)

    if extensions:
        config.extensions = list(extensions)
    if clang_format:
        config.clang_format = clang_format
    if style:
        config.style = style
    if no_syntax_guard:
        config.syntax_guard = False

    return config


def build_formatter(config: FormatConfig) -> Formatter:
    formatter = ClangFormatFormatter(binary=config.clang_format, style=config.style)
    if config.syntax_guard:
        return SyntaxGuard(formatter)
    return formatter


def find_repo_path(path: Optional[Path]) -> Path:
    """Explicit path, else the enclosing git repository, else the current directory."""
    if path:
        return path
    cwd = Path.cwd()
    return repo_root(cwd) or cwd


def read_requests(diff_file: TextIO, since: Optional[str], repo_path: Path) -> List[ChangeRequest]:
    """
    Parse the diff from git (when since is given) or from diff_file.

    Exits with EXIT_BAD_DIFF if the diff cannot be obtained or parsed.
    """
    try:
        if since:
            return parse_diff_text(git_diff(since, repo_path))
        return parse_diff(diff_file)
    except DiffFormatError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(EXIT_BAD_DIFF)


def print_requests(groups: Dict[str, List[ChangeRequest]]):
    """Show what would be formatted."""
    table = Table(title="Change Requests")
    table.add_column("File", style="cyan")
    table.add_column("Lines", style="green")

    for filename, requests in groups.items():
        ranges = ", ".join(f"{r.line_start + 1}-{r.line_end}" for r in sorted(requests, key=lambda r: r.line_start))
        table.add_row(filename, ranges)

    console.print(table)


def print_summary(report: ApplyReport):
    """Print per-file results and the totals."""
    if report.results:
        table = Table(title="Formatting Results")
        table.add_column("File", style="cyan")
        table.add_column("Requests", justify="right")
        table.add_column("Result")

        for result in report.results:
            if result.error:
                status = f"[red]✗ {result.error}[/red]"
            elif result.skipped:
                status = "[yellow]skipped[/yellow]"
            elif result.changed:
                status = "[green]✓ formatted[/green]"
            else:
                status = "[green]✓ unchanged[/green]"
            table.add_row(result.filename, str(len(result.requests)), status)

        console.print(table)

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  [green]{len(report.formatted)} files processed successfully[/green]")
    if report.failed:
        console.print(f"  [red]{len(report.failed)} files failed[/red]")


def exit_code(report: ApplyReport) -> int:
    return EXIT_OK if report.ok else EXIT_FORMAT_FAILED
