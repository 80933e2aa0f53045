"""
Files command - format changed lines of plain files in place.
"""

import logging
import sys
from pathlib import Path

import click

from ..core.applier import apply_changes
from ..core.grouper import group_requests
from ..core.sources import FileDocumentSource
from .helpers import (
    build_formatter,
    console,
    exit_code,
    find_repo_path,
    formatting_options,
    print_requests,
    print_summary,
    read_requests,
    resolve_config,
)

logger = logging.getLogger(__name__)


@click.command("files")
@click.argument("diff_file", type=click.File("r"), default="-")
@click.option(
    "--since",
    type=str,
    default=None,
    help="Take the diff from git instead: ref to diff against (e.g. origin/dev, HEAD~5) or 'auto'",
)
@click.option(
    "--repo-path",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory diff file names are relative to (default: git root)",
)
@formatting_options
@click.option("--dry-run", is_flag=True, help="Only list the line ranges that would be formatted")
def files(diff_file, since, repo_path, extensions, clang_format, style, no_syntax_guard, dry_run):
    """
    Format the lines touched by a diff, file by file.

    DIFF_FILE is a unified diff, or '-' (the default) to read it from stdin.
    Each file is written back as soon as it has been formatted.

    Examples:
        git diff | diff-format files
        diff-format files changes.patch -e .cs -e .cpp
        diff-format files --since origin/main
    """
    repo_path = find_repo_path(repo_path)
    config = resolve_config(repo_path, repo_path, extensions, clang_format, style, no_syntax_guard)

    groups = group_requests(read_requests(diff_file, since, repo_path), config.extensions)
    logger.info(f"{len(groups)} files to process")
    console.print(f"[bold]{len(groups)} files to process[/bold]")

    if dry_run:
        print_requests(groups)
        return

    report = apply_changes(FileDocumentSource(repo_path), groups, build_formatter(config))

    print_summary(report)
    sys.exit(exit_code(report))
