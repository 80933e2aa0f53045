"""
Workspace command - format changed lines of the documents in a project directory.
"""

import logging
import sys
from pathlib import Path

import click
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from ..core.applier import apply_changes
from ..core.errors import PersistenceError
from ..core.grouper import group_requests
from ..core.sources import Workspace
from .helpers import (
    EXIT_SAVE_FAILED,
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


@click.command("workspace")
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("diff_file", type=click.File("r"), default="-")
@click.option("--all-files", "-a", is_flag=True, help="Format every document of the project, ignoring the diff")
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
def workspace(
    project_dir, diff_file, all_files, since, repo_path, extensions, clang_format, style, no_syntax_guard, dry_run
):
    """
    Format the lines touched by a diff across a project directory.

    PROJECT_DIR is indexed for supported documents (generated *.Designer
    files excluded). Diff entries outside the index are skipped. All edits
    are saved together once every file has been formatted.

    Examples:
        git diff | diff-format workspace src/MyProject
        diff-format workspace src/MyProject --all-files
    """
    repo_path = find_repo_path(repo_path)
    config = resolve_config(project_dir, repo_path, extensions, clang_format, style, no_syntax_guard)

    console.print(f"[cyan]Opening workspace: {project_dir}[/cyan]")
    ws = Workspace(
        project_dir,
        base_path=repo_path,
        extensions=config.extensions,
        exclude_patterns=config.exclude_patterns,
        exclude_dirs=config.exclude_dirs,
    )

    if all_files:
        groups = ws.all_files_requests()
    else:
        groups = {}
        for filename, requests in group_requests(read_requests(diff_file, since, repo_path), config.extensions).items():
            if filename in ws:
                groups[filename] = requests
            else:
                logger.warning(f"Could not find a document for {filename}")

    logger.info(f"{len(groups)} files to process")
    console.print(f"[bold]{len(groups)} files to process[/bold]")

    if dry_run:
        print_requests(groups)
        return

    formatter = build_formatter(config)
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("formatting", total=len(groups))

        def tick(filename):
            progress.update(task, advance=1, description=f"formatting {filename}")

        report = apply_changes(ws, groups, formatter, progress=tick)

    try:
        ws.save()
    except PersistenceError as e:
        console.print(f"[red]✗ {e}[/red]")
        print_summary(report)
        sys.exit(EXIT_SAVE_FAILED)

    print_summary(report)
    sys.exit(exit_code(report))
