"""
Obtaining diff text from git.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .errors import GitError

logger = logging.getLogger(__name__)


def detect_base(repo_path: Path) -> str:
    """
    Auto-detect the base commit for diffing.

    Tries merge-base with main, then master, falls back to HEAD~1.
    """
    for branch in ("main", "master"):
        result = subprocess.run(
            ["git", "merge-base", "HEAD", branch],
            capture_output=True,
            cwd=repo_path,
            text=True,
        )
        if result.returncode == 0:
            return result.stdout.strip()

    # Fall back to parent commit
    return "HEAD~1"


def git_diff(base: Optional[str] = None, repo_path: Optional[Path] = None) -> str:
    """
    Run git diff and return its output.

    Args:
        base: Commit/branch to diff the working tree against, a range like
              "HEAD~5..HEAD~2", or None/"auto" to detect the base.
        repo_path: Path to git repository. Uses cwd if None.

    Returns:
        Unified diff text

    Raises:
        GitError: If git is missing or the diff fails
    """
    repo_path = repo_path or Path.cwd()
    if base is None or base == "auto":
        base = detect_base(repo_path)
        logger.info(f"Diffing against detected base {base}")

    cmd = ["git", "diff", "--no-color", "--no-ext-diff", base]
    logger.debug(f"Running {' '.join(cmd)} in {repo_path}")

    try:
        result = subprocess.run(cmd, capture_output=True, cwd=repo_path, text=True)
    except OSError as e:
        raise GitError(f"could not run git: {e}") from e

    if result.returncode != 0:
        raise GitError(f"git diff failed: {result.stderr.strip()}")

    return result.stdout


def repo_root(path: Path) -> Optional[Path]:
    """Top-level directory of the git repository containing path, if any."""
    result = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        capture_output=True,
        cwd=path,
        text=True,
    )
    if result.returncode != 0:
        return None
    return Path(result.stdout.strip())
