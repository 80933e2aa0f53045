"""
Formatting configuration and per-project .diff-format.py hook files.

A project can drop a .diff-format.py next to its sources defining
setup_formatting(config) to change the defaults for that project.
"""

import importlib.util
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .grouper import DEFAULT_EXTENSIONS
from .sources import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXCLUDE_PATTERNS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".diff-format.py"


@dataclass
class FormatConfig:
    """Settings shared by the files and workspace commands."""

    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    clang_format: str = "clang-format"
    style: str = "file"
    syntax_guard: bool = True
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))


def find_config_file(start_path: Path, boundary: Optional[Path] = None) -> Optional[Path]:
    """
    Find .diff-format.py by walking up from start_path.

    Args:
        start_path: Directory to start searching from
        boundary: Directory not to search above (usually the repository root)

    Returns:
        Path to .diff-format.py if found, None otherwise
    """
    current = start_path.resolve()
    boundary = boundary.resolve() if boundary else None

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            logger.info(f"Found config file at {config_file}")
            return config_file

        if boundary is not None and current == boundary:
            break

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None


def load_config(start_path: Path, boundary: Optional[Path] = None) -> FormatConfig:
    """
    Build the configuration for a project directory.

    Errors in the hook file are logged and the defaults are kept.
    """
    config = FormatConfig()

    config_file = find_config_file(start_path, boundary)
    if not config_file:
        return config

    try:
        spec = importlib.util.spec_from_file_location("diff_format_config", config_file)
        if not spec or not spec.loader:
            logger.warning(f"Could not load {config_file}")
            return config

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if hasattr(module, "setup_formatting"):
            module.setup_formatting(config)
            logger.info(f"Loaded settings from {config_file}")
        else:
            logger.warning(f"{config_file} missing setup_formatting function")

    except Exception as e:
        logger.error(f"Error loading settings from {config_file}: {e}")
        return FormatConfig()

    return config
