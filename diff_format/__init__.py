"""
diff-format: Reformat only the lines a diff touched.
"""

import logging
from rich.logging import RichHandler

__version__ = "0.1.0"

# Package-level logger
logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO):
    """
    Send the package's log records to a rich handler at the given level.

    Args:
        level: Logging level
    """
    root_logger = logging.getLogger("diff_format")
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers = []

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
