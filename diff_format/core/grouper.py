"""
Grouping of change requests per file.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from .diff_parser import ChangeRequest

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".cs", ".vb")


def is_supported(filename: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> bool:
    """Case-sensitive suffix check against the supported extensions."""
    return filename.endswith(tuple(extensions))


def group_requests(
    requests: Iterable[ChangeRequest], extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> Dict[str, List[ChangeRequest]]:
    """
    Group requests by file name, dropping unsupported file types.

    Files keep the order in which they first appear. Requests inside a group
    keep diff order and are not de-duplicated.

    Args:
        requests: Change requests from the diff parser
        extensions: Supported file name suffixes

    Returns:
        Dict mapping file name to its requests
    """
    groups: Dict[str, List[ChangeRequest]] = {}

    for request in requests:
        if not is_supported(request.filename, extensions):
            logger.warning(f"{request.filename} is not a {' or '.join(extensions)} file. Skipping")
            continue

        groups.setdefault(request.filename, []).append(request)

    return groups
