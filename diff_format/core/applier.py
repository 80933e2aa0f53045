"""
Sequential application of formatting requests with line drift correction.

Formatting one span can change how many lines it occupies (re-wrapping,
brace placement, blank line normalisation). Requests of a file are applied
top to bottom, so every request after a format is shifted by the net change
in line count accumulated so far.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from .diff_parser import ChangeRequest
from .document import Document

if TYPE_CHECKING:
    from .formatter import Formatter
    from .sources import DocumentSource

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Outcome of formatting one file."""

    filename: str
    requests: List[ChangeRequest]
    error: Optional[str] = None
    changed: bool = False
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ApplyReport:
    """Outcome of formatting a batch of files."""

    results: List[FileResult] = field(default_factory=list)

    @property
    def failed(self) -> List[FileResult]:
        return [r for r in self.results if r.error is not None]

    @property
    def formatted(self) -> List[FileResult]:
        return [r for r in self.results if r.ok and not r.skipped]

    @property
    def ok(self) -> bool:
        return not self.failed


def apply_requests(document: Document, requests: Sequence[ChangeRequest], formatter: "Formatter") -> Document:
    """
    Format each requested line range of one document.

    Args:
        document: Document to format
        requests: Requests for this document, sorted by line_start
        formatter: Formats a span and returns the new document

    Returns:
        The formatted document
    """
    # Net line count change caused by the formats done so far
    line_adjustment = 0

    for request in requests:
        span = document.span_for_lines(request.line_start + line_adjustment, request.line_count)
        lines_before_format = document.line_count

        document = formatter.format(document, span)

        lines_after_format = document.line_count
        line_adjustment += lines_after_format - lines_before_format
        logger.debug(
            f"Formatted {request} at span {span}; "
            f"{lines_before_format} -> {lines_after_format} lines, adjustment {line_adjustment:+d}"
        )

    return document


def apply_changes(
    source: "DocumentSource",
    groups: Dict[str, List[ChangeRequest]],
    formatter: "Formatter",
    progress: Optional[Callable[[str], None]] = None,
) -> ApplyReport:
    """
    Format every file of a request map, one file at a time.

    A failure in one file is logged and recorded; the remaining files are
    still processed.

    Args:
        source: Where documents are read from and handed back to
        groups: File name to requests, as built by group_requests()
        formatter: Formatter used for every span
        progress: Called with each file name before it is processed

    Returns:
        ApplyReport with one FileResult per file
    """
    report = ApplyReport()

    for filename, requests in groups.items():
        if progress:
            progress(filename)

        result = FileResult(filename, list(requests))
        report.results.append(result)

        try:
            document = source.open(filename)
            if document is None:
                logger.warning(f"Could not find a document for {filename}")
                result.skipped = True
                continue

            logger.info(f"Applying changes to: {filename}")

            # Top of the file first so earlier drift can be corrected
            ordered = sorted(requests, key=lambda r: r.line_start)
            formatted = apply_requests(document, ordered, formatter)

            result.changed = formatted.text != document.text
            if result.changed:
                source.update(formatted)

        except Exception as e:
            logger.error(f"Exception formatting {filename}: {e}")
            result.error = str(e) or type(e).__name__

    return report
