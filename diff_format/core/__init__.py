"""
Diff interpretation and span-tracking engine.
"""

from .applier import ApplyReport, FileResult, apply_changes, apply_requests
from .diff_parser import ChangeRequest, parse_diff, parse_diff_text
from .document import Document, TextLine, TextSpan, span_for_lines
from .errors import DiffFormatError, FormatterError, GitError, MalformedDiff, PersistenceError, SpanOutOfRange
from .grouper import DEFAULT_EXTENSIONS, group_requests

__all__ = [
    "ApplyReport",
    "ChangeRequest",
    "DEFAULT_EXTENSIONS",
    "DiffFormatError",
    "Document",
    "FileResult",
    "FormatterError",
    "GitError",
    "MalformedDiff",
    "PersistenceError",
    "SpanOutOfRange",
    "TextLine",
    "TextSpan",
    "apply_changes",
    "apply_requests",
    "group_requests",
    "parse_diff",
    "parse_diff_text",
    "span_for_lines",
]
