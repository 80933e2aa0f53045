"""
Exceptions raised by the formatting pipeline.
"""


class DiffFormatError(Exception):
    """Base class for all diff-format errors."""


class MalformedDiff(DiffFormatError):
    """The diff stream cannot be interpreted (e.g. a hunk before any file header)."""

    def __init__(self, message: str, line_number: int = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class SpanOutOfRange(DiffFormatError, ValueError):
    """A requested line range does not exist in the document."""


class FormatterError(DiffFormatError):
    """The external formatter failed or produced an unusable result."""


class PersistenceError(DiffFormatError):
    """Writing formatted documents back to disk failed."""


class GitError(DiffFormatError):
    """Running git to obtain a diff failed."""
