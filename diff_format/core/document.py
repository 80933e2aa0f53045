"""
In-memory documents with a line table, and line-range to character-span resolution.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import SpanOutOfRange

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TextSpan:
    """Character range [start, end) within a document."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}..{self.end})"


@dataclass(frozen=True)
class TextLine:
    """One physical line: start offset and end offset excluding its line break."""

    start: int
    end: int


def compute_lines(text: str) -> Tuple[TextLine, ...]:
    """
    Build the line table for text.

    There is always one more line than there are line breaks, so text ending
    with a newline has an empty last line.
    """
    lines = []
    start = 0
    for match in _LINE_BREAK.finditer(text):
        lines.append(TextLine(start, match.start()))
        start = match.end()
    lines.append(TextLine(start, len(text)))
    return tuple(lines)


def span_for_lines(lines: Sequence[TextLine], line_start: int, line_count: int) -> TextSpan:
    """
    Return the span covering a run of whole lines.

    Args:
        lines: Line table of the document
        line_start: First line (0-based)
        line_count: Number of lines

    Returns:
        Span from the start of the first line to the end of the last one
        (the last line's break is not included)

    Raises:
        SpanOutOfRange: If the lines are not all in the document
    """
    if line_start < 0 or line_count < 1 or line_start + line_count > len(lines):
        raise SpanOutOfRange(
            f"lines {line_start}..{line_start + line_count - 1} out of range "
            f"for a document of {len(lines)} lines"
        )

    first_line = lines[line_start]
    last_line = lines[line_start + line_count - 1]
    return TextSpan(first_line.start, last_line.end)


class Document:
    """
    Text of one source file, identified by its diff file name.

    Documents are immutable; with_text() returns the edited copy.
    """

    def __init__(self, filename: str, text: str, path=None):
        self.filename = filename
        self.text = text
        self.path = path
        self._lines: Optional[Tuple[TextLine, ...]] = None

    @property
    def lines(self) -> Tuple[TextLine, ...]:
        """Line table of the current text."""
        if self._lines is None:
            self._lines = compute_lines(self.text)
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def span_for_lines(self, line_start: int, line_count: int) -> TextSpan:
        return span_for_lines(self.lines, line_start, line_count)

    def with_text(self, text: str) -> "Document":
        return Document(self.filename, text, self.path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.filename == other.filename and self.text == other.text

    def __hash__(self) -> int:
        return hash((self.filename, self.text))

    def __repr__(self) -> str:
        return f"Document({self.filename!r}, {self.line_count} lines)"
