"""Shared fixtures: in-memory formatters standing in for clang-format."""

import pytest

from diff_format.core.document import Document, TextSpan
from diff_format.core.errors import FormatterError


class SplitStatementsFormatter:
    """Puts every statement in the span on its own line ("a(); b();" -> two lines)."""

    def __init__(self):
        self.calls = []

    def format(self, document: Document, span: TextSpan) -> Document:
        self.calls.append((document, span))
        text = document.text
        formatted = text[span.start:span.end].replace("; ", ";\n")
        return document.with_text(text[:span.start] + formatted + text[span.end:])

    def spanned_text(self, call: int) -> str:
        """Text the formatter was asked to format on a given call."""
        document, span = self.calls[call]
        return document.text[span.start:span.end]


class JoinLinesFormatter:
    """Joins all lines of the span into one (removes lines)."""

    def format(self, document: Document, span: TextSpan) -> Document:
        text = document.text
        formatted = " ".join(text[span.start:span.end].split("\n"))
        return document.with_text(text[:span.start] + formatted + text[span.end:])


class FailingFormatter:
    """Raises FormatterError for one file, delegates everything else."""

    def __init__(self, bad_filename: str, inner=None):
        self.bad_filename = bad_filename
        self.inner = inner or SplitStatementsFormatter()

    def format(self, document: Document, span: TextSpan) -> Document:
        if document.filename == self.bad_filename:
            raise FormatterError(f"cannot format {document.filename}")
        return self.inner.format(document, span)


@pytest.fixture
def splitter():
    return SplitStatementsFormatter()


@pytest.fixture
def joiner():
    return JoinLinesFormatter()


@pytest.fixture
def failing_formatter():
    """Factory: failing_formatter("Bad.cs") fails only for that file."""
    return FailingFormatter
