"""
Formatter capability and the clang-format backed implementation.
"""

import logging
import subprocess
from typing import Protocol, Sequence

from .document import Document, TextSpan
from .errors import FormatterError

logger = logging.getLogger(__name__)

# Languages clang-format knows how to lay out
CLANG_FORMAT_EXTENSIONS = (
    ".cs",
    ".c",
    ".cc",
    ".cpp",
    ".cxx",
    ".h",
    ".hh",
    ".hpp",
    ".hxx",
    ".java",
    ".js",
    ".ts",
    ".proto",
)


class Formatter(Protocol):
    """Reformats one span of a document."""

    def format(self, document: Document, span: TextSpan) -> Document:
        """
        Return the document with the span re-laid-out.

        Text outside the span must be preserved; the number of lines may change.
        """
        ...


class ClangFormatFormatter:
    """Run clang-format on a byte range of the document."""

    def __init__(self, binary: str = "clang-format", style: str = "file",
                 extensions: Sequence[str] = CLANG_FORMAT_EXTENSIONS):
        self.binary = binary
        self.style = style
        self.extensions = tuple(extensions)

    def command(self, document: Document, span: TextSpan) -> list:
        # clang-format counts offsets in bytes, not characters
        offset = len(document.text[:span.start].encode("utf-8"))
        length = len(document.text[span.start:span.end].encode("utf-8"))
        # --style=file looks for .clang-format starting from this path
        assume_filename = document.path or document.filename
        return [
            self.binary,
            f"--style={self.style}",
            f"--assume-filename={assume_filename}",
            f"--offset={offset}",
            f"--length={length}",
        ]

    def format(self, document: Document, span: TextSpan) -> Document:
        if not document.filename.endswith(self.extensions):
            logger.warning(f"clang-format cannot format {document.filename}, leaving it unchanged")
            return document

        cmd = self.command(document, span)
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                input=document.text.encode("utf-8"),
                capture_output=True,
            )
        except OSError as e:
            raise FormatterError(f"could not run {self.binary}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise FormatterError(f"{self.binary} failed on {document.filename}: {stderr}")

        return document.with_text(result.stdout.decode("utf-8"))
