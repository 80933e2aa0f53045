"""
Unified diff parsing into per-file change requests.

Only the lines a hunk really changed are kept: leading and trailing context
lines are trimmed from the hunk's new-file range before a request is emitted.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

from .errors import MalformedDiff

logger = logging.getLogger(__name__)

FILE_HEADER = "+++"
HUNK_MARKER = "@@"
CONTEXT = " "
ADDITION = "+"
REMOVAL = "-"
NO_NEWLINE = "\\"

# "+++ b/" - the a/ b/ prefix convention used by git
FILE_HEADER_PREFIX_LENGTH = 6


@dataclass(frozen=True)
class ChangeRequest:
    """Lines [line_start, line_start + line_count) of filename need formatting."""

    filename: str
    line_start: int  # 0-based
    line_count: int

    @property
    def line_end(self) -> int:
        """Exclusive end line (0-based)."""
        return self.line_start + self.line_count

    def __str__(self) -> str:
        return f"{self.filename}:{self.line_start + 1}-{self.line_end}"


class ParserState(Enum):
    """Where the parser is within the diff stream."""

    SEEK_HEADER = auto()
    HUNK_FRONT = auto()  # leading context
    HUNK_CHANGES = auto()  # run of +/- lines
    HUNK_TRAILING = auto()  # context after the last change seen so far


@dataclass
class _Hunk:
    """Running state of the hunk being scanned."""

    new_start: int
    new_count: int
    old_remaining: int
    new_remaining: int
    ignore_front: int = 0
    ignore_end: int = 0

    @property
    def exhausted(self) -> bool:
        return self.old_remaining <= 0 and self.new_remaining <= 0


def _parse_range(field: str) -> Tuple[int, int]:
    """Parse "start,count" (or "start", meaning a count of 1)."""
    if "," in field:
        start, count = field.split(",", 1)
        return int(start), int(count)
    return int(field), 1


def parse_hunk_header(line: str) -> Tuple[int, int, int, int]:
    """
    Decode a hunk header.

    Args:
        line: A line like "@@ -10,3 +12,5 @@ void foo()"

    Returns:
        Tuple of (old_start, old_count, new_start, new_count)

    Raises:
        MalformedDiff: If the header does not have the expected shape
    """
    # Get rid of the leading @@ and everything after the closing one
    stripped = line[len(HUNK_MARKER):]
    end = stripped.find(HUNK_MARKER)
    if end == -1:
        raise MalformedDiff(f"unterminated hunk header: {line!r}")

    fields = stripped[:end].split()
    if len(fields) < 2 or not fields[0].startswith(REMOVAL) or not fields[1].startswith(ADDITION):
        raise MalformedDiff(f"unrecognised hunk header: {line!r}")

    try:
        old_start, old_count = _parse_range(fields[0][1:])
        new_start, new_count = _parse_range(fields[1][1:])
    except ValueError:
        raise MalformedDiff(f"bad line numbers in hunk header: {line!r}") from None

    return old_start, old_count, new_start, new_count


class DiffParser:
    """
    Line-at-a-time state machine over a unified diff.

    Feed lines with feed(), then call finish() to flush the last hunk and get
    the requests in the order their hunks appeared.
    """

    def __init__(self):
        self.state = ParserState.SEEK_HEADER
        self.current_file: Optional[str] = None
        self.requests: List[ChangeRequest] = []
        self.line_number = 0
        self._hunk: Optional[_Hunk] = None

    def feed(self, line: str) -> None:
        """Consume one diff line (a trailing line break is ignored)."""
        self.line_number += 1
        line = line.rstrip("\r\n")

        # A handler returns False when the line ended the hunk and has to be
        # looked at again as a header line.
        consumed = False
        while not consumed:
            if self.state is ParserState.SEEK_HEADER:
                consumed = self._seek_header(line)
            elif self.state is ParserState.HUNK_FRONT:
                consumed = self._hunk_front(line)
            elif self.state is ParserState.HUNK_CHANGES:
                consumed = self._hunk_changes(line)
            else:
                consumed = self._hunk_trailing(line)

    def finish(self) -> List[ChangeRequest]:
        """Flush any open hunk and return every request found."""
        if self._hunk is not None:
            self._close_hunk()
        return self.requests

    def _seek_header(self, line: str) -> bool:
        if line.startswith(FILE_HEADER):
            # Drop "+++ b/" and any tab-separated timestamp
            self.current_file = line[FILE_HEADER_PREFIX_LENGTH:].split("\t")[0]
            logger.debug(f"File header: {self.current_file}")
        elif line.startswith(HUNK_MARKER):
            if self.current_file is None:
                raise MalformedDiff("hunk found before any '+++' file header", self.line_number)
            try:
                old_start, old_count, new_start, new_count = parse_hunk_header(line)
            except MalformedDiff as e:
                raise MalformedDiff(str(e), self.line_number) from None
            self._hunk = _Hunk(new_start, new_count, old_remaining=old_count, new_remaining=new_count)
            self.state = ParserState.HUNK_FRONT
            self._check_exhausted()
        return True

    def _hunk_front(self, line: str) -> bool:
        if line.startswith(CONTEXT):
            self._hunk.ignore_front += 1
            self._take(line)
            return True
        if self._is_change(line):
            self.state = ParserState.HUNK_CHANGES
            self._take(line)
            return True
        self._close_hunk()
        return False

    def _hunk_changes(self, line: str) -> bool:
        if self._is_change(line) or line.startswith(NO_NEWLINE):
            self._take(line)
            return True
        if line.startswith(CONTEXT):
            # The line that tells us trailing context started is itself context
            self._hunk.ignore_end = 1
            self.state = ParserState.HUNK_TRAILING
            self._take(line)
            return True
        self._close_hunk()
        return False

    def _hunk_trailing(self, line: str) -> bool:
        if line.startswith(CONTEXT):
            self._hunk.ignore_end += 1
            self._take(line)
            return True
        if self._is_change(line):
            # Context between two changes of the same hunk stays in the range
            self._hunk.ignore_end = 0
            self.state = ParserState.HUNK_CHANGES
            self._take(line)
            return True
        self._close_hunk()
        return False

    @staticmethod
    def _is_change(line: str) -> bool:
        return line.startswith(ADDITION) or line.startswith(REMOVAL)

    def _take(self, line: str) -> None:
        """Account for a body line and close the hunk once its counts are used up."""
        hunk = self._hunk
        if line.startswith(CONTEXT):
            hunk.old_remaining -= 1
            hunk.new_remaining -= 1
        elif line.startswith(ADDITION):
            hunk.new_remaining -= 1
        elif line.startswith(REMOVAL):
            hunk.old_remaining -= 1
        self._check_exhausted()

    def _check_exhausted(self) -> None:
        if self._hunk is not None and self._hunk.exhausted:
            self._close_hunk()

    def _close_hunk(self) -> None:
        hunk = self._hunk
        self._hunk = None
        self.state = ParserState.SEEK_HEADER

        count = hunk.new_count - hunk.ignore_front - hunk.ignore_end
        if count > 0:
            request = ChangeRequest(self.current_file, hunk.new_start - 1 + hunk.ignore_front, count)
            logger.debug(f"Change request {request}")
            self.requests.append(request)


def parse_diff(lines: Iterable[str]) -> List[ChangeRequest]:
    """
    Parse unified diff lines into change requests.

    Args:
        lines: Diff lines, with or without line terminators

    Returns:
        Requests in the order their hunks appear in the diff

    Raises:
        MalformedDiff: If a hunk appears before a file header or a hunk
            header cannot be decoded
    """
    parser = DiffParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()


def parse_diff_text(diff_output: str) -> List[ChangeRequest]:
    """Parse a whole diff held in a string."""
    return parse_diff(diff_output.split("\n"))
