"""
Document sources: where documents named by a diff are loaded from and saved to.

FileDocumentSource works on individual files and writes each one back as soon
as it has been formatted. Workspace indexes a whole project directory, keeps
edits in memory, and writes them all out in save().
"""

import fnmatch
import logging
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional, Protocol, Sequence

from .diff_parser import ChangeRequest
from .document import Document
from .errors import PersistenceError
from .grouper import DEFAULT_EXTENSIONS, is_supported

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_PATTERNS = ("*.Designer.cs", "*.Designer.vb")
DEFAULT_EXCLUDE_DIRS = (".git", "bin", "obj")


class DocumentSource(Protocol):
    """Capability the applier uses to load and store documents."""

    def open(self, filename: str) -> Optional[Document]:
        """Return the document for a diff file name, or None if unknown."""
        ...

    def update(self, document: Document) -> None:
        """Accept the formatted version of a document."""
        ...

    def save(self) -> None:
        """Persist everything not yet written. Raises PersistenceError."""
        ...


def diff_path(base_path: Path, filename: str) -> Path:
    """Resolve a diff file name (always '/'-separated) against base_path."""
    if PurePosixPath(filename).is_absolute():
        return Path(filename).resolve()
    return (base_path / Path(*filename.split("/"))).resolve()


def read_source(path: Path) -> str:
    """Read a source file keeping its line endings untouched."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_source(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


class FileDocumentSource:
    """Plain files on disk; formatted documents are written immediately."""

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = base_path or Path.cwd()
        self.written: List[Path] = []

    def open(self, filename: str) -> Optional[Document]:
        path = diff_path(self.base_path, filename)
        if not path.is_file():
            return None
        return Document(filename, read_source(path), path)

    def update(self, document: Document) -> None:
        write_source(document.path, document.text)
        self.written.append(document.path)
        logger.debug(f"Wrote {document.path}")

    def save(self) -> None:
        """Nothing to do, files were written by update()."""


class Workspace:
    """
    In-memory view of the supported source files of a project directory.

    Diff file names are resolved against base_path (the repository root,
    defaults to the current directory) and must point at an indexed file.
    """

    def __init__(
        self,
        project_dir: Path,
        base_path: Optional[Path] = None,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
        exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
    ):
        self.project_dir = project_dir.resolve()
        self.base_path = (base_path or Path.cwd()).resolve()
        self.extensions = tuple(extensions)
        self.exclude_patterns = tuple(exclude_patterns)
        self.exclude_dirs = set(exclude_dirs)

        self._index: Dict[Path, str] = {}  # resolved path -> file name
        self._edits: Dict[Path, Document] = {}

        self._build_index()

    def _build_index(self) -> None:
        for path in sorted(self.project_dir.rglob("*")):
            if not path.is_file() or not is_supported(path.name, self.extensions):
                continue
            relative = path.relative_to(self.project_dir)
            if self.exclude_dirs.intersection(relative.parts[:-1]):
                continue
            if any(fnmatch.fnmatchcase(path.name, pattern) for pattern in self.exclude_patterns):
                logger.debug(f"Excluding generated file {relative}")
                continue
            self._index[path.resolve()] = self._filename_for(path.resolve())

        logger.info(f"Indexed {len(self._index)} documents in {self.project_dir}")

    def _filename_for(self, path: Path) -> str:
        try:
            return path.relative_to(self.base_path).as_posix()
        except ValueError:
            return path.as_posix()

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, filename: str) -> bool:
        return diff_path(self.base_path, filename) in self._index

    @property
    def filenames(self) -> List[str]:
        return list(self._index.values())

    def open(self, filename: str) -> Optional[Document]:
        path = diff_path(self.base_path, filename)
        if path not in self._index:
            return None
        if path in self._edits:
            return self._edits[path]
        return Document(filename, read_source(path), path)

    def update(self, document: Document) -> None:
        self._edits[document.path] = document

    @property
    def dirty(self) -> List[Document]:
        return list(self._edits.values())

    def documents(self) -> Iterator[Document]:
        """Every indexed document, with pending edits applied."""
        for filename in self.filenames:
            yield self.open(filename)

    def all_files_requests(self) -> Dict[str, List[ChangeRequest]]:
        """One request per indexed document covering all of its lines."""
        return {
            document.filename: [ChangeRequest(document.filename, 0, document.line_count)]
            for document in self.documents()
        }

    def save(self) -> None:
        """
        Write every edited document back to disk.

        Raises:
            PersistenceError: If any file could not be written; files that
                were written successfully stay written
        """
        failures = []
        for path, document in list(self._edits.items()):
            try:
                write_source(path, document.text)
                del self._edits[path]
                logger.debug(f"Wrote {path}")
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                failures.append(f"{document.filename}: {e}")

        if failures:
            raise PersistenceError("Failed while saving files to disk: " + "; ".join(failures))
