"""
Tree-sitter grammars for the languages diff-format can check.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, Optional

import tree_sitter_c_sharp as tscsharp
import tree_sitter_cpp as tscpp
from tree_sitter import Language

logger = logging.getLogger(__name__)

# Map file extensions to grammar loaders
GRAMMARS: Dict[str, Callable[[], object]] = {
    ".cs": tscsharp.language,
    ".cpp": tscpp.language,
    ".cc": tscpp.language,
    ".cxx": tscpp.language,
    ".c++": tscpp.language,
    ".hpp": tscpp.language,
    ".h": tscpp.language,
    ".hxx": tscpp.language,
    ".h++": tscpp.language,
    ".c": tscpp.language,  # C is close enough to C++ for our purposes
    ".ipp": tscpp.language,
}


@lru_cache(maxsize=None)
def _load(suffix: str) -> Language:
    logger.debug(f"Loading tree-sitter grammar for {suffix}")
    return Language(GRAMMARS[suffix]())


def get_language(filename: str) -> Optional[Language]:
    """
    Get the tree-sitter language for a file name.

    Args:
        filename: File name or path as written in the diff

    Returns:
        The Language, or None if no grammar handles the extension
    """
    dot = filename.rfind(".")
    if dot == -1:
        return None
    suffix = filename[dot:].lower()
    if suffix not in GRAMMARS:
        return None
    return _load(suffix)
