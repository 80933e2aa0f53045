"""
Reject formatting results that break the syntax of a document.
"""

import logging

from tree_sitter import Language, Node, Parser

from ..core.document import Document, TextSpan
from ..core.errors import FormatterError
from ..core.formatter import Formatter
from .grammars import get_language

logger = logging.getLogger(__name__)


def _error_nodes(node: Node) -> int:
    if not node.has_error:
        return 0
    if node.is_error or node.is_missing:
        return 1
    return sum(_error_nodes(child) for child in node.children)


def count_errors(language: Language, text: str) -> int:
    """Number of ERROR / MISSING nodes tree-sitter finds in text."""
    tree = Parser(language).parse(text.encode("utf-8"))
    return _error_nodes(tree.root_node)


class SyntaxGuard:
    """
    Formatter wrapper that checks the formatted document still parses.

    A result with more syntax errors than the input is refused with
    FormatterError. Files without a tree-sitter grammar pass through.
    """

    def __init__(self, inner: Formatter):
        self.inner = inner

    def format(self, document: Document, span: TextSpan) -> Document:
        formatted = self.inner.format(document, span)

        language = get_language(document.filename)
        if language is None or formatted.text == document.text:
            return formatted

        errors_before = count_errors(language, document.text)
        errors_after = count_errors(language, formatted.text)
        if errors_after > errors_before:
            raise FormatterError(
                f"formatting {document.filename} at {span} introduced syntax errors "
                f"({errors_before} -> {errors_after})"
            )

        logger.debug(f"Syntax check passed for {document.filename}")
        return formatted
