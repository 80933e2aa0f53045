"""
Tree-sitter support: grammar lookup and the syntax guard.
"""

from .grammars import GRAMMARS, get_language
from .syntax_guard import SyntaxGuard, count_errors

__all__ = ["GRAMMARS", "SyntaxGuard", "count_errors", "get_language"]
