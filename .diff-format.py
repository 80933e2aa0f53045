"""
Example project settings for diff-format.

diff-format looks for this file by walking up from the project directory
to the repository root and calls setup_formatting() with the defaults.
"""

from diff_format.core.config import FormatConfig


def setup_formatting(config: FormatConfig):
    """
    Adjust settings for this repository.

    Args:
        config: FormatConfig to modify in place
    """
    # Format C# and C++ sources; Visual Basic is left alone
    config.extensions = [".cs", ".cpp", ".h"]

    # Use the .clang-format file next to the sources
    config.style = "file"

    # Generated sources are never formatted
    config.exclude_patterns += ["*.g.cs", "*.generated.cs"]
