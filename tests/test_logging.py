"""Tests for package logging setup."""

import logging

from rich.logging import RichHandler

from diff_format import setup_logging


def test_setup_logging_installs_one_rich_handler():
    """Repeated setup replaces the handler instead of stacking them."""
    setup_logging(logging.DEBUG)
    setup_logging(logging.WARNING)

    package_logger = logging.getLogger("diff_format")
    assert package_logger.level == logging.WARNING
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], RichHandler)

    # Sub-module loggers inherit the package level
    assert logging.getLogger("diff_format.core.applier").getEffectiveLevel() == logging.WARNING
