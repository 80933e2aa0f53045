"""
Command-line interface for diff-format.
"""

import logging

import click

from .. import setup_logging
from .files import files
from .workspace import workspace

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
def cli(verbose, debug):
    """Reformat only the lines a diff touched."""
    if debug:
        setup_logging(logging.DEBUG)
    elif verbose:
        setup_logging(logging.INFO)
    else:
        setup_logging(logging.WARNING)


# Register commands
cli.add_command(files)
cli.add_command(workspace)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
