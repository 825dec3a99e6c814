"""syncat CLI entry point: Click group with subcommands."""

import logging

import click

from syncat import __version__


@click.group()
@click.version_option(version=__version__, prog_name="syncat")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool) -> None:
    """syncat - stylesheet-driven syntax highlighting for source files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


# Import and register subcommands
from syncat.cli.cat import cat  # noqa: E402
from syncat.cli.check import check  # noqa: E402

cli.add_command(cat)
cli.add_command(check)
