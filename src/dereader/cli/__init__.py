"""CLI entry point for dereader."""

import click

from .info import info
from .state import state
from .constants import constants
from .masses import masses
from .check import check
from . import common as common
from ..logging import get_logger


# Create a logger for this module
logger = get_logger(__name__)


@click.group()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times: -v, -vv, -vvv)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging (equivalent to -vv)",
)
@click.option(
    "--quiet",
    is_flag=True,
    help="Suppress all logging except errors",
)
def cli(verbose: int, debug: bool, quiet: bool) -> None:
    """Read JPL DE and INPOP binary ephemeris files."""
    common.configure_logging(
        {
            "quiet": quiet,
            "debug": debug,
            "verbose": verbose,
        }
    )
    logger.debug("Debug logging enabled")


cli.add_command(info)
cli.add_command(state)
cli.add_command(constants)
cli.add_command(masses)
cli.add_command(check)

if __name__ == "__main__":
    cli()
