"""CLI command listing the constants of an ephemeris file."""

from typing import Optional

import click

from .common import open_ephemeris_file


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--limit", type=int, help="Only show the first N constants")
def constants(path: str, limit: Optional[int] = None) -> None:
    """List constant names and values."""
    with open_ephemeris_file(path, load_constants=True) as eph:
        table = eph.constants
        count = len(table) if limit is None else min(limit, len(table))
        for i in range(count):
            click.echo(f"{i:4d} {table.name(i):<6} {table.value(i):.17e}")
