"""CLI command describing an ephemeris file."""

import click

from ..header import N_IPT_ROWS
from .common import open_ephemeris_file

IPT_ROW_LABELS = [
    "Mercury",
    "Venus",
    "EMB",
    "Mars",
    "Jupiter",
    "Saturn",
    "Uranus",
    "Neptune",
    "Pluto",
    "Moon",
    "Sun",
    "Nutations",
    "Librations",
    "Mantle rate",
    "TT-TDB",
]


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
def info(path: str) -> None:
    """Show the header of an ephemeris file.

    Example:

       dereader info de405.bin
    """
    with open_ephemeris_file(path) as eph:
        header = eph.header
        click.echo(f"Name:        {header.name or '(unknown)'}")
        click.echo(f"Format:      {header.variant.value}")
        click.echo(f"Version:     {header.version}")
        click.echo(f"Start JD:    {header.start}")
        click.echo(f"End JD:      {header.end}")
        click.echo(f"Step:        {header.step} days")
        click.echo(f"Records:     {header.n_records()}")
        click.echo(f"AU:          {header.au_km} km")
        click.echo(f"EMRAT:       {header.emrat}")
        click.echo(f"Constants:   {header.n_constants}")
        click.echo(f"Byte order:  {'swapped' if header.byte_swapped else 'native'}")
        click.echo(f"Record size: {header.record_size} bytes")
        click.echo(f"Coefficients per record: {header.n_coeff_per_record}")
        click.echo("")
        click.echo(f"{'Quantity':<12} {'Offset':>6} {'Order':>5} {'Subint':>6}")
        for row in range(N_IPT_ROWS):
            params = header.ipt[row]
            click.echo(
                f"{IPT_ROW_LABELS[row]:<12} {params.offset:>6} "
                f"{params.order:>5} {params.n_subintervals:>6}"
            )
