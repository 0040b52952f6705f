"""CLI command printing the planetary mass table."""

import click

from ..masses import planetary_masses
from .common import open_ephemeris_file


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
def masses(path: str) -> None:
    """Print body masses derived from the GM constants.

    Columns: mass relative to the Sun, Sun mass over body mass, GM in
    km^3/s^2 and GM in AU^3/day^2.
    """
    with open_ephemeris_file(path, load_constants=True) as eph:
        try:
            table = planetary_masses(eph.constants, eph.header.au_km)
        except KeyError as e:
            raise click.ClickException(f"Missing constant {e} in {path}")
        click.echo(f"{'Body':<8} {'M/Msun':>24} {'Msun/M':>24} {'GM km3/s2':>24} {'GM au3/d2':>24}")
        for mass in table:
            click.echo(
                f"{mass.name:<8} {mass.ratio_to_sun:>24.16e} {mass.sun_ratio:>24.16e} "
                f"{mass.gm_km3_s2:>24.16e} {mass.gm_au3_day2:>24.16e}"
            )
