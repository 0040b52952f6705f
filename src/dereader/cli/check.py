"""CLI command exercising every body of an ephemeris file."""

from typing import Optional

import click

from ..ephemeris import Body
from ..errors import EphemerisError, QuantityUnavailableError
from .common import open_ephemeris_file, parse_epoch


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option(
    "--date",
    "-d",
    help="Date to check (ISO format or Julian date). Defaults to the middle of the file.",
)
def check(path: str, date: Optional[str] = None) -> None:
    """Compute every body and quantity once and report failures.

    Each body is computed relative to the solar system barycenter, each
    stored quantity on its own, and the Moon relative to the Earth. Errors
    are reported per body; quantities the file does not carry are listed
    but not counted as failures.
    """
    with open_ephemeris_file(path) as eph:
        epoch = parse_epoch(date) if date else (eph.start + eph.end) / 2.0
        click.echo(f"Checking {eph.name or path} at JD {epoch}")

        pairs = [(body, Body.SOLAR_SYSTEM_BARYCENTER) for body in Body if not body.is_quantity]
        pairs += [(body, Body.SOLAR_SYSTEM_BARYCENTER) for body in Body if body.is_quantity]
        pairs.append((Body.MOON, Body.EARTH))

        failures = 0
        for target, center in pairs:
            name = target.label if target.is_quantity else f"{target.label} / {center.label}"
            try:
                position, _ = eph.calculate_pv(epoch, target, center)
            except QuantityUnavailableError:
                click.echo(f"  {name:<40} not in this file")
                continue
            except EphemerisError as e:
                failures += 1
                click.echo(f"  {name:<40} ERROR {type(e).__name__}: {e}")
                continue
            click.echo(f"  {name:<40} {position.x:.10e} {position.y:.10e} {position.z:.10e}")

        if failures:
            raise click.ClickException(f"{failures} of {len(pairs)} checks failed")
        click.echo(f"All {len(pairs)} checks passed")
