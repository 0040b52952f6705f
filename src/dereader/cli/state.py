"""CLI command printing relative states."""

from typing import Tuple

import click

from ..ephemeris import Body
from ..space_time.julian import julian_to_datetime
from .common import open_ephemeris_file, parse_epoch


def _format_epoch(epoch: float) -> str:
    """JD with its calendar date, or the JD alone outside the datetime range."""
    try:
        return f"JD {epoch} ({julian_to_datetime(epoch):%Y-%m-%d %H:%M:%S} TDB)"
    except (ValueError, OverflowError):
        return f"JD {epoch}"


def _parse_body(text: str, param: str) -> Body:
    try:
        return Body.parse(text)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=param)


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("target")
@click.argument("center")
@click.option(
    "--date",
    "-d",
    multiple=True,
    default=(),
    help="Date(s) to compute the state for. Can be specified multiple times. Use ISO format or Julian date. Defaults to now.",
)
@click.option(
    "--no-velocity",
    is_flag=True,
    help="Only print positions",
)
def state(
    path: str,
    target: str,
    center: str,
    date: Tuple[str, ...],
    no_velocity: bool = False,
) -> None:
    """Print the state of TARGET relative to CENTER.

    Bodies are given by name or JPL code (mars, 4, ssb, emb, tt-tdb).
    Positions are in AU and velocities in AU/day; nutations and
    librations are in radians and TT-TDB in days.

    Examples:

       dereader state de405.bin mars sun --date 2451545.0

       dereader state de405.bin moon earth --date 2000-01-01T12:00:00 --no-velocity
    """
    target_body = _parse_body(target, "TARGET")
    center_body = _parse_body(center, "CENTER")
    epochs = [parse_epoch(d) for d in (date or ("now",))]

    with open_ephemeris_file(path) as eph:
        for epoch in epochs:
            position, velocity = eph.calculate_pv(
                epoch, target_body, center_body, velocity=not no_velocity
            )
            if target_body.is_quantity:
                click.echo(
                    f"{_format_epoch(epoch)}: {target_body.label} "
                    f"{position.x:.15e} {position.y:.15e} {position.z:.15e}"
                )
                if not no_velocity:
                    click.echo(
                        f"  rates {velocity.dx:.15e} {velocity.dy:.15e} {velocity.dz:.15e}"
                    )
                continue
            click.echo(
                f"{_format_epoch(epoch)}: {target_body.label} from {center_body.label} "
                f"x={position.x:.15f} y={position.y:.15f} z={position.z:.15f} "
                f"r={position.distance():.15f} AU"
            )
            if not no_velocity:
                click.echo(
                    f"  vx={velocity.dx:.15e} vy={velocity.dy:.15e} vz={velocity.dz:.15e} AU/day"
                )
