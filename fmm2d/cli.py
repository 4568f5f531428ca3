import logging

import click
import numpy as np

from fmm2d.core import KernelConfig, ReferenceScene


@click.command()
@click.argument("order", type=click.IntRange(min=1))
@click.option(
    "--buffer",
    type=click.FloatRange(min=0, min_open=True),
    default=1.0,
    show_default=True,
    help="Width of the smoothing buffer around cell edges.",
)
@click.option(
    "--root-radius",
    type=click.FloatRange(min=0, min_open=True),
    default=10.0,
    show_default=True,
    help="Half-width of the domain box centered at the origin.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every kernel phase.")
def main(order: int, buffer: float, root_radius: float, verbose: bool) -> None:
    """Compare expansion and direct evaluation of the reference scene at ORDER."""
    formatter = logging.Formatter("%(levelname)s (%(name)s): %(message)s")
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger = logging.getLogger("fmm2d")
    if not logger.handlers:
        logger.addHandler(console)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    config = KernelConfig(
        order=order, buffer=buffer, root_center=np.zeros(2), root_radius=root_radius
    )
    try:
        scene = ReferenceScene(config)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=["--buffer", "--root-radius"]) from exc
    errors = scene.get_error_estimate()
    click.echo("%-20s : %8.5e" % ("Rel. L2 Error (p)", errors["potential_error"]))
    click.echo("%-20s : %8.5e" % ("Rel. L2 Error (F)", errors["force_error"]))
