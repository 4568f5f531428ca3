"""
Smoothing Weight Module

Separable cubic taper used to fade a body's contribution near the edges of
its cell, so that neighbouring cells form a partition of unity instead of a
hard spatial cut.
"""

from .body import Body
from .cell import Cell
from .config import KernelConfig


def blend(t: float) -> float:
    """
    One-dimensional taper (2 + 3t - t^3) / 4.

    blend(-1) = 0, blend(0) = 1/2, blend(1) = 1, and
    blend(t) + blend(-t) = 1.
    """
    return (2 + 3 * t - t * t * t) / 4


def weight(body: Body, cell: Cell, config: KernelConfig) -> float:
    """
    Smoothing weight of a body with respect to a cell.

    Along each axis the clear distance from the body to the nearest cell
    edge is clipped to the buffer width D and normalized by D. Bodies lying
    within D of the outer domain boundary along an axis are never faded
    along that axis.

    Args:
        body: Body to weight
        cell: Cell the body contributes to (or receives from)
        config: Kernel configuration providing D, X0 and R0

    Returns:
        Product of the per-axis tapers, nominally in [0, 1]
    """
    D = config.buffer
    X0 = config.root_center
    R0 = config.root_radius

    x = min(cell.radius - abs(body.position[0] - cell.center[0]), D)
    y = min(cell.radius - abs(body.position[1] - cell.center[1]), D)
    if R0 - abs(body.position[0] - X0[0]) < D:
        x = D
    if R0 - abs(body.position[1] - X0[1]) < D:
        y = D
    assert x >= -D, "body lies more than one buffer width outside its cell"
    assert y >= -D, "body lies more than one buffer width outside its cell"
    x /= D
    y /= D
    w = blend(x)
    w *= blend(y)
    return w
