"""
Verification Module

Wires the operators together on a small fixed scene of cells and bodies,
evaluates the scene both through the expansions and by direct summation,
and reports the relative L2 error between the two.
"""

import logging
from typing import Dict, List, Optional, Tuple
import numpy as np

from .body import Body
from .cell import Cell
from .config import KernelConfig
from .operators import P2M, M2L, L2P, P2P, P2PX


def relative_l2_error(bodies: List[Body], reference: List[Body]) -> Tuple[float, float]:
    """
    Relative L2 error of potential and force against reference bodies.

    Args:
        bodies: Bodies evaluated with the expansions
        reference: Same bodies, in the same order, evaluated directly

    Returns:
        Tuple (potential error, force error) where
        error = sqrt(sum |a - b|^2 / sum |b|^2)
    """
    if len(bodies) != len(reference):
        raise ValueError("Body lists must have the same length")

    p = np.array([b.potential for b in bodies])
    p_ref = np.array([b.potential for b in reference])
    F = np.array([b.force for b in bodies]).reshape(-1, 2)
    F_ref = np.array([b.force for b in reference]).reshape(-1, 2)

    p_dif = np.sum((p - p_ref) ** 2)
    p_nrm = np.sum(p_ref ** 2)
    F_dif = np.sum((F - F_ref) ** 2)
    F_nrm = np.sum(F_ref ** 2)
    return float(np.sqrt(p_dif / p_nrm)), float(np.sqrt(F_dif / F_nrm))


class ReferenceScene:
    """
    Two-cell-per-side scene for checking the expansion operators.

    One unit charge at (6.5, 0) is expanded in two multipole cells of
    radius 2 centered at (8, 0) and (4, 0). One target at (-6.5, 0) lies in
    two local cells of radius 2 centered at (-8, 0) and (-4, 0). The three
    far pairs go through M2L, the near pair through weighted P2P, and the
    smoothing weights of each side sum to one, so the result converges to
    the unweighted direct interaction as the order grows.
    """

    SOURCE_POSITION = (6.5, 0.0)
    TARGET_POSITION = (-6.5, 0.0)
    SOURCE_CENTERS = ((8.0, 0.0), (4.0, 0.0))
    TARGET_CENTERS = ((-8.0, 0.0), (-4.0, 0.0))
    CELL_RADIUS = 2.0

    def __init__(self, config: Optional[KernelConfig] = None):
        """
        Initialize the scene.

        Args:
            config: Kernel configuration; defaults to a domain of radius 10
                around the origin with a unit smoothing buffer
        """
        if config is None:
            config = KernelConfig(order=4, buffer=1.0,
                                  root_center=np.zeros(2), root_radius=10.0)
        self.config = config
        self.log = logging.getLogger(self.__class__.__module__)

        self.sources = [Body(position=self.SOURCE_POSITION, charge=1.0, index=0)]
        self.targets = [Body(position=self.TARGET_POSITION, charge=1.0, index=0)]

        self.source_cells = []
        for center in self.SOURCE_CENTERS:
            cell = Cell(center=center, radius=self.CELL_RADIUS)
            cell.set_bodies(self.sources)
            self.source_cells.append(cell)

        self.target_cells = []
        for center in self.TARGET_CENTERS:
            cell = Cell(center=center, radius=self.CELL_RADIUS)
            cell.set_bodies(self.targets)
            self.target_cells.append(cell)

        self._check_geometry()

        CI, CI2 = self.target_cells
        CJ, CJ2 = self.source_cells
        self.far_pairs = [(CI, CJ), (CI, CJ2), (CI2, CJ)]
        self.near_pairs = [(CI2, CJ2)]
        for Ci, Cj in self.far_pairs:
            Ci.list_m2l.append(Cj)
        for Ci, Cj in self.near_pairs:
            Ci.list_p2p.append(Cj)

        self.p2m = P2M(config)
        self.m2l = M2L(config)
        self.l2p = L2P(config)
        self.p2p = P2P(config)
        self.p2px = P2PX(config)

        self.reference: List[Body] = []

    def _check_geometry(self):
        """
        Reject configurations under which the weights of a side's cells
        no longer sum to one.

        Raises:
            ValueError: If the buffer is wider than a cell or narrower than
                a body's overhang, or if the root box does not enclose
                every cell
        """
        D = self.config.buffer
        X0 = self.config.root_center
        R0 = self.config.root_radius

        for cell in self.source_cells + self.target_cells:
            if D > cell.radius:
                raise ValueError(
                    f"Buffer width {D} is wider than the cell radius {cell.radius}"
                )
            lo, hi = cell.bounds
            if np.any(lo < X0 - R0) or np.any(hi > X0 + R0):
                raise ValueError(
                    f"Root box of radius {R0} around {X0} does not enclose "
                    f"the cell at {cell.center}"
                )
            for body in cell.bodies:
                if not cell.contains(body.position):
                    overhang = np.max(np.abs(body.position - cell.center)) - cell.radius
                    if overhang > D:
                        raise ValueError(
                            f"Buffer width {D} is narrower than a body's "
                            f"overhang of {overhang} outside its cell"
                        )

    def compute(self) -> np.ndarray:
        """
        Evaluate the targets through the expansions.

        Returns:
            Array of target potentials
        """
        P = self.config.order
        for body in self.targets:
            body.reset()

        # Upward pass
        for cell in self.source_cells:
            cell.allocate_multipole(P)
            self.p2m.apply(cell)
        self.log.debug("P2M done for %d source cells", len(self.source_cells))

        # Downward pass
        for cell in self.target_cells:
            cell.allocate_local(P)
        for Ci in self.target_cells:
            for Cj in Ci.list_m2l:
                self.m2l.apply(Ci, Cj)
        self.log.debug("M2L done for %d cell pairs", len(self.far_pairs))

        for cell in self.target_cells:
            self.l2p.apply(cell)

        # Near field
        for Ci in self.target_cells:
            for Cj in Ci.list_p2p:
                self.p2p.apply(Ci, Cj)

        return np.array([b.potential for b in self.targets])

    def direct_compute(self) -> np.ndarray:
        """
        Evaluate fresh copies of the targets by unweighted direct summation.

        Returns:
            Array of reference potentials
        """
        self.reference = [body.copy() for body in self.targets]
        target = Cell(center=self.TARGET_CENTERS[0], radius=self.CELL_RADIUS)
        target.set_bodies(self.reference)
        self.p2px.apply(target, self.source_cells[0])
        return np.array([b.potential for b in self.reference])

    def get_error_estimate(self) -> Dict[str, float]:
        """
        Run both evaluations and compare them.

        Returns:
            Dictionary with 'potential_error' and 'force_error'
        """
        self.compute()
        self.direct_compute()
        p_err, F_err = relative_l2_error(self.targets, self.reference)
        self.log.info("order %d: potential error %.5e, force error %.5e",
                      self.config.order, p_err, F_err)
        return {'potential_error': p_err, 'force_error': F_err}
