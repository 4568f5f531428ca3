"""
Body Module

Represents a single point charge with its accumulated potential and force.
"""

import numpy as np
from dataclasses import dataclass, field


@dataclass
class Body:
    """
    Represents a point charge in the 2D plane.

    The potential and force fields are accumulators: kernels only ever add
    to them, so they must be reset before a pass meant to produce fresh values.

    Attributes:
        position: Body coordinates (x, y)
        charge: Source strength of the body
        potential: Accumulated potential at this body
        force: Accumulated 2D force at this body
        index: Unique identifier for the body
    """
    position: np.ndarray
    charge: float
    potential: float = 0.0
    force: np.ndarray = field(default_factory=lambda: np.zeros(2))
    index: int = 0

    def __post_init__(self):
        """Validate body properties after initialization."""
        self.position = np.asarray(self.position, dtype=np.float64)
        self.force = np.array(self.force, dtype=np.float64)
        if self.position.shape != (2,):
            raise ValueError("Body position must have exactly 2 coordinates")

    def reset(self):
        """Reset potential and force to zero."""
        self.potential = 0.0
        self.force[:] = 0.0

    def copy(self) -> 'Body':
        """Return a body at the same place with fresh accumulators."""
        return Body(position=self.position.copy(), charge=self.charge, index=self.index)

    def __repr__(self) -> str:
        return f"Body(id={self.index}, pos={self.position}, q={self.charge:.3f})"
