"""
Configuration Module

Parameters shared by every kernel call of one evaluation sequence.
"""

from dataclasses import dataclass, field, replace
import numpy as np


@dataclass(frozen=True)
class KernelConfig:
    """
    Configuration for the expansion and direct kernels.

    Attributes:
        order: Expansion order P (number of retained complex coefficients)
        buffer: Smoothing buffer width D
        root_center: Center X0 of the global domain box
        root_radius: Half-width R0 of the global domain box
    """
    order: int = 4
    buffer: float = 1.0
    root_center: np.ndarray = field(default_factory=lambda: np.zeros(2), compare=False)
    root_radius: float = 1.0

    def __post_init__(self):
        """Validate configuration."""
        if int(self.order) != self.order or self.order < 1:
            raise ValueError("Expansion order must be a positive integer")
        if self.buffer <= 0:
            raise ValueError("Buffer width must be positive")
        if self.root_radius <= 0:
            raise ValueError("Root radius must be positive")

        center = np.array(self.root_center, dtype=np.float64)
        if center.shape != (2,):
            raise ValueError("Root center must have exactly 2 coordinates")
        center.setflags(write=False)

        # Frozen dataclass: bypass __setattr__ for normalized fields
        object.__setattr__(self, 'order', int(self.order))
        object.__setattr__(self, 'buffer', float(self.buffer))
        object.__setattr__(self, 'root_radius', float(self.root_radius))
        object.__setattr__(self, 'root_center', center)

    def __eq__(self, other):
        if not isinstance(other, KernelConfig):
            return NotImplemented
        return (self.order == other.order and self.buffer == other.buffer
                and self.root_radius == other.root_radius
                and np.array_equal(self.root_center, other.root_center))

    def __hash__(self):
        return hash((self.order, self.buffer, self.root_radius,
                     tuple(self.root_center.tolist())))

    def with_order(self, order: int) -> 'KernelConfig':
        """Return a copy of this configuration with a different expansion order."""
        return replace(self, order=order)
