"""
Expansion Module

Closed-form evaluation of the complex-plane expansions stored on cells.

The operators build coefficients with incremental recurrences; the classes
here evaluate the same series term by term from explicit factorials, which
makes them an independent check of the operators and a convenient way to
probe an expansion at arbitrary points.
"""

from abc import ABC, abstractmethod
from typing import Tuple
import numpy as np
from scipy.special import factorial

from .cell import Cell


class Expansion(ABC):
    """
    Abstract base class for FMM expansions.

    An expansion is a truncated series of complex coefficients about a
    center. `evaluate` returns the potential (real part of the series) and
    `gradient` the force accumulator convention (Re f', -Im f').
    """

    def __init__(self, center: np.ndarray, coefficients: np.ndarray):
        """
        Initialize the expansion.

        Args:
            center: Expansion center (x, y)
            coefficients: Complex coefficients, one per order
        """
        self.center = np.asarray(center, dtype=np.float64)
        self.coefficients = np.asarray(coefficients, dtype=np.complex128)

    @classmethod
    @abstractmethod
    def from_cell(cls, cell: Cell) -> 'Expansion':
        """Build a view of the matching coefficient array of a cell."""
        pass

    @property
    def order(self) -> int:
        """Number of retained coefficients."""
        return len(self.coefficients)

    def _offsets(self, points: np.ndarray) -> np.ndarray:
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            points = points.reshape(1, -1)
        return (points[:, 0] - self.center[0]) + 1j * (points[:, 1] - self.center[1])

    @abstractmethod
    def complex_potential(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate the complex series f and its derivative f'.

        Args:
            points: Array of points (N x 2)

        Returns:
            Tuple (f, f') of complex arrays of length N
        """
        pass

    def evaluate(self, points: np.ndarray) -> np.ndarray:
        """Potential Re f at the given points."""
        f, _ = self.complex_potential(points)
        return f.real

    def gradient(self, points: np.ndarray) -> np.ndarray:
        """Force accumulator (Re f', -Im f') at the given points, shape (N, 2)."""
        _, df = self.complex_potential(points)
        return np.column_stack([df.real, -df.imag])


class MultipoleExpansion(Expansion):
    """
    Multipole expansion f(w) = -M[0] log w + sum_{k>=1} M[k] (k-1)! / w^k.

    Valid OUTSIDE the cell that created it.
    """

    @classmethod
    def from_cell(cls, cell: Cell) -> 'MultipoleExpansion':
        return cls(cell.center, cell.multipole)

    def complex_potential(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        w = self._offsets(points)
        M = self.coefficients

        f = -M[0] * np.log(w)
        df = -M[0] / w
        for k in range(1, self.order):
            f += M[k] * factorial(k - 1) / w ** k
            df -= M[k] * factorial(k) / w ** (k + 1)
        return f, df


class LocalExpansion(Expansion):
    """
    Local expansion f(z) = sum_{n>=0} L[n] z^n / n!.

    Valid INSIDE the cell it represents.
    """

    @classmethod
    def from_cell(cls, cell: Cell) -> 'LocalExpansion':
        return cls(cell.center, cell.local)

    def complex_potential(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        z = self._offsets(points)
        L = self.coefficients

        f = np.zeros_like(z)
        df = np.zeros_like(z)
        for n in range(self.order):
            f += L[n] * z ** n / factorial(n)
            if n + 1 < self.order:
                df += L[n + 1] * z ** n / factorial(n)
        return f, df
