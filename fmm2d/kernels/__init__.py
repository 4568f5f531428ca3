"""
FMM Kernels Module

Analytic reference kernels, evaluated with numpy independently of the
cell-based operators.
"""

import numpy as np
from typing import Tuple
from abc import ABC, abstractmethod


class Kernel(ABC):
    """Abstract base class for kernel functions."""

    @abstractmethod
    def __call__(self, x: np.ndarray, y: np.ndarray) -> float:
        """
        Evaluate kernel G(x, y).

        Args:
            x: Target point coordinates
            y: Source point coordinates

        Returns:
            Kernel value
        """
        pass

    @abstractmethod
    def gradient(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """
        Compute gradient of kernel with respect to the target point.

        Args:
            x: Target point coordinates
            y: Source point coordinates

        Returns:
            Gradient vector
        """
        pass


class LaplaceKernel(Kernel):
    """
    Free-space 2D Laplace kernel without the 1/(2*pi) normalization.

    G(x, y) = -log(|x - y|)

    Coincident points are defined to interact with zero potential and
    gradient.
    """

    def __call__(self, x: np.ndarray, y: np.ndarray) -> float:
        """Evaluate Laplace kernel."""
        d = np.asarray(x, dtype=np.float64) - np.asarray(y, dtype=np.float64)
        r2 = d @ d
        if r2 == 0:
            return 0.0
        return -0.5 * np.log(r2)

    def gradient(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Compute gradient of Laplace kernel, -(x - y) / |x - y|^2."""
        d = np.asarray(x, dtype=np.float64) - np.asarray(y, dtype=np.float64)
        r2 = d @ d
        if r2 == 0:
            return np.zeros_like(d)
        return -d / r2

    def direct(self, targets: np.ndarray, sources: np.ndarray,
               charges: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Vectorized direct summation over all target/source pairs.

        Args:
            targets: Target coordinates (N x 2)
            sources: Source coordinates (M x 2)
            charges: Source charges (M,)

        Returns:
            Tuple (potential (N,), gradient (N x 2)); the gradient uses the
            same sign as the operators' force accumulator
        """
        targets = np.atleast_2d(np.asarray(targets, dtype=np.float64))
        sources = np.atleast_2d(np.asarray(sources, dtype=np.float64))
        charges = np.asarray(charges, dtype=np.float64)

        d = targets[:, None, :] - sources[None, :, :]
        r2 = np.einsum('ijk,ijk->ij', d, d)
        coincident = r2 == 0
        safe_r2 = np.where(coincident, 1.0, r2)

        log_term = np.where(coincident, 0.0, -0.5 * np.log(safe_r2))
        potential = log_term @ charges

        scale = np.where(coincident, 0.0, charges[None, :] / safe_r2)
        gradient = -np.einsum('ij,ijk->ik', scale, d)
        return potential, gradient


def create_kernel(name: str, **kwargs) -> Kernel:
    """
    Factory function to create kernels by name.

    Args:
        name: Kernel name ('laplace')
        **kwargs: Additional kernel parameters

    Returns:
        Kernel instance
    """
    kernels = {
        'laplace': LaplaceKernel,
    }

    name_lower = name.lower()
    if name_lower not in kernels:
        raise ValueError(f"Unknown kernel type: {name}")

    return kernels[name_lower](**kwargs)
