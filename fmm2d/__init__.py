"""
2D Laplace Fast Multipole Method Kernels

Complex-plane multipole and local expansions for the 2D free-space Laplace
potential phi = -q log r, with a cubic smoothing weight that blends
contributions across cell edges, and the direct pairwise kernel used as
ground truth.

This package includes:
- Expansion operators (P2M, M2M, M2L, L2L, L2P) and M2P / P2L shortcuts
- Weighted (P2P) and unweighted (P2PX) direct kernels
- Closed-form expansion evaluators for diagnostics
- A reference scene that measures the expansion error against direct summation

Tree construction and interaction-list building are left to the caller:
cells and bodies are supplied with their geometry already set.
"""

from fmm2d.core import (
    KernelConfig,
    Body,
    Cell,
    Span,
    weight,
    MultipoleExpansion,
    LocalExpansion,
    P2M,
    M2M,
    M2L,
    L2L,
    L2P,
    P2P,
    P2PX,
    M2P,
    P2L,
    ReferenceScene,
    relative_l2_error,
)
from fmm2d.kernels import (
    Kernel,
    LaplaceKernel,
    create_kernel,
)

__version__ = '0.1.0'

__all__ = [
    # Core classes
    'KernelConfig',
    'Body',
    'Cell',
    'Span',
    'weight',
    'MultipoleExpansion',
    'LocalExpansion',
    'P2M',
    'M2M',
    'M2L',
    'L2L',
    'L2P',
    'P2P',
    'P2PX',
    'M2P',
    'P2L',
    'ReferenceScene',
    'relative_l2_error',
    # Kernels
    'Kernel',
    'LaplaceKernel',
    'create_kernel',
]
