"""
FMM Core Module

This module contains the data structures and operators of the 2D Laplace
expansion kernel.
"""

from .config import KernelConfig
from .body import Body
from .cell import Cell, Span
from .weight import weight, blend
from .expansion import Expansion, MultipoleExpansion, LocalExpansion
from .operators import Operator, P2M, M2M, M2L, L2L, L2P, P2P, P2PX, M2P, P2L
from .fmm import ReferenceScene, relative_l2_error

__all__ = [
    'KernelConfig',
    'Body',
    'Cell',
    'Span',
    'weight',
    'blend',
    'Expansion',
    'MultipoleExpansion',
    'LocalExpansion',
    'Operator',
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
]
