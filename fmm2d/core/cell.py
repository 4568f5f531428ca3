"""
Cell Module

Represents an expansion cell: a square region referencing a contiguous span
of bodies and/or child cells, together with its multipole and local
expansion coefficients.
"""

from typing import Generic, Iterator, List, Optional, Sequence, TypeVar
import numpy as np
from dataclasses import dataclass, field

from .body import Body

T = TypeVar('T')


class Span(Generic[T]):
    """
    Contiguous range [start, start + count) of a shared arena.

    The arena is referenced, never copied, so cells built over one global
    list of bodies (or cells) share their elements with it.
    """

    __slots__ = ('arena', 'start', 'count')

    def __init__(self, arena: Optional[Sequence[T]] = None, start: int = 0,
                 count: Optional[int] = None):
        if arena is None:
            arena = []
        if count is None:
            count = len(arena) - start
        if start < 0 or count < 0 or start + count > len(arena):
            raise ValueError(
                f"Span [{start}, {start + count}) out of range for arena of length {len(arena)}"
            )
        self.arena = arena
        self.start = start
        self.count = count

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[T]:
        for i in range(self.start, self.start + self.count):
            yield self.arena[i]

    def __getitem__(self, i: int) -> T:
        if i < 0:
            i += self.count
        if not 0 <= i < self.count:
            raise IndexError("Span index out of range")
        return self.arena[self.start + i]

    def __repr__(self) -> str:
        return f"Span(start={self.start}, count={self.count})"


@dataclass(eq=False)
class Cell:
    """
    Represents a cell of the (externally built) spatial decomposition.

    Attributes:
        center: Center coordinates of the cell
        radius: Half-width of the cell, also the reference scale of the
            smoothing buffer
        body_span: Bodies owned by this cell (a range of a shared body list)
        child_span: Child cells (a range of a shared cell list)
        multipole: Complex multipole coefficients M[0..P-1]
        local: Complex local coefficients L[0..P-1]
        list_m2l: Cells interacting with this one through M2L
        list_p2p: Cells interacting with this one through P2P
    """
    center: np.ndarray
    radius: float
    body_span: Span = field(default_factory=Span)
    child_span: Span = field(default_factory=Span)
    multipole: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.complex128))
    local: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.complex128))
    # Filled by the interaction-list builder, if any
    list_m2l: List['Cell'] = field(default_factory=list)
    list_p2p: List['Cell'] = field(default_factory=list)

    def __post_init__(self):
        """Validate and initialize cell properties."""
        self.center = np.asarray(self.center, dtype=np.float64)
        if self.center.shape != (2,):
            raise ValueError("Cell center must have exactly 2 coordinates")
        if self.radius <= 0:
            raise ValueError("Cell radius must be positive")

    def set_bodies(self, arena: Sequence[Body], start: int = 0,
                   count: Optional[int] = None):
        """Reference bodies arena[start:start + count] without copying them."""
        self.body_span = Span(arena, start, count)

    def set_children(self, arena: Sequence['Cell'], start: int = 0,
                     count: Optional[int] = None):
        """Reference cells arena[start:start + count] as children."""
        self.child_span = Span(arena, start, count)

    @property
    def bodies(self) -> Span:
        return self.body_span

    @property
    def children(self) -> Span:
        return self.child_span

    @property
    def nbody(self) -> int:
        return len(self.body_span)

    @property
    def nchild(self) -> int:
        return len(self.child_span)

    def allocate_multipole(self, order: int):
        """Resize the multipole coefficients to `order` zeros."""
        self.multipole = np.zeros(order, dtype=np.complex128)

    def allocate_local(self, order: int):
        """Resize the local coefficients to `order` zeros."""
        self.local = np.zeros(order, dtype=np.complex128)

    @property
    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """Return the minimum and maximum coordinates of the cell."""
        return self.center - self.radius, self.center + self.radius

    @property
    def is_leaf(self) -> bool:
        """Check if this is a leaf cell."""
        return self.nchild == 0

    def contains(self, point: np.ndarray) -> bool:
        """Check if a point is inside this cell."""
        min_bound, max_bound = self.bounds
        return bool(np.all((point >= min_bound) & (point <= max_bound)))

    def __repr__(self) -> str:
        return (f"Cell(center={self.center}, radius={self.radius:.3f}, "
                f"nbody={self.nbody}, nchild={self.nchild})")
