"""
Operators Module

Implements the 2D Laplace FMM operators on complex-plane expansions:
P2M, M2M, M2L, L2L, L2P, and the direct P2P / P2PX kernels.
Also includes M2P and P2L operators for pairs that skip one level of
expansion.

Conventions (z = x + iy, offsets taken from the expansion center):
    multipole  f(w) = -M[0] log(w) + sum_{k>=1} M[k] (k-1)! / w^k
    local      f(z) = sum_{n>=0} L[n] z^n / n!
    potential  Re f,  force accumulator  (Re f', -Im f')

The force accumulator therefore holds the gradient of the potential
phi = -q log r, matching the sign used by P2P.

All operators accumulate into their targets. Coefficient arrays must be
allocated to exactly `order` entries before the first call; see
Cell.allocate_multipole and Cell.allocate_local.
"""

from abc import ABC, abstractmethod
import numpy as np

from .body import Body
from .cell import Cell
from .config import KernelConfig
from .weight import weight


class Operator(ABC):
    """
    Abstract base class for FMM operators.

    Operators hold only the (immutable) configuration. Every temporary,
    including the offset between centers, is local to `apply`, so one
    instance may be used from several threads as long as they write to
    disjoint cells and bodies.
    """

    def __init__(self, config: KernelConfig):
        """
        Initialize the operator.

        Args:
            config: Kernel configuration (expansion order, smoothing buffer,
                domain box)
        """
        self.config = config
        self.order = config.order

    @abstractmethod
    def apply(self, *args, **kwargs):
        """Apply the operator."""
        pass

    def _check_coefficients(self, coefficients: np.ndarray, name: str):
        assert len(coefficients) == self.order, (
            f"{name} coefficients have length {len(coefficients)}, expected {self.order}"
        )


class P2M(Operator):
    """
    Particles-to-Multipole operator.

    M[n] += q * w * z^n / n!  for every body of the cell, z = body - center,
    w = smoothing weight of the body in the cell.

    Complexity: O(Np) where N = bodies in the cell, p = order
    """

    def apply(self, cell: Cell):
        """
        Accumulate the multipole expansion of a leaf cell's bodies.

        Args:
            cell: Leaf cell with allocated multipole coefficients
        """
        P = self.order
        M = cell.multipole
        self._check_coefficients(M, "multipole")

        for body in cell.bodies:
            dX = body.position - cell.center
            w = weight(body, cell, self.config)
            Z = complex(dX[0], dX[1])
            powZ = complex(1.0, 0.0)
            M[0] += body.charge * w
            for n in range(1, P):
                powZ *= Z / n                               # z^n / n!
                M[n] += powZ * body.charge * w


class M2M(Operator):
    """
    Multipole-to-Multipole translation operator.

    Shifts each child's expansion to the parent center:
    M_parent[k] += sum_{n=0}^{k} M_child[k-n] * z^n / n!,  z = child - parent

    Complexity: O(p^2) per child
    """

    def apply(self, parent: Cell):
        """
        Accumulate the shifted multipole expansions of all children.

        Args:
            parent: Cell whose children already carry multipole expansions
        """
        P = self.order
        M = parent.multipole
        self._check_coefficients(M, "multipole")

        for child in parent.children:
            Mc = child.multipole
            self._check_coefficients(Mc, "child multipole")
            dX = child.center - parent.center
            for k in range(P):
                Z = complex(dX[0], dX[1])
                powZ = complex(1.0, 0.0)
                M[k] += Mc[k]
                for n in range(1, k + 1):
                    powZ *= Z / n                           # z^n / n!
                    M[k] += Mc[k - n] * powZ


class M2L(Operator):
    """
    Multipole-to-Local translation operator.

    Re-expands the source multipole series around the target center,
    z = target - source:
        L[0] += -M[0] log z + sum_{k>=1} M[k] (k-1)! / z^k
        L[1] += -M[0] / z  - sum_{k>=1} M[k] k! / z^(k+1)
        L[n] += (-1)^n sum_{k>=0} M[k] (n+k-1)! / z^(n+k)     for n >= 2

    The centers must not coincide; admissibility of the pair is the
    caller's decision.

    Complexity: O(p^2) per cell pair
    """

    def apply(self, target: Cell, source: Cell):
        """
        Accumulate the local expansion induced at `target` by `source`.

        Args:
            target: Cell receiving the local expansion
            source: Well-separated cell carrying a multipole expansion
        """
        P = self.order
        M = source.multipole
        L = target.local
        self._check_coefficients(M, "multipole")
        self._check_coefficients(L, "local")

        dX = target.center - source.center
        Z = complex(dX[0], dX[1])
        assert Z != 0, "M2L called on cells sharing a center"
        powZn = complex(1.0, 0.0)
        powZnk = complex(1.0, 0.0)
        invZ = powZn / Z

        L[0] += -M[0] * np.log(Z)
        if P == 1:
            return
        L[0] += M[1] * invZ
        powZn = invZ
        for k in range(2, P):
            powZn *= (k - 1) * invZ                         # (k-1)! / z^k
            L[0] += M[k] * powZn

        L[1] += -M[0] * invZ
        powZn = invZ
        for k in range(1, P):
            powZn *= k * invZ                               # k! / z^(k+1)
            L[1] += -M[k] * powZn

        Cnk = -1.0
        for n in range(2, P):
            Cnk *= -1
            powZnk *= invZ                                  # (n-2)! / z^(n-1)
            powZn = Cnk * powZnk
            for k in range(P):
                powZn *= (n + k - 1) * invZ                 # (n+k-1)! / z^(n+k)
                L[n] += M[k] * powZn
            powZnk *= n - 1


class L2L(Operator):
    """
    Local-to-Local translation operator.

    Taylor-shifts the parent's local expansion to each child center:
    L_child[l] += sum_{k=0}^{p-1-l} L_parent[l+k] * z^k / k!,  z = child - parent

    Complexity: O(p^2) per child
    """

    def apply(self, parent: Cell):
        """
        Accumulate the re-centered local expansion into all children.

        Args:
            parent: Cell carrying a local expansion
        """
        P = self.order
        L = parent.local
        self._check_coefficients(L, "local")

        for child in parent.children:
            Lc = child.local
            self._check_coefficients(Lc, "child local")
            dX = child.center - parent.center
            Z = complex(dX[0], dX[1])
            for l in range(P):
                powZ = complex(1.0, 0.0)
                Lc[l] += L[l]
                for k in range(1, P - l):
                    powZ *= Z / k                           # z^k / k!
                    Lc[l] += L[l + k] * powZ


class L2P(Operator):
    """
    Local-to-Particles operator.

    Evaluates the weighted local series and its derivative at every body
    of the cell and adds them to the body's potential and force.

    Complexity: O(Np) where N = target bodies
    """

    def apply(self, cell: Cell):
        """
        Accumulate potential and force from the cell's local expansion.

        Args:
            cell: Cell carrying a local expansion and target bodies
        """
        P = self.order
        L = cell.local
        self._check_coefficients(L, "local")

        for body in cell.bodies:
            w = weight(body, cell, self.config)
            dX = body.position - cell.center
            Z = complex(dX[0], dX[1])
            powZ = complex(1.0, 0.0)
            body.potential += L[0].real * w
            if P > 1:
                body.force[0] += L[1].real * w
                body.force[1] -= L[1].imag * w
            for n in range(1, P):
                powZ *= Z / n                               # z^n / n!
                body.potential += (L[n] * powZ).real * w
                if n < P - 1:
                    body.force[0] += (L[n + 1] * powZ).real * w
                    body.force[1] -= (L[n + 1] * powZ).imag * w


class P2PX(Operator):
    """
    Unweighted Particles-to-Particles operator.

    Exact pairwise evaluation of phi = -q log r between all target and
    source bodies. Coincident bodies contribute nothing.

    Complexity: O(N*M) for N targets and M sources
    """

    def _weight(self, body: Body, cell: Cell) -> float:
        return 1.0

    def apply(self, target: Cell, source: Cell):
        """
        Accumulate direct interactions of `source` bodies on `target` bodies.

        Args:
            target: Cell whose bodies receive potential and force
            source: Cell whose bodies act as charges
        """
        for bi in target.bodies:
            p = 0.0
            F = np.zeros(2)
            wi = self._weight(bi, target)
            for bj in source.bodies:
                wj = self._weight(bj, source)
                dX = bi.position - bj.position
                R2 = dX[0] * dX[0] + dX[1] * dX[1]
                if R2 != 0:
                    invR = 1 / np.sqrt(R2)
                    logR = bj.charge * np.log(invR)
                    p += logR * wj
                    F += dX * bj.charge / R2 * wj
            bi.potential += p * wi
            bi.force -= F * wi


class P2P(P2PX):
    """
    Weighted Particles-to-Particles operator.

    Same kernel as P2PX, with each source term scaled by the source's
    smoothing weight in its cell and the summed result scaled by the
    target's weight in its cell.
    """

    def _weight(self, body: Body, cell: Cell) -> float:
        return weight(body, cell, self.config)


class M2P(Operator):
    """
    Multipole-to-Particles operator.

    Evaluates a source multipole series directly at the target cell's
    bodies, weighted like L2P. Useful when a target is far from the source
    but its cell carries no local expansion.

    Complexity: O(Np) where N = target bodies
    """

    def apply(self, target: Cell, source: Cell):
        """
        Accumulate potential and force from `source`'s multipole expansion.

        Args:
            target: Cell whose bodies receive potential and force
            source: Well-separated cell carrying a multipole expansion
        """
        P = self.order
        M = source.multipole
        self._check_coefficients(M, "multipole")

        for body in target.bodies:
            w = weight(body, target, self.config)
            dX = body.position - source.center
            Z = complex(dX[0], dX[1])
            assert Z != 0, "M2P evaluated at the multipole center"
            invZ = 1 / Z

            phi = -M[0] * np.log(Z)
            dphi = -M[0] * invZ
            powZn = invZ
            for k in range(1, P):
                phi += M[k] * powZn                         # (k-1)! / z^k
                powZn *= k * invZ                           # k! / z^(k+1)
                dphi += -M[k] * powZn

            body.potential += phi.real * w
            body.force[0] += dphi.real * w
            body.force[1] -= dphi.imag * w


class P2L(Operator):
    """
    Particles-to-Local operator.

    Builds the target's local expansion directly from the source bodies,
    each treated as a weighted monopole at its own position:
        L[0] += -q w log z,  L[n] += q w (-1)^n (n-1)! / z^n,  z = center - body

    Complexity: O(Np) where N = source bodies
    """

    def apply(self, target: Cell, source: Cell):
        """
        Accumulate the local expansion induced at `target` by `source`'s bodies.

        Args:
            target: Cell receiving the local expansion
            source: Cell whose bodies act as charges
        """
        P = self.order
        L = target.local
        self._check_coefficients(L, "local")

        for body in source.bodies:
            qw = body.charge * weight(body, source, self.config)
            dX = target.center - body.position
            Z = complex(dX[0], dX[1])
            assert Z != 0, "P2L source body sits on the local expansion center"
            invZ = 1 / Z

            L[0] += -qw * np.log(Z)
            if P == 1:
                continue
            powZn = -invZ
            L[1] += qw * powZn
            for n in range(2, P):
                powZn *= -(n - 1) * invZ                    # (-1)^n (n-1)! / z^n
                L[n] += qw * powZn
