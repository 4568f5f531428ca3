"""
Tests for the Direct Kernels

P2PX sums phi = -q log r over all source/target pairs; P2P does the same
with smoothing weights applied per source term and once per target.
"""

import pytest
import numpy as np

from fmm2d.core import Body, Cell, KernelConfig, P2P, P2PX
from fmm2d.kernels import LaplaceKernel, create_kernel


@pytest.fixture
def config():
    return KernelConfig(order=4, buffer=1.0, root_center=np.array([5.0, 0.0]), root_radius=10.0)


def make_cell(center, radius, positions, charges=None):
    """Build a cell owning freshly created bodies."""
    if charges is None:
        charges = np.ones(len(positions))
    bodies = [Body(position=pos, charge=q, index=i)
              for i, (pos, q) in enumerate(zip(positions, charges))]
    cell = Cell(center=center, radius=radius)
    cell.set_bodies(bodies)
    return cell


class TestP2PX:
    """Test the unweighted direct kernel."""

    def test_single_source_matches_analytic(self, config):
        """Potential -q log r and force of magnitude q/r along the separation."""
        target = make_cell([0.0, 0.0], 1.0, [[0.0, 0.0]])
        source = make_cell([3.0, 4.0], 1.0, [[3.0, 4.0]], [2.0])

        P2PX(config).apply(target, source)

        body = target.bodies[0]
        assert body.potential == pytest.approx(-2.0 * np.log(5.0))
        np.testing.assert_allclose(body.force, [0.24, 0.32], rtol=1e-14)
        assert np.linalg.norm(body.force) == pytest.approx(2.0 / 5.0)

    def test_self_interaction_is_zero(self, config):
        """Coincident bodies contribute exactly nothing."""
        cell = make_cell([0.0, 0.0], 1.0, [[0.1, 0.2], [0.1, 0.2]], [1.0, -3.0])

        P2PX(config).apply(cell, cell)

        for body in cell.bodies:
            assert body.potential == 0.0
            np.testing.assert_array_equal(body.force, [0.0, 0.0])

    def test_accumulates(self, config):
        target = make_cell([0.0, 0.0], 1.0, [[0.0, 0.0]])
        source = make_cell([2.0, 0.0], 1.0, [[2.0, 0.0]])
        p2px = P2PX(config)

        p2px.apply(target, source)
        first = target.bodies[0].potential
        p2px.apply(target, source)
        assert target.bodies[0].potential == pytest.approx(2 * first)

    def test_matches_vectorized_kernel(self, config):
        rng = np.random.default_rng(42)
        targets = rng.random((20, 2))
        sources = rng.random((15, 2)) + [3.0, 0.0]
        charges = rng.standard_normal(15)

        target = make_cell([0.5, 0.5], 0.5, targets)
        source = make_cell([3.5, 0.5], 0.5, sources, charges)
        P2PX(config).apply(target, source)

        potential, gradient = LaplaceKernel().direct(targets, sources, charges)
        np.testing.assert_allclose([b.potential for b in target.bodies], potential, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose([b.force for b in target.bodies], gradient, rtol=1e-12, atol=1e-12)


class TestP2P:
    """Test the weighted direct kernel."""

    def test_equals_unweighted_away_from_edges(self, config):
        """All bodies at least D inside their cells: weights are exactly 1."""
        ti = [[0.3, -0.2], [-0.5, 0.4]]
        sj = [[10.2, 0.1], [9.6, -0.3]]
        q = [1.0, -0.7]

        weighted = make_cell([0.0, 0.0], 2.0, ti)
        unweighted = make_cell([0.0, 0.0], 2.0, ti)
        source = make_cell([10.0, 0.0], 2.0, sj, q)

        P2P(config).apply(weighted, source)
        P2PX(config).apply(unweighted, source)

        for a, b in zip(weighted.bodies, unweighted.bodies):
            assert a.potential == pytest.approx(b.potential, rel=1e-15)
            np.testing.assert_allclose(a.force, b.force, rtol=1e-15)

    def test_weights_scale_contribution(self, config):
        """Target and source half a buffer from their edges: w = 0.84375 each."""
        weighted = make_cell([0.0, 0.0], 2.0, [[1.5, 0.0]])
        unweighted = make_cell([0.0, 0.0], 2.0, [[1.5, 0.0]])
        source = make_cell([10.0, 0.0], 2.0, [[11.5, 0.0]], [1.5])

        P2P(config).apply(weighted, source)
        P2PX(config).apply(unweighted, source)

        expected = 0.84375 ** 2
        a, b = weighted.bodies[0], unweighted.bodies[0]
        assert a.potential == pytest.approx(expected * b.potential, rel=1e-14)
        np.testing.assert_allclose(a.force, expected * b.force, rtol=1e-14)

    def test_coincident_bodies_are_finite(self, config):
        cell = make_cell([0.0, 0.0], 2.0, [[1.5, 0.5], [1.5, 0.5]])
        P2P(config).apply(cell, cell)
        for body in cell.bodies:
            assert body.potential == 0.0
            assert np.all(np.isfinite(body.force))


class TestLaplaceKernel:
    """Test the analytic reference kernel."""

    def test_value(self):
        kernel = LaplaceKernel()
        assert kernel([0.0, 0.0], [3.0, 4.0]) == pytest.approx(-np.log(5.0))
        assert kernel([1.0, 1.0], [1.0, 1.0]) == 0.0

    def test_gradient(self):
        kernel = LaplaceKernel()
        np.testing.assert_allclose(kernel.gradient([0.0, 0.0], [3.0, 4.0]), [0.12, 0.16])
        np.testing.assert_array_equal(kernel.gradient([1.0, 1.0], [1.0, 1.0]), [0.0, 0.0])

    def test_direct_skips_coincident(self):
        points = np.array([[0.0, 0.0], [1.0, 0.0]])
        potential, gradient = LaplaceKernel().direct(points, points, np.ones(2))
        np.testing.assert_allclose(potential, [0.0, 0.0], atol=1e-15)
        np.testing.assert_allclose(gradient, [[1.0, 0.0], [-1.0, 0.0]])

    def test_factory(self):
        assert isinstance(create_kernel('Laplace'), LaplaceKernel)
        with pytest.raises(ValueError):
            create_kernel('helmholtz')
