"""
Tests for the Smoothing Weight

The weight is a separable cubic taper (2 + 3t - t^3)/4 of the clear
distance between a body and the edges of its cell, normalized by the
buffer width D. Bodies near the outer domain boundary are never faded.
"""

import pytest
import numpy as np

from fmm2d.core import Body, Cell, KernelConfig, weight, blend


@pytest.fixture
def config():
    """Unit buffer in a domain of radius 10 around the origin."""
    return KernelConfig(order=4, buffer=1.0, root_center=np.zeros(2), root_radius=10.0)


def body_at(x, y):
    return Body(position=np.array([x, y]), charge=1.0)


class TestBlend:
    """Test the one-dimensional taper."""

    def test_endpoints(self):
        assert blend(-1.0) == 0.0
        assert blend(0.0) == 0.5
        assert blend(1.0) == 1.0

    def test_complementary(self):
        """blend(t) + blend(-t) = 1 for every t."""
        for t in np.linspace(-1.0, 1.0, 21):
            assert blend(t) + blend(-t) == pytest.approx(1.0)

    def test_monotone_on_unit_interval(self):
        values = [blend(t) for t in np.linspace(-1.0, 1.0, 41)]
        assert np.all(np.diff(values) > 0)


class TestWeight:
    """Test the weight of a body relative to a cell."""

    def test_center_is_fully_trusted(self, config):
        """A body at the center of a cell wider than D has weight 1."""
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        assert weight(body_at(0.0, 0.0), cell, config) == 1.0

    def test_deep_interior_is_fully_trusted(self, config):
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        assert weight(body_at(0.9, -1.0), cell, config) == 1.0

    def test_one_buffer_outside_edge_is_zero(self, config):
        """A body exactly D outside an interior edge is faded out."""
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        assert weight(body_at(3.0, 0.0), cell, config) == pytest.approx(0.0, abs=1e-15)

    def test_on_edge_is_half(self, config):
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        assert weight(body_at(2.0, 0.0), cell, config) == 0.5
        assert weight(body_at(2.0, -2.0), cell, config) == 0.25

    def test_continuous_across_edge(self, config):
        """No jump as a body crosses a cell edge."""
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        eps = 1e-9
        inside = weight(body_at(2.0 - eps, 0.3), cell, config)
        outside = weight(body_at(2.0 + eps, 0.3), cell, config)
        assert inside == pytest.approx(0.5, abs=1e-8)
        assert outside == pytest.approx(0.5, abs=1e-8)
        assert abs(inside - outside) < 1e-8

    def test_partition_of_unity(self, config):
        """Two cells sharing an edge split a body's weight into 1."""
        left = Cell(center=[-2.0, 0.0], radius=2.0)
        right = Cell(center=[2.0, 0.0], radius=2.0)
        for x in np.linspace(-0.9, 0.9, 7):
            body = body_at(x, 0.7)
            total = weight(body, left, config) + weight(body, right, config)
            assert total == pytest.approx(1.0)

    def test_domain_boundary_is_not_faded(self, config):
        """Bodies within D of the root boundary keep full weight on that axis."""
        cell = Cell(center=[8.0, 0.0], radius=2.0)
        body = body_at(9.5, 0.0)
        assert weight(body, cell, config) == 1.0

        interior = KernelConfig(order=4, buffer=1.0,
                                root_center=np.zeros(2), root_radius=100.0)
        assert weight(body, cell, interior) == pytest.approx(0.84375)

    def test_scales_with_buffer(self):
        """Halving the clear distance relative to D reproduces blend(0.5)."""
        cell = Cell(center=[0.0, 0.0], radius=1.0)
        config = KernelConfig(order=4, buffer=0.2,
                              root_center=np.zeros(2), root_radius=50.0)
        assert weight(body_at(0.9, 0.0), cell, config) == pytest.approx(blend(0.5))

    def test_far_outside_is_a_precondition_violation(self, config):
        cell = Cell(center=[0.0, 0.0], radius=2.0)
        with pytest.raises(AssertionError):
            weight(body_at(5.0, 0.0), cell, config)
