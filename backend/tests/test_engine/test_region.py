"""Tests for the connector region predicate."""

from __future__ import annotations

import numpy as np
import pytest

from dotgrid.engine.config import CircleRadii
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.engine.links import ConnectorInstance, ConnectorKind, make_link
from dotgrid.engine.region import connector_sdf, contains, coverage_from_sdf, diagonal_sdf, horizontal_sdf


def _instance(topo, a, b):
    return ConnectorInstance.from_link(topo, make_link(topo, a, b))


@pytest.fixture
def sample_points() -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.uniform(-1.2, 1.2, size=(2000, 2))


class TestSymmetry:
    def test_horizontal(self, block_topology, sample_points):
        a, b = block_topology.center(0, 0), block_topology.center(1, 0)
        np.testing.assert_array_equal(
            horizontal_sdf(sample_points, a, b, 0.4),
            horizontal_sdf(sample_points, b, a, 0.4),
        )

    @pytest.mark.parametrize("cells", [((0, 0), (1, 1), (1, 0), (0, 1)), ((0, 1), (1, 0), (1, 1), (0, 0))])
    def test_diagonals(self, block_topology, sample_points, cells):
        a, b, c, d = (block_topology.center(*cell) for cell in cells)
        np.testing.assert_array_equal(
            diagonal_sdf(sample_points, a, b, c, d, 0.4, 0.5),
            diagonal_sdf(sample_points, b, a, c, d, 0.4, 0.5),
        )

    def test_link_construction_order(self, block_topology, block_radii, sample_points):
        first = ConnectorInstance.from_link(block_topology, make_link(block_topology, (0, 1), (1, 0)))
        second = ConnectorInstance.from_link(block_topology, make_link(block_topology, (1, 0), (0, 1)))
        np.testing.assert_array_equal(
            contains(sample_points, first, block_radii),
            contains(sample_points, second, block_radii),
        )


class TestDiagonalRegion:
    @pytest.mark.parametrize("a,b", [((0, 0), (1, 1)), ((0, 1), (1, 0))])
    def test_midpoint_inside(self, block_topology, block_radii, a, b):
        inst = _instance(block_topology, a, b)
        mid = (inst.center_a + inst.center_b) / 2
        assert contains(mid, inst, block_radii) is True

    @pytest.mark.parametrize("a,b", [((0, 0), (1, 1)), ((0, 1), (1, 0))])
    def test_flank_centers_excluded(self, block_topology, a, b):
        inst = _instance(block_topology, a, b)
        for radii in (CircleRadii(0.4, 0.5), CircleRadii(0.1, 2.0), CircleRadii(0.01, 0.02)):
            for flank in inst.flank_centers:
                assert contains(flank, inst, radii) is False

    def test_endpoint_centers_excluded(self, block_topology, block_radii):
        inst = _instance(block_topology, (0, 0), (1, 1))
        assert contains(inst.center_a, inst, block_radii) is False
        assert contains(inst.center_b, inst, block_radii) is False

    @pytest.mark.parametrize("r,R", [(0.4, 0.5), (0.01, 0.02), (0.1, 5.0), (0.9, 0.5), (0.0, 0.1), (-0.2, 0.3)])
    def test_bounding_box_clamp(self, block_topology, r, R):
        rng = np.random.default_rng(11)
        xs = np.concatenate([rng.uniform(-5.0, -0.7501, 500), rng.uniform(0.7501, 5.0, 500)])
        ys = rng.uniform(-5.0, 5.0, 1000)
        pts = np.stack([xs, ys], axis=-1)
        for a, b in [((0, 0), (1, 1)), ((0, 1), (1, 0))]:
            inst = _instance(block_topology, a, b)
            assert not contains(pts, inst, CircleRadii(r, R)).any()

    def test_equal_radii_is_empty(self, block_topology, sample_points):
        radii = CircleRadii(0.5, 0.5)
        for a, b in [((0, 0), (1, 1)), ((0, 1), (1, 0))]:
            inst = _instance(block_topology, a, b)
            assert not contains(sample_points, inst, radii).any()
            assert contains(np.zeros(2), inst, radii) is False

    def test_inner_larger_than_outer_is_empty_not_error(self, block_topology, sample_points):
        inst = _instance(block_topology, (0, 0), (1, 1))
        assert not contains(sample_points, inst, CircleRadii(0.6, 0.5)).any()

    def test_both_diagonals_share_midpoint(self, block_topology, block_radii, full_block):
        diagonals = [i for i in enumerate_connectors(full_block) if i.kind.is_diagonal]
        assert len(diagonals) == 2
        origin = np.zeros(2)
        assert all(contains(origin, inst, block_radii) for inst in diagonals)


class TestHorizontalRegion:
    def test_band_between_centers(self, block_topology, block_radii):
        inst = _instance(block_topology, (0, 0), (1, 0))
        y = inst.center_a[1]
        assert contains((0.0, y + 0.39), inst, block_radii)
        assert not contains((0.0, y + 0.41), inst, block_radii)
        assert not contains((0.76, y), inst, block_radii)

    def test_boundary_is_outside(self, block_topology, block_radii):
        inst = _instance(block_topology, (0, 0), (1, 0))
        assert contains(inst.center_a, inst, block_radii) is False
        assert contains(inst.center_b, inst, block_radii) is False
        assert contains(inst.center_a + [0.01, 0.0], inst, block_radii) is True
        edge = connector_sdf(inst.center_a, inst, block_radii)
        assert float(edge) == pytest.approx(0.0)
        assert float(coverage_from_sdf(edge, 0.1)) == pytest.approx(0.5)

    def test_zero_inner_radius_is_empty(self, block_topology, sample_points):
        inst = _instance(block_topology, (0, 0), (1, 0))
        assert not contains(sample_points, inst, CircleRadii(0.0, 0.5)).any()

    def test_kind_dispatch(self, block_topology, block_radii, sample_points):
        inst = _instance(block_topology, (0, 1), (1, 1))
        assert inst.kind is ConnectorKind.HORIZONTAL
        np.testing.assert_array_equal(
            connector_sdf(sample_points, inst, block_radii),
            horizontal_sdf(sample_points, inst.center_a, inst.center_b, block_radii.inner),
        )


class TestCoverage:
    def test_hard_mask_matches_contains(self):
        sdf = np.array([-0.2, -1e-9, 0.0, 0.3])
        np.testing.assert_array_equal(coverage_from_sdf(sdf, 0.0), [1.0, 1.0, 0.0, 0.0])

    def test_band_ramp(self):
        cov = coverage_from_sdf(np.array([-0.1, -0.05, 0.0, 0.05, 0.1]), 0.1)
        np.testing.assert_allclose(cov, [1.0, 1.0, 0.5, 0.0, 0.0])
        assert np.all(np.diff(coverage_from_sdf(np.linspace(-0.1, 0.1, 41), 0.1)) <= 0)
