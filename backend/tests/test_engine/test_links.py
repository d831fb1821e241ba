"""Tests for connector links and instances."""

from __future__ import annotations

import numpy as np
import pytest

from dotgrid.engine.errors import InvalidConfiguration, OutOfBounds
from dotgrid.engine.links import ConnectorInstance, ConnectorKind, ConnectorLink, classify, link_from, make_link
from dotgrid.engine.topology import GridTopology


@pytest.fixture
def topo() -> GridTopology:
    return GridTopology(3, 3, 1.0)


class TestMakeLink:
    def test_order_independent(self, topo):
        assert make_link(topo, (1, 1), (0, 0)) == make_link(topo, (0, 0), (1, 1))

    def test_kinds(self, topo):
        assert make_link(topo, (0, 0), (1, 0)).kind is ConnectorKind.HORIZONTAL
        assert make_link(topo, (0, 0), (1, 1)).kind is ConnectorKind.DIAGONAL_DOWN
        assert make_link(topo, (0, 1), (1, 0)).kind is ConnectorKind.DIAGONAL_UP

    def test_left_endpoint_first(self, topo):
        link = make_link(topo, (1, 0), (0, 1))
        assert link.a == (0, 1)
        assert link.b == (1, 0)

    @pytest.mark.parametrize("first,second", [((0, 0), (0, 1)), ((0, 0), (2, 0)), ((0, 0), (0, 0))])
    def test_not_connectable(self, topo, first, second):
        with pytest.raises(InvalidConfiguration):
            make_link(topo, first, second)

    def test_off_grid(self, topo):
        with pytest.raises(OutOfBounds):
            make_link(topo, (2, 2), (3, 3))

    def test_link_from_last_column(self, topo):
        with pytest.raises(OutOfBounds):
            link_from(topo, (2, 0), ConnectorKind.HORIZONTAL)

    def test_link_from_last_row(self, topo):
        with pytest.raises(OutOfBounds):
            link_from(topo, (0, 2), ConnectorKind.DIAGONAL_DOWN)
        assert link_from(topo, (0, 2), ConnectorKind.DIAGONAL_UP).b == (1, 1)

    def test_classify(self):
        assert classify((0, 0), (1, 0)) is ConnectorKind.HORIZONTAL
        assert classify((0, 0), (1, 2)) is None


class TestLinkGeometry:
    def test_diagonal_block_and_flanks(self):
        down = ConnectorLink((0, 0), (1, 1), ConnectorKind.DIAGONAL_DOWN)
        up = ConnectorLink((0, 1), (1, 0), ConnectorKind.DIAGONAL_UP)
        assert down.block == up.block == (0, 0)
        assert set(down.flanks) == {(1, 0), (0, 1)}
        assert set(up.flanks) == {(0, 0), (1, 1)}

    def test_horizontal_has_no_flanks(self):
        link = ConnectorLink((0, 0), (1, 0), ConnectorKind.HORIZONTAL)
        assert link.block is None
        assert link.flanks is None

    def test_instance_centers(self, topo):
        inst = ConnectorInstance.from_link(topo, make_link(topo, (0, 0), (1, 1)))
        np.testing.assert_allclose(inst.center_a, [-1.0, -1.0])
        np.testing.assert_allclose(inst.center_b, [0.0, 0.0])
        assert inst.corner_centers().shape == (4, 2)

    def test_horizontal_bounds_include_radius(self, topo):
        inst = ConnectorInstance.from_link(topo, make_link(topo, (0, 1), (1, 1)))
        assert inst.bounds(0.3) == pytest.approx((-1.0, -0.3, 0.0, 0.3))

    def test_diagonal_bounds_are_block(self, topo):
        inst = ConnectorInstance.from_link(topo, make_link(topo, (1, 2), (2, 1)))
        assert inst.bounds(0.3) == pytest.approx((0.0, 0.0, 1.0, 1.0))

    def test_instance_equality(self, topo):
        link = make_link(topo, (0, 0), (1, 0))
        assert ConnectorInstance.from_link(topo, link) == ConnectorInstance.from_link(topo, link)
        assert len({ConnectorInstance.from_link(topo, link), ConnectorInstance.from_link(topo, link)}) == 1
