"""
Tests for geometry helpers.
"""

import math

import pytest
from matplotlib.patches import PathPatch
from shapely.geometry import MultiPolygon, Point, Polygon

from ridingbins.tools import (
    hexagon_cell,
    polygon_patch,
    region_block_shape,
    simplify_polygon,
    square_cell,
)


class TestCells:

    def test_square_cell(self) -> None:
        cell = square_cell(2, 3, size=0.5)
        assert cell.bounds == (1.75, 2.75, 2.25, 3.25)

    def test_hexagon_cell_dimensions(self) -> None:
        cell = hexagon_cell(0, 0)
        minx, miny, maxx, maxy = cell.bounds
        assert maxx - minx == pytest.approx(1.0)
        assert maxy - miny == pytest.approx(2 / math.sqrt(3))
        assert cell.area == pytest.approx(math.sqrt(3) / 2)
        assert cell.centroid.x == pytest.approx(0.0)
        assert cell.centroid.y == pytest.approx(0.0)


class TestRegionBlockShape:

    @pytest.mark.parametrize("n, expected", [
        (0, (0, 0)),
        (1, (1, 1)),
        (2, (1, 2)),
        (3, (2, 2)),
        (4, (2, 2)),
        (5, (2, 3)),
        (7, (3, 3)),
        (10, (3, 4)),
        (121, (11, 11)),
        (122, (11, 12)),
    ])
    def test_shapes(self, n, expected) -> None:
        assert region_block_shape(n) == expected

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            region_block_shape(-1)


class TestPolygonPatch:

    def test_polygon_with_hole(self) -> None:
        outer = [(0, 0), (4, 0), (4, 4), (0, 4)]
        hole = [(1, 1), (2, 1), (2, 2), (1, 2)]
        patch = polygon_patch(Polygon(outer, [hole]), facecolor="r")
        assert isinstance(patch, PathPatch)
        # closed exterior and closed hole
        assert len(patch.get_path().vertices) == 10

    def test_multipolygon(self) -> None:
        multi = MultiPolygon([square_cell(0, 0), square_cell(3, 0)])
        patch = polygon_patch(multi)
        assert len(patch.get_path().vertices) == 10

    def test_rejects_points(self) -> None:
        with pytest.raises(TypeError):
            polygon_patch(Point(0, 0))


class TestSimplifyPolygon:

    def test_removes_collinear_vertices(self) -> None:
        poly = Polygon([(0, 0), (0.5, 0), (1, 0), (1, 0.5), (1, 1), (0.5, 1), (0, 1), (0, 0.5)])
        simple = simplify_polygon(poly, threshold=0.01)
        assert len(simple.exterior.coords) < len(poly.exterior.coords)
        assert simple.area == pytest.approx(1.0)

    def test_keeps_rings_that_would_collapse(self) -> None:
        triangle = Polygon([(0, 0), (1, 0), (0, 1)])
        simple = simplify_polygon(triangle, threshold=10.)
        assert simple.area == pytest.approx(triangle.area)

    def test_keeps_holes(self) -> None:
        outer = [(0, 0), (4, 0), (4, 4), (0, 4)]
        hole = [(1, 1), (2, 1), (2, 2), (1, 2)]
        simple = simplify_polygon(Polygon(outer, [hole]), threshold=0.01)
        assert len(simple.interiors) == 1
        assert simple.area == pytest.approx(15.0)
