"""
Utility functions for riding bin geometry and map drawing.

This module provides helper functions for:
- Converting shapely geometries to matplotlib patches
- Building square and hexagonal grid cells
- Sizing the rectangular block a region is packed into
- Simplifying boundary polygons
"""

from __future__ import annotations

from typing import Any, Union
import math
from matplotlib.path import Path
from matplotlib.patches import PathPatch
from shapely.geometry import Polygon, MultiPolygon
import visvalingamwyatt as vw


#: vertical distance between hexagon rows, in units of the hexagon width
HEX_ROW_SPACING = math.sqrt(3) / 2


def polygon_patch(
    polygon: Union[Polygon, MultiPolygon],
    **kwargs: Any
) -> PathPatch:
    """
    Create a matplotlib PathPatch from a shapely Polygon or MultiPolygon.

    Parameters
    ----------
    polygon : shapely.geometry.Polygon or shapely.geometry.MultiPolygon
        The polygon geometry to convert to a matplotlib patch.
    **kwargs : dict
        Additional keyword arguments passed to matplotlib.patches.PathPatch
        (e.g., facecolor, edgecolor, alpha, linewidth).

    Returns
    -------
    matplotlib.patches.PathPatch
        A patch that can be added to a matplotlib axes via ax.add_patch().

    Raises
    ------
    TypeError
        If polygon is not a Polygon or MultiPolygon.

    Examples
    --------
    >>> cell = square_cell(0, 0)
    >>> patch = polygon_patch(cell, facecolor='blue', edgecolor='white')
    >>> ax.add_patch(patch)
    """
    def ring_to_codes(n):
        codes = [Path.LINETO] * n
        codes[0] = Path.MOVETO
        codes[-1] = Path.CLOSEPOLY
        return codes

    def polygon_to_path(poly):
        vertices = list(poly.exterior.coords)
        codes = ring_to_codes(len(vertices))

        # holes
        for interior in poly.interiors:
            int_coords = list(interior.coords)
            vertices.extend(int_coords)
            codes.extend(ring_to_codes(len(int_coords)))

        return vertices, codes

    vertices = []
    codes = []

    if isinstance(polygon, MultiPolygon):
        for poly in polygon.geoms:
            v, c = polygon_to_path(poly)
            vertices.extend(v)
            codes.extend(c)
    elif isinstance(polygon, Polygon):
        vertices, codes = polygon_to_path(polygon)
    else:
        raise TypeError(f"Expected Polygon or MultiPolygon, got {type(polygon)}")

    return PathPatch(Path(vertices, codes), **kwargs)


def square_cell(x: float, y: float, size: float = 1.0) -> Polygon:
    """
    Axis-aligned square of side ``size`` centred on (x, y).
    """
    h = size / 2.
    return Polygon([
        (x - h, y - h),
        (x + h, y - h),
        (x + h, y + h),
        (x - h, y + h),
    ])


def hexagon_cell(x: float, y: float, size: float = 1.0) -> Polygon:
    """
    Pointy-top hexagon centred on (x, y).

    The hexagon is ``size`` wide (flat side to flat side) and
    ``2 * size / sqrt(3)`` tall, so that rows spaced ``HEX_ROW_SPACING * size``
    apart, with every odd row shifted by half a width, tile the plane
    without gaps.

    Parameters
    ----------
    x, y : float
        Centre of the hexagon.
    size : float, optional
        Width of the hexagon (default: 1.0).

    Returns
    -------
    shapely.geometry.Polygon
    """
    r = size / math.sqrt(3)
    half = size / 2.
    return Polygon([
        (x, y + r),
        (x - half, y + r / 2.),
        (x - half, y - r / 2.),
        (x, y - r),
        (x + half, y - r / 2.),
        (x + half, y + r / 2.),
    ])


def region_block_shape(n: int) -> tuple[int, int]:
    """
    Shape of the rectangular block that ``n`` ridings are packed into.

    The block is ``ceil(sqrt(n))`` columns wide and just tall enough to
    hold ``n`` cells; the last row may be partially filled.

    Parameters
    ----------
    n : int
        Number of ridings in the region.

    Returns
    -------
    tuple of int
        ``(n_rows, n_cols)``.

    Examples
    --------
    >>> region_block_shape(3)
    (2, 2)
    >>> region_block_shape(10)
    (3, 4)
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return 0, 0
    n_cols = math.isqrt(n)
    if n_cols * n_cols < n:
        n_cols += 1
    n_rows = -(-n // n_cols)
    return n_rows, n_cols


def simplify_polygon(polygon: Polygon, threshold: float) -> Polygon:
    """
    Simplify a polygon using the Visvalingam-Whyatt algorithm.

    Reduces vertex count while preserving shape characteristics.
    Rings that would collapse below a triangle are kept as they are.

    Parameters
    ----------
    polygon : shapely.geometry.Polygon
        Input polygon.
    threshold : float
        Simplification threshold (minimal triangle area). Higher values
        mean more simplification.

    Returns
    -------
    shapely.geometry.Polygon
        Simplified polygon.
    """
    def simplify_ring(coords):
        coords = list(coords)
        new_coords = vw.Simplifier(coords).simplify(threshold=threshold)
        if len(new_coords) < 4:
            return coords
        return [tuple(c) for c in new_coords]

    exterior = simplify_ring(polygon.exterior.coords)
    interiors = [simplify_ring(ring.coords) for ring in polygon.interiors]
    return Polygon(exterior, interiors)

