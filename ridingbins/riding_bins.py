"""
Grid bin layouts of ridings.

This module provides the GridBinLayout class, which places ridings on a
regular square or hexagonal grid, and the riding_bins() convenience
function that selects the reference layout of a boundary scope first.

Every riding of the input occupies exactly one grid cell. Ridings are
either kept at their canonical cell of the reference layout, or arranged:
packed per region, in ascending riding code order, into a compact
rectangular block that starts at the region's anchor cell.

Layouts are pure data. Drawing them is left to ridingbins.plotting.
"""

from __future__ import annotations

from numbers import Integral, Real
from typing import Any, Iterable, Iterator, NamedTuple, Sequence
import logging

import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry import Polygon

from ridingbins.exceptions import NoMatchingRidings
from ridingbins.reference_layout import (
    ReferenceLayout,
    get_reference_layout,
    normalize_region,
)
from ridingbins.tools import (
    HEX_ROW_SPACING,
    hexagon_cell,
    region_block_shape,
    square_cell,
)

logger = logging.getLogger(__name__)

SQUARE = 'square'
HEXAGON = 'hexagon'

_SHAPE_ALIASES = {
    'square': SQUARE,
    'hexagon': HEXAGON,
    'hex': HEXAGON,
}


def normalize_shape(shape: str) -> str:
    """Return ``"square"`` or ``"hexagon"`` for a cell shape name."""
    try:
        return _SHAPE_ALIASES[str(shape).lower()]
    except KeyError:
        raise ValueError(f"shape must be 'square' or 'hexagon', got {shape!r}") from None


class GridCell(NamedTuple):
    """
    One riding placed on the grid.

    Attributes
    ----------
    riding_code : int
        Code of the riding the cell represents.
    region : str
        Region (province) the riding belongs to.
    row, col : int
        Grid coordinate. Rows grow downward.
    shape : str
        ``"square"`` or ``"hexagon"``.
    value : any
        Attribute value used to fill the cell.
    """

    riding_code: int
    region: str
    row: int
    col: int
    shape: str
    value: Any

    @property
    def x(self) -> float:
        """Horizontal centre of the cell; odd hexagon rows sit half a cell to the right."""
        if self.shape == HEXAGON:
            return self.col + 0.5 * (self.row % 2)
        return float(self.col)

    @property
    def y(self) -> float:
        """Vertical centre of the cell."""
        if self.shape == HEXAGON:
            return self.row * HEX_ROW_SPACING
        return float(self.row)

    @property
    def shape_id(self) -> str:
        return str(self.riding_code)

    def polygon(self, size: float = 1.0) -> Polygon:
        """
        Cell geometry centred on (x, y).

        Parameters
        ----------
        size : float, optional
            Cell width relative to the grid spacing (default: 1.0).
            Values below 1 leave a gap between neighbouring cells.

        Returns
        -------
        shapely.geometry.Polygon
        """
        if self.shape == HEXAGON:
            return hexagon_cell(self.x, self.y, size)
        return square_cell(self.x, self.y, size)


class RidingBinLayout():
    """
    Result of a grid bin layout.

    Iterating over the layout yields its GridCells in output order:
    grouped by region (in anchor order), then by ascending riding code.

    Attributes
    ----------
    cells : tuple of GridCell
        Placed cells, one per matched input row.
    mismatch_count : int
        Number of input rows that were dropped.
    mismatched_codes : tuple
        The riding codes of the dropped rows, as supplied.
    continuous : bool
        Whether the values should be drawn on a continuous colour scale.
    shape : str
        ``"square"`` or ``"hexagon"``.
    arrange : bool
        Whether ridings were arranged per region.
    scope : str
        Name of the reference layout scope used.
    """

    def __init__(
        self,
        cells: Iterable[GridCell],
        mismatched_codes: Sequence[Any],
        continuous: bool,
        shape: str,
        arrange: bool,
        scope: str,
    ) -> None:
        self.cells = tuple(cells)
        self.mismatched_codes = tuple(mismatched_codes)
        self.mismatch_count = len(self.mismatched_codes)
        self.continuous = continuous
        self.shape = shape
        self.arrange = arrange
        self.scope = scope

    def __iter__(self) -> Iterator[GridCell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, i: int) -> GridCell:
        return self.cells[i]

    def __repr__(self) -> str:
        return (f"RidingBinLayout(scope={self.scope!r}, shape={self.shape!r}, "
                f"arrange={self.arrange}, cells={len(self)}, mismatches={self.mismatch_count})")

    def positions(self) -> dict[int, tuple[int, int]]:
        """Riding code to ``(row, col)``."""
        return {cell.riding_code: (cell.row, cell.col) for cell in self.cells}

    def to_frame(self) -> pd.DataFrame:
        """
        Tabular form of the layout.

        Returns
        -------
        pandas.DataFrame
            One row per cell with columns ``riding_code, region, row, col,
            x, y, group, fill``. ``x``/``y`` are the cell centres, ``group``
            the shape id and ``fill`` the cell value.
        """
        return pd.DataFrame({
            'riding_code': [cell.riding_code for cell in self.cells],
            'region': [cell.region for cell in self.cells],
            'row': [cell.row for cell in self.cells],
            'col': [cell.col for cell in self.cells],
            'x': [cell.x for cell in self.cells],
            'y': [cell.y for cell in self.cells],
            'group': [cell.shape_id for cell in self.cells],
            'fill': [cell.value for cell in self.cells],
        })

    def to_geodataframe(self, size: float = 1.0) -> gpd.GeoDataFrame:
        """
        The layout as a GeoDataFrame of cell polygons.

        Parameters
        ----------
        size : float, optional
            Cell width relative to the grid spacing (default: 1.0).

        Returns
        -------
        geopandas.GeoDataFrame
            The columns of to_frame() plus the cell geometry.
        """
        return gpd.GeoDataFrame(
            self.to_frame(),
            geometry=[cell.polygon(size) for cell in self.cells],
        )

    def polygon_coordinates(self, size: float = 1.0) -> pd.DataFrame:
        """
        Vertex table of the cell polygons.

        Each cell contributes one closed ring (first vertex repeated last).

        Parameters
        ----------
        size : float, optional
            Cell width relative to the grid spacing (default: 1.0).

        Returns
        -------
        pandas.DataFrame
            Columns ``x, y, group, order, fill, riding_code, region``.
        """
        records = []
        for cell in self.cells:
            for order, (x, y) in enumerate(cell.polygon(size).exterior.coords, start=1):
                records.append((x, y, cell.shape_id, order, cell.value, cell.riding_code, cell.region))
        return pd.DataFrame.from_records(
            records,
            columns=['x', 'y', 'group', 'order', 'fill', 'riding_code', 'region'],
        )


def arrange_region(
    codes: Iterable[int],
    anchor: tuple[int, int] = (0, 0),
) -> dict[int, tuple[int, int]]:
    """
    Pack the ridings of one region into a compact rectangular block.

    Codes are sorted ascending and filled row-major, left to right and top
    to bottom, into ``ceil(sqrt(n))`` columns. Only the last row may be
    partially filled.

    Parameters
    ----------
    codes : iterable of int
        Riding codes of the region.
    anchor : tuple of int, optional
        ``(row, col)`` of the top-left cell of the block (default: (0, 0)).

    Returns
    -------
    dict
        Riding code to ``(row, col)``.

    Examples
    --------
    >>> arrange_region([30, 10, 20], anchor=(5, 5))
    {10: (5, 5), 20: (5, 6), 30: (6, 5)}
    """
    codes = sorted(codes)
    _, n_cols = region_block_shape(len(codes))
    row0, col0 = anchor
    return {
        code: (row0 + i // n_cols, col0 + i % n_cols)
        for i, code in enumerate(codes)
    }


def _coerce_code(raw: Any) -> int | None:
    """Riding code as int, or None if the value cannot be a riding code."""
    if isinstance(raw, (bool, np.bool_)):
        return None
    if isinstance(raw, Integral):
        return int(raw)
    if isinstance(raw, Real):
        if np.isfinite(raw) and float(raw).is_integer():
            return int(raw)
        return None
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw.strip())
    return None


class GridBinLayout():
    """
    Place ridings on a square or hexagonal grid.

    Parameters
    ----------
    reference : ReferenceLayout
        Canonical riding positions and region anchors of the scope.
    region_filter : str, optional
        If set, only ridings of this region are placed; rows of other
        regions are treated as mismatches.

    Examples
    --------
    >>> binner = GridBinLayout(federal_layout())
    >>> layout = binner.layout(df, 'turnout', 'riding_code', continuous=True)
    >>> layout.to_frame().head()
    """

    def __init__(self, reference: ReferenceLayout, region_filter: str | None = None) -> None:
        self.reference = reference
        self.region_filter = region_filter
        if region_filter is None:
            self.scope = reference.name
        else:
            self.scope = f"{reference.name}:{region_filter}"

    def match_rows(
        self,
        riding_data: pd.DataFrame,
        value_column: str,
        riding_code_column: str,
    ) -> tuple[dict[int, Any], list[Any]]:
        """
        Match input rows to ridings of the reference layout.

        Rows whose code is not a riding of the scope, lies outside the
        region filter, or repeats an earlier row's code are dropped.

        Returns
        -------
        matched : dict
            Riding code to value, in input order.
        mismatched : list
            Riding codes of dropped rows, as supplied.
        """
        for column in (riding_code_column, value_column):
            if column not in riding_data.columns:
                raise KeyError(f"Column '{column}' not found in riding data")

        matched = {}
        mismatched = []
        for raw_code, value in zip(riding_data[riding_code_column], riding_data[value_column]):
            code = _coerce_code(raw_code)
            if code is None or code not in self.reference or code in matched:
                mismatched.append(raw_code)
                continue
            if self.region_filter is not None and self.reference.regions[code] != self.region_filter:
                mismatched.append(raw_code)
                continue
            matched[code] = value

        return matched, mismatched

    def canonical_positions(self, codes: Iterable[int]) -> dict[int, tuple[int, int]]:
        """Canonical cells of the given ridings, taken verbatim from the reference layout."""
        return {code: self.reference.positions[code] for code in codes}

    def arranged_positions(self, codes: Iterable[int]) -> dict[int, tuple[int, int]]:
        """Cells of the given ridings packed per region at the region anchors."""
        by_region = {}
        for code in codes:
            by_region.setdefault(self.reference.regions[code], []).append(code)

        positions = {}
        for region, region_codes in by_region.items():
            positions.update(arrange_region(region_codes, self.reference.anchors[region]))
        return positions

    def layout(
        self,
        riding_data: Any,
        value_column: str,
        riding_code_column: str,
        continuous: bool,
        arrange: bool = False,
        shape: str = SQUARE,
    ) -> RidingBinLayout:
        """
        Compute the grid cells for a table of riding values.

        Parameters
        ----------
        riding_data : pandas.DataFrame or dict or list of dict
            Table with at least a riding code and a value column.
        value_column : str
            Column holding the value each cell is filled with.
        riding_code_column : str
            Column holding the riding codes.
        continuous : bool
            True for a continuous colour scale, False for a categorical one.
            Continuous values must be numeric.
        arrange : bool, optional
            If True, pack the ridings of each region into a compact block at
            the region anchor instead of using canonical cells (default: False).
        shape : str, optional
            ``"square"`` or ``"hexagon"`` (default: ``"square"``).

        Returns
        -------
        RidingBinLayout

        Raises
        ------
        KeyError
            If a column is missing.
        ValueError
            If ``shape`` is unknown or continuous values are not numeric.
        NoMatchingRidings
            If no row matches a riding of the scope.
        """
        shape = normalize_shape(shape)
        if not isinstance(riding_data, pd.DataFrame):
            riding_data = pd.DataFrame(riding_data)

        matched, mismatched = self.match_rows(riding_data, value_column, riding_code_column)

        if mismatched:
            logger.warning(
                "%d of %d rows did not match a riding of scope '%s' and were dropped",
                len(mismatched), len(riding_data), self.scope,
            )
        if not matched:
            raise NoMatchingRidings(len(riding_data), self.scope)

        if continuous:
            try:
                values = pd.to_numeric(pd.Series(list(matched.values()), dtype=object))
            except (ValueError, TypeError) as err:
                raise ValueError(
                    f"Column '{value_column}' must be numeric for a continuous scale"
                ) from err
            matched = dict(zip(matched, values.astype(float).to_list()))

        if arrange:
            positions = self.arranged_positions(matched)
        else:
            positions = self.canonical_positions(matched)

        region_order = {region: i for i, region in enumerate(self.reference.ordered_regions())}
        ordered_codes = sorted(
            matched,
            key=lambda code: (region_order[self.reference.regions[code]], code),
        )

        cells = []
        for code in ordered_codes:
            row, col = positions[code]
            cells.append(GridCell(code, self.reference.regions[code], row, col, shape, matched[code]))

        logger.debug("placed %d ridings of scope '%s' (arrange=%s, shape=%s)",
                     len(cells), self.scope, arrange, shape)

        return RidingBinLayout(cells, mismatched, continuous, shape, arrange, self.scope)


def riding_bins(
    riding_data: Any,
    value_column: str,
    riding_code_column: str,
    continuous: bool,
    arrange: bool = False,
    shape: str = SQUARE,
    provincial: bool = False,
    province: Any = None,
) -> RidingBinLayout:
    """
    Lay out ridings of a Canadian boundary scope on a tile or hex grid.

    Parameters
    ----------
    riding_data : pandas.DataFrame or dict or list of dict
        Table with at least a riding code and a value column.
    value_column : str
        Column holding the value each cell is filled with.
    riding_code_column : str
        Column holding the riding codes.
    continuous : bool
        True for a continuous colour scale, False for a categorical one.
    arrange : bool, optional
        Pack ridings per province instead of using canonical cells
        (default: False).
    shape : str, optional
        ``"square"`` or ``"hexagon"`` (default: ``"square"``).
    provincial : bool, optional
        Use provincial electoral divisions of ``province`` instead of
        federal districts (default: False). Only Quebec is supported.
    province : int or str, optional
        With ``provincial=True``, the province whose divisions are used.
        With federal districts, restricts the layout to that province.

    Returns
    -------
    RidingBinLayout

    Raises
    ------
    UnsupportedScope
        If the provincial layout or the province does not exist.
    NoMatchingRidings
        If no row matches a riding of the scope.

    Examples
    --------
    >>> df = pd.DataFrame({'code': [24001, 24002], 'party': ['BQ', 'LPC']})
    >>> layout = riding_bins(df, 'party', 'code', continuous=False, arrange=True)
    >>> fig, ax = plot_riding_bins(layout)
    """
    reference = get_reference_layout(provincial, province)

    region_filter = None
    if not provincial and province is not None:
        region_filter = normalize_region(province)

    return GridBinLayout(reference, region_filter).layout(
        riding_data,
        value_column,
        riding_code_column,
        continuous,
        arrange=arrange,
        shape=shape,
    )
