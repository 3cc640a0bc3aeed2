"""
Boundary polygons as coordinate tables and choropleth maps.

Reading shapefiles and projecting them is left to geopandas; the functions
here take an already projected GeoDataFrame of provinces, census divisions
or ridings (or a population cartogram of them) and

- flatten its geometry into a long table of vertices,
- attach statistics to such tables without duplicating rows,
- draw it as a choropleth.
"""

from __future__ import annotations

from typing import Any, Sequence, Union
import logging

import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as pl
from matplotlib.axes import Axes
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Colormap, Normalize
from matplotlib.figure import Figure
from matplotlib.patches import Patch
import matplotlib as mpl
from shapely.geometry import Polygon, MultiPolygon
from tqdm import tqdm

from ridingbins.plotting import (
    DEFAULT_CONTINUOUS_CMAP,
    MISSING_COLOR,
    category_colors,
    is_missing,
    theme_map,
)
from ridingbins.tools import polygon_patch, simplify_polygon

logger = logging.getLogger(__name__)

COORDINATE_COLUMNS = ['long', 'lat', 'order', 'hole', 'piece', 'ring', 'group']


def _as_column_list(columns: Union[str, Sequence[str], None]) -> list[str]:
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def polygon_parts(geom: Any) -> list[Polygon]:
    """
    Split a geometry into its polygons.

    Parameters
    ----------
    geom : shapely geometry or None
        Polygon or MultiPolygon. None and empty geometries give no parts.

    Returns
    -------
    list of shapely.geometry.Polygon

    Raises
    ------
    TypeError
        If the geometry is neither a Polygon nor a MultiPolygon.
    """
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, MultiPolygon):
        return list(geom.geoms)
    raise TypeError(f"Expected Polygon or MultiPolygon, got {geom.geom_type}")


def boundary_coordinates(
    geo_df: gpd.GeoDataFrame,
    id_columns: Union[str, Sequence[str], None] = None,
    simplify_threshold: float | None = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Flatten boundary polygons into a table of vertices.

    Every polygon part of every row becomes one group; its exterior ring
    comes first, followed by its holes. Rings are closed, i.e. their first
    vertex is repeated at the end.

    Parameters
    ----------
    geo_df : geopandas.GeoDataFrame
        Boundaries, one row per areal unit.
    id_columns : str or list of str, optional
        Columns of geo_df copied to every vertex of the row,
        e.g. the riding code.
    simplify_threshold : float, optional
        If set, simplify every polygon with the Visvalingam-Whyatt
        algorithm first.
    verbose : bool, optional
        Show progress bar (default: False).

    Returns
    -------
    pandas.DataFrame
        Columns ``long, lat, order, hole, piece, ring, group`` followed by
        the id columns. ``piece`` counts the polygon parts of a row from 1,
        ``ring`` is 0 for exteriors and counts holes from 1, ``order`` runs
        over all vertices of a group and ``group`` is ``"<index>.<piece>"``.

    Raises
    ------
    KeyError
        If an id column is missing.
    TypeError
        If a geometry is not polygonal.
    """
    id_columns = _as_column_list(id_columns)
    for column in id_columns:
        if column not in geo_df.columns:
            raise KeyError(f"Column '{column}' not found in GeoDataFrame")

    ids = geo_df[id_columns].to_dict('records') if id_columns else [{}] * len(geo_df)

    records = []
    skipped = 0
    rows = tqdm(zip(geo_df.index, geo_df.geometry, ids),
                total=len(geo_df),
                desc='flattening boundaries',
                disable=not verbose,
                )
    for index, geom, id_values in rows:
        parts = polygon_parts(geom)
        if not parts:
            skipped += 1
            continue
        for piece, poly in enumerate(parts, start=1):
            if simplify_threshold is not None:
                poly = simplify_polygon(poly, simplify_threshold)
            group = f"{index}.{piece}"
            order = 0
            rings = [poly.exterior] + list(poly.interiors)
            for ring_id, ring in enumerate(rings):
                for x, y in ring.coords:
                    order += 1
                    records.append((x, y, order, ring_id > 0, piece, ring_id, group, *id_values.values()))

    if skipped:
        logger.debug("skipped %d rows without geometry", skipped)

    return pd.DataFrame.from_records(records, columns=COORDINATE_COLUMNS + id_columns)


def join_values(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: Union[str, Sequence[str]],
    how: str = 'left',
) -> pd.DataFrame:
    """
    Attach statistics to a coordinate table or a bin table.

    Parameters
    ----------
    left : pandas.DataFrame
        Table to attach values to, e.g. from boundary_coordinates().
        GeoDataFrames stay GeoDataFrames.
    right : pandas.DataFrame
        Statistics, at most one row per key.
    on : str or list of str
        Key column(s) present in both tables.
    how : str, optional
        'left' or 'inner' (default: 'left').

    Returns
    -------
    pandas.DataFrame
        ``left`` with the columns of ``right`` added, row count unchanged
        for a left join.

    Raises
    ------
    KeyError
        If a key column is missing from either table.
    ValueError
        If ``right`` has duplicate keys or ``how`` is not supported.
    """
    on = _as_column_list(on)
    if how not in ('left', 'inner'):
        raise ValueError(f"how must be 'left' or 'inner', got {how!r}")
    for name, df in (('left', left), ('right', right)):
        missing = [column for column in on if column not in df.columns]
        if missing:
            raise KeyError(f"Key column(s) {missing} not found in {name} table")

    duplicated = right.duplicated(subset=on)
    if duplicated.any():
        raise ValueError(
            f"Right table has {int(duplicated.sum())} duplicate key(s) on {on}; "
            "joining would duplicate rows"
        )

    return left.merge(right, on=on, how=how)


def plot_choropleth(
    geo_df: gpd.GeoDataFrame,
    value_column: str,
    ax: Axes | None = None,
    continuous: bool = True,
    cmap: Union[str, Colormap, None] = None,
    edgecolor: Any = 'w',
    linewidth: float = 0.2,
    legend: bool = True,
    missing_color: Any = MISSING_COLOR,
) -> Union[tuple[Figure, Axes], Axes]:
    """
    Plot boundaries filled by value.

    Works the same for true boundaries and for population cartograms,
    which are just boundaries with distorted geometry.

    Parameters
    ----------
    geo_df : geopandas.GeoDataFrame
        Boundaries with a value column.
    value_column : str
        Column holding the fill values.
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, creates new figure.
    continuous : bool, optional
        Continuous colour scale with a colorbar if True, categorical
        colours with a legend otherwise (default: True).
    cmap : str or matplotlib.colors.Colormap, optional
        Colormap.
    edgecolor : color-like, optional
        Boundary colour (default: 'w').
    linewidth : float, optional
        Boundary width (default: 0.2).
    legend : bool, optional
        Add a colorbar or a legend (default: True).
    missing_color : color-like, optional
        Fill colour of units without a value.

    Returns
    -------
    fig, ax : matplotlib Figure and Axes
        Only if ax was None; otherwise returns just ax.
    """
    if value_column not in geo_df.columns:
        raise KeyError(f"Column '{value_column}' not found in GeoDataFrame")

    generate_figure = ax is None

    if generate_figure:
        fig, ax = pl.subplots(1, 1)
    else:
        fig = ax.figure

    values = geo_df[value_column].to_list()
    handles = []
    mappable = None

    if continuous:
        numeric = pd.to_numeric(pd.Series(values, dtype=object)).to_numpy(dtype=float)
        finite = numeric[np.isfinite(numeric)]
        cmap = mpl.colormaps.get_cmap(DEFAULT_CONTINUOUS_CMAP if cmap is None else cmap)
        if len(finite) > 0:
            mappable = ScalarMappable(norm=Normalize(vmin=finite.min(), vmax=finite.max()), cmap=cmap)
        fills = [missing_color if mappable is None or not np.isfinite(v) else mappable.to_rgba(v) for v in numeric]
    else:
        palette = category_colors(values, cmap)
        fills = [missing_color if is_missing(v) else palette[v] for v in values]
        handles = [Patch(facecolor=c, edgecolor='none', label=str(cat)) for cat, c in palette.items()]

    for geom, fc in zip(geo_df.geometry, fills):
        if geom is None or geom.is_empty:
            continue
        patch = polygon_patch(geom,
                              facecolor=fc,
                              edgecolor=edgecolor,
                              lw=linewidth,
                              )
        ax.add_patch(patch)

    # no drawable geometry leaves NaN bounds; keep autoscaling then
    bounds = geo_df.total_bounds
    if np.all(np.isfinite(bounds)):
        xmin, ymin, xmax, ymax = bounds
        ax.set_xlim(xmin, xmax)
        ax.set_ylim(ymin, ymax)

    theme_map(ax)

    if legend:
        if mappable is not None:
            fig.colorbar(mappable, ax=ax, shrink=0.6)
        if handles:
            ax.legend(handles=handles,
                      frameon=False,
                      loc='center left',
                      bbox_to_anchor=(1, 0.5),
                      )

    if generate_figure:
        return fig, ax
    else:
        return ax
