"""
Drawing riding bin layouts with matplotlib.

Layout computation lives in ridingbins.riding_bins; this module only turns
a RidingBinLayout into patches, a colour scale and a legend.
"""

from __future__ import annotations

from typing import Any, Iterable, Union
import numpy as np
import pandas as pd
import matplotlib as mpl
import matplotlib.pyplot as pl
from matplotlib.axes import Axes
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Colormap, ListedColormap, Normalize
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from ridingbins.riding_bins import RidingBinLayout
from ridingbins.tools import polygon_patch

MISSING_COLOR = (0.85, 0.85, 0.85, 1.0)
DEFAULT_CONTINUOUS_CMAP = 'viridis'
DEFAULT_CATEGORICAL_CMAP = 'tab10'


def theme_map(ax: Axes) -> Axes:
    """
    Strip an axes down to the map itself.

    Sets an equal aspect ratio and removes ticks, tick labels, spines
    and axis labels.
    """
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_xlabel('')
    ax.set_ylabel('')
    for spine in ax.spines.values():
        spine.set_visible(False)
    return ax


def savefig_marginless(fn: str, fig: Figure, ax: Axes | None = None, **kwargs: Any) -> None:
    """
    Save a map without frame, padding or whitespace around it.

    Parameters
    ----------
    fn : str
        Output filename.
    fig : matplotlib.figure.Figure
        Figure to save.
    ax : matplotlib.axes.Axes, optional
        The map axes. Defaults to the first axes of ``fig``, so a colorbar
        axes added by plot_riding_bins() or plot_choropleth() is kept.
    **kwargs : dict
        Additional arguments passed to fig.savefig().
    """
    if ax is None:
        ax = fig.axes[0]
    theme_map(ax).set_axis_off()
    ax.margins(0, 0)
    fig.subplots_adjust(top=1, bottom=0, right=1, left=0, hspace=0, wspace=0)
    fig.savefig(fn, bbox_inches='tight', pad_inches=0, **kwargs)


def is_missing(value: Any) -> bool:
    """True for None, NaN and pandas NA."""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # array-likes are never a missing scalar
        return False


def category_colors(
    values: Iterable[Any],
    cmap: Union[str, Colormap, None] = None,
) -> dict[Any, tuple[float, float, float, float]]:
    """
    Assign a colour to every category of a categorical variable.

    Categories are sorted by their string form so that the same set of
    values always gets the same colours. Missing values are ignored.

    Parameters
    ----------
    values : iterable
        Category of each cell.
    cmap : str or matplotlib.colors.Colormap, optional
        Colormap to draw colours from. Defaults to 'tab10', or 'tab20'
        for more than ten categories.

    Returns
    -------
    dict
        Category to RGBA tuple.
    """
    categories = sorted({v for v in values if not is_missing(v)}, key=str)
    n = len(categories)

    if cmap is None:
        cmap = DEFAULT_CATEGORICAL_CMAP if n <= 10 else 'tab20'
    cmap = mpl.colormaps.get_cmap(cmap)

    # qualitative maps hand out their colours in order
    if isinstance(cmap, ListedColormap) and n <= cmap.N <= 20:
        colors = [cmap(i) for i in range(n)]
    elif n == 1:
        colors = [cmap(0.5)]
    else:
        colors = [cmap(i / (n - 1)) for i in range(n)]

    return {cat: tuple(float(c) for c in color) for cat, color in zip(categories, colors)}


def plot_riding_bins(
    layout: RidingBinLayout,
    ax: Axes | None = None,
    cmap: Union[str, Colormap, None] = None,
    edgecolor: Any = 'w',
    linewidth: float = 0.5,
    legend: bool = True,
    label_ridings: bool = False,
    size: float = 0.95,
    missing_color: Any = MISSING_COLOR,
) -> Union[tuple[Figure, Axes], Axes]:
    """
    Plot a riding bin layout.

    Parameters
    ----------
    layout : RidingBinLayout
        The cells to draw, as returned by riding_bins().
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, creates new figure.
    cmap : str or matplotlib.colors.Colormap, optional
        Colormap. Defaults to 'viridis' for continuous layouts and
        'tab10'/'tab20' for categorical ones.
    edgecolor : color-like, optional
        Cell edge colour (default: 'w').
    linewidth : float, optional
        Cell edge width (default: 0.5).
    legend : bool, optional
        Add a colorbar (continuous) or a legend (categorical)
        (default: True).
    label_ridings : bool, optional
        Write the riding code into every cell (default: False).
    size : float, optional
        Cell width relative to the grid spacing (default: 0.95).
    missing_color : color-like, optional
        Fill colour of cells without a value.

    Returns
    -------
    fig, ax : matplotlib Figure and Axes
        Only if ax was None; otherwise returns just ax.
    """
    generate_figure = ax is None

    if generate_figure:
        fig, ax = pl.subplots(1, 1)
    else:
        fig = ax.figure

    values = [cell.value for cell in layout]
    handles = []
    mappable = None

    if layout.continuous:
        numeric = np.array([np.nan if is_missing(v) else float(v) for v in values])
        finite = numeric[np.isfinite(numeric)]
        cmap = mpl.colormaps.get_cmap(DEFAULT_CONTINUOUS_CMAP if cmap is None else cmap)
        if len(finite) > 0:
            norm = Normalize(vmin=finite.min(), vmax=finite.max())
            mappable = ScalarMappable(norm=norm, cmap=cmap)
        color = lambda v: missing_color if not np.isfinite(v) or mappable is None else mappable.to_rgba(v)
        fills = [color(v) for v in numeric]
    else:
        palette = category_colors(values, cmap)
        fills = [missing_color if is_missing(v) else palette[v] for v in values]
        handles = [Patch(facecolor=c, edgecolor='none', label=str(cat)) for cat, c in palette.items()]

    if any(is_missing(v) for v in values):
        handles.append(Patch(facecolor=missing_color, edgecolor='none', label='NA'))

    for cell, fc in zip(layout, fills):
        patch = polygon_patch(cell.polygon(size),
                              facecolor=fc,
                              edgecolor=edgecolor,
                              lw=linewidth,
                              )
        ax.add_patch(patch)
        if label_ridings:
            ax.text(cell.x, cell.y, cell.shape_id,
                    ha='center', va='center', fontsize=3)

    xs = [cell.x for cell in layout]
    ys = [cell.y for cell in layout]
    ax.set_xlim(min(xs) - 1, max(xs) + 1)
    # rows grow downward
    ax.set_ylim(max(ys) + 1, min(ys) - 1)

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
