"""
ridingbins - Tile and hex grid maps of Canadian ridings.

This package lays out electoral districts on square or hexagonal grids,
one cell per riding, and draws the result or true boundary polygons as
choropleth maps with matplotlib.
"""

from .exceptions import RidingBinError, UnsupportedScope, NoMatchingRidings
from .reference_layout import (
    ReferenceLayout,
    get_reference_layout,
    federal_layout,
    quebec_layout,
    normalize_region,
    PROVINCE_CODES,
)
from .riding_bins import (
    GridCell,
    GridBinLayout,
    RidingBinLayout,
    riding_bins,
    arrange_region,
)
from .plotting import plot_riding_bins, category_colors, theme_map, savefig_marginless
from .boundaries import boundary_coordinates, join_values, plot_choropleth
from .tools import (
    HEX_ROW_SPACING,
    polygon_patch,
    square_cell,
    hexagon_cell,
    region_block_shape,
    simplify_polygon,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "RidingBinError",
    "UnsupportedScope",
    "NoMatchingRidings",
    # Reference layouts
    "ReferenceLayout",
    "get_reference_layout",
    "federal_layout",
    "quebec_layout",
    "normalize_region",
    "PROVINCE_CODES",
    # Grid bin layouts
    "GridCell",
    "GridBinLayout",
    "RidingBinLayout",
    "riding_bins",
    "arrange_region",
    # Drawing
    "plot_riding_bins",
    "category_colors",
    "theme_map",
    "savefig_marginless",
    "boundary_coordinates",
    "join_values",
    "plot_choropleth",
    # Utility functions
    "HEX_ROW_SPACING",
    "polygon_patch",
    "square_cell",
    "hexagon_cell",
    "region_block_shape",
    "simplify_polygon",
]
