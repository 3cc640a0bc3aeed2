#!/usr/bin/env python
"""
Choropleth Example

Draws a boundary file (any polygon layer geopandas can read, already
projected) filled by a statistic joined on a code column, and exports the
flattened vertex table.

Usage: python example_choropleth.py provinces.shp PRUID
"""

import sys
import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as plt
from ridingbins import boundary_coordinates, join_values, plot_choropleth, savefig_marginless

shape_file, code_column = sys.argv[1], sys.argv[2]

gdf = gpd.read_file(shape_file)
stats = pd.DataFrame({
    code_column: gdf[code_column].unique(),
})
stats['growth'] = np.random.default_rng(1).normal(0.05, 0.02, len(stats))

gdf = join_values(gdf, stats, on=code_column)

fig, ax = plot_choropleth(gdf, 'growth', cmap='RdBu')
savefig_marginless('img/example_choropleth.png', fig, ax, dpi=150)

coords = boundary_coordinates(gdf, id_columns=code_column, simplify_threshold=1e4, verbose=True)
coords = join_values(coords, stats, on=code_column)
coords.to_csv('img/example_choropleth_coordinates.csv', index=False)
print(coords.head())

plt.show()
