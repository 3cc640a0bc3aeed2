#!/usr/bin/env python
"""
Quick Start Example - Federal riding bins

Lays out every federal riding on a square grid, once at its canonical
cell and once packed per province, and colours cells by a made-up turnout.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from ridingbins import federal_layout, riding_bins, plot_riding_bins

rng = np.random.default_rng(42)
codes = sorted(federal_layout().positions)
df = pd.DataFrame({
    'riding_code': codes,
    'turnout': rng.uniform(0.5, 0.8, len(codes)),
})

fig, axes = plt.subplots(1, 2, figsize=(14, 5))

canonical = riding_bins(df, 'turnout', 'riding_code', continuous=True)
plot_riding_bins(canonical, ax=axes[0])
axes[0].set_title('Canonical cells', fontsize=12)

arranged = riding_bins(df, 'turnout', 'riding_code', continuous=True, arrange=True)
plot_riding_bins(arranged, ax=axes[1])
axes[1].set_title('Arranged by province', fontsize=12)

fig.tight_layout()

output_path = 'img/example_quickstart.png'
fig.savefig(output_path, dpi=150, bbox_inches='tight', facecolor='white')
print(f"Saved: {output_path}")

plt.show()
