#!/usr/bin/env python
"""
Hexagon bins with a categorical fill

Winning party per riding on a hexagonal grid, federal and for the Quebec
provincial divisions.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from ridingbins import federal_layout, quebec_layout, riding_bins, plot_riding_bins

rng = np.random.default_rng(2019)

fed_codes = sorted(federal_layout().positions)
federal = pd.DataFrame({
    'fed_num': fed_codes,
    'party': rng.choice(['LPC', 'CPC', 'NDP', 'BQ', 'GPC'], size=len(fed_codes)),
})
# a riding that does not exist, reported as a mismatch
federal.loc[len(federal)] = [99999, 'IND']

qc_codes = sorted(quebec_layout().positions)
quebec = pd.DataFrame({
    'division': qc_codes,
    'party': rng.choice(['CAQ', 'PLQ', 'QS', 'PQ'], size=len(qc_codes)),
})

fig, axes = plt.subplots(1, 2, figsize=(16, 6))

layout = riding_bins(federal, 'party', 'fed_num', continuous=False, arrange=True, shape='hexagon')
print(layout)
plot_riding_bins(layout, ax=axes[0], cmap='Set2')
axes[0].set_title(f'Federal ({layout.mismatch_count} unmatched rows)', fontsize=12)

layout = riding_bins(quebec, 'party', 'division', continuous=False,
                     shape='hexagon', provincial=True, province='QC')
plot_riding_bins(layout, ax=axes[1], label_ridings=True)
axes[1].set_title('Quebec provincial divisions', fontsize=12)

fig.tight_layout()
plt.show()
