import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as pl
import pandas as pd
import pytest

from ridingbins import ReferenceLayout, federal_layout


@pytest.fixture(autouse=True)
def close_figures():
    yield
    pl.close("all")


@pytest.fixture
def toy_reference() -> ReferenceLayout:
    """Three ridings of region 'A' with scattered canonical cells."""
    return ReferenceLayout(
        "toy",
        positions={10: (0, 0), 20: (0, 5), 30: (3, 2)},
        regions={10: "A", 20: "A", 30: "A"},
        anchors={"A": (10, 10)},
    )


@pytest.fixture
def two_region_reference() -> ReferenceLayout:
    """Five ridings in regions 'A' (anchor further down) and 'B'."""
    return ReferenceLayout(
        "two",
        positions={1: (0, 0), 2: (0, 1), 3: (1, 0), 7: (5, 5), 8: (5, 6)},
        regions={1: "A", 2: "A", 3: "A", 7: "B", 8: "B"},
        anchors={"A": (4, 0), "B": (0, 0)},
    )


@pytest.fixture
def federal_frame() -> pd.DataFrame:
    """One row per federal riding with a numeric and a categorical value."""
    codes = sorted(federal_layout().positions)
    return pd.DataFrame({
        "riding_code": codes,
        "turnout": [0.5 + (code % 40) / 100 for code in codes],
        "party": ["LPC", "CPC", "NDP", "BQ", "GPC"] * 67 + ["LPC", "CPC", "NDP"],
    })
