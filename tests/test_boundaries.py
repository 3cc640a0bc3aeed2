"""
Tests for boundary coordinate tables, joins and choropleths.
"""

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import MultiPolygon, Point, Polygon

from ridingbins import boundary_coordinates, join_values, plot_choropleth
from ridingbins.tools import square_cell


@pytest.fixture
def provinces() -> gpd.GeoDataFrame:
    """A square, a two-part island province and a square with a lake."""
    lake = Polygon(
        [(10, 0), (14, 0), (14, 4), (10, 4)],
        [[(11, 1), (12, 1), (12, 2), (11, 2)]],
    )
    return gpd.GeoDataFrame(
        {
            "pr_code": [35, 11, 24],
            "name": ["ON", "PE", "QC"],
            "pop": [14.2, 0.16, 8.5],
        },
        geometry=[
            square_cell(0, 0, 2),
            MultiPolygon([square_cell(5, 0), square_cell(7, 0)]),
            lake,
        ],
    )


class TestBoundaryCoordinates:

    def test_groups(self, provinces) -> None:
        coords = boundary_coordinates(provinces)
        assert list(coords.columns) == ["long", "lat", "order", "hole", "piece", "ring", "group"]
        assert coords.group.unique().tolist() == ["0.1", "1.1", "1.2", "2.1"]

    def test_rings_are_closed(self, provinces) -> None:
        coords = boundary_coordinates(provinces)
        for _, ring in coords.groupby(["group", "ring"]):
            assert (ring.long.iloc[0], ring.lat.iloc[0]) == (ring.long.iloc[-1], ring.lat.iloc[-1])

    def test_holes(self, provinces) -> None:
        coords = boundary_coordinates(provinces)
        lake = coords[coords.group == "2.1"]
        assert lake.hole.sum() == 5
        assert lake.order.tolist() == list(range(1, 11))
        assert not coords[coords.group != "2.1"].hole.any()

    def test_id_columns(self, provinces) -> None:
        coords = boundary_coordinates(provinces, id_columns=["pr_code", "name"])
        assert coords.columns[-2:].tolist() == ["pr_code", "name"]
        assert coords[coords.group == "1.2"]["name"].unique().tolist() == ["PE"]
        assert len(coords) == 5 + 5 + 5 + 10

    def test_single_id_column(self, provinces) -> None:
        coords = boundary_coordinates(provinces, id_columns="pr_code")
        assert set(coords.pr_code) == {35, 11, 24}

    def test_missing_id_column(self, provinces) -> None:
        with pytest.raises(KeyError):
            boundary_coordinates(provinces, id_columns="cd_code")

    def test_skips_missing_geometry(self, provinces) -> None:
        provinces.loc[1, "geometry"] = None
        coords = boundary_coordinates(provinces)
        assert coords.group.unique().tolist() == ["0.1", "2.1"]

    def test_rejects_points(self) -> None:
        gdf = gpd.GeoDataFrame({"a": [1]}, geometry=[Point(0, 0)])
        with pytest.raises(TypeError):
            boundary_coordinates(gdf)

    def test_simplification(self) -> None:
        jagged = Polygon([(0, 0), (1, 0), (2, 0), (3, 0), (3, 3), (0, 3)])
        gdf = gpd.GeoDataFrame({"a": [1]}, geometry=[jagged])
        coords = boundary_coordinates(gdf, simplify_threshold=0.01)
        assert len(coords) == 5

    def test_verbose(self, provinces) -> None:
        coords = boundary_coordinates(provinces, verbose=True)
        assert len(coords) == 25


class TestJoinValues:

    def test_left_join_keeps_rows(self, provinces) -> None:
        coords = boundary_coordinates(provinces, id_columns="pr_code")
        stats = pd.DataFrame({"pr_code": [35, 24], "turnout": [0.6, 0.7]})
        joined = join_values(coords, stats, on="pr_code")
        assert len(joined) == len(coords)
        assert joined[joined.pr_code == 11].turnout.isna().all()
        assert joined[joined.pr_code == 35].turnout.unique().tolist() == [0.6]

    def test_inner_join(self, provinces) -> None:
        stats = pd.DataFrame({"pr_code": [35], "turnout": [0.6]})
        joined = join_values(provinces, stats, on="pr_code", how="inner")
        assert joined["name"].tolist() == ["ON"]
        assert isinstance(joined, gpd.GeoDataFrame)

    def test_duplicate_keys(self, provinces) -> None:
        stats = pd.DataFrame({"pr_code": [35, 35], "turnout": [0.6, 0.7]})
        with pytest.raises(ValueError, match="duplicate"):
            join_values(provinces, stats, on="pr_code")

    def test_missing_key(self, provinces) -> None:
        stats = pd.DataFrame({"code": [35], "turnout": [0.6]})
        with pytest.raises(KeyError):
            join_values(provinces, stats, on="pr_code")

    def test_unsupported_how(self, provinces) -> None:
        stats = pd.DataFrame({"pr_code": [35], "turnout": [0.6]})
        with pytest.raises(ValueError):
            join_values(provinces, stats, on="pr_code", how="outer")


class TestPlotChoropleth:

    def test_continuous(self, provinces) -> None:
        fig, ax = plot_choropleth(provinces, "pop")
        assert len(ax.patches) == 3
        assert len(fig.axes) == 2

    def test_categorical(self, provinces) -> None:
        fig, ax = plot_choropleth(provinces, "name", continuous=False)
        labels = [text.get_text() for text in ax.get_legend().get_texts()]
        assert labels == ["ON", "PE", "QC"]

    def test_bounds(self, provinces) -> None:
        fig, ax = plot_choropleth(provinces, "pop", legend=False)
        assert ax.get_xlim() == pytest.approx((-1, 14))
        assert ax.get_ylim() == pytest.approx((-1, 4))

    def test_missing_column(self, provinces) -> None:
        with pytest.raises(KeyError):
            plot_choropleth(provinces, "turnout")

    def test_missing_values(self, provinces) -> None:
        provinces["pop"] = [1.0, np.nan, 3.0]
        fig, ax = plot_choropleth(provinces, "pop")
        assert len(ax.patches) == 3

    def test_empty_frame(self) -> None:
        gdf = gpd.GeoDataFrame({"pop": []}, geometry=[])
        fig, ax = plot_choropleth(gdf, "pop")
        assert len(ax.patches) == 0
        assert np.all(np.isfinite(ax.get_xlim()))

    def test_only_missing_geometry(self) -> None:
        gdf = gpd.GeoDataFrame({"name": ["ON", "PE"]}, geometry=[None, Polygon()])
        fig, ax = plot_choropleth(gdf, "name", continuous=False)
        assert len(ax.patches) == 0
        assert np.all(np.isfinite(ax.get_ylim()))
