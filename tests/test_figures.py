"""Tests for src.report.figures."""

import sys
from pathlib import Path

import geopandas as gpd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.report import FIGURES
from src.report.figures import (
    load_outline,
    plot_base_msrp_hist,
    plot_city_count_hist,
    plot_city_density_map,
    plot_electric_range_hist,
    plot_msrp_vs_count,
    plot_range_vs_count,
    render_figures,
)


def _city_table():
    return pd.DataFrame({
        "city": ["Seattle", "Bellevue", "Redmond", "Nowhere"],
        "city_ev_count": [150, 60, 45, 3],
        "average_base_msrp": [52000.0, 78000.0, 61000.0, 40000.0],
        "average_electric_range": [230.0, 260.0, 240.0, 90.0],
        "lat": [47.61, 47.61, 47.67, None],
        "long": [-122.33, -122.20, -122.12, None],
    })


def _vehicles():
    return pd.DataFrame({
        "city": ["Seattle", "Seattle", "Bellevue", "Redmond"],
        "base_msrp": [40000.0, 250000.0, 90000.0, 60000.0],
        "electric_range": [200.0, 330.0, 150.0, 300.0],
    })


def _outline(tmp_path):
    centre = gpd.GeoSeries(gpd.points_from_xy([-120.5], [47.3]), crs="EPSG:4326")
    outline = gpd.GeoDataFrame({"name": ["region"]}, geometry=centre.buffer(3), crs="EPSG:4326")
    path = tmp_path / "outline.geojson"
    outline.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def test_density_map_without_outline():
    fig = plot_city_density_map(_city_table())
    ax = fig.axes[0]
    # one point per city with coordinates
    assert len(ax.collections[0].get_offsets()) == 3


def test_density_map_marker_size_follows_count():
    fig = plot_city_density_map(_city_table())
    sizes = fig.axes[0].collections[0].get_sizes()
    assert sizes[0] > sizes[1] > sizes[2]


def test_density_map_with_outline(tmp_path):
    outline = load_outline(_outline(tmp_path))
    fig = plot_city_density_map(_city_table(), outline)
    assert len(fig.axes[0].collections) >= 2


def test_load_outline_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_outline(tmp_path / "nope.geojson")


def test_histograms_return_figures():
    assert plot_city_count_hist(_city_table()).axes
    assert plot_electric_range_hist(_vehicles()).axes


def test_base_msrp_hist_clamped():
    fig = plot_base_msrp_hist(_vehicles())
    assert fig.axes[0].get_xlim() == (0, 200000)


def test_msrp_trend_clamped():
    fig = plot_msrp_vs_count(_city_table())
    ax = fig.axes[0]
    assert ax.get_xlim() == (30000, 110000)
    assert ax.get_ylim() == (0, 200)
    # scatter + regression line
    assert len(ax.lines) == 1


def test_range_trend_has_line():
    fig = plot_range_vs_count(_city_table())
    assert len(fig.axes[0].lines) == 1


def test_trend_needs_two_rows():
    with pytest.raises(ValueError, match="need 2 rows"):
        plot_range_vs_count(_city_table().head(1))


def test_empty_table_raises():
    with pytest.raises(ValueError, match="Cannot draw"):
        plot_city_count_hist(_city_table().iloc[0:0])


def test_render_figures_writes_all(tmp_path):
    saved = render_figures(_vehicles(), _city_table(), tmp_path / "out", outline_path=_outline(tmp_path))
    assert set(saved) == set(FIGURES)
    for key, path in saved.items():
        assert path.name == FIGURES[key]
        assert path.exists()


def test_render_figures_missing_outline_still_draws_map(tmp_path):
    saved = render_figures(_vehicles(), _city_table(), tmp_path, outline_path=tmp_path / "missing.geojson")
    assert "city_density_map" in saved


def test_render_figures_skips_failing_figures(tmp_path):
    saved = render_figures(_vehicles(), _city_table().iloc[0:0], tmp_path)
    assert set(saved) == {"base_msrp_hist", "electric_range_hist"}


def test_render_figures_unreadable_outline_still_draws_map(tmp_path):
    broken = tmp_path / "broken.geojson"
    broken.write_text("this is not a boundary file")
    saved = render_figures(_vehicles(), _city_table(), tmp_path / "out", outline_path=broken)
    assert set(saved) == set(FIGURES)
    assert saved["city_density_map"].exists()
