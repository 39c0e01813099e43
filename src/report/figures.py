"""
Figures for the EV city report.

Each plot_* function takes the table it draws and returns a matplotlib Figure;
render_figures draws all six and saves them as PNGs. Inputs are never modified.
"""

import logging
from pathlib import Path

import geopandas as gpd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from src.configs.report import (
    AVERAGE_MSRP_XLIM,
    BASE_MSRP_RANGE,
    CITY_COUNT_YLIM,
    DPI,
    FIGSIZE,
    FIGURES,
    HIST_BINS,
    MAP_FIGSIZE,
    MARKER_SCALE,
)

logger = logging.getLogger(__name__)

sns.set_theme(style="whitegrid")


def _require_rows(df: pd.DataFrame, columns: list[str], figure_name: str, min_rows: int = 1) -> pd.DataFrame:
    """Return the rows with all columns present; raise ValueError if fewer than min_rows."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Cannot draw {figure_name}: missing columns {missing}")
    rows = df[columns].dropna()
    if len(rows) < min_rows:
        raise ValueError(f"Cannot draw {figure_name}: need {min_rows} rows with {columns}, got {len(rows)}")
    return rows


def load_outline(path: str | Path) -> gpd.GeoDataFrame:
    """Read a boundary file (shapefile, GeoJSON, gpkg) in lon/lat degrees."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Outline not found: {path}")
    outline = gpd.read_file(path)
    if outline.crs is not None and outline.crs.to_epsg() != 4326:
        outline = outline.to_crs(epsg=4326)
    return outline


def plot_city_density_map(city_table: pd.DataFrame, outline: gpd.GeoDataFrame | None = None) -> plt.Figure:
    """Cities as points sized by city_ev_count, over the region outline when given."""
    points = _require_rows(city_table, ["long", "lat", "city_ev_count"], "city density map")

    fig, ax = plt.subplots(figsize=MAP_FIGSIZE)
    if outline is not None:
        outline.boundary.plot(ax=ax, color="black", linewidth=0.8)
    ax.scatter(
        points["long"],
        points["lat"],
        s=points["city_ev_count"] * MARKER_SCALE,
        color="steelblue",
        alpha=0.5,
        edgecolor="navy",
        linewidth=0.3,
    )
    ax.set_title("EV Registrations by City", fontsize=14, fontweight="bold", pad=15)
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    fig.tight_layout()
    return fig


def plot_city_count_hist(city_table: pd.DataFrame) -> plt.Figure:
    rows = _require_rows(city_table, ["city_ev_count"], "city_ev_count histogram")
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.histplot(data=rows, x="city_ev_count", bins=HIST_BINS, color="steelblue", ax=ax)
    ax.set_title("Distribution of EV Count per City", fontsize=13, fontweight="bold")
    ax.set_xlabel("EVs registered in city")
    ax.set_ylabel("Number of cities")
    fig.tight_layout()
    return fig


def plot_base_msrp_hist(vehicles: pd.DataFrame) -> plt.Figure:
    """Histogram of base_msrp, binned and clamped to BASE_MSRP_RANGE."""
    rows = _require_rows(vehicles, ["base_msrp"], "base_msrp histogram")
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.histplot(data=rows, x="base_msrp", bins=HIST_BINS, binrange=BASE_MSRP_RANGE, color="coral", ax=ax)
    ax.set_xlim(*BASE_MSRP_RANGE)
    ax.set_title("Distribution of Base MSRP", fontsize=13, fontweight="bold")
    ax.set_xlabel("Base MSRP ($)")
    ax.set_ylabel("Vehicles")
    fig.tight_layout()
    return fig


def plot_electric_range_hist(vehicles: pd.DataFrame) -> plt.Figure:
    rows = _require_rows(vehicles, ["electric_range"], "electric_range histogram")
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.histplot(data=rows, x="electric_range", bins=HIST_BINS, color="seagreen", ax=ax)
    ax.set_title("Distribution of Electric Range", fontsize=13, fontweight="bold")
    ax.set_xlabel("Electric range (miles)")
    ax.set_ylabel("Vehicles")
    fig.tight_layout()
    return fig


def plot_trend(
    city_table: pd.DataFrame,
    x: str,
    title: str,
    xlabel: str,
    xlim: tuple | None = None,
    ylim: tuple | None = None,
) -> plt.Figure:
    """Scatter of x against city_ev_count with a least-squares line."""
    rows = _require_rows(city_table, [x, "city_ev_count"], f"{x} trend", min_rows=2)
    fig, ax = plt.subplots(figsize=FIGSIZE)
    sns.regplot(
        data=rows,
        x=x,
        y="city_ev_count",
        ci=None,
        scatter_kws={"alpha": 0.6, "s": 20},
        line_kws={"color": "red", "linewidth": 1.5},
        ax=ax,
    )
    if xlim is not None:
        ax.set_xlim(*xlim)
    if ylim is not None:
        ax.set_ylim(*ylim)
    ax.set_title(title, fontsize=13, fontweight="bold")
    ax.set_xlabel(xlabel)
    ax.set_ylabel("EVs registered in city")
    fig.tight_layout()
    return fig


def plot_msrp_vs_count(city_table: pd.DataFrame) -> plt.Figure:
    return plot_trend(
        city_table,
        "average_base_msrp",
        "Average Base MSRP vs EV Count per City",
        "Average base MSRP ($)",
        xlim=AVERAGE_MSRP_XLIM,
        ylim=CITY_COUNT_YLIM,
    )


def plot_range_vs_count(city_table: pd.DataFrame) -> plt.Figure:
    return plot_trend(
        city_table,
        "average_electric_range",
        "Average Electric Range vs EV Count per City",
        "Average electric range (miles)",
    )


def save_figure(fig: plt.Figure, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=DPI, bbox_inches="tight")
    plt.close(fig)
    return path


def render_figures(
    vehicles: pd.DataFrame,
    city_table: pd.DataFrame,
    output_dir: Path,
    outline_path: str | Path | None = None,
) -> dict[str, Path]:
    """Draw and save all six figures.

    A figure that cannot be drawn (e.g. empty input) is logged and skipped;
    the others are still rendered.

    Args:
        vehicles: Cleaned vehicle table.
        city_table: City aggregate table.
        output_dir: Directory receiving the PNGs.
        outline_path: Boundary file for the density map; skipped when None, missing or unreadable.

    Returns:
        Mapping of figure key (see FIGURES) to saved path, for figures that rendered.
    """
    outline = None
    if outline_path is not None and Path(outline_path).exists():
        try:
            outline = load_outline(outline_path)
        except (OSError, ValueError, RuntimeError) as e:
            logger.warning("Unreadable region outline %s (%s); drawing density map without it", outline_path, e)
    else:
        logger.warning("No region outline at %s; drawing density map without it", outline_path)

    plots = {
        "city_density_map": lambda: plot_city_density_map(city_table, outline),
        "city_count_hist": lambda: plot_city_count_hist(city_table),
        "base_msrp_hist": lambda: plot_base_msrp_hist(vehicles),
        "electric_range_hist": lambda: plot_electric_range_hist(vehicles),
        "msrp_vs_count": lambda: plot_msrp_vs_count(city_table),
        "range_vs_count": lambda: plot_range_vs_count(city_table),
    }

    saved = {}
    for key, draw in plots.items():
        try:
            fig = draw()
        except ValueError as e:
            logger.error("Skipping %s: %s", key, e)
            continue
        saved[key] = save_figure(fig, Path(output_dir) / FIGURES[key])
        logger.info("Saved %s", saved[key])
    return saved
