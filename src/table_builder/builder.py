"""
Composable builders for the city-level EV table.

Pipeline stages, each returning a new DataFrame:
- Clean: vehicle rows filtered to the target state with positive price/range;
  geo rows projected to zip_code, lat, long
- Join: vehicles left-joined to geo on zip_code (geo keys must be unique)
- Aggregate: joined rows grouped by city (count + means, nulls skipped)

run_pipeline threads every table through a PipelineContext.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from src.analysis.correlation import correlation_table
from src.configs.report import TARGET_STATE
from src.configs.sources import SOURCES
from src.table_builder.reader import read

logger = logging.getLogger(__name__)

GEO_COLUMNS = ["zip_code", "lat", "long"]
AGGREGATE_COLUMNS = [
    "city",
    "city_ev_count",
    "average_base_msrp",
    "average_electric_range",
    "lat",
    "long",
]


@dataclass
class PipelineContext:
    """Tables produced by one pipeline run."""

    base_path: Path | None = None
    target_state: str = TARGET_STATE
    raw_vehicles: pd.DataFrame | None = None
    raw_geo: pd.DataFrame | None = None
    vehicles: pd.DataFrame | None = None
    geo: pd.DataFrame | None = None
    joined: pd.DataFrame | None = None
    city_table: pd.DataFrame | None = None
    correlations: pd.DataFrame | None = None
    notes: dict = field(default_factory=dict)


def _apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    for col, val in filters.items():
        if col not in df.columns:
            continue
        df = df[df[col] == val]
    return df


def _apply_positive(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Keep rows where every listed column is > 0 (drops zeros and missing values)."""
    for col in columns:
        df = df[df[col].fillna(0) > 0]
    return df


def _report_missing_per_feature(df: pd.DataFrame, table_name: str) -> None:
    """Log missing value counts for each column."""
    n = len(df)
    missing = df.isna().sum()
    lines = [f"Missing values in {table_name} (n={n} rows):"]
    for col in df.columns:
        cnt = missing[col]
        pct = (100.0 * cnt / n) if n else 0
        lines.append(f"  {col}: {cnt} ({pct:.2f}%)")
    logger.info("\n".join(lines))


def clean_vehicles(
    df: pd.DataFrame,
    target_state: str = TARGET_STATE,
    positive: list[str] | None = None,
) -> pd.DataFrame:
    """Keep vehicle rows registered in target_state with positive base_msrp and electric_range.

    Rows failing the predicates are dropped, not reported as errors.
    """
    if positive is None:
        positive = SOURCES["vehicles"].get("positive", ["base_msrp", "electric_range"])
    filters = {**SOURCES["vehicles"].get("filters", {}), "state": target_state}
    out = _apply_filters(df, filters)
    out = _apply_positive(out, positive)
    out = out.reset_index(drop=True)
    logger.info(
        "Cleaned vehicles: kept %d of %d rows (state == %s, %s > 0)",
        len(out), len(df), target_state, " and ".join(positive),
    )
    return out


def clean_geo(df: pd.DataFrame) -> pd.DataFrame:
    """Project geo rows to zip_code, lat, long; rows without a zip_code cannot join and are dropped."""
    out = df[GEO_COLUMNS].dropna(subset=["zip_code"]).reset_index(drop=True)
    if len(out) != len(df):
        logger.warning("Dropped %d geo rows with missing zip_code", len(df) - len(out))
    return out


def join_geo(vehicles: pd.DataFrame, geo: pd.DataFrame) -> pd.DataFrame:
    """Left-join vehicles to geo on zip_code.

    Unmatched vehicles keep null lat/long. Duplicate geo keys raise ValueError,
    so the result always has exactly one row per vehicle.
    """
    dup = geo["zip_code"][geo["zip_code"].duplicated()]
    if not dup.empty:
        raise ValueError(f"Geo table has duplicate zip_code keys: {dup.unique().tolist()[:5]}")

    joined = vehicles.merge(
        geo[GEO_COLUMNS],
        on="zip_code",
        how="left",
        validate="many_to_one",
    )
    unmatched = int(joined["lat"].isna().sum())
    logger.info("Joined %d vehicles to geo on zip_code; %d without coordinates", len(joined), unmatched)
    return joined


def aggregate_by_city(joined: pd.DataFrame) -> pd.DataFrame:
    """Group joined rows by city: vehicle count plus mean price, range and coordinates.

    Means skip nulls, so a city keeps the coordinates of its matched rows and
    gets null lat/long only when none of its rows matched. Sorted by
    city_ev_count descending, then city.
    """
    no_city = int(joined["city"].isna().sum())
    if no_city:
        logger.warning("Skipping %d rows with missing city", no_city)

    out = (
        joined.dropna(subset=["city"])
        .groupby("city", as_index=False)
        .agg(
            city_ev_count=("base_msrp", "size"),
            average_base_msrp=("base_msrp", "mean"),
            average_electric_range=("electric_range", "mean"),
            lat=("lat", "mean"),
            long=("long", "mean"),
        )
    )
    out["city_ev_count"] = out["city_ev_count"].astype("int64")
    out = out.sort_values(["city_ev_count", "city"], ascending=[False, True]).reset_index(drop=True)
    logger.info("Aggregated %d rows into %d cities", len(joined) - no_city, len(out))
    return out[AGGREGATE_COLUMNS]


def build_vehicle_table(
    base_path: Path | None = None,
    path: str | Path | None = None,
    target_state: str = TARGET_STATE,
) -> pd.DataFrame:
    """Load and clean the vehicle registrations."""
    return clean_vehicles(read("vehicles", base_path, path=path), target_state=target_state)


def build_geo_table(base_path: Path | None = None, path: str | Path | None = None) -> pd.DataFrame:
    """Load and project the ZIP geocoordinates."""
    return clean_geo(read("zip_geo", base_path, path=path))


def build_city_table(
    base_path: Path | None = None,
    vehicles_path: str | Path | None = None,
    geo_path: str | Path | None = None,
    target_state: str = TARGET_STATE,
) -> pd.DataFrame:
    """Build the city aggregate table from the configured (or given) source files."""
    vehicles = build_vehicle_table(base_path, vehicles_path, target_state)
    geo = build_geo_table(base_path, geo_path)
    return aggregate_by_city(join_geo(vehicles, geo))


def run_pipeline(
    base_path: Path | None = None,
    vehicles_path: str | Path | None = None,
    geo_path: str | Path | None = None,
    target_state: str = TARGET_STATE,
) -> PipelineContext:
    """Run load → clean → join → aggregate → correlate once.

    Args:
        base_path: Project root for resolving data paths.
        vehicles_path: Override for the vehicle CSV path.
        geo_path: Override for the ZIP geo CSV path.
        target_state: Jurisdiction kept by the cleaner.

    Returns:
        PipelineContext holding every intermediate table.
    """
    ctx = PipelineContext(base_path=base_path, target_state=target_state)

    ctx.raw_vehicles = read("vehicles", base_path, path=vehicles_path)
    logger.info("Read vehicles: %d rows", len(ctx.raw_vehicles))
    ctx.raw_geo = read("zip_geo", base_path, path=geo_path)
    logger.info("Read zip_geo: %d rows", len(ctx.raw_geo))

    ctx.vehicles = clean_vehicles(ctx.raw_vehicles, target_state=target_state)
    ctx.geo = clean_geo(ctx.raw_geo)
    ctx.joined = join_geo(ctx.vehicles, ctx.geo)
    _report_missing_per_feature(ctx.joined, "joined")

    ctx.city_table = aggregate_by_city(ctx.joined)
    ctx.correlations = correlation_table(ctx.city_table)

    ctx.notes = {
        "raw_vehicle_rows": len(ctx.raw_vehicles),
        "clean_vehicle_rows": len(ctx.vehicles),
        "geo_rows": len(ctx.geo),
        "unmatched_rows": int(ctx.joined["lat"].isna().sum()),
        "city_count": len(ctx.city_table),
    }
    return ctx
