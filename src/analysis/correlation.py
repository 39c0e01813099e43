"""
Pearson correlations between city-level averages and city EV counts.
"""

import logging

import pandas as pd

from src.configs.report import CORRELATION_CAPTION, CORRELATION_DECIMALS

logger = logging.getLogger(__name__)

COUNT_COLUMN = "city_ev_count"

# (x, y) pairs reported in the summary table
CORRELATION_PAIRS = [
    ("average_base_msrp", COUNT_COLUMN),
    ("average_electric_range", COUNT_COLUMN),
]


def pearson(x: pd.Series, y: pd.Series) -> float:
    """Pearson r over the rows where both x and y are present.

    Returns NaN when fewer than two complete pairs remain or either side is
    constant.
    """
    pairs = pd.concat([x.astype("float64"), y.astype("float64")], axis=1).dropna()
    if len(pairs) < 2:
        logger.warning("Correlation undefined: %d complete pairs", len(pairs))
        return float("nan")
    r = pairs.iloc[:, 0].corr(pairs.iloc[:, 1], method="pearson")
    if pd.isna(r):
        return float("nan")
    # floating error can push |r| a hair past 1
    return float(min(1.0, max(-1.0, r)))


def correlation_label(x_col: str, y_col: str) -> str:
    return f"corr({x_col}, {y_col})"


def correlation_table(
    city_table: pd.DataFrame,
    pairs: list[tuple[str, str]] | None = None,
    decimals: int = CORRELATION_DECIMALS,
) -> pd.DataFrame:
    """Build the one-row correlation summary.

    Args:
        city_table: City aggregate (see builder.aggregate_by_city).
        pairs: (x, y) column pairs. Default: CORRELATION_PAIRS.
        decimals: Rounding applied to every coefficient.

    Returns:
        One-row DataFrame, one column per pair, with the caption in attrs["caption"].
    """
    pairs = pairs or CORRELATION_PAIRS
    missing = [c for pair in pairs for c in pair if c not in city_table.columns]
    if missing:
        raise KeyError(f"City table is missing columns {missing}")
    row = {
        correlation_label(x_col, y_col): round(pearson(city_table[x_col], city_table[y_col]), decimals)
        for x_col, y_col in pairs
    }
    out = pd.DataFrame([row])
    out.attrs["caption"] = CORRELATION_CAPTION
    return out
