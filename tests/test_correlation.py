"""Tests for src.analysis.correlation."""

import math
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.analysis.correlation import (
    CORRELATION_PAIRS,
    correlation_label,
    correlation_table,
    pearson,
)


def _city_table():
    return pd.DataFrame({
        "city": ["A", "B", "C", "D", "E"],
        "city_ev_count": [120, 80, 40, 20, 10],
        "average_base_msrp": [52000.0, 61000.0, 45000.0, 70000.0, 38000.0],
        "average_electric_range": [250.0, 220.0, 180.0, 150.0, 90.0],
        "lat": [47.6, 47.7, 47.5, None, 47.2],
        "long": [-122.3, -122.1, -122.2, None, -122.9],
    })


# --- pearson ---


def test_pearson_perfect_positive():
    x = pd.Series([1.0, 2.0, 3.0, 4.0])
    assert pearson(x, x * 2 + 1) == pytest.approx(1.0)


def test_pearson_perfect_negative():
    x = pd.Series([1.0, 2.0, 3.0, 4.0])
    assert pearson(x, -x) == pytest.approx(-1.0)


def test_pearson_symmetric_and_bounded():
    rng = np.random.default_rng(7)
    x = pd.Series(rng.normal(size=50))
    y = pd.Series(x * 0.3 + rng.normal(size=50))
    r_xy = pearson(x, y)
    assert r_xy == pytest.approx(pearson(y, x))
    assert -1.0 <= r_xy <= 1.0


def test_pearson_matches_numpy():
    t = _city_table()
    expected = np.corrcoef(t["average_electric_range"], t["city_ev_count"])[0, 1]
    assert pearson(t["average_electric_range"], t["city_ev_count"]) == pytest.approx(expected)


def test_pearson_ignores_incomplete_pairs():
    x = pd.Series([1.0, 2.0, None, 4.0])
    y = pd.Series([2.0, 4.0, 100.0, 8.0])
    assert pearson(x, y) == pytest.approx(1.0)


def test_pearson_constant_is_nan():
    assert math.isnan(pearson(pd.Series([1.0, 1.0, 1.0]), pd.Series([1.0, 2.0, 3.0])))


def test_pearson_too_few_pairs_is_nan():
    assert math.isnan(pearson(pd.Series([1.0]), pd.Series([2.0])))
    assert math.isnan(pearson(pd.Series([1.0, None]), pd.Series([None, 2.0])))


# --- correlation_table ---


def test_correlation_table_shape_and_caption():
    out = correlation_table(_city_table())
    assert out.shape == (1, 2)
    assert list(out.columns) == [correlation_label(x, y) for x, y in CORRELATION_PAIRS]
    assert out.attrs["caption"] == "Correlation Coefficients"


def test_correlation_table_rounded_to_four_decimals():
    out = correlation_table(_city_table())
    for value in out.iloc[0]:
        assert value == round(value, 4)
        assert -1.0 <= value <= 1.0


def test_correlation_table_values():
    t = _city_table()
    out = correlation_table(t)
    expected = round(t["average_electric_range"].corr(t["city_ev_count"]), 4)
    assert out["corr(average_electric_range, city_ev_count)"].iloc[0] == expected


def test_correlation_table_missing_column_raises():
    with pytest.raises(KeyError, match="average_base_msrp"):
        correlation_table(_city_table().drop(columns=["average_base_msrp"]))


def test_correlation_table_single_city_is_nan():
    out = correlation_table(_city_table().head(1))
    assert out.shape == (1, 2)
    assert out.iloc[0].isna().all()
