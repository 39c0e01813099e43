"""Tests for src.raw_table_inspector.inspector."""

import sys
from pathlib import Path

import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.configs.sources import SOURCES
from src.raw_table_inspector.inspector import inspect_dtypes, inspect_sources, parse_config


def test_parse_config_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_config(SOURCES["zip_geo"], base_path=tmp_path)


def test_parse_config_reads_raw_columns(tmp_path):
    p = tmp_path / "geo.csv"
    p.write_text("zip,lat,lng\n98101,47.6,-122.3\n")
    df = parse_config(SOURCES["zip_geo"], path=p)
    assert list(df.columns) == ["zip", "lat", "lng"]


def test_inspect_dtypes_missing_and_expected():
    df = pd.DataFrame({"zip": [1, 2], "lat": [1.0, None], "extra": ["a", "b"]})
    out = inspect_dtypes(df, expected=["zip", "lat", "lng"])
    assert list(out.columns) == ["column", "dtype", "missing", "expected"]
    assert out.set_index("column").loc["lat", "missing"] == 1
    assert out["expected"].tolist() == [True, True, False]


def test_inspect_sources_reports_errors_and_tables(tmp_path):
    geo = tmp_path / "geo.csv"
    geo.write_text("zip,lat,lng\n98101,47.6,-122.3\n")
    results = inspect_sources(base_path=tmp_path, paths={"zip_geo": geo})
    assert isinstance(results["zip_geo"], pd.DataFrame)
    assert isinstance(results["vehicles"], str)
    assert results["vehicles"].startswith("FileNotFoundError")
