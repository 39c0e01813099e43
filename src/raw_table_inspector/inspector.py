from pathlib import Path

import pandas as pd

from src.configs.sources import SOURCES
from src.table_builder.reader import read_file, resolve_path


def parse_config(cfg: dict, base_path: Path | None = None, path: str | Path | None = None) -> pd.DataFrame:
    """
    Load the raw table for a source config, before rename or dtype parsing.
    Paths are resolved against base_path when provided; path overrides cfg["path"].
    """
    file_path = resolve_path(str(path if path is not None else cfg["path"]), base_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Data not found: {file_path}")
    return read_file(file_path, cfg)


def inspect_dtypes(df: pd.DataFrame, expected: list[str] | None = None) -> pd.DataFrame:
    """Return one row per column: inferred dtype, missing count and whether the config expects it."""
    out = (
        df.dtypes.astype(str)
        .reset_index()
        .rename(columns={"index": "column", 0: "dtype"})
    )
    out["missing"] = df.isna().sum().values
    if expected is not None:
        out["expected"] = out["column"].isin(expected)
    return out


def inspect_sources(
    base_path: Path | None = None,
    paths: dict[str, str | Path] | None = None,
    sources: dict | None = None,
) -> dict:
    """Inspect every configured source. Values are dtype tables, or an error string when the read fails."""
    sources = sources or SOURCES
    paths = paths or {}
    results = {}
    for name, cfg in sources.items():
        expected = list(cfg.get("keys", {}).values()) + list(cfg.get("value_columns", {}).values())
        try:
            df = parse_config(cfg, base_path=base_path, path=paths.get(name))
            results[name] = inspect_dtypes(df, expected)
        except (OSError, ValueError) as e:
            results[name] = type(e).__name__ + ": " + str(e)
    return results
