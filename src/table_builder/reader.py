"""
Generic reader: load any table from SOURCES config into a DataFrame.

Single entry point for both source tables. Handles CSV parsing errors,
required-column checks, rename/select to canonical names and dtype parsing
(including the explicit ZIP code parse used for joins).
"""

from pathlib import Path

import pandas as pd

from src.configs.sources import SOURCES


def resolve_path(path_str: str, base_path: Path | None) -> Path:
    p = Path(path_str)
    if not p.is_absolute() and base_path is not None:
        return base_path / p
    return p


def read_file(path: Path, spec: dict) -> pd.DataFrame:
    """Read a raw source file as configured; parser failures surface as OSError."""
    fmt = spec.get("format", "csv").lower()
    if fmt != "csv":
        raise ValueError(f"Unsupported format: {fmt}")
    try:
        return pd.read_csv(path, low_memory=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise OSError(f"Malformed table {path}: {e}") from e


def _check_columns(df: pd.DataFrame, required: list[str], table_name: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Table '{table_name}' is missing columns {missing}. Found: {list(df.columns)}")


def _rename_and_select(df: pd.DataFrame, keys: dict, value_columns: dict) -> pd.DataFrame:
    rename = {}
    if keys:
        rename.update({v: k for k, v in keys.items()})
    if value_columns:
        rename.update({v: k for k, v in value_columns.items()})
    df = df.rename(columns=rename)
    keep = list((keys or {}).keys()) + list((value_columns or {}).keys())
    keep = [c for c in keep if c in df.columns]
    return df[keep].copy()


def parse_zip_codes(values: pd.Series, table_name: str = "") -> pd.Series:
    """Parse postal codes to nullable integers.

    Accepts ints, integral floats and digit strings (surrounding whitespace and a
    ZIP+4 suffix are tolerated, leading zeros are dropped). Missing values stay
    missing. Anything else raises ValueError listing the offending values.
    """
    text = values.astype("string").str.strip().replace("", pd.NA)
    text = text.str.replace(r"^(\d{5})-\d{4}$", r"\1", regex=True)
    raw = text.astype(object).where(text.notna(), None)
    parsed = pd.to_numeric(raw, errors="coerce").astype("float64")
    present = text.notna().to_numpy(dtype=bool)
    invalid = present & (parsed.isna().to_numpy() | (parsed.fillna(0) % 1 != 0).to_numpy())
    if invalid.any():
        bad = text[invalid].unique().tolist()[:5]
        raise ValueError(f"Non-numeric zip codes in '{table_name}': {bad}")
    return parsed.astype("Int64")


def _parse_float(values: pd.Series, column: str, table_name: str) -> pd.Series:
    parsed = pd.to_numeric(values, errors="coerce")
    invalid = (values.notna() & parsed.isna()).to_numpy(dtype=bool)
    if invalid.any():
        bad = values[invalid].astype(str).unique().tolist()[:5]
        raise ValueError(f"Non-numeric values in '{table_name}.{column}': {bad}")
    return parsed.astype("float64")


def _apply_dtypes(df: pd.DataFrame, dtypes: dict, table_name: str) -> pd.DataFrame:
    df = df.copy()
    for col, dtype in dtypes.items():
        if col not in df.columns:
            continue
        if dtype == "zip":
            df[col] = parse_zip_codes(df[col], table_name)
        elif dtype in ("string", "str"):
            df[col] = df[col].astype("string").str.strip()
        elif dtype.startswith("float"):
            df[col] = _parse_float(df[col], col, table_name)
        else:
            df[col] = df[col].astype(dtype)
    return df


def read(table_name: str, base_path: Path | None = None, path: str | Path | None = None) -> pd.DataFrame:
    """Load a single table from SOURCES into a DataFrame.

    Args:
        table_name: Key in SOURCES ('vehicles' or 'zip_geo').
        base_path: Project root for resolving relative paths.
        path: Optional file path overriding the configured one.

    Returns:
        DataFrame with canonical column names and parsed dtypes.
    """
    if table_name not in SOURCES:
        raise KeyError(f"Unknown table '{table_name}'. Available: {list(SOURCES)}")
    spec = SOURCES[table_name]

    file_path = resolve_path(str(path if path is not None else spec["path"]), base_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Data not found: {file_path}")
    df = read_file(file_path, spec)

    keys = spec.get("keys", {})
    value_columns = spec.get("value_columns", {})
    _check_columns(df, list(keys.values()) + list(value_columns.values()), table_name)

    df = _rename_and_select(df, keys, value_columns)

    if "dtypes" in spec:
        df = _apply_dtypes(df, spec["dtypes"], table_name)

    return df
