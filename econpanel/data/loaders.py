"""Panel data loading utilities.

This is the only module that reads or writes dataset files. Inputs are
CSV files fetched from a URL or a local path (parquet is accepted
locally); outputs are derived datasets in CSV or parquet.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .weo import reshape_weo

logger = logging.getLogger(__name__)

# Firm financial line items coerced to numeric on load
FIRM_NUMERIC_COLUMNS = [
    "sales",
    "ebitda",
    "net_income",
    "total_assets",
    "total_debt",
    "total_equity",
    "cash",
    "capex",
]

INEQUALITY_NUMERIC_COLUMNS = ["gini", "gdp_per_capita", "gdp"]


def is_url(source: str | Path) -> bool:
    """Return True if ``source`` is an http(s) or ftp URL."""
    return isinstance(source, str) and source.lower().startswith(("http://", "https://", "ftp://"))


def read_table(
    source: str | Path,
    columns: list[str] | None = None,
    **kwargs,
) -> pd.DataFrame:
    """
    Read a CSV or parquet table from a local path or a URL.

    Parameters
    ----------
    source : str | Path
        Local file path or URL. URLs are read as CSV unless they end
        in ``.parquet``.
    columns : list[str] | None, optional
        Specific columns to load. If None, loads all columns.
    **kwargs
        Passed through to ``pd.read_csv``.

    Returns
    -------
    pd.DataFrame
        Loaded table. Index is reset (RangeIndex).

    Raises
    ------
    FileNotFoundError
        If a local file does not exist.
    ValueError
        If the file format is not supported.

    Examples
    --------
    >>> firms = read_table("data/firms.csv")
    >>> weo = read_table("https://example.org/WEOApr2024all.csv")
    """
    if is_url(source):
        suffix = Path(source.split("?", 1)[0]).suffix.lower() or ".csv"
    else:
        source = Path(source)
        if not source.exists():
            raise FileNotFoundError(f"Data file not found: {source}")
        suffix = source.suffix.lower()

    if suffix == ".parquet":
        df = pd.read_parquet(source, columns=columns)
    elif suffix in (".csv", ".txt"):
        if columns is not None:
            df = pd.read_csv(source, usecols=columns, **kwargs)
        else:
            df = pd.read_csv(source, **kwargs)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

    df = df.reset_index(drop=True)

    logger.info(f"Loaded {len(df)} rows from {source}")

    return df


def _coerce_numeric(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    for col in columns:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def _coerce_year(df: pd.DataFrame, year_col: str) -> pd.DataFrame:
    if year_col not in df.columns:
        raise ValueError(f"Year column '{year_col}' not found in DataFrame")

    years = pd.to_numeric(df[year_col], errors="coerce")
    n_bad = int(years.isna().sum())
    if n_bad > 0:
        logger.warning(f"Dropping {n_bad} rows with missing or non-numeric '{year_col}'")
        df = df.loc[years.notna()].copy()
        years = years.loc[years.notna()]
    df[year_col] = years.astype(int)
    return df


def load_firms(
    source: str | Path,
    year_col: str = "year",
    numeric_columns: list[str] | None = None,
) -> pd.DataFrame:
    """
    Load firm financials.

    Parameters
    ----------
    source : str | Path
        Local path or URL of the firm-year CSV.
    year_col : str, default "year"
        Name of the fiscal year column.
    numeric_columns : list[str] | None
        Line items coerced to numeric (non-numeric entries become NaN).
        Defaults to ``FIRM_NUMERIC_COLUMNS``.

    Returns
    -------
    pd.DataFrame
        Firm-year panel with integer ``year_col``.
    """
    if numeric_columns is None:
        numeric_columns = FIRM_NUMERIC_COLUMNS

    df = read_table(source)
    df = _coerce_year(df, year_col)
    df = _coerce_numeric(df, numeric_columns)

    return df.reset_index(drop=True)


def load_weo(
    source: str | Path,
    subjects: list[str] | None = None,
    country_col: str = "ISO",
) -> pd.DataFrame:
    """
    Load a World Economic Outlook export as a country-year panel.

    Parameters
    ----------
    source : str | Path
        Local path or URL of the WEO CSV (wide, one column per year).
    subjects : list[str] | None
        WEO subject codes to keep. None keeps all.
    country_col : str, default "ISO"
        Identifier column used as ``country``.

    Returns
    -------
    pd.DataFrame
        Columns ``country``, ``year`` and one column per subject code.
    """
    raw = read_table(source, dtype=str, keep_default_na=False)
    return reshape_weo(raw, subjects=subjects, country_col=country_col)


def load_inequality(
    source: str | Path,
    year_col: str = "year",
    numeric_columns: list[str] | None = None,
) -> pd.DataFrame:
    """
    Load Gini / GDP inequality data.

    Parameters
    ----------
    source : str | Path
        Local path or URL of the inequality CSV.
    year_col : str, default "year"
        Name of the year column.
    numeric_columns : list[str] | None
        Columns coerced to numeric. Defaults to
        ``INEQUALITY_NUMERIC_COLUMNS``.

    Returns
    -------
    pd.DataFrame
        Country-year inequality panel.
    """
    if numeric_columns is None:
        numeric_columns = INEQUALITY_NUMERIC_COLUMNS

    df = read_table(source)
    df = _coerce_year(df, year_col)
    df = _coerce_numeric(df, numeric_columns)

    return df.reset_index(drop=True)


def write_table(df: pd.DataFrame, path: str | Path) -> Path:
    """
    Write a derived dataset to CSV or parquet.

    Parameters
    ----------
    df : pd.DataFrame
        Data to write.
    path : str | Path
        Output path; the suffix selects the format.

    Returns
    -------
    Path
        The written path.

    Raises
    ------
    ValueError
        If the file format is not supported.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".parquet"):
        raise ValueError(f"Unsupported file format: {suffix}")

    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)

    logger.info(f"Wrote {len(df)} rows to {path}")

    return path
