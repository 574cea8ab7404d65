"""World Economic Outlook reshaping.

WEO exports are wide: identifying columns (``ISO``, ``WEO Subject Code``,
``Country``, ``Units``, ``Scale``, ...) followed by one column per year.
Values carry thousands separators and use ``n/a`` or ``--`` for missing.
"""

from __future__ import annotations

import logging
import re

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

SUBJECT_COL = "WEO Subject Code"

MISSING_MARKERS = {"", "n/a", "na", "--", "..", "nan"}

_YEAR_RE = re.compile(r"^\d{4}$")


def year_columns(df: pd.DataFrame) -> list[str]:
    """Return the columns whose names are four-digit years."""
    return [c for c in df.columns if _YEAR_RE.match(str(c).strip())]


def clean_weo_values(values: pd.Series) -> pd.Series:
    """
    Convert raw WEO cells to floats.

    Parameters
    ----------
    values : pd.Series
        Raw cells, e.g. ``"1,234.5"``, ``"n/a"``, ``"--"``.

    Returns
    -------
    pd.Series
        Float series; missing markers and unparseable cells become NaN.

    Examples
    --------
    >>> clean_weo_values(pd.Series(["1,234.5", "n/a", "--", "3"]))
    0    1234.5
    1       NaN
    2       NaN
    3       3.0
    dtype: float64
    """
    text = values.astype(str).str.strip()
    text = text.where(~text.str.lower().isin(MISSING_MARKERS), np.nan)
    text = text.str.replace(",", "", regex=False)
    return pd.to_numeric(text, errors="coerce")


def reshape_weo(
    raw: pd.DataFrame,
    subjects: list[str] | None = None,
    country_col: str = "ISO",
) -> pd.DataFrame:
    """
    Reshape a wide WEO export to a country-year panel.

    Parameters
    ----------
    raw : pd.DataFrame
        WEO export as read from CSV (preferably as strings).
    subjects : list[str] | None
        Subject codes to keep (e.g. ``["NGDP_RPCH", "LUR"]``). None keeps all.
    country_col : str, default "ISO"
        Identifier column renamed to ``country``.

    Returns
    -------
    pd.DataFrame
        Columns ``country``, ``year`` (int), then one float column per
        subject code, sorted by (country, year).

    Raises
    ------
    ValueError
        If identifier columns or year columns are missing, or a
        (country, subject, year) cell is duplicated.
    """
    for col in (country_col, SUBJECT_COL):
        if col not in raw.columns:
            raise ValueError(f"Column '{col}' not found in WEO data")

    years = year_columns(raw)
    if not years:
        raise ValueError("No year columns found in WEO data")

    df = raw[[country_col, SUBJECT_COL] + years].copy()
    df[country_col] = df[country_col].astype(str).str.strip()
    df[SUBJECT_COL] = df[SUBJECT_COL].astype(str).str.strip()

    # Footer rows ("International Monetary Fund, ...") have no subject code
    df = df[(df[SUBJECT_COL] != "") & (df[SUBJECT_COL].str.lower() != "nan")]

    if subjects is not None:
        unknown = set(subjects) - set(df[SUBJECT_COL])
        if unknown:
            logger.warning(f"WEO subjects not found in data: {sorted(unknown)}")
        df = df[df[SUBJECT_COL].isin(subjects)]

    long = df.melt(
        id_vars=[country_col, SUBJECT_COL],
        value_vars=years,
        var_name="year",
        value_name="value",
    )
    long["year"] = long["year"].astype(str).str.strip().astype(int)
    long["value"] = clean_weo_values(long["value"])

    dup = long.duplicated(subset=[country_col, SUBJECT_COL, "year"])
    if dup.any():
        first = long.loc[dup, [country_col, SUBJECT_COL]].iloc[0].tolist()
        raise ValueError(f"Duplicate WEO series for {first}")

    wide = long.pivot(index=[country_col, "year"], columns=SUBJECT_COL, values="value")
    wide.columns.name = None
    wide = wide.reset_index().rename(columns={country_col: "country"})
    wide = wide.sort_values(["country", "year"]).reset_index(drop=True)

    logger.info(
        f"Reshaped WEO data: {wide['country'].nunique()} countries, "
        f"{len(wide)} country-years, {len(wide.columns) - 2} subjects"
    )

    return wide
