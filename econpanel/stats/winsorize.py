"""Winsorization.

Outlier mitigation by capping (or trimming) values beyond sample
percentiles, optionally within groups such as fiscal years.
"""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def _check_bounds(lower: float, upper: float) -> None:
    if not (0.0 <= lower < upper <= 1.0):
        raise ValueError(f"Quantile bounds must satisfy 0 <= lower < upper <= 1, got ({lower}, {upper})")


def winsorize(
    series: pd.Series,
    lower: float = 0.01,
    upper: float = 0.99,
    method: str = "cap",
) -> pd.Series:
    """
    Winsorize a series at the given quantiles.

    Parameters
    ----------
    series : pd.Series
        Values to winsorize. NaN is ignored and preserved.
    lower : float, default 0.01
        Lower quantile.
    upper : float, default 0.99
        Upper quantile.
    method : {"cap", "trim"}
        ``cap`` replaces extreme values with the quantile value;
        ``trim`` replaces them with NaN.

    Returns
    -------
    pd.Series
        Winsorized series with the same index and name.

    Raises
    ------
    ValueError
        If the bounds are invalid or method is unknown.

    Examples
    --------
    >>> s = pd.Series([1.0, 2.0, 3.0, 4.0, 100.0])
    >>> winsorize(s, lower=0.0, upper=0.75)
    0    1.0
    1    2.0
    2    3.0
    3    4.0
    4    4.0
    dtype: float64
    """
    _check_bounds(lower, upper)
    if method not in ("cap", "trim"):
        raise ValueError(f"method must be 'cap' or 'trim', got '{method}'")

    values = pd.to_numeric(series, errors="coerce")
    if values.dropna().empty:
        return values

    lo = values.quantile(lower)
    hi = values.quantile(upper)

    if method == "cap":
        return values.clip(lo, hi)

    return values.where((values >= lo) & (values <= hi))


def winsorize_columns(
    df: pd.DataFrame,
    columns: list[str],
    lower: float = 0.01,
    upper: float = 0.99,
    by: str | list[str] | None = None,
    method: str = "cap",
    suffix: str | None = None,
) -> pd.DataFrame:
    """
    Winsorize several columns of a panel.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data.
    columns : list[str]
        Columns to winsorize. Columns not present are skipped with a
        warning.
    lower, upper : float
        Quantile bounds.
    by : str | list[str] | None
        Group columns; quantiles are computed within each group
        (e.g. ``"year"``). None uses the pooled sample. Rows with a
        missing group key are left unchanged.
    method : {"cap", "trim"}
        See :func:`winsorize`.
    suffix : str | None
        If given, results go to ``<col><suffix>`` and the originals are
        kept (e.g. ``"_w"``). Otherwise columns are replaced.

    Returns
    -------
    pd.DataFrame
        Copy of ``df`` with winsorized columns.
    """
    _check_bounds(lower, upper)

    out = df.copy()

    null_keys = None
    if by is not None:
        by_cols = [by] if isinstance(by, str) else list(by)
        null_keys = out[by_cols].isna().any(axis=1)
        if null_keys.any():
            logger.warning(
                f"winsorize_columns: {int(null_keys.sum())} rows with missing {by_cols} left unchanged"
            )

    for col in columns:
        if col not in out.columns:
            logger.warning(f"winsorize_columns: column '{col}' not found, skipping")
            continue

        if by is None:
            result = winsorize(out[col], lower=lower, upper=upper, method=method)
        else:
            result = out.groupby(by, group_keys=False)[col].transform(
                lambda s: winsorize(s, lower=lower, upper=upper, method=method)
            )
            result = result.where(~null_keys, pd.to_numeric(out[col], errors="coerce"))

        changed = int((result != out[col]).sum() - (result.isna() & out[col].isna()).sum())
        logger.debug(f"winsorize_columns: {col} changed {changed} values")

        target = f"{col}{suffix}" if suffix else col
        out[target] = result

    logger.info(f"Winsorized {len(columns)} columns at [{lower}, {upper}] ({method})")

    return out
