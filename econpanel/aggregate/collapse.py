"""Collapse a panel to group-level aggregates.

Typical use reduces a firm-year panel to one row per country-year.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_STATS = ("mean", "median", "sum", "count", "sd", "min", "max", "first", "last")
WEIGHTED_STATS = ("mean", "sum")

_PCTILE_RE = re.compile(r"^p(\d{1,2})$")


def _check_stat(stat: str) -> None:
    if stat in SUPPORTED_STATS:
        return
    match = _PCTILE_RE.match(stat)
    if match and 1 <= int(match.group(1)) <= 99:
        return
    raise ValueError(f"Unknown statistic '{stat}'. Use one of {SUPPORTED_STATS} or p1..p99")


def _normalize_stats(stats: dict[str, Any]) -> dict[str, tuple[str, str]]:
    """Map output column -> (statistic, source column)."""
    spec: dict[str, tuple[str, str]] = {}
    for out_col, value in stats.items():
        if isinstance(value, str):
            stat, source = value, out_col
        elif isinstance(value, (list, tuple)) and len(value) == 2:
            stat, source = value[0], value[1]
        else:
            raise ValueError(f"Invalid collapse entry for '{out_col}': {value!r}")
        _check_stat(stat)
        spec[out_col] = (stat, source)
    return spec


def _reduce(values: pd.Series, stat: str, weights: pd.Series | None = None) -> float:
    values = pd.to_numeric(values, errors="coerce")
    mask = values.notna()
    if weights is not None:
        mask &= weights.notna() & (weights > 0)
    clean = values[mask]

    if stat == "count":
        return float(len(clean))
    if len(clean) == 0:
        return np.nan

    if weights is not None and stat in WEIGHTED_STATS:
        w = weights[mask]
        if stat == "mean":
            return float((clean * w).sum() / w.sum())
        return float((clean * w).sum())

    if stat == "mean":
        return float(clean.mean())
    if stat == "median":
        return float(clean.median())
    if stat == "sum":
        return float(clean.sum())
    if stat == "sd":
        return float(clean.std(ddof=1)) if len(clean) > 1 else np.nan
    if stat == "min":
        return float(clean.min())
    if stat == "max":
        return float(clean.max())
    if stat == "first":
        return float(clean.iloc[0])
    if stat == "last":
        return float(clean.iloc[-1])

    pct = int(_PCTILE_RE.match(stat).group(1))
    return float(clean.quantile(pct / 100))


def collapse(
    df: pd.DataFrame,
    by: str | list[str],
    stats: dict[str, Any],
    weights: str | None = None,
) -> pd.DataFrame:
    """
    Collapse a panel to one row per group.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data.
    by : str | list[str]
        Group columns, e.g. ``["country", "year"]``.
    stats : dict[str, Any]
        Output column -> ``(statistic, source column)``, or a statistic
        name applied to the same-named column. Statistics: ``mean``,
        ``median``, ``sum``, ``count``, ``sd``, ``min``, ``max``,
        ``first``, ``last`` (first/last non-missing) and ``p1``..``p99``.
    weights : str | None
        Weight column. Weighted mean and sum use it; other statistics are
        computed over observations with a positive weight.

    Returns
    -------
    pd.DataFrame
        Columns ``by`` followed by the output columns, sorted by ``by``.

    Raises
    ------
    ValueError
        If a column is missing or a statistic is unknown.

    Examples
    --------
    >>> collapse(
    ...     firms,
    ...     by=["country", "year"],
    ...     stats={"roic": ("mean", "roic"), "n_firms": ("count", "roic")},
    ... )
      country  year   roic  n_firms
    0     FRA  2020  0.112       41
    1     USA  2020  0.135      310

    Notes
    -----
    A group whose inputs are all missing yields NaN for every statistic
    except ``count`` (0); in particular an all-missing ``sum`` is NaN.
    """
    by = [by] if isinstance(by, str) else list(by)
    spec = _normalize_stats(stats)

    needed = set(by) | {source for _, source in spec.values()}
    if weights is not None:
        needed.add(weights)
    missing = needed - set(df.columns)
    if missing:
        raise ValueError(f"Columns not found: {missing}")

    n_null_keys = int(df[by].isna().any(axis=1).sum())
    if n_null_keys > 0:
        logger.warning(f"collapse: dropping {n_null_keys} rows with missing group keys")

    rows = []
    for key, group in df.groupby(by, sort=True):
        key = key if isinstance(key, tuple) else (key,)
        w = pd.to_numeric(group[weights], errors="coerce") if weights is not None else None
        row = dict(zip(by, key))
        for out_col, (stat, source) in spec.items():
            row[out_col] = _reduce(group[source], stat, w)
        rows.append(row)

    result = pd.DataFrame(rows, columns=by + list(spec))

    for out_col, (stat, _) in spec.items():
        if stat == "count":
            result[out_col] = result[out_col].astype(int)

    logger.info(f"Collapsed {len(df)} rows to {len(result)} groups by {by}")

    return result


def count_entities(
    df: pd.DataFrame,
    by: str | list[str],
    entity: str = "firm_id",
    name: str = "n_firms",
) -> pd.DataFrame:
    """
    Count distinct entities per group.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data.
    by : str | list[str]
        Group columns.
    entity : str, default "firm_id"
        Entity identifier.
    name : str, default "n_firms"
        Output column name.

    Returns
    -------
    pd.DataFrame
        Columns ``by`` and ``name``.
    """
    by = [by] if isinstance(by, str) else list(by)
    if entity not in df.columns:
        raise ValueError(f"Column '{entity}' not found in DataFrame")

    counts = df.groupby(by, sort=True)[entity].nunique().rename(name).reset_index()
    return counts
