"""Panel lag operator and growth rates.

Lags are taken on the calendar, not on row position: the value lagged
``k`` periods at year ``t`` is the same entity's value at exactly
``t - k``. A missing year is never bridged and lags never cross entities.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from econpanel.data.validation import assert_unique_keys

logger = logging.getLogger(__name__)


def panel_lag(
    df: pd.DataFrame,
    column: str,
    entity: str = "firm_id",
    time: str = "year",
    periods: int = 1,
) -> pd.Series:
    """
    Lag a column within each entity using the time variable.

    Parameters
    ----------
    df : pd.DataFrame
        Panel with ``entity``, ``time`` and ``column``.
    column : str
        Column to lag.
    entity : str, default "firm_id"
        Panel identifier.
    time : str, default "year"
        Integer time variable.
    periods : int, default 1
        Number of periods to lag. Negative values give leads.

    Returns
    -------
    pd.Series
        Lagged values aligned with ``df.index``. NaN where the entity
        has no observation at ``time - periods``.

    Raises
    ------
    ValueError
        If columns are missing or (entity, time) is not unique.

    Examples
    --------
    >>> df = pd.DataFrame({
    ...     "firm_id": [1, 1, 1],
    ...     "year": [2018, 2019, 2021],
    ...     "sales": [100.0, 110.0, 130.0],
    ... })
    >>> panel_lag(df, "sales")
    0      NaN
    1    100.0
    2      NaN
    Name: L1.sales, dtype: float64
    """
    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in DataFrame")
    assert_unique_keys(df, [entity, time])

    shifted = df[[entity, time, column]].copy()
    shifted[time] = shifted[time] + periods
    shifted = shifted.rename(columns={column: "_lagged"})

    merged = df[[entity, time]].merge(shifted, on=[entity, time], how="left")
    name = f"L{periods}.{column}" if periods >= 0 else f"F{-periods}.{column}"

    return pd.Series(merged["_lagged"].to_numpy(), index=df.index, name=name)


def growth_rate(
    df: pd.DataFrame,
    column: str,
    entity: str = "firm_id",
    time: str = "year",
    periods: int = 1,
    method: str = "pct",
) -> pd.Series:
    """
    Compute the growth rate of a column over ``periods`` years.

    Formula:
        pct: g_t = x_t / x_{t-k} - 1
        log: g_t = ln(x_t) - ln(x_{t-k})

    Parameters
    ----------
    df : pd.DataFrame
        Panel with ``entity``, ``time`` and ``column``.
    column : str
        Level variable, e.g. ``"sales"``.
    entity : str, default "firm_id"
        Panel identifier.
    time : str, default "year"
        Integer time variable.
    periods : int, default 1
        Horizon ``k`` in years.
    method : {"pct", "log"}
        Growth definition.

    Returns
    -------
    pd.Series
        Growth rate aligned with ``df.index``.

    Raises
    ------
    ValueError
        If method is not "pct" or "log".

    Notes
    -----
    - NaN where the lagged value is missing (including gaps in years).
    - ``pct`` yields NaN for a zero base; ``log`` yields NaN unless both
      values are strictly positive. Never returns inf.
    """
    if method not in ("pct", "log"):
        raise ValueError(f"method must be 'pct' or 'log', got '{method}'")

    current = pd.to_numeric(df[column], errors="coerce")
    lagged = panel_lag(df, column, entity=entity, time=time, periods=periods)

    if method == "pct":
        base = lagged.where(lagged != 0)
        growth = current / base - 1
    else:
        valid = (current > 0) & (lagged > 0)
        with np.errstate(divide="ignore", invalid="ignore"):
            growth = np.log(current.where(valid)) - np.log(lagged.where(valid))

    growth = growth.replace([np.inf, -np.inf], np.nan)

    n_degenerate = int((lagged.notna() & current.notna() & growth.isna()).sum())
    if n_degenerate > 0:
        logger.warning(f"growth_rate({column}): {n_degenerate} rows with degenerate base set to NaN")

    growth.name = f"{column}_growth"
    return growth
