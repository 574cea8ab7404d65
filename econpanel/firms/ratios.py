"""Firm-level financial ratios.

This module provides profitability, margin and leverage ratios for a
firm-year panel, including ROIC measured as EBITDA over lagged
invested capital.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from .growth import growth_rate, panel_lag

logger = logging.getLogger(__name__)


def _safe_divide(numerator: pd.Series, denominator: pd.Series, positive_only: bool = False) -> pd.Series:
    if positive_only:
        denominator = denominator.where(denominator > 0)
    else:
        denominator = denominator.where(denominator != 0)
    ratio = numerator / denominator
    return ratio.replace([np.inf, -np.inf], np.nan)


def invested_capital(
    df: pd.DataFrame,
    debt_col: str = "total_debt",
    equity_col: str = "total_equity",
    cash_col: str = "cash",
) -> pd.Series:
    """
    Compute invested capital.

    Formula:
        IC = total_debt + total_equity - cash

    Parameters
    ----------
    df : pd.DataFrame
        Firm-year panel.
    debt_col, equity_col, cash_col : str
        Line item columns. Missing cash is treated as zero.

    Returns
    -------
    pd.Series
        Invested capital. NaN if debt or equity is missing.
    """
    for col in (debt_col, equity_col):
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found in DataFrame")

    cash = df[cash_col].fillna(0.0) if cash_col in df.columns else 0.0
    ic = df[debt_col] + df[equity_col] - cash
    ic.name = "invested_capital"
    return ic


def roic(
    df: pd.DataFrame,
    ebitda_col: str = "ebitda",
    capital_col: str = "invested_capital",
    entity: str = "firm_id",
    time: str = "year",
) -> pd.Series:
    """
    Compute Return on Invested Capital.

    Formula:
        ROIC_t = EBITDA_t / IC_{t-1}

    Parameters
    ----------
    df : pd.DataFrame
        Firm-year panel with ``ebitda_col`` and ``capital_col``.
        If ``capital_col`` is absent it is built with
        :func:`invested_capital`.
    ebitda_col : str, default "ebitda"
        EBITDA column.
    capital_col : str, default "invested_capital"
        Invested capital column.
    entity : str, default "firm_id"
        Panel identifier.
    time : str, default "year"
        Fiscal year column.

    Returns
    -------
    pd.Series
        ROIC aligned with ``df.index``.

    Examples
    --------
    >>> df = pd.DataFrame({
    ...     "firm_id": [1, 1],
    ...     "year": [2019, 2020],
    ...     "ebitda": [20.0, 30.0],
    ...     "invested_capital": [200.0, 250.0],
    ... })
    >>> roic(df)
    0    NaN
    1    0.15
    Name: roic, dtype: float64

    Notes
    -----
    - The first year of each firm, and any year following a gap, is NaN.
    - Non-positive lagged invested capital yields NaN.
    """
    if ebitda_col not in df.columns:
        raise ValueError(f"Column '{ebitda_col}' not found in DataFrame")

    if capital_col not in df.columns:
        df = df.assign(**{capital_col: invested_capital(df)})

    lagged_ic = panel_lag(df, capital_col, entity=entity, time=time, periods=1)

    n_nonpositive = int((lagged_ic <= 0).sum())
    if n_nonpositive > 0:
        logger.warning(f"roic: {n_nonpositive} rows with non-positive lagged invested capital set to NaN")

    result = _safe_divide(df[ebitda_col], lagged_ic, positive_only=True)
    result.name = "roic"
    return result


def return_on_assets(
    df: pd.DataFrame,
    income_col: str = "net_income",
    assets_col: str = "total_assets",
    entity: str = "firm_id",
    time: str = "year",
) -> pd.Series:
    """ROA = net income over lagged total assets."""
    lagged_assets = panel_lag(df, assets_col, entity=entity, time=time, periods=1)
    result = _safe_divide(df[income_col], lagged_assets, positive_only=True)
    result.name = "roa"
    return result


def ebitda_margin(df: pd.DataFrame, ebitda_col: str = "ebitda", sales_col: str = "sales") -> pd.Series:
    """EBITDA over sales; NaN for zero sales."""
    result = _safe_divide(df[ebitda_col], df[sales_col])
    result.name = "ebitda_margin"
    return result


def leverage(df: pd.DataFrame, debt_col: str = "total_debt", assets_col: str = "total_assets") -> pd.Series:
    """Total debt over total assets; NaN for non-positive assets."""
    result = _safe_divide(df[debt_col], df[assets_col], positive_only=True)
    result.name = "leverage"
    return result


def capex_intensity(df: pd.DataFrame, capex_col: str = "capex", sales_col: str = "sales") -> pd.Series:
    result = _safe_divide(df[capex_col], df[sales_col])
    result.name = "capex_intensity"
    return result


def compute_firm_metrics(
    df: pd.DataFrame,
    entity: str = "firm_id",
    time: str = "year",
    growth: dict[str, str] | None = None,
    growth_method: str = "pct",
) -> pd.DataFrame:
    """
    Add the standard firm metrics to a firm-year panel.

    Parameters
    ----------
    df : pd.DataFrame
        Firm-year panel.
    entity : str, default "firm_id"
        Firm identifier.
    time : str, default "year"
        Fiscal year column.
    growth : dict[str, str] | None
        Mapping of level column to growth column name. Defaults to
        ``{"sales": "sales_growth", "total_assets": "asset_growth"}``.
        Level columns not in ``df`` are skipped.
    growth_method : {"pct", "log"}
        Growth definition passed to :func:`growth_rate`.

    Returns
    -------
    pd.DataFrame
        Copy of ``df`` sorted by (entity, time) with added columns
        ``invested_capital``, ``roic``, the growth columns, and
        ``ebitda_margin``, ``leverage``, ``roa``, ``capex_intensity``
        where their inputs are present.
    """
    if growth is None:
        growth = {"sales": "sales_growth", "total_assets": "asset_growth"}

    out = df.sort_values([entity, time]).reset_index(drop=True)
    cols = set(out.columns)
    added: list[str] = []

    if {"total_debt", "total_equity"} <= cols:
        out["invested_capital"] = invested_capital(out)
        added.append("invested_capital")
        if "ebitda" in cols:
            out["roic"] = roic(out, entity=entity, time=time)
            added.append("roic")

    for level_col, growth_col in growth.items():
        if level_col not in cols:
            logger.warning(f"compute_firm_metrics: '{level_col}' not in panel, skipping {growth_col}")
            continue
        out[growth_col] = growth_rate(out, level_col, entity=entity, time=time, method=growth_method)
        added.append(growth_col)

    ratio_inputs: dict[str, tuple[set[str], Any]] = {
        "ebitda_margin": ({"ebitda", "sales"}, ebitda_margin),
        "leverage": ({"total_debt", "total_assets"}, leverage),
        "capex_intensity": ({"capex", "sales"}, capex_intensity),
    }
    for name, (needed, func) in ratio_inputs.items():
        if needed <= cols:
            out[name] = func(out)
            added.append(name)

    if {"net_income", "total_assets"} <= cols:
        out["roa"] = return_on_assets(out, entity=entity, time=time)
        added.append("roa")

    logger.info(f"Computed firm metrics {added} for {len(out)} firm-years")

    return out
