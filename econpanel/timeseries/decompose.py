"""Classical time-series decomposition.

Trend, seasonal and irregular components estimated by a single OLS
regression of the series on a polynomial time trend and seasonal
dummies:

    y_t = a + b_1 t + ... + b_k t^k + sum_s g_s D_{s,t} + e_t

The seasonal effects are centred to mean zero over a cycle and their
mean is absorbed into the trend, so ``trend + seasonal + irregular``
reproduces the observed series exactly (products for the
multiplicative model).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.tsa.filters.hp_filter import hpfilter

logger = logging.getLogger(__name__)


@dataclass
class DecompositionResult:
    """Components of a decomposed series.

    Attributes
    ----------
    observed : pd.Series
        Input series.
    trend : pd.Series
        Polynomial trend (including the mean seasonal level).
    seasonal : pd.Series
        Seasonal effects, mean zero over a cycle. Zero (additive) or one
        (multiplicative) when there is no seasonality.
    irregular : pd.Series
        Residual component. NaN where the input is missing.
    params : pd.Series
        OLS coefficients.
    rsquared : float
        OLS R-squared.
    model : str
        "additive" or "multiplicative".
    period : int
        Seasonal period (1 for none).
    meta : dict[str, Any]
        Extra info (trend_order, nobs).
    """

    observed: pd.Series
    trend: pd.Series
    seasonal: pd.Series
    irregular: pd.Series
    params: pd.Series
    rsquared: float
    model: str = "additive"
    period: int = 1
    meta: dict[str, Any] = field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        """Components as columns."""
        return pd.DataFrame({
            "observed": self.observed,
            "trend": self.trend,
            "seasonal": self.seasonal,
            "irregular": self.irregular,
        })


def _design_matrix(n: int, trend_order: int, period: int) -> pd.DataFrame:
    t = np.arange(n, dtype=float)
    columns: dict[str, np.ndarray] = {"const": np.ones(n)}
    for power in range(1, trend_order + 1):
        columns[f"t{power}" if power > 1 else "t"] = t ** power
    season = np.arange(n) % period
    for s in range(1, period):
        columns[f"season_{s}"] = (season == s).astype(float)
    return pd.DataFrame(columns)


def decompose(
    series: pd.Series,
    period: int | None = None,
    trend_order: int = 1,
    model: str = "additive",
) -> DecompositionResult:
    """
    Decompose a series into trend, seasonal and irregular components.

    Parameters
    ----------
    series : pd.Series
        Regularly spaced observations in time order. Missing values are
        excluded from estimation.
    period : int | None
        Seasonal period (4 for quarterly, 12 for monthly). None or 1
        means no seasonal component (annual data).
    trend_order : int, default 1
        Degree of the polynomial time trend (0 for a constant).
    model : {"additive", "multiplicative"}
        Multiplicative decomposes ``log(series)`` and exponentiates
        the components.

    Returns
    -------
    DecompositionResult
        Components aligned with ``series.index``.

    Raises
    ------
    ValueError
        If options are invalid, there are too few observations, or the
        multiplicative model receives non-positive values.

    Examples
    --------
    >>> res = decompose(gdp_quarterly, period=4)
    >>> res.to_frame().head()
    """
    if model not in ("additive", "multiplicative"):
        raise ValueError(f"model must be 'additive' or 'multiplicative', got '{model}'")
    if trend_order < 0:
        raise ValueError(f"trend_order must be >= 0, got {trend_order}")
    period = 1 if period is None else int(period)
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    observed = pd.to_numeric(series, errors="coerce").astype(float)
    y = observed

    if model == "multiplicative":
        if (observed.dropna() <= 0).any():
            raise ValueError("Multiplicative decomposition requires strictly positive values")
        y = np.log(observed)

    X = _design_matrix(len(y), trend_order, period)
    X.index = y.index

    mask = y.notna().to_numpy()
    n_params = X.shape[1]
    if mask.sum() <= n_params:
        raise ValueError(
            f"Need more than {n_params} observations for trend_order={trend_order}, "
            f"period={period}; got {int(mask.sum())}"
        )

    fit = sm.OLS(y[mask], X[mask]).fit()
    params = fit.params

    trend_cols = [c for c in X.columns if not c.startswith("season_")]
    season_cols = [c for c in X.columns if c.startswith("season_")]

    trend = X[trend_cols] @ params[trend_cols]
    if season_cols:
        raw_seasonal = X[season_cols] @ params[season_cols]
        # Baseline season has effect 0; centre the cycle on zero
        level = float(np.concatenate([[0.0], params[season_cols].to_numpy()]).mean())
        seasonal = raw_seasonal - level
        trend = trend + level
    else:
        seasonal = pd.Series(0.0, index=y.index)

    irregular = y - trend - seasonal

    if model == "multiplicative":
        trend = np.exp(trend)
        seasonal = np.exp(seasonal)
        irregular = np.exp(irregular)

    logger.info(
        f"Decomposed series '{series.name}' ({model}, period={period}, "
        f"trend_order={trend_order}): R2={fit.rsquared:.3f}"
    )

    return DecompositionResult(
        observed=observed.rename("observed"),
        trend=trend.rename("trend"),
        seasonal=seasonal.rename("seasonal"),
        irregular=irregular.rename("irregular"),
        params=params,
        rsquared=float(fit.rsquared),
        model=model,
        period=period,
        meta={"trend_order": trend_order, "nobs": int(fit.nobs)},
    )


def hp_decompose(series: pd.Series, lamb: float = 100.0) -> pd.DataFrame:
    """
    Hodrick-Prescott trend/cycle split.

    Parameters
    ----------
    series : pd.Series
        Observations in time order. Missing values are dropped.
    lamb : float, default 100.0
        Smoothing parameter (100 for annual, 1600 for quarterly data).

    Returns
    -------
    pd.DataFrame
        Columns ``observed``, ``trend``, ``cycle`` on the non-missing
        index.
    """
    clean = pd.to_numeric(series, errors="coerce").dropna().astype(float)
    if len(clean) < 3:
        raise ValueError(f"HP filter needs at least 3 observations, got {len(clean)}")

    cycle, trend = hpfilter(clean, lamb=lamb)

    return pd.DataFrame({
        "observed": clean,
        "trend": np.asarray(trend),
        "cycle": np.asarray(cycle),
    }, index=clean.index)
