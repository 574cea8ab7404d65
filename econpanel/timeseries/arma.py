"""Autocorrelation analysis and ARMA/ARIMA modelling.

Thin wrappers over statsmodels: a correlogram table (AC, PAC and
Ljung-Box Q), an augmented Dickey-Fuller test, ARIMA estimation, order
selection by information criterion, and forecasting.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import ConvergenceWarning
from statsmodels.tsa.arima.model import ARIMA
from statsmodels.tsa.stattools import acf, adfuller, pacf

logger = logging.getLogger(__name__)


@dataclass
class ArmaResult:
    """Estimated ARMA/ARIMA model.

    Attributes
    ----------
    order : tuple[int, int, int]
        (p, d, q).
    params : pd.Series
        Coefficient estimates.
    bse : pd.Series
        Standard errors.
    aic, bic, llf : float
        Information criteria and log-likelihood.
    sigma2 : float
        Innovation variance.
    residuals : pd.Series
        Model residuals.
    nobs : int
        Observations used.
    fitted : Any
        Underlying statsmodels results object.
    """

    order: tuple[int, int, int]
    params: pd.Series
    bse: pd.Series
    aic: float
    bic: float
    llf: float
    sigma2: float
    residuals: pd.Series
    nobs: int
    fitted: Any = field(default=None, repr=False)

    def summary(self) -> str:
        lines = [
            f"ARIMA{self.order}  nobs={self.nobs}",
            f"AIC={self.aic:.3f}  BIC={self.bic:.3f}  logL={self.llf:.3f}",
        ]
        for name, value in self.params.items():
            se = self.bse.get(name, np.nan)
            lines.append(f"  {name:<10} {value: .4f}  ({se:.4f})")
        return "\n".join(lines)


def _clean(series: pd.Series) -> pd.Series:
    clean = pd.to_numeric(series, errors="coerce").dropna().astype(float)
    if len(clean) < len(series):
        logger.debug(f"Dropped {len(series) - len(clean)} missing observations")
    # Drop a Period/Datetime index without a frequency; estimation is positional
    return clean.reset_index(drop=True)


def autocorrelations(series: pd.Series, nlags: int = 10) -> pd.DataFrame:
    """
    Correlogram table.

    Parameters
    ----------
    series : pd.Series
        Time series. Missing values are dropped.
    nlags : int, default 10
        Number of lags. Capped at ``nobs // 2 - 1``.

    Returns
    -------
    pd.DataFrame
        Columns ``lag, ac, pac, q, prob`` where ``q`` is the Ljung-Box
        statistic up to that lag and ``prob`` its p-value.

    Raises
    ------
    ValueError
        If fewer than 4 observations remain.
    """
    clean = _clean(series)
    n = len(clean)
    if n < 4:
        raise ValueError(f"Need at least 4 observations for autocorrelations, got {n}")

    max_lags = max(1, n // 2 - 1)
    if nlags > max_lags:
        logger.warning(f"autocorrelations: nlags={nlags} capped at {max_lags} for {n} observations")
        nlags = max_lags

    ac, q, prob = acf(clean, nlags=nlags, qstat=True, fft=False)
    pac = pacf(clean, nlags=nlags, method="ywm")

    return pd.DataFrame({
        "lag": np.arange(1, nlags + 1),
        "ac": ac[1:],
        "pac": pac[1:],
        "q": q,
        "prob": prob,
    })


def adf_test(series: pd.Series, regression: str = "c", maxlag: int | None = None) -> dict[str, Any]:
    """
    Augmented Dickey-Fuller unit-root test.

    Parameters
    ----------
    series : pd.Series
        Time series.
    regression : {"c", "ct", "ctt", "n"}
        Deterministic terms.
    maxlag : int | None
        Maximum lag; None selects by AIC.

    Returns
    -------
    dict[str, Any]
        ``statistic``, ``pvalue``, ``usedlag``, ``nobs`` and
        ``critical_values``.
    """
    clean = _clean(series)
    autolag = "AIC" if maxlag is None else None
    stat, pvalue, usedlag, nobs, crit, *_ = adfuller(
        clean, maxlag=maxlag, regression=regression, autolag=autolag
    )
    return {
        "statistic": float(stat),
        "pvalue": float(pvalue),
        "usedlag": int(usedlag),
        "nobs": int(nobs),
        "critical_values": dict(crit),
    }


def fit_arma(
    series: pd.Series,
    order: tuple[int, int, int] = (1, 0, 0),
    trend: str | None = None,
) -> ArmaResult:
    """
    Estimate an ARIMA(p, d, q) model.

    Parameters
    ----------
    series : pd.Series
        Time series. Missing values are dropped.
    order : tuple[int, int, int], default (1, 0, 0)
        (p, d, q).
    trend : str | None
        statsmodels trend term. None uses ``"c"`` when d == 0 and
        ``"n"`` otherwise.

    Returns
    -------
    ArmaResult
        Estimated model.

    Raises
    ------
    ValueError
        If the order is invalid or there are too few observations.

    Examples
    --------
    >>> res = fit_arma(gdp_growth, order=(1, 0, 1))
    >>> print(res.summary())
    """
    p, d, q = (int(x) for x in order)
    if min(p, d, q) < 0:
        raise ValueError(f"order must be non-negative, got {order}")

    clean = _clean(series)
    min_obs = max(10, 2 * (p + q + 1) + d)
    if len(clean) < min_obs:
        raise ValueError(f"ARIMA{(p, d, q)} needs at least {min_obs} observations, got {len(clean)}")

    if trend is None:
        trend = "c" if d == 0 else "n"

    fitted = ARIMA(clean, order=(p, d, q), trend=trend).fit()

    params = pd.Series(fitted.params, index=fitted.model.param_names)
    bse = pd.Series(fitted.bse, index=fitted.model.param_names)

    result = ArmaResult(
        order=(p, d, q),
        params=params,
        bse=bse,
        aic=float(fitted.aic),
        bic=float(fitted.bic),
        llf=float(fitted.llf),
        sigma2=float(params.get("sigma2", np.nan)),
        residuals=pd.Series(np.asarray(fitted.resid), name="residual"),
        nobs=int(fitted.nobs),
        fitted=fitted,
    )

    logger.info(f"Fitted ARIMA{result.order}: AIC={result.aic:.3f}, BIC={result.bic:.3f}")

    return result


def select_order(
    series: pd.Series,
    max_p: int = 3,
    max_q: int = 3,
    d: int = 0,
    criterion: str = "aic",
) -> tuple[tuple[int, int, int], pd.DataFrame]:
    """
    Grid-search ARMA orders by information criterion.

    Parameters
    ----------
    series : pd.Series
        Time series.
    max_p, max_q : int
        Largest AR and MA orders tried (inclusive).
    d : int, default 0
        Differencing order held fixed.
    criterion : {"aic", "bic"}
        Ranking criterion (lower is better).

    Returns
    -------
    tuple[tuple[int, int, int], pd.DataFrame]
        Best order and a table ``p, d, q, aic, bic`` sorted by
        ``criterion``.

    Raises
    ------
    ValueError
        If criterion is unknown or no order could be estimated.

    Notes
    -----
    Orders that fail to estimate, or need more observations than are
    available, are skipped with a warning.
    """
    if criterion not in ("aic", "bic"):
        raise ValueError(f"criterion must be 'aic' or 'bic', got '{criterion}'")

    rows = []
    for p in range(max_p + 1):
        for q in range(max_q + 1):
            try:
                with warnings.catch_warnings():
                    warnings.simplefilter("ignore", ConvergenceWarning)
                    warnings.simplefilter("ignore", UserWarning)
                    res = fit_arma(series, order=(p, d, q))
            except (ValueError, np.linalg.LinAlgError) as exc:
                logger.warning(f"select_order: ARIMA({p},{d},{q}) skipped: {exc}")
                continue
            rows.append({"p": p, "d": d, "q": q, "aic": res.aic, "bic": res.bic})

    if not rows:
        raise ValueError("No ARMA order could be estimated")

    table = pd.DataFrame(rows).sort_values(criterion, kind="mergesort").reset_index(drop=True)
    best = tuple(int(x) for x in table.loc[0, ["p", "d", "q"]])

    logger.info(f"select_order: best ARIMA{best} by {criterion.upper()}={table.loc[0, criterion]:.3f}")

    return best, table


def forecast(result: ArmaResult, steps: int = 5, alpha: float = 0.05) -> pd.DataFrame:
    """
    Forecast from an estimated model.

    Parameters
    ----------
    result : ArmaResult
        Output of :func:`fit_arma`.
    steps : int, default 5
        Forecast horizon.
    alpha : float, default 0.05
        Significance level for the interval.

    Returns
    -------
    pd.DataFrame
        Columns ``step, mean, lower, upper``.
    """
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    if result.fitted is None:
        raise ValueError("ArmaResult has no fitted model to forecast from")

    pred = result.fitted.get_forecast(steps=steps)
    ci = np.asarray(pred.conf_int(alpha=alpha))

    return pd.DataFrame({
        "step": np.arange(1, steps + 1),
        "mean": np.asarray(pred.predicted_mean),
        "lower": ci[:, 0],
        "upper": ci[:, 1],
    })
