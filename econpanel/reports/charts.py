"""PNG chart exports.

Every function draws one figure with the non-interactive Agg backend,
saves it as PNG, closes it, and returns the written path.
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from econpanel.timeseries.decompose import DecompositionResult

logger = logging.getLogger(__name__)

DPI = 160


def _savefig(fig: plt.Figure, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=DPI)
    plt.close(fig)
    logger.info(f"Saved chart to {path}")
    return path


def plot_series(
    df: pd.DataFrame,
    x: str,
    ys: str | list[str],
    path: str | Path,
    title: str | None = None,
    ylabel: str | None = None,
) -> Path:
    """
    Line chart of one or more columns against ``x``.

    Parameters
    ----------
    df : pd.DataFrame
        Data with one row per x value.
    x : str
        Horizontal axis column, e.g. ``"year"``.
    ys : str | list[str]
        Columns to draw.
    path : str | Path
        Output PNG.
    title, ylabel : str | None
        Labels.

    Returns
    -------
    Path
        The written path.
    """
    ys = [ys] if isinstance(ys, str) else list(ys)
    missing = ({x} | set(ys)) - set(df.columns)
    if missing:
        raise ValueError(f"Columns not found: {missing}")

    data = df.sort_values(x)
    fig, ax = plt.subplots(figsize=(10, 4))
    for col in ys:
        ax.plot(data[x], data[col], marker="o", markersize=3, label=col)
    ax.set_xlabel(x)
    if ylabel:
        ax.set_ylabel(ylabel)
    if title:
        ax.set_title(title)
    if len(ys) > 1:
        ax.legend()
    return _savefig(fig, path)


def plot_decomposition(result: DecompositionResult, path: str | Path, title: str | None = None) -> Path:
    """Four stacked panels: observed, trend, seasonal, irregular."""
    frame = result.to_frame()
    x = np.arange(len(frame))
    labels = [str(i) for i in frame.index]

    fig, axes = plt.subplots(4, 1, figsize=(10, 8), sharex=True)
    axes[0].plot(x, frame["observed"], label="observed")
    axes[0].plot(x, frame["trend"], linestyle="--", label="trend")
    axes[0].legend()
    axes[1].plot(x, frame["trend"])
    axes[2].plot(x, frame["seasonal"])
    baseline = 1.0 if result.model == "multiplicative" else 0.0
    axes[3].bar(x, frame["irregular"] - baseline, bottom=baseline, width=0.8)

    for ax, name in zip(axes, ["Observed", "Trend", "Seasonal", "Irregular"]):
        ax.set_ylabel(name)

    step = max(1, len(x) // 10)
    axes[3].set_xticks(x[::step])
    axes[3].set_xticklabels(labels[::step], rotation=45)

    axes[0].set_title(title or f"Decomposition ({result.model}, period={result.period})")
    return _savefig(fig, path)


def plot_correlogram(table: pd.DataFrame, nobs: int, path: str | Path, title: str | None = None) -> Path:
    """
    ACF and PACF bar charts with approximate 95% bands.

    Parameters
    ----------
    table : pd.DataFrame
        Output of ``autocorrelations`` (columns lag, ac, pac).
    nobs : int
        Observations behind the table; bands are +/- 1.96/sqrt(nobs).
    path : str | Path
        Output PNG.
    """
    if nobs < 1:
        raise ValueError(f"nobs must be positive, got {nobs}")
    band = 1.96 / np.sqrt(nobs)

    fig, axes = plt.subplots(1, 2, figsize=(10, 4), sharey=True)
    for ax, col, name in zip(axes, ["ac", "pac"], ["ACF", "PACF"]):
        ax.bar(table["lag"], table[col], width=0.4)
        ax.axhline(0, color="black", linewidth=0.8)
        ax.axhline(band, color="grey", linestyle="--", linewidth=0.8)
        ax.axhline(-band, color="grey", linestyle="--", linewidth=0.8)
        ax.set_title(name)
        ax.set_xlabel("Lag")
    if title:
        fig.suptitle(title)
    return _savefig(fig, path)


def plot_forecast(
    history: pd.Series,
    forecast: pd.DataFrame,
    path: str | Path,
    title: str | None = None,
) -> Path:
    """
    History followed by the forecast mean and interval.

    ``forecast`` has columns step, mean, lower, upper. If ``history`` has
    an integer index (e.g. years) the forecast continues it; otherwise
    positions are used.
    """
    history = history.dropna()
    if pd.api.types.is_integer_dtype(history.index):
        x_hist = history.index.to_numpy()
        x_fc = x_hist[-1] + forecast["step"].to_numpy()
    else:
        x_hist = np.arange(len(history))
        x_fc = len(history) - 1 + forecast["step"].to_numpy()

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(x_hist, history.to_numpy(), label="observed")
    ax.plot(x_fc, forecast["mean"], linestyle="--", label="forecast")
    ax.fill_between(x_fc, forecast["lower"], forecast["upper"], alpha=0.25, label="interval")
    ax.legend()
    ax.set_title(title or f"Forecast: {history.name}")
    return _savefig(fig, path)


def plot_scatter(
    df: pd.DataFrame,
    x: str,
    y: str,
    path: str | Path,
    fit: bool = True,
    title: str | None = None,
) -> Path:
    """
    Scatter of ``y`` against ``x`` with an optional OLS fit line.

    Typical use: Gini coefficient against GDP per capita.
    """
    missing = {x, y} - set(df.columns)
    if missing:
        raise ValueError(f"Columns not found: {missing}")

    data = df[[x, y]].apply(pd.to_numeric, errors="coerce").dropna()

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.scatter(data[x], data[y], s=12)
    if fit and len(data) >= 2 and data[x].nunique() > 1:
        slope, intercept = np.polyfit(data[x], data[y], 1)
        grid = np.linspace(data[x].min(), data[x].max(), 50)
        ax.plot(grid, intercept + slope * grid, color="red", label=f"fit: slope={slope:.3g}")
        ax.legend()
    ax.set_xlabel(x)
    ax.set_ylabel(y)
    ax.set_title(title or f"{y} vs {x}")
    return _savefig(fig, path)
