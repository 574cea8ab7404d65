"""Batch pipeline.

Runs one panel analysis end to end from a configuration dict:

1. Load and validate the firm-year panel
2. Derive firm metrics, winsorize, summarize (RTF table)
3. Collapse to country-year and merge WEO and inequality data
4. Decompose, correlogram, select and fit ARMA, forecast
5. Write derived datasets and PNG charts under ``output.dir``

Each stage is skipped when its inputs are not configured.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from econpanel.aggregate import collapse, count_entities, merge_panels
from econpanel.data import (
    assert_unique_keys,
    load_firms,
    load_inequality,
    load_weo,
    validate_panel,
    write_table,
)
from econpanel.data.config import DEFAULT_CONFIG, merge_config
from econpanel.firms import compute_firm_metrics
from econpanel.reports import (
    plot_correlogram,
    plot_decomposition,
    plot_forecast,
    plot_scatter,
    plot_series,
    write_rtf,
)
from econpanel.stats import summarize, winsorize_columns
from econpanel.timeseries import autocorrelations, decompose, fit_arma, forecast, select_order

from .results import PipelineResult

logger = logging.getLogger(__name__)


def _firm_stage(config: dict[str, Any], result: PipelineResult, out_dir: Path) -> None:
    cols = config["columns"]
    firm, country, year = cols["firm"], cols["country"], cols["year"]

    firms = load_firms(config["inputs"]["firms"], year_col=year)
    logger.info(f"Loaded {len(firms)} firm-years")

    validation = validate_panel(firms, keys=[firm, year], required_columns=[country])
    for warning in validation.warnings:
        logger.warning(f"Firm panel: {warning}")
    if not validation.is_valid:
        raise ValueError(f"Invalid firm panel: {'; '.join(validation.errors)}")

    metrics = config["metrics"]
    firms = compute_firm_metrics(
        firms,
        entity=firm,
        time=year,
        growth=metrics["growth"],
        growth_method=metrics["growth_method"],
    )

    wins = config["winsorize"]
    firms = winsorize_columns(
        firms,
        columns=wins["columns"],
        lower=wins["lower"],
        upper=wins["upper"],
        by=wins["by"],
    )
    result.firms = firms

    summ = config["summary"]
    columns = [c for c in summ["columns"] if c in firms.columns]
    if columns:
        table = summarize(firms, columns, detail=summ["detail"])
        table.index.name = "Variable"
        result.summary_table = table
        notes = f"Winsorized at the {wins['lower']:.0%} and {wins['upper']:.0%} quantiles."
        result.files.append(
            write_rtf(
                table,
                out_dir / "summary.rtf",
                title=summ["title"],
                decimals=summ["decimals"],
                notes=notes,
            )
        )

    stats = {
        name: entry
        for name, entry in config["collapse"]["stats"].items()
        if (entry[1] if isinstance(entry, (list, tuple)) else name) in firms.columns
    }
    panel = collapse(firms, by=[country, year], stats=stats, weights=config["collapse"]["weights"])
    counts = count_entities(firms, by=[country, year], entity=firm)
    panel, report = merge_panels(panel, counts, on=[country, year], how="left", validate="1:1")
    result.merge_reports["firm_counts"] = report
    result.country = panel


def _merge_country(
    result: PipelineResult,
    other: pd.DataFrame,
    keys: list[str],
    name: str,
) -> None:
    if result.country is None:
        result.country = other.sort_values(keys).reset_index(drop=True)
        return

    merged, report = merge_panels(result.country, other, on=keys, how="left", validate="1:1")
    result.merge_reports[name] = report
    if report.left_only:
        logger.warning(f"{name}: {report.left_only} country-years without a match")
    result.country = merged


def _timeseries_stage(config: dict[str, Any], result: PipelineResult, out_dir: Path) -> None:
    ts = config["timeseries"]
    country_col, year = config["columns"]["country"], config["columns"]["year"]

    country = ts["country"]
    if country is None:
        countries = result.country[country_col].dropna().unique()
        if len(countries) != 1:
            logger.info("timeseries.country not set; skipping time-series stage")
            return
        country = countries[0]

    data = result.country[result.country[country_col] == country].sort_values(year)
    if data.empty:
        raise ValueError(f"Country '{country}' not found in country-year panel")

    variables = [v for v in ts["variables"] if v in data.columns]
    for missing in set(ts["variables"]) - set(variables):
        logger.warning(f"timeseries: variable '{missing}' not in country-year panel, skipping")
    if not variables:
        return

    charts = out_dir / "charts"
    result.files.append(
        plot_series(data, year, variables, charts / f"series_{country}.png", title=str(country))
    )

    indexed = data.set_index(year)
    for var in variables:
        series = indexed[var].rename(var)

        decomposition = decompose(
            series,
            period=ts["period"],
            trend_order=ts["trend_order"],
            model=ts["model"],
        )
        result.decompositions[var] = decomposition
        result.files.append(plot_decomposition(decomposition, charts / f"decompose_{var}.png"))

        table = autocorrelations(series, nlags=ts["nlags"])
        result.correlograms[var] = table
        result.files.append(
            plot_correlogram(
                table,
                nobs=int(series.notna().sum()),
                path=charts / f"correlogram_{var}.png",
                title=var,
            )
        )

        best, orders = select_order(
            series,
            max_p=ts["max_p"],
            max_q=ts["max_q"],
            d=ts["d"],
            criterion=ts["criterion"],
        )
        result.order_tables[var] = orders

        model = fit_arma(series, order=best)
        result.models[var] = model

        fc = forecast(model, steps=ts["forecast_steps"])
        result.forecasts[var] = fc
        result.files.append(plot_forecast(series, fc, charts / f"forecast_{var}.png"))


def run_pipeline(config: dict[str, Any]) -> PipelineResult:
    """
    Run the panel analysis pipeline.

    Parameters
    ----------
    config : dict[str, Any]
        Configuration; missing keys are filled from ``DEFAULT_CONFIG``.

    Returns
    -------
    PipelineResult
        Panels, tables, models and the list of files written.

    Raises
    ------
    ValueError
        If no input is configured, a panel is invalid, a merge violates
        its cardinality, or a series is too short to model.
    FileNotFoundError
        If a configured local input does not exist.

    Examples
    --------
    >>> result = run_pipeline({"inputs": {"firms": "data/firms.csv"}})
    >>> print(result.summary())
    """
    config = merge_config(DEFAULT_CONFIG, config)
    inputs = config["inputs"]
    if not any(inputs.get(name) for name in ("firms", "weo", "inequality")):
        raise ValueError("No inputs configured: set inputs.firms, inputs.weo or inputs.inequality")

    out_dir = Path(config["output"]["dir"])
    fmt = config["output"]["format"]
    if fmt not in ("csv", "parquet"):
        raise ValueError(f"output.format must be 'csv' or 'parquet', got '{fmt}'")

    country_col, year = config["columns"]["country"], config["columns"]["year"]
    keys = [country_col, year]

    logger.info("Starting pipeline...")
    result = PipelineResult(config=config)

    if inputs.get("firms"):
        _firm_stage(config, result, out_dir)
        result.files.append(write_table(result.firms, out_dir / f"firm_panel.{fmt}"))

    if inputs.get("weo"):
        weo = load_weo(inputs["weo"], subjects=config["weo"]["subjects"])
        weo = weo.rename(columns={"country": country_col, "year": year})
        _merge_country(result, weo, keys, "weo")

    if inputs.get("inequality"):
        inequality = load_inequality(inputs["inequality"], year_col=year)
        assert_unique_keys(inequality, keys)
        _merge_country(result, inequality, keys, "inequality")

    if result.country is not None:
        result.files.append(write_table(result.country, out_dir / f"country_panel.{fmt}"))

        if {"gini", "gdp_per_capita"} <= set(result.country.columns):
            result.files.append(
                plot_scatter(
                    result.country,
                    "gdp_per_capita",
                    "gini",
                    out_dir / "charts" / "gini_vs_gdp.png",
                    title="Gini vs GDP per capita",
                )
            )

        if config["timeseries"]["variables"]:
            _timeseries_stage(config, result, out_dir)

    for var, fc in result.forecasts.items():
        result.files.append(write_table(fc, out_dir / f"forecast_{var}.{fmt}"))

    logger.info(f"Pipeline complete: {len(result.files)} files written to {out_dir}")

    return result
