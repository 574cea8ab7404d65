"""Pipeline result container.

This module defines the PipelineResult dataclass that holds all
outputs from a batch run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from econpanel.aggregate.merge import MergeReport
from econpanel.timeseries.arma import ArmaResult
from econpanel.timeseries.decompose import DecompositionResult


@dataclass
class PipelineResult:
    """Container for pipeline outputs.

    Attributes
    ----------
    firms : pd.DataFrame | None
        Firm-year panel with derived, winsorized metrics.
    country : pd.DataFrame | None
        Country-year panel after collapse and macro merges.
    summary_table : pd.DataFrame | None
        Summary statistics written to ``summary.rtf``.
    merge_reports : dict[str, MergeReport]
        Outcome counts per merge step.
    decompositions : dict[str, DecompositionResult]
        Per time-series variable.
    correlograms : dict[str, pd.DataFrame]
        AC/PAC/Q tables per variable.
    order_tables : dict[str, pd.DataFrame]
        Information criteria for every ARMA order tried.
    models : dict[str, ArmaResult]
        Selected ARMA model per variable.
    forecasts : dict[str, pd.DataFrame]
        Forecast tables per variable.
    files : list[Path]
        Every file written.
    config : dict[str, Any]
        Configuration the run used.

    Examples
    --------
    >>> result = run_pipeline(load_pipeline_config("conf/pipeline.yaml"))
    >>> print(result.summary())
    """

    firms: pd.DataFrame | None = None
    country: pd.DataFrame | None = None
    summary_table: pd.DataFrame | None = None
    merge_reports: dict[str, MergeReport] = field(default_factory=dict)
    decompositions: dict[str, DecompositionResult] = field(default_factory=dict)
    correlograms: dict[str, pd.DataFrame] = field(default_factory=dict)
    order_tables: dict[str, pd.DataFrame] = field(default_factory=dict)
    models: dict[str, ArmaResult] = field(default_factory=dict)
    forecasts: dict[str, pd.DataFrame] = field(default_factory=dict)
    files: list[Path] = field(default_factory=list)
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def n_firm_years(self) -> int:
        """Rows in the firm-year panel."""
        return 0 if self.firms is None else len(self.firms)

    @property
    def n_country_years(self) -> int:
        """Rows in the country-year panel."""
        return 0 if self.country is None else len(self.country)

    def summary(self) -> str:
        """Generate summary string."""
        lines = [
            "Pipeline Results",
            "=" * 40,
            f"Firm-years: {self.n_firm_years}",
            f"Country-years: {self.n_country_years}",
        ]
        for name, report in self.merge_reports.items():
            lines.append(f"Merge {name}: {report.summary()}")
        for name, model in self.models.items():
            lines.append(f"{name}: ARIMA{model.order} AIC={model.aic:.3f}")
        lines.append(f"Files written: {len(self.files)}")
        return "\n".join(lines)
