"""Tests for the batch pipeline."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from econpanel.aggregate.merge import MergeCardinalityError
from econpanel.pipeline.results import PipelineResult
from econpanel.pipeline.run import run_pipeline

YEARS = list(range(2000, 2020))


def _firm_panel() -> pd.DataFrame:
    rng = np.random.default_rng(7)
    rows = []
    for firm, scale in [("A", 100.0), ("B", 250.0), ("C", 60.0)]:
        for i, year in enumerate(YEARS):
            sales = scale * 1.04 ** i * (1 + 0.05 * rng.standard_normal())
            rows.append({
                "firm_id": firm,
                "country": "USA",
                "year": year,
                "sales": sales,
                "ebitda": sales * (0.15 + 0.02 * rng.standard_normal()),
                "total_assets": 2.0 * sales,
                "total_debt": 0.8 * sales,
                "total_equity": 1.0 * sales,
                "cash": 0.1 * sales,
                "capex": 0.05 * sales,
                "net_income": 0.07 * sales,
            })
    return pd.DataFrame(rows)


def _weo_wide() -> pd.DataFrame:
    rng = np.random.default_rng(11)
    growth = 2.0 + rng.standard_normal(len(YEARS))
    data = {
        "ISO": ["USA"],
        "WEO Subject Code": ["NGDP_RPCH"],
        "Country": ["United States"],
        "Units": ["Percent change"],
    }
    for year, value in zip(YEARS, growth):
        data[str(year)] = [f"{value:.3f}"]
    return pd.DataFrame(data)


def _inequality() -> pd.DataFrame:
    return pd.DataFrame({
        "country": ["USA"] * len(YEARS),
        "year": YEARS,
        "gini": np.linspace(40.0, 41.5, len(YEARS)),
        "gdp_per_capita": np.linspace(36000.0, 65000.0, len(YEARS)),
    })


@pytest.fixture
def inputs(tmp_path: Path) -> dict[str, str]:
    paths = {
        "firms": tmp_path / "firms.csv",
        "weo": tmp_path / "weo.csv",
        "inequality": tmp_path / "inequality.csv",
    }
    _firm_panel().to_csv(paths["firms"], index=False)
    _weo_wide().to_csv(paths["weo"], index=False)
    _inequality().to_csv(paths["inequality"], index=False)
    return {name: str(path) for name, path in paths.items()}


def _config(inputs: dict[str, str], out_dir: Path, **overrides) -> dict:
    config = {
        "inputs": inputs,
        "output": {"dir": str(out_dir), "format": "csv"},
        "timeseries": {
            "country": "USA",
            "variables": ["roic", "NGDP_RPCH"],
            "max_p": 1,
            "max_q": 1,
            "forecast_steps": 3,
        },
    }
    config.update(overrides)
    return config


class TestRunPipeline:
    """Tests for run_pipeline function."""

    def test_full_run(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test a run over firms, WEO and inequality inputs."""
        out_dir = tmp_path / "out"

        result = run_pipeline(_config(inputs, out_dir))

        assert isinstance(result, PipelineResult)
        assert result.n_firm_years == 60
        assert {"roic", "sales_growth", "ebitda_margin"} <= set(result.firms.columns)

        country = result.country
        assert len(country) == len(YEARS)
        assert {"roic", "n_firms", "NGDP_RPCH", "gini", "gdp_per_capita"} <= set(country.columns)
        assert (country["n_firms"] == 3).all()

        assert set(result.merge_reports) == {"firm_counts", "weo", "inequality"}
        assert result.merge_reports["weo"].both == len(YEARS)

        assert set(result.models) == {"roic", "NGDP_RPCH"}
        assert len(result.forecasts["NGDP_RPCH"]) == 3
        assert "roic" in result.summary_table.index

        for path in result.files:
            assert Path(path).exists()
        names = {Path(p).name for p in result.files}
        assert {"summary.rtf", "firm_panel.csv", "country_panel.csv", "gini_vs_gdp.png"} <= names
        assert "forecast_NGDP_RPCH.png" in names
        assert "forecast_roic.csv" in names

    def test_first_year_roic_missing(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test country ROIC is missing in the first year only."""
        result = run_pipeline(_config({"firms": inputs["firms"]}, tmp_path / "out", timeseries={}))

        country = result.country.set_index("year")
        assert np.isnan(country.loc[2000, "roic"])
        assert country.loc[2001:, "roic"].notna().all()

    def test_firms_only(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test a run with only firm data."""
        result = run_pipeline(_config({"firms": inputs["firms"]}, tmp_path / "out", timeseries={}))

        assert result.country is not None
        assert "NGDP_RPCH" not in result.country.columns
        assert result.models == {}
        assert (tmp_path / "out" / "summary.rtf").exists()

    def test_weo_only(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test a run with only WEO data."""
        config = _config({"weo": inputs["weo"]}, tmp_path / "out")
        config["timeseries"]["variables"] = ["NGDP_RPCH"]

        result = run_pipeline(config)

        assert result.firms is None
        assert list(result.country["year"]) == YEARS
        assert set(result.models) == {"NGDP_RPCH"}

    def test_parquet_output(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test parquet output format."""
        out_dir = tmp_path / "out"
        config = _config({"firms": inputs["firms"]}, out_dir, timeseries={})
        config["output"]["format"] = "parquet"

        run_pipeline(config)

        firms = pd.read_parquet(out_dir / "firm_panel.parquet")
        assert len(firms) == 60

    def test_no_inputs(self, tmp_path: Path) -> None:
        """Test a config without inputs raises."""
        with pytest.raises(ValueError, match="No inputs configured"):
            run_pipeline({"output": {"dir": str(tmp_path)}})

    def test_invalid_output_format(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test an unknown output format raises."""
        config = _config(inputs, tmp_path / "out")
        config["output"]["format"] = "xlsx"

        with pytest.raises(ValueError, match="output.format"):
            run_pipeline(config)

    def test_missing_input_file(self, tmp_path: Path) -> None:
        """Test a missing input file raises."""
        with pytest.raises(FileNotFoundError):
            run_pipeline(_config({"firms": str(tmp_path / "nope.csv")}, tmp_path / "out"))

    def test_duplicate_firm_keys(self, tmp_path: Path) -> None:
        """Test duplicate firm-years raise."""
        panel = _firm_panel()
        panel = pd.concat([panel, panel.iloc[[0]]], ignore_index=True)
        path = tmp_path / "firms.csv"
        panel.to_csv(path, index=False)

        with pytest.raises(ValueError, match="Invalid firm panel"):
            run_pipeline(_config({"firms": str(path)}, tmp_path / "out"))

    def test_duplicate_inequality_keys(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test duplicate inequality country-years raise."""
        inequality = _inequality()
        inequality = pd.concat([inequality, inequality.iloc[[0]]], ignore_index=True)
        path = tmp_path / "dup_inequality.csv"
        inequality.to_csv(path, index=False)

        with pytest.raises(ValueError, match="not unique"):
            run_pipeline(_config({"weo": inputs["weo"], "inequality": str(path)}, tmp_path / "out"))

    def test_merge_error_is_value_error(self) -> None:
        """Test merge errors are handled as ValueError."""
        assert issubclass(MergeCardinalityError, ValueError)


class TestPipelineResult:
    """Tests for PipelineResult container."""

    def test_empty_summary(self) -> None:
        """Test summary of an empty result."""
        result = PipelineResult()

        text = result.summary()

        assert "Firm-years: 0" in text
        assert "Country-years: 0" in text
        assert "Files written: 0" in text

    def test_summary_lists_merges(self, inputs: dict[str, str], tmp_path: Path) -> None:
        """Test summary lists merges and models."""
        result = run_pipeline(_config(inputs, tmp_path / "out"))

        text = result.summary()

        assert "Firm-years: 60" in text
        assert "Merge weo: matched=20" in text
        assert "NGDP_RPCH: ARIMA" in text
