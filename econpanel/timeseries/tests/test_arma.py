"""Tests for ARMA modelling."""

import numpy as np
import pandas as pd
import pytest

from econpanel.timeseries.arma import (
    ArmaResult,
    adf_test,
    autocorrelations,
    fit_arma,
    forecast,
    select_order,
)


def _ar1(phi: float = 0.6, n: int = 400, seed: int = 7, mean: float = 2.0) -> pd.Series:
    rng = np.random.default_rng(seed)
    eps = rng.standard_normal(n)
    x = np.zeros(n)
    for t in range(1, n):
        x[t] = phi * x[t - 1] + eps[t]
    return pd.Series(x + mean, name="growth")


class TestAutocorrelations:
    """Tests for autocorrelations function."""

    def test_columns_and_lags(self) -> None:
        """Test correlogram columns and lags."""
        table = autocorrelations(_ar1(), nlags=5)

        assert list(table.columns) == ["lag", "ac", "pac", "q", "prob"]
        assert table["lag"].tolist() == [1, 2, 3, 4, 5]

    def test_ar1_signature(self) -> None:
        """AR(1): AC decays geometrically, PAC cuts off after lag 1."""
        table = autocorrelations(_ar1(phi=0.6), nlags=5)

        assert table.loc[0, "ac"] == pytest.approx(0.6, abs=0.1)
        assert table.loc[0, "pac"] == pytest.approx(table.loc[0, "ac"], abs=1e-2)
        assert abs(table.loc[2, "pac"]) < 0.15
        assert table.loc[0, "prob"] < 0.01

    def test_q_statistic_increasing(self) -> None:
        """Test the Ljung-Box Q statistic is cumulative."""
        table = autocorrelations(_ar1(), nlags=5)

        assert table["q"].is_monotonic_increasing

    def test_nlags_capped(self) -> None:
        """Test lags are capped for short series."""
        table = autocorrelations(pd.Series(np.arange(10, dtype=float)), nlags=20)

        assert len(table) == 4

    def test_too_short(self) -> None:
        """Test a too-short series raises."""
        with pytest.raises(ValueError, match="at least 4"):
            autocorrelations(pd.Series([1.0, 2.0, np.nan]))


class TestAdfTest:
    """Tests for adf_test function."""

    def test_stationary_series_rejects_unit_root(self) -> None:
        """Test a stationary series rejects a unit root."""
        result = adf_test(_ar1(phi=0.3))

        assert result["pvalue"] < 0.05
        assert set(result["critical_values"]) == {"1%", "5%", "10%"}

    def test_integrated_series_does_not_reject(self) -> None:
        """Test an integrated series does not reject a unit root."""
        rng = np.random.default_rng(3)
        integrated = pd.Series(rng.standard_normal(300).cumsum().cumsum())

        result = adf_test(integrated)

        assert result["pvalue"] > 0.05


class TestFitArma:
    """Tests for fit_arma function."""

    def test_recovers_ar_coefficient(self) -> None:
        """Test an AR(1) coefficient is recovered."""
        result = fit_arma(_ar1(phi=0.6), order=(1, 0, 0))

        assert isinstance(result, ArmaResult)
        assert result.params["ar.L1"] == pytest.approx(0.6, abs=0.1)
        assert result.params["const"] == pytest.approx(2.0, abs=0.3)
        assert result.sigma2 == pytest.approx(1.0, abs=0.2)

    def test_result_fields(self) -> None:
        """Test result fields are populated."""
        result = fit_arma(_ar1(), order=(1, 0, 1))

        assert result.order == (1, 0, 1)
        assert "ma.L1" in result.params.index
        assert len(result.residuals) == result.nobs == 400
        assert np.isfinite(result.aic) and np.isfinite(result.bic)
        assert "ARIMA(1, 0, 1)" in result.summary()

    def test_differenced_model_has_no_constant(self) -> None:
        """Test a differenced model has no constant."""
        rng = np.random.default_rng(5)
        walk = pd.Series(rng.standard_normal(200).cumsum())

        result = fit_arma(walk, order=(0, 1, 1))

        assert "const" not in result.params.index

    def test_missing_values_dropped(self) -> None:
        """Test missing values are dropped before fitting."""
        series = _ar1(n=100)
        series.iloc[[3, 50]] = np.nan

        result = fit_arma(series, order=(1, 0, 0))

        assert result.nobs == 98

    def test_too_few_observations(self) -> None:
        """Test too few observations raise."""
        with pytest.raises(ValueError, match="needs at least"):
            fit_arma(pd.Series(np.arange(8, dtype=float)), order=(1, 0, 0))

    def test_negative_order(self) -> None:
        """Test a negative order raises."""
        with pytest.raises(ValueError, match="non-negative"):
            fit_arma(_ar1(), order=(-1, 0, 0))


class TestSelectOrder:
    """Tests for select_order function."""

    def test_table_sorted_by_criterion(self) -> None:
        """Test the order table is sorted by criterion."""
        best, table = select_order(_ar1(n=250), max_p=2, max_q=1, criterion="bic")

        assert len(table) == 6
        assert table["bic"].is_monotonic_increasing
        assert best == tuple(int(x) for x in table.loc[0, ["p", "d", "q"]])

    def test_ar1_beats_white_noise(self) -> None:
        """Test an AR(1) series selects an AR term."""
        _, table = select_order(_ar1(phi=0.7, n=250), max_p=1, max_q=0)

        ranked = table.set_index("p")["aic"]
        assert ranked[1] < ranked[0]

    def test_short_series_skips_large_orders(self) -> None:
        """Test orders needing more data are skipped."""
        best, table = select_order(_ar1(n=11), max_p=5, max_q=0)

        assert 5 not in table["p"].tolist()
        assert len(table) == 5
        assert best[0] in table["p"].tolist()

    def test_invalid_criterion(self) -> None:
        """Test an unknown criterion raises."""
        with pytest.raises(ValueError, match="criterion"):
            select_order(_ar1(), criterion="hqic")


class TestForecast:
    """Tests for forecast function."""

    def test_forecast_shape_and_interval(self) -> None:
        """Test forecast columns and interval ordering."""
        result = fit_arma(_ar1(), order=(1, 0, 0))

        fc = forecast(result, steps=4)

        assert list(fc.columns) == ["step", "mean", "lower", "upper"]
        assert len(fc) == 4
        assert (fc["lower"] < fc["mean"]).all()
        assert (fc["mean"] < fc["upper"]).all()

    def test_forecast_reverts_to_mean(self) -> None:
        """Test a stationary forecast reverts to the mean."""
        result = fit_arma(_ar1(phi=0.5), order=(1, 0, 0))

        fc = forecast(result, steps=30)

        assert fc["mean"].iloc[-1] == pytest.approx(result.params["const"], abs=1e-3)

    def test_intervals_widen(self) -> None:
        """Test intervals widen with the horizon."""
        fc = forecast(fit_arma(_ar1(), order=(1, 0, 0)), steps=5)

        width = fc["upper"] - fc["lower"]
        assert width.is_monotonic_increasing

    def test_invalid_steps(self) -> None:
        """Test non-positive steps raise."""
        with pytest.raises(ValueError):
            forecast(fit_arma(_ar1(), order=(1, 0, 0)), steps=0)
