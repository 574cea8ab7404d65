"""Tests for winsorization."""

import numpy as np
import pandas as pd
import pytest

from econpanel.stats.winsorize import winsorize, winsorize_columns


class TestWinsorize:
    """Tests for winsorize function."""

    def test_caps_at_quantiles(self) -> None:
        """Test values are capped at the quantiles."""
        s = pd.Series(np.arange(1.0, 101.0))

        result = winsorize(s, lower=0.05, upper=0.95)

        assert result.min() == pytest.approx(s.quantile(0.05))
        assert result.max() == pytest.approx(s.quantile(0.95))
        assert result.iloc[50] == pytest.approx(51.0)

    def test_values_within_bounds(self) -> None:
        """Test winsorized values lie within the sample quantiles."""
        rng = np.random.default_rng(42)
        s = pd.Series(rng.standard_t(df=2, size=500))

        result = winsorize(s, lower=0.01, upper=0.99)

        assert (result >= s.quantile(0.01) - 1e-12).all()
        assert (result <= s.quantile(0.99) + 1e-12).all()

    def test_trim_sets_nan(self) -> None:
        """Test trim replaces extremes with NaN."""
        s = pd.Series([1.0, 2.0, 3.0, 4.0, 100.0])

        result = winsorize(s, lower=0.0, upper=0.75, method="trim")

        assert np.isnan(result.iloc[4])
        assert result.iloc[:4].tolist() == [1.0, 2.0, 3.0, 4.0]

    def test_nan_preserved(self) -> None:
        """Test NaN is preserved."""
        s = pd.Series([1.0, np.nan, 3.0, 1000.0])

        result = winsorize(s, lower=0.0, upper=0.5)

        assert np.isnan(result.iloc[1])
        assert result.index.equals(s.index)

    def test_all_nan_returns_input(self) -> None:
        """Test an all-NaN series is returned unchanged."""
        s = pd.Series([np.nan, np.nan])

        result = winsorize(s)

        assert result.isna().all()

    @pytest.mark.parametrize("lower, upper", [(0.5, 0.5), (-0.1, 0.9), (0.1, 1.5), (0.9, 0.1)])
    def test_invalid_bounds(self, lower: float, upper: float) -> None:
        """Test invalid quantile bounds raise."""
        with pytest.raises(ValueError, match="Quantile bounds"):
            winsorize(pd.Series([1.0, 2.0]), lower=lower, upper=upper)

    def test_invalid_method(self) -> None:
        """Test an unknown method raises."""
        with pytest.raises(ValueError, match="method must be"):
            winsorize(pd.Series([1.0, 2.0]), method="clip")


class TestWinsorizeColumns:
    """Tests for winsorize_columns function."""

    def _panel(self) -> pd.DataFrame:
        return pd.DataFrame({
            "year": [2019] * 5 + [2020] * 5,
            "roic": [0.1, 0.2, 0.3, 0.4, 5.0, 1.0, 2.0, 3.0, 4.0, 50.0],
        })

    def test_pooled_in_place(self) -> None:
        """Test pooled winsorization replaces the column."""
        df = self._panel()

        result = winsorize_columns(df, ["roic"], lower=0.0, upper=0.8)

        assert result["roic"].max() == pytest.approx(df["roic"].quantile(0.8))
        assert df["roic"].max() == pytest.approx(50.0)

    def test_by_group(self) -> None:
        """Test quantiles are computed within each group."""
        df = self._panel()

        result = winsorize_columns(df, ["roic"], lower=0.0, upper=0.75, by="year")

        assert result.loc[4, "roic"] == pytest.approx(0.4)
        assert result.loc[9, "roic"] == pytest.approx(4.0)

    def test_suffix_keeps_original(self) -> None:
        """Test a suffix keeps the original column."""
        df = self._panel()

        result = winsorize_columns(df, ["roic"], lower=0.0, upper=0.75, suffix="_w")

        assert "roic_w" in result.columns
        assert result["roic"].equals(df["roic"])

    def test_missing_column_skipped(self) -> None:
        """Test a missing column is skipped."""
        df = self._panel()

        result = winsorize_columns(df, ["leverage"])

        assert list(result.columns) == ["year", "roic"]

    def test_null_group_key_left_unchanged(self) -> None:
        """Test rows with a missing group key keep their values."""
        df = pd.DataFrame({"country": ["USA", "USA", None], "x": [1.0, 2.0, 3.0]})

        result = winsorize_columns(df, ["x"], by="country")

        assert result["x"].iloc[2] == pytest.approx(3.0)
        assert result["x"].iloc[:2].notna().all()
