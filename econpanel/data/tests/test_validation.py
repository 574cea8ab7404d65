"""Tests for validation module."""

import numpy as np
import pandas as pd
import pytest

from econpanel.data.validation import assert_unique_keys, validate_panel


class TestValidatePanel:
    """Tests for validate_panel function."""

    def test_valid_panel(self) -> None:
        """Test validation of a clean firm-year panel."""
        df = pd.DataFrame({
            "firm_id": [1, 1, 2],
            "year": [2019, 2020, 2019],
            "sales": [100.0, 110.0, 50.0],
        })

        result = validate_panel(df, keys=["firm_id", "year"], required_columns=["sales"])

        assert result.is_valid is True
        assert result.errors == []
        assert result.stats["total_rows"] == 3
        assert result.stats["duplicate_keys"] == 0

    def test_duplicate_keys_is_error(self) -> None:
        """Test duplicate keys are an error."""
        df = pd.DataFrame({"firm_id": [1, 1], "year": [2019, 2019]})

        result = validate_panel(df, keys=["firm_id", "year"])

        assert result.is_valid is False
        assert result.stats["duplicate_keys"] == 1

    def test_missing_required_columns(self) -> None:
        """Test missing required columns are an error."""
        df = pd.DataFrame({"firm_id": [1], "year": [2019]})

        result = validate_panel(df, keys=["firm_id", "year"], required_columns=["ebitda"])

        assert result.is_valid is False
        assert any("Missing required columns" in e for e in result.errors)

    def test_null_values_are_warnings(self) -> None:
        """Test null values are warnings only."""
        df = pd.DataFrame({
            "firm_id": [1, np.nan],
            "year": [2019, 2020],
            "sales": [np.nan, 1.0],
        })

        result = validate_panel(df, keys=["firm_id", "year"], required_columns=["sales"])

        assert result.is_valid is True
        assert result.stats["null_firm_id"] == 1
        assert result.stats["null_sales"] == 1
        assert len(result.warnings) == 2

    def test_empty_dataframe_is_warning(self) -> None:
        """Test an empty DataFrame is a warning."""
        df = pd.DataFrame(columns=["firm_id", "year"])

        result = validate_panel(df, keys=["firm_id", "year"])

        assert result.is_valid is True
        assert any("empty" in w.lower() for w in result.warnings)


class TestAssertUniqueKeys:
    """Tests for assert_unique_keys function."""

    def test_unique_passes(self) -> None:
        """Test unique keys pass."""
        df = pd.DataFrame({"country": ["A", "A", "B"], "year": [1, 2, 1]})

        assert_unique_keys(df, ["country", "year"])

    def test_duplicates_raise(self) -> None:
        """Test duplicate keys raise."""
        df = pd.DataFrame({"country": ["A", "A"], "year": [1, 1]})

        with pytest.raises(ValueError, match="not unique"):
            assert_unique_keys(df, ["country", "year"])

    def test_missing_key_raises(self) -> None:
        """Test a missing key column raises."""
        with pytest.raises(ValueError, match="Missing key columns"):
            assert_unique_keys(pd.DataFrame({"year": [1]}), ["country", "year"])
