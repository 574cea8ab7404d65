"""econpanel Data Package - Data loading layer.

This is the ONLY package that reads or writes dataset files. All other
packages receive DataFrames from this package.

Public API:
- load_config, load_pipeline_config: YAML configuration
- read_table, write_table: CSV/parquet from local paths or URLs
- load_firms: Firm financials
- load_weo: World Economic Outlook macro data (reshaped to country-year)
- load_inequality: Gini / GDP inequality data
- validate_panel, assert_unique_keys: Panel structure checks
"""

from .config import load_config, load_pipeline_config, get_nested
from .loaders import read_table, write_table, load_firms, load_weo, load_inequality
from .weo import reshape_weo, clean_weo_values
from .validation import ValidationResult, validate_panel, assert_unique_keys

__all__ = [
    "load_config",
    "load_pipeline_config",
    "get_nested",
    "read_table",
    "write_table",
    "load_firms",
    "load_weo",
    "load_inequality",
    "reshape_weo",
    "clean_weo_values",
    "ValidationResult",
    "validate_panel",
    "assert_unique_keys",
]
