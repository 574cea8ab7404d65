"""Data validation utilities.

This module provides functions to validate the structure and quality
of firm-year and country-year panels before metrics are derived.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    stats: dict[str, int | float]


def assert_unique_keys(df: pd.DataFrame, keys: list[str]) -> None:
    """
    Raise if the panel has duplicated key combinations.

    Parameters
    ----------
    df : pd.DataFrame
        Panel to check.
    keys : list[str]
        Key columns, e.g. ``["firm_id", "year"]``.

    Raises
    ------
    ValueError
        If a key column is missing or keys are not unique.
    """
    missing = set(keys) - set(df.columns)
    if missing:
        raise ValueError(f"Missing key columns: {missing}")

    dup = df.duplicated(subset=keys, keep=False)
    if dup.any():
        examples = df.loc[dup, keys].drop_duplicates().head(3).to_dict("records")
        raise ValueError(
            f"Panel keys {keys} are not unique: {int(dup.sum())} rows share keys, e.g. {examples}"
        )


def validate_panel(
    df: pd.DataFrame,
    keys: list[str],
    required_columns: list[str] | None = None,
) -> ValidationResult:
    """
    Validate panel structure and data quality.

    Parameters
    ----------
    df : pd.DataFrame
        Panel to validate.
    keys : list[str]
        Columns that identify a row, e.g. ``["firm_id", "year"]``.
    required_columns : list[str] | None
        Additional columns that must be present.

    Returns
    -------
    ValidationResult
        Validation result with errors, warnings, and stats.

    Examples
    --------
    >>> result = validate_panel(firms, keys=["firm_id", "year"])
    >>> result.is_valid
    True
    >>> result.stats["total_rows"]
    1200
    """
    required = list(keys) + [c for c in (required_columns or []) if c not in keys]

    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int | float] = {"total_rows": len(df)}

    # Check required columns
    missing_cols = set(required) - set(df.columns)
    if missing_cols:
        errors.append(f"Missing required columns: {missing_cols}")

    if len(df) == 0:
        warnings.append("DataFrame is empty")
        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            stats=stats,
        )

    present_keys = [k for k in keys if k in df.columns]

    # Null keys cannot be lagged or merged
    for col in present_keys:
        null_count = int(df[col].isna().sum())
        stats[f"null_{col}"] = null_count
        if null_count > 0:
            warnings.append(f"Key column '{col}' has {null_count} null values")

    # Duplicate keys
    if len(present_keys) == len(keys):
        duplicates = int(df.duplicated(subset=keys).sum())
        stats["duplicate_keys"] = duplicates
        if duplicates > 0:
            errors.append(f"Found {duplicates} duplicate {keys} rows")

    # Null values in other required columns
    for col in required:
        if col in df.columns and col not in keys:
            null_count = int(df[col].isna().sum())
            stats[f"null_{col}"] = null_count
            if null_count > 0:
                warnings.append(f"Column '{col}' has {null_count} null values")

    logger.info(f"Validated {len(df)} panel rows: {len(errors)} errors, {len(warnings)} warnings")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        stats=stats,
    )
