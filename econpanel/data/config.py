"""Configuration loading utilities.

This module provides functions to load the YAML configuration files
that drive a panel analysis run, layered over packaged defaults.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "inputs": {
        "firms": None,
        "weo": None,
        "inequality": None,
    },
    "columns": {
        "firm": "firm_id",
        "country": "country",
        "year": "year",
    },
    "metrics": {
        "growth": {"sales": "sales_growth", "total_assets": "asset_growth"},
        "growth_method": "pct",
    },
    "winsorize": {
        "columns": ["roic", "sales_growth", "asset_growth", "ebitda_margin", "leverage"],
        "lower": 0.01,
        "upper": 0.99,
        "by": None,
    },
    "summary": {
        "columns": ["roic", "sales_growth", "asset_growth", "ebitda_margin", "leverage"],
        "detail": False,
        "decimals": 3,
        "title": "Summary statistics",
    },
    "collapse": {
        "stats": {
            "roic": ["mean", "roic"],
            "roic_median": ["median", "roic"],
            "sales_growth": ["mean", "sales_growth"],
            "total_sales": ["sum", "sales"],
        },
        "weights": None,
    },
    "weo": {
        "subjects": ["NGDP_RPCH", "PCPIPCH", "LUR"],
    },
    "timeseries": {
        "country": None,
        "variables": [],
        "period": None,
        "trend_order": 1,
        "model": "additive",
        "nlags": 10,
        "max_p": 2,
        "max_q": 2,
        "d": 0,
        "criterion": "aic",
        "forecast_steps": 5,
    },
    "output": {
        "dir": "output",
        "format": "csv",
    },
}


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    path : str | Path
        Path to the YAML configuration file.

    Returns
    -------
    dict[str, Any]
        Configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the YAML is malformed.

    Examples
    --------
    >>> cfg = load_config("conf/pipeline.yaml")
    >>> cfg["winsorize"]["lower"]
    0.01
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        config = yaml.safe_load(f)

    return config if config is not None else {}


def get_nested(config: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Get a nested value from a configuration dictionary.

    Parameters
    ----------
    config : dict[str, Any]
        Configuration dictionary.
    *keys : str
        Sequence of keys to traverse.
    default : Any, optional
        Default value if key path doesn't exist.

    Returns
    -------
    Any
        The value at the nested key path, or default.

    Examples
    --------
    >>> cfg = {"winsorize": {"lower": 0.01}}
    >>> get_nested(cfg, "winsorize", "lower")
    0.01
    >>> get_nested(cfg, "winsorize", "missing", default=0.05)
    0.05
    """
    result = config
    for key in keys:
        if isinstance(result, dict) and key in result:
            result = result[key]
        else:
            return default
    return result


# Option maps that a user value replaces whole instead of merging into
REPLACE_PATHS: set[tuple[str, ...]] = {
    ("metrics", "growth"),
    ("collapse", "stats"),
}


def merge_config(
    base: dict[str, Any],
    override: dict[str, Any],
    _path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested dictionaries are merged key by key; any other value in
    ``override`` (lists included) replaces the base value. Mappings at
    ``REPLACE_PATHS`` (e.g. ``collapse.stats``) are option maps and are
    replaced whole, so a user can drop default entries.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        path = _path + (key,)
        if isinstance(value, dict) and isinstance(merged.get(key), dict) and path not in REPLACE_PATHS:
            merged[key] = merge_config(merged[key], value, path)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_pipeline_config(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load a pipeline configuration layered over ``DEFAULT_CONFIG``.

    Parameters
    ----------
    path : str | Path | None
        User YAML file. None returns a copy of the defaults.

    Returns
    -------
    dict[str, Any]
        Complete configuration.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given and does not exist.
    ValueError
        If the file does not hold a mapping at the top level.
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    user = load_config(path)
    if not isinstance(user, dict):
        raise ValueError(f"Configuration root must be a mapping, got {type(user).__name__}")

    return merge_config(DEFAULT_CONFIG, user)
