"""econpanel Firms Package - Firm-level metric construction.

All functions take a firm-year DataFrame and return a pd.Series aligned
with its index, except compute_firm_metrics which returns the panel
with the metrics added.

Public API:
- panel_lag: Gap-aware lag/lead within an entity
- growth_rate: Percent or log growth over k years
- invested_capital, roic: EBITDA over lagged invested capital
- ebitda_margin, leverage, return_on_assets, capex_intensity
- compute_firm_metrics: All of the above in one pass
"""

from .growth import panel_lag, growth_rate
from .ratios import (
    invested_capital,
    roic,
    return_on_assets,
    ebitda_margin,
    leverage,
    capex_intensity,
    compute_firm_metrics,
)

__all__ = [
    "panel_lag",
    "growth_rate",
    "invested_capital",
    "roic",
    "return_on_assets",
    "ebitda_margin",
    "leverage",
    "capex_intensity",
    "compute_firm_metrics",
]
