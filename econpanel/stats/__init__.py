"""econpanel Stats Package - Outlier handling and descriptive statistics.

Public API:
- winsorize, winsorize_columns: Percentile capping or trimming
- summarize: Variable summary (N, mean, sd, min, max, percentiles)
- tabstat: Summary statistics by group
"""

from .winsorize import winsorize, winsorize_columns
from .summary import summarize, tabstat

__all__ = [
    "winsorize",
    "winsorize_columns",
    "summarize",
    "tabstat",
]
