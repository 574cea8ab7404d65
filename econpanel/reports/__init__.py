"""econpanel Reports Package - Tables and charts.

Public API:
- table_to_rtf, write_rtf: RTF summary tables
- plot_series, plot_decomposition, plot_correlogram, plot_forecast,
  plot_scatter: PNG chart exports
"""

from .rtf import table_to_rtf, write_rtf, rtf_escape, format_value
from .charts import (
    plot_series,
    plot_decomposition,
    plot_correlogram,
    plot_forecast,
    plot_scatter,
)

__all__ = [
    "table_to_rtf",
    "write_rtf",
    "rtf_escape",
    "format_value",
    "plot_series",
    "plot_decomposition",
    "plot_correlogram",
    "plot_forecast",
    "plot_scatter",
]
