# econpanel - Firm and Country Panel Analytics
"""
Package structure:
- data: Data loading (sole file reader/writer), config, WEO reshaping
- firms: Firm-level metric construction (lags, growth, ROIC)
- stats: Winsorization and summary statistics
- aggregate: Collapse to country-year, cardinality-checked merges
- timeseries: OLS decomposition, autocorrelation, ARMA
- reports: RTF summary tables and PNG charts
- pipeline: Batch runner and CLI
"""

__version__ = "0.1.0"
