"""econpanel Time Series Package - Decomposition and ARMA modelling.

Public API:
- decompose: OLS trend + seasonal dummies decomposition
- hp_decompose: Hodrick-Prescott trend/cycle
- DecompositionResult: Component container
- autocorrelations: AC / PAC / Ljung-Box table
- adf_test: Augmented Dickey-Fuller test
- fit_arma, select_order, forecast: ARIMA estimation and forecasting
- ArmaResult: Estimated model container
"""

from .decompose import DecompositionResult, decompose, hp_decompose
from .arma import ArmaResult, adf_test, autocorrelations, fit_arma, forecast, select_order

__all__ = [
    "DecompositionResult",
    "decompose",
    "hp_decompose",
    "ArmaResult",
    "autocorrelations",
    "adf_test",
    "fit_arma",
    "select_order",
    "forecast",
]
