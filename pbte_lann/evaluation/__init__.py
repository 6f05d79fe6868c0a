"""
Uncertainty propagation and evaluation against reference measurements.
"""

from .uncertainty import (
    Z_95,
    CELSIUS_TO_KELVIN,
    Interval,
    IntervalFlags,
    Quantity,
    DerivedProperties,
    absolute_temperature,
    confidence_bounds,
    positive_interval,
    reciprocal_interval,
    squared_bounds,
    derive_all,
    derive_sweep,
)
from .metrics import (
    regression_metrics,
    interval_coverage,
    compare_with_measurements,
    metrics_by_property,
)

__all__ = [
    # Uncertainty
    "Z_95",
    "CELSIUS_TO_KELVIN",
    "Interval",
    "IntervalFlags",
    "Quantity",
    "DerivedProperties",
    "absolute_temperature",
    "confidence_bounds",
    "positive_interval",
    "reciprocal_interval",
    "squared_bounds",
    "derive_all",
    "derive_sweep",
    # Metrics
    "regression_metrics",
    "interval_coverage",
    "compare_with_measurements",
    "metrics_by_property",
]
