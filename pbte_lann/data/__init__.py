"""Parameter bundles and reference measurements."""

from .parameters import load_bundle_file, load_predictor, predictor_from_bundles
from .measurements import add_derived_columns, load_measurements, measurement_labels

__all__ = [
    "load_bundle_file",
    "load_predictor",
    "predictor_from_bundles",
    "add_derived_columns",
    "load_measurements",
    "measurement_labels",
]
