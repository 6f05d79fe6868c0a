"""
PbTe latent-space neural network (LANN)

Predicts thermoelectric transport properties of doped PbTe from composition
and temperature with a pretrained embedding + dictionary network pair, and
propagates the predicted mean/std into derived figures of merit.
"""

from .exceptions import (
    LannError,
    DimensionMismatchError,
    OutOfBoundsError,
    UnknownActivationError,
    NonFiniteInputError,
    ParameterFormatError,
)
from .lann.predictor import ThermoelectricPredictor, PrimitiveEstimates, PropertyEstimate
from .evaluation.uncertainty import IntervalFlags, derive_all, derive_sweep
from .data.parameters import load_predictor

__version__ = "0.2.0"

__all__ = [
    "LannError",
    "DimensionMismatchError",
    "OutOfBoundsError",
    "UnknownActivationError",
    "NonFiniteInputError",
    "ParameterFormatError",
    "ThermoelectricPredictor",
    "PrimitiveEstimates",
    "PropertyEstimate",
    "IntervalFlags",
    "derive_all",
    "derive_sweep",
    "load_predictor",
]
