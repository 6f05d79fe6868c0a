"""
Latent-space neural network components.

Exports:
- Matrix: Dense row-major matrix
- FeedForwardNetwork / NetworkParameters: Layered affine + activation evaluator
- LatentSpaceNetwork: Embedding + dictionary composition
- ThermoelectricPredictor: Mean/dispersion heads with normalisation and calibration
"""

from .matrix import Matrix
from .activations import ACTIVATIONS, elu, get_activation, identity, softplus
from .network import FeedForwardNetwork, NetworkParameters
from .latent import LatentSpaceNetwork
from .predictor import (
    DEFAULT_SCALES,
    PRIMITIVE_NAMES,
    CompositionPoint,
    Head,
    ModelScales,
    OperatingPoint,
    PrimitiveEstimates,
    PropertyEstimate,
    PropertySweep,
    ThermoelectricPredictor,
    calibrate,
)

__all__ = [
    "Matrix",
    "ACTIVATIONS",
    "elu",
    "get_activation",
    "identity",
    "softplus",
    "FeedForwardNetwork",
    "NetworkParameters",
    "LatentSpaceNetwork",
    "DEFAULT_SCALES",
    "PRIMITIVE_NAMES",
    "CompositionPoint",
    "Head",
    "ModelScales",
    "OperatingPoint",
    "PrimitiveEstimates",
    "PropertyEstimate",
    "PropertySweep",
    "ThermoelectricPredictor",
    "calibrate",
]
