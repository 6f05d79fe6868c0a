"""
Dual-head thermoelectric property predictor.

Two latent-space networks share the same architectural split: the mean head
predicts (resistivity, Seebeck, thermal conductivity) and the dispersion head
predicts their standard deviations. Inputs are normalised by fixed model
scales before evaluation and raw outputs are calibrated per channel after.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from pbte_lann.exceptions import DimensionMismatchError, NonFiniteInputError
from pbte_lann.lann.activations import softplus
from pbte_lann.lann.latent import LatentSpaceNetwork
from pbte_lann.lann.network import FeedForwardNetwork, NetworkParameters
from pbte_lann.utils.logging_utils import get_logger
from pbte_lann.utils.numerics import require_finite

logger = get_logger("predictor")

ArrayLike = Union[float, np.ndarray]

PRIMITIVE_NAMES = ("resistivity", "seebeck", "thermal_conductivity")
PRIMITIVE_UNITS = {
    "resistivity": "Ohm m",
    "seebeck": "V/K",
    "thermal_conductivity": "W/m/K",
}


@dataclass(frozen=True)
class ModelScales:
    """Fixed input normalisation and output calibration constants of the model."""

    composition_scales: Tuple[float, float] = (0.1, 0.1)
    temperature_scale: float = 1000.0
    resistivity_scale: float = 5e-5
    seebeck_scale: float = 1e-4
    thermal_conductivity_scale: float = 1.0


DEFAULT_SCALES = ModelScales()


@dataclass(frozen=True)
class CompositionPoint:
    """Dopant fractions (a, b), dimensionless and typically within [0, 0.1]."""

    a: float
    b: float

    def __post_init__(self):
        require_finite("composition", (self.a, self.b))
        if self.a < 0 or self.b < 0:
            raise ValueError(f"Composition fractions must be non-negative, got ({self.a}, {self.b})")

    @property
    def label(self) -> str:
        return f"x={self.a:.3f}, y={self.b:.3f}"


@dataclass(frozen=True)
class OperatingPoint:
    composition: CompositionPoint
    temperature: float

    def __post_init__(self):
        require_finite("temperature", self.temperature)


@dataclass(frozen=True)
class PropertyEstimate:
    """Mean and standard deviation of one property (scalars or aligned arrays)."""

    mean: ArrayLike
    std: ArrayLike


@dataclass(frozen=True)
class PrimitiveEstimates:
    """Resistivity [Ohm m], Seebeck [V/K] and thermal conductivity [W/m/K] from one evaluation."""

    resistivity: PropertyEstimate
    seebeck: PropertyEstimate
    thermal_conductivity: PropertyEstimate

    @classmethod
    def from_arrays(cls, mean: np.ndarray, std: np.ndarray) -> "PrimitiveEstimates":
        """Split (..., 3) mean/std arrays into per-property estimates."""
        scalar = mean.ndim == 1
        parts = []
        for ch in range(3):
            m = mean[..., ch]
            s = std[..., ch]
            parts.append(PropertyEstimate(float(m), float(s)) if scalar else PropertyEstimate(m, s))
        return cls(*parts)

    def means(self) -> np.ndarray:
        return np.stack([np.asarray(p.mean, dtype=np.float64) for p in self], axis=-1)

    def stds(self) -> np.ndarray:
        return np.stack([np.asarray(p.std, dtype=np.float64) for p in self], axis=-1)

    def as_dict(self) -> Dict[str, PropertyEstimate]:
        return dict(zip(PRIMITIVE_NAMES, self))

    def __iter__(self):
        yield self.resistivity
        yield self.seebeck
        yield self.thermal_conductivity


@dataclass(frozen=True)
class PropertySweep:
    """Predictions for one composition over a temperature grid."""

    composition: CompositionPoint
    temperature: np.ndarray
    estimates: PrimitiveEstimates = field(repr=False)

    def __len__(self) -> int:
        return int(self.temperature.size)

    def at(self, index: int) -> PrimitiveEstimates:
        return PrimitiveEstimates.from_arrays(self.estimates.means()[index], self.estimates.stds()[index])

    def to_frame(self) -> pd.DataFrame:
        data = {"temperature": self.temperature}
        for name, est in self.estimates.as_dict().items():
            data[name] = est.mean
            data[f"{name}_std"] = est.std
        frame = pd.DataFrame(data)
        frame.insert(0, "b", self.composition.b)
        frame.insert(0, "a", self.composition.a)
        return frame


class Head(Enum):
    MEAN = "mean"
    DISPERSION = "dispersion"


def calibrate(mean_raw: np.ndarray, std_raw: np.ndarray, scales: ModelScales = DEFAULT_SCALES):
    """
    Map raw head outputs (..., 3) to physical units.

    Resistivity and thermal-conductivity means go through softplus so they stay
    positive whatever the network's last activation. The dispersion channels
    are only rescaled.
    """
    mean_raw = np.asarray(mean_raw, dtype=np.float64)
    std_raw = np.asarray(std_raw, dtype=np.float64)
    mean = np.empty_like(mean_raw)
    std = np.empty_like(std_raw)
    mean[..., 0] = softplus(mean_raw[..., 0]) * scales.resistivity_scale
    mean[..., 1] = mean_raw[..., 1] * scales.seebeck_scale
    mean[..., 2] = softplus(mean_raw[..., 2]) * scales.thermal_conductivity_scale
    std[..., 0] = std_raw[..., 0] * scales.resistivity_scale
    std[..., 1] = std_raw[..., 1] * scales.seebeck_scale
    std[..., 2] = std_raw[..., 2] * scales.thermal_conductivity_scale
    return mean, std


class ThermoelectricPredictor:
    """
    Mean + dispersion latent-space networks behind one ``predict`` call.

    Args:
        mean_head: Latent-space network producing raw means
        std_head: Latent-space network producing raw standard deviations
        scales: Normalisation/calibration constants (default: model constants)

    Example:
        >>> predictor = load_predictor()
        >>> est = predictor.predict(0.03, 0.0, 573.0)
        >>> est.seebeck.mean
    """

    num_descriptors = 2
    num_outputs = 3

    def __init__(self, mean_head: LatentSpaceNetwork, std_head: LatentSpaceNetwork, scales: ModelScales = DEFAULT_SCALES):
        for tag, head in ((Head.MEAN, mean_head), (Head.DISPERSION, std_head)):
            if head.input_dim != self.num_descriptors + 1:
                raise DimensionMismatchError(
                    f"{tag.value} head expects {head.input_dim} inputs, need {self.num_descriptors + 1}"
                )
            if head.output_dim != self.num_outputs:
                raise DimensionMismatchError(
                    f"{tag.value} head produces {head.output_dim} outputs, need {self.num_outputs}"
                )
        self.mean_head = mean_head
        self.std_head = std_head
        self.scales = scales

    @classmethod
    def from_parameters(
        cls,
        embedding: NetworkParameters,
        mean_dictionary: NetworkParameters,
        std_dictionary: NetworkParameters,
        std_embedding: Optional[NetworkParameters] = None,
        scales: ModelScales = DEFAULT_SCALES,
    ) -> "ThermoelectricPredictor":
        """Build both heads; the dispersion head reuses ``embedding`` unless ``std_embedding`` is given."""
        mean_embedding_net = FeedForwardNetwork.from_parameters(cls.num_descriptors, embedding)
        if std_embedding is None:
            std_embedding_net = mean_embedding_net
        else:
            std_embedding_net = FeedForwardNetwork.from_parameters(cls.num_descriptors, std_embedding)
        mean_head = LatentSpaceNetwork(
            mean_embedding_net,
            FeedForwardNetwork.from_parameters(mean_embedding_net.output_dim + 1, mean_dictionary),
        )
        std_head = LatentSpaceNetwork(
            std_embedding_net,
            FeedForwardNetwork.from_parameters(std_embedding_net.output_dim + 1, std_dictionary),
        )
        return cls(mean_head, std_head, scales=scales)

    def head(self, which: Head) -> LatentSpaceNetwork:
        return {Head.MEAN: self.mean_head, Head.DISPERSION: self.std_head}[which]

    def normalize_input(self, a: ArrayLike, b: ArrayLike, temperature: ArrayLike) -> np.ndarray:
        """Scale (a, b, T) to network units; broadcasts to shape (..., 3)."""
        sa, sb = self.scales.composition_scales
        a, b, temperature = np.broadcast_arrays(
            np.asarray(a, dtype=np.float64),
            np.asarray(b, dtype=np.float64),
            np.asarray(temperature, dtype=np.float64),
        )
        return np.stack([a / sa, b / sb, temperature / self.scales.temperature_scale], axis=-1)

    def evaluate(self, raw_input) -> PrimitiveEstimates:
        """
        Predict primitive properties for one raw ``(a, b, temperature)`` triple.

        Raises:
            DimensionMismatchError: If ``raw_input`` does not have three components
            NonFiniteInputError: If any component is NaN or infinite
            ValueError: If a composition fraction is negative
        """
        raw = np.asarray(raw_input, dtype=np.float64)
        if raw.shape != (self.num_descriptors + 1,):
            raise DimensionMismatchError(f"Expected raw input of shape (3,), got {raw.shape}")
        require_finite("raw input", raw)
        if raw[0] < 0 or raw[1] < 0:
            raise ValueError(f"Composition fractions must be non-negative, got ({raw[0]}, {raw[1]})")
        x = self.normalize_input(raw[0], raw[1], raw[2])
        mean, std = calibrate(self.mean_head.evaluate(x), self.std_head.evaluate(x), self.scales)
        return PrimitiveEstimates.from_arrays(mean, std)

    def predict(self, a: float, b: float, temperature: float) -> PrimitiveEstimates:
        """Predict at composition (a, b) and temperature [degC]."""
        return self.evaluate((a, b, temperature))

    def predict_point(self, point: OperatingPoint) -> PrimitiveEstimates:
        return self.predict(point.composition.a, point.composition.b, point.temperature)

    def predict_sweep(self, a: float, b: float, temperatures: Iterable[float]) -> PropertySweep:
        """
        Predict over a temperature grid for one composition.

        The embedding of each head is evaluated once; the dictionaries run as a
        single batch over all temperature nodes.
        """
        composition = CompositionPoint(float(a), float(b))
        temps = np.array(list(temperatures), dtype=np.float64).ravel()
        if temps.size == 0:
            raise DimensionMismatchError("Temperature grid is empty")
        require_finite("temperature", temps)

        x = self.normalize_input(composition.a, composition.b, temps)
        descriptor = x[0, : self.num_descriptors]
        context = x[:, self.num_descriptors :]
        raw = {}
        for which in Head:
            head = self.head(which)
            raw[which] = head.evaluate_context(head.embed(descriptor), context)
        mean, std = calibrate(raw[Head.MEAN], raw[Head.DISPERSION], self.scales)
        logger.debug(
            f"Predicted {temps.size} temperature nodes for {composition.label} "
            f"({temps.min():.1f} to {temps.max():.1f} degC)"
        )
        return PropertySweep(composition, temps, PrimitiveEstimates.from_arrays(mean, std))

    def __repr__(self) -> str:
        return f"ThermoelectricPredictor(mean_head={self.mean_head!r}, std_head={self.std_head!r})"
