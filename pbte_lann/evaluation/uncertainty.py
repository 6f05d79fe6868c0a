"""
Propagation of predicted mean/std into 95% intervals of derived quantities.

Bounds follow a Gaussian approximation, ``mean +/- 1.96 std``. Resistivity
and thermal conductivity are non-negative, so their interval is hidden (set
to NaN) rather than clamped when the lower bound drops below zero; every
quantity computed from a hidden interval is hidden as well.

Temperatures handed to this module are in degrees Celsius. Figures of merit
use the absolute temperature ``T + 273.15``.

All functions accept floats or aligned numpy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple, Union

import numpy as np
import pandas as pd

from pbte_lann.lann.predictor import PrimitiveEstimates, PropertySweep

ArrayLike = Union[float, np.ndarray]

Z_95 = 1.96
CELSIUS_TO_KELVIN = 273.15


def _out(x) -> ArrayLike:
    arr = np.asarray(x, dtype=np.float64)
    return float(arr) if arr.ndim == 0 else arr


@dataclass(frozen=True)
class Interval:
    """Closed interval (low, high); NaN bounds mark a suppressed interval."""

    low: ArrayLike
    high: ArrayLike

    @classmethod
    def suppressed_interval(cls) -> "Interval":
        return cls(float("nan"), float("nan"))

    @property
    def suppressed(self):
        """True (elementwise for arrays) where the interval is not shown."""
        mask = np.isnan(np.asarray(self.low, dtype=np.float64)) | np.isnan(np.asarray(self.high, dtype=np.float64))
        return bool(mask) if mask.ndim == 0 else mask

    def suppress_where(self, mask) -> "Interval":
        mask = np.asarray(mask, dtype=bool)
        return Interval(_out(np.where(mask, np.nan, self.low)), _out(np.where(mask, np.nan, self.high)))

    def __iter__(self):
        yield self.low
        yield self.high


@dataclass(frozen=True)
class Quantity:
    """Point value with its (possibly suppressed) 95% interval."""

    value: ArrayLike
    interval: Interval


@dataclass(frozen=True)
class IntervalFlags:
    """
    Which interval series the caller wants displayed.

    Args:
        properties: Resistivity, Seebeck, thermal and electrical conductivity
        figures_of_merit: Power factor and zT
    """

    properties: bool = True
    figures_of_merit: bool = True

    @classmethod
    def from_config(cls, section: Any) -> "IntervalFlags":
        return cls(
            properties=bool(section.get("properties", True)),
            figures_of_merit=bool(section.get("figures_of_merit", True)),
        )


@dataclass(frozen=True)
class DerivedProperties:
    """Primitive properties and the quantities derived from them at one or more nodes."""

    resistivity: Quantity
    seebeck: Quantity
    thermal_conductivity: Quantity
    electrical_conductivity: Quantity
    power_factor: Quantity
    figure_of_merit: Quantity

    def as_dict(self) -> Dict[str, Quantity]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_frame(self, temperature) -> pd.DataFrame:
        """One row per temperature node with ``<name>``, ``<name>_low``, ``<name>_high`` columns."""
        data = {"temperature": np.atleast_1d(np.asarray(temperature, dtype=np.float64))}
        for name, q in self.as_dict().items():
            data[name] = np.atleast_1d(q.value)
            data[f"{name}_low"] = np.atleast_1d(q.interval.low)
            data[f"{name}_high"] = np.atleast_1d(q.interval.high)
        return pd.DataFrame(data)


def absolute_temperature(temperature: ArrayLike) -> ArrayLike:
    """Celsius to Kelvin."""
    return _out(np.asarray(temperature, dtype=np.float64) + CELSIUS_TO_KELVIN)


def confidence_bounds(mean: ArrayLike, std: ArrayLike) -> Interval:
    mean = np.asarray(mean, dtype=np.float64)
    std = np.asarray(std, dtype=np.float64)
    return Interval(_out(mean - Z_95 * std), _out(mean + Z_95 * std))


def positive_interval(mean: ArrayLike, std: ArrayLike) -> Interval:
    """95% bounds of a non-negative quantity; suppressed where the lower bound is negative."""
    bounds = confidence_bounds(mean, std)
    return bounds.suppress_where(np.asarray(bounds.low) < 0)


def reciprocal_interval(interval: Interval) -> Interval:
    """Image of a positive interval under 1/x; the bounds swap."""
    low = np.asarray(interval.low, dtype=np.float64)
    high = np.asarray(interval.high, dtype=np.float64)
    with np.errstate(divide="ignore"):
        return Interval(_out(1.0 / high), _out(1.0 / low))


def squared_bounds(mean: ArrayLike, low: ArrayLike, high: ArrayLike) -> Tuple[ArrayLike, ArrayLike, ArrayLike]:
    """
    Square of a signed quantity with bounds.

    Returns:
        (mean**2, min square, max square); the minimum is 0 when the interval
        contains zero. NaN bounds give NaN bounds.
    """
    mean = np.asarray(mean, dtype=np.float64)
    low = np.asarray(low, dtype=np.float64)
    high = np.asarray(high, dtype=np.float64)
    sq = mean ** 2
    sq_min = np.minimum(np.minimum(sq, low ** 2), high ** 2)
    sq_max = np.maximum(np.maximum(sq, low ** 2), high ** 2)
    sq_min = np.where((low < 0) & (high > 0), 0.0, sq_min)
    return _out(sq), _out(sq_min), _out(sq_max)


def derive_all(
    estimates: PrimitiveEstimates,
    temperature: ArrayLike,
    flags: IntervalFlags = IntervalFlags(),
) -> DerivedProperties:
    """
    Point values and 95% intervals for all primitive and derived quantities.

    Args:
        estimates: Mean/std of resistivity, Seebeck, thermal conductivity
        temperature: Operating temperature(s) [degC], aligned with the estimates
        flags: Which interval series to display

    Returns:
        DerivedProperties with resistivity, Seebeck, thermal conductivity,
        electrical conductivity (1/rho), power factor (S^2/rho) and
        zT (S^2 T / (rho kappa))
    """
    rho = np.asarray(estimates.resistivity.mean, dtype=np.float64)
    seebeck = np.asarray(estimates.seebeck.mean, dtype=np.float64)
    kappa = np.asarray(estimates.thermal_conductivity.mean, dtype=np.float64)
    t_abs = np.asarray(absolute_temperature(temperature), dtype=np.float64)

    rho_iv = positive_interval(rho, estimates.resistivity.std)
    seebeck_iv = confidence_bounds(seebeck, estimates.seebeck.std)
    kappa_iv = positive_interval(kappa, estimates.thermal_conductivity.std)
    sq, sq_min, sq_max = squared_bounds(seebeck, seebeck_iv.low, seebeck_iv.high)

    rho_low = np.asarray(rho_iv.low)
    rho_high = np.asarray(rho_iv.high)
    kappa_low = np.asarray(kappa_iv.low)
    kappa_high = np.asarray(kappa_iv.high)

    with np.errstate(divide="ignore", invalid="ignore"):
        conductivity = 1.0 / rho
        conductivity_iv = reciprocal_interval(rho_iv)

        power_factor = sq / rho
        power_factor_iv = Interval(_out(sq_min / rho_high), _out(sq_max / rho_low))

        zt = sq * t_abs / (rho * kappa)
        zt_iv = Interval(
            _out(sq_min * t_abs / (rho_high * kappa_high)),
            _out(sq_max * t_abs / (rho_low * kappa_low)),
        )

    hide_properties = not flags.properties
    hide_merit = not flags.figures_of_merit
    return DerivedProperties(
        resistivity=Quantity(_out(rho), rho_iv.suppress_where(hide_properties)),
        seebeck=Quantity(_out(seebeck), seebeck_iv.suppress_where(hide_properties)),
        thermal_conductivity=Quantity(_out(kappa), kappa_iv.suppress_where(hide_properties)),
        electrical_conductivity=Quantity(_out(conductivity), conductivity_iv.suppress_where(hide_properties)),
        power_factor=Quantity(_out(power_factor), power_factor_iv.suppress_where(hide_merit)),
        figure_of_merit=Quantity(_out(zt), zt_iv.suppress_where(hide_merit)),
    )


def derive_sweep(sweep: PropertySweep, flags: IntervalFlags = IntervalFlags()) -> pd.DataFrame:
    """Derived quantities over a temperature sweep as a DataFrame."""
    derived = derive_all(sweep.estimates, sweep.temperature, flags)
    frame = derived.to_frame(sweep.temperature)
    frame.insert(0, "b", sweep.composition.b)
    frame.insert(0, "a", sweep.composition.a)
    return frame
