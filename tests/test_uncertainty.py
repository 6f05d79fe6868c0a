import math

import numpy as np
import pytest

from pbte_lann.evaluation.uncertainty import (
    CELSIUS_TO_KELVIN,
    Z_95,
    Interval,
    IntervalFlags,
    confidence_bounds,
    derive_all,
    derive_sweep,
    positive_interval,
    reciprocal_interval,
    squared_bounds,
)
from pbte_lann.lann.predictor import PrimitiveEstimates, PropertyEstimate


def _estimates(rho=(1e-5, 1e-7), seebeck=(2e-4, 5e-6), kappa=(1.5, 0.05)):
    return PrimitiveEstimates(PropertyEstimate(*rho), PropertyEstimate(*seebeck), PropertyEstimate(*kappa))


def test_confidence_bounds():
    iv = confidence_bounds(10.0, 1.0)
    assert iv.low == pytest.approx(10.0 - 1.96)
    assert iv.high == pytest.approx(10.0 + 1.96)
    assert not iv.suppressed


def test_reciprocal_interval_reverses_order():
    iv = reciprocal_interval(Interval(2.0, 4.0))
    assert (iv.low, iv.high) == (0.25, 0.5)


def test_reciprocal_of_suppressed_is_suppressed():
    assert reciprocal_interval(Interval.suppressed_interval()).suppressed


def test_squared_bounds_sign_crossing():
    iv = confidence_bounds(0.0, 1.0)
    assert (iv.low, iv.high) == (-1.96, 1.96)
    sq, sq_min, sq_max = squared_bounds(0.0, iv.low, iv.high)
    assert sq == 0.0
    assert sq_min == 0.0
    assert sq_max == pytest.approx(1.96 ** 2)


def test_squared_bounds_negative_interval():
    sq, sq_min, sq_max = squared_bounds(-3.0, -4.0, -2.0)
    assert (sq, sq_min, sq_max) == (9.0, 4.0, 16.0)


def test_squared_bounds_crossing_not_centered():
    # minimum square over [-1, 5] is 0, not 1
    _, sq_min, sq_max = squared_bounds(2.0, -1.0, 5.0)
    assert sq_min == 0.0
    assert sq_max == 25.0


def test_positivity_suppression():
    iv = positive_interval(1e-6, 1e-6)
    assert iv.suppressed
    assert math.isnan(iv.low) and math.isnan(iv.high)
    assert not positive_interval(1e-6, 1e-7).suppressed


def test_resistivity_suppressed_regardless_of_flag():
    derived = derive_all(_estimates(rho=(1e-6, 1e-6)), 300.0, IntervalFlags(properties=True, figures_of_merit=True))
    assert derived.resistivity.interval.suppressed
    assert derived.electrical_conductivity.interval.suppressed
    assert derived.power_factor.interval.suppressed
    assert derived.figure_of_merit.interval.suppressed
    # point values are still reported
    assert derived.resistivity.value == 1e-6
    assert derived.electrical_conductivity.value == pytest.approx(1e6)
    # Seebeck and thermal conductivity do not depend on resistivity
    assert not derived.seebeck.interval.suppressed
    assert not derived.thermal_conductivity.interval.suppressed


def test_thermal_conductivity_suppression_hides_zt_only():
    derived = derive_all(_estimates(kappa=(0.1, 0.1)), 300.0)
    assert derived.thermal_conductivity.interval.suppressed
    assert derived.figure_of_merit.interval.suppressed
    assert not derived.power_factor.interval.suppressed
    assert not derived.electrical_conductivity.interval.suppressed


def test_negative_seebeck_is_not_positivity_suppressed():
    derived = derive_all(_estimates(seebeck=(-1e-4, 1e-4)), 300.0)
    assert not derived.seebeck.interval.suppressed
    assert derived.seebeck.interval.low < 0


def test_values_and_bounds():
    rho, s, k, t = 1e-5, 2e-4, 1.5, 500.0
    est = _estimates(rho=(rho, 1e-7), seebeck=(s, 5e-6), kappa=(k, 0.05))
    d = derive_all(est, t)
    t_abs = t + CELSIUS_TO_KELVIN

    assert d.electrical_conductivity.value == pytest.approx(1.0 / rho)
    assert d.power_factor.value == pytest.approx(s ** 2 / rho)
    assert d.figure_of_merit.value == pytest.approx(s ** 2 * t_abs / (rho * k))

    rho_low, rho_high = rho - Z_95 * 1e-7, rho + Z_95 * 1e-7
    s_low, s_high = s - Z_95 * 5e-6, s + Z_95 * 5e-6
    k_low, k_high = k - Z_95 * 0.05, k + Z_95 * 0.05
    assert d.electrical_conductivity.interval.low == pytest.approx(1.0 / rho_high)
    assert d.electrical_conductivity.interval.high == pytest.approx(1.0 / rho_low)
    assert d.power_factor.interval.low == pytest.approx(s_low ** 2 / rho_high)
    assert d.power_factor.interval.high == pytest.approx(s_high ** 2 / rho_low)
    assert d.figure_of_merit.interval.low == pytest.approx(s_low ** 2 * t_abs / (rho_high * k_high))
    assert d.figure_of_merit.interval.high == pytest.approx(s_high ** 2 * t_abs / (rho_low * k_low))
    assert d.figure_of_merit.interval.low <= d.figure_of_merit.value <= d.figure_of_merit.interval.high


def test_sign_crossing_power_factor_lower_bound_is_zero():
    d = derive_all(_estimates(seebeck=(0.0, 1e-4)), 300.0)
    assert d.power_factor.interval.low == 0.0
    assert d.figure_of_merit.interval.low == 0.0
    assert d.power_factor.value == 0.0


def test_display_flags():
    est = _estimates()
    d = derive_all(est, 400.0, IntervalFlags(properties=False, figures_of_merit=True))
    for q in (d.resistivity, d.seebeck, d.thermal_conductivity, d.electrical_conductivity):
        assert q.interval.suppressed
    assert not d.power_factor.interval.suppressed
    assert not d.figure_of_merit.interval.suppressed

    d = derive_all(est, 400.0, IntervalFlags(properties=True, figures_of_merit=False))
    assert not d.resistivity.interval.suppressed
    assert d.power_factor.interval.suppressed
    assert d.figure_of_merit.interval.suppressed


def test_flags_from_config_section():
    flags = IntervalFlags.from_config({"properties": False})
    assert flags == IntervalFlags(properties=False, figures_of_merit=True)


def test_vectorised_matches_scalar():
    rho = np.array([1e-5, 1e-6, 2e-5])
    rho_std = np.array([1e-7, 1e-6, 1e-6])
    s = np.array([2e-4, -1e-5, 1e-4])
    s_std = np.array([5e-6, 2e-5, 1e-5])
    k = np.array([1.5, 2.0, 0.9])
    k_std = np.array([0.05, 0.1, 0.6])
    t = np.array([300.0, 450.0, 600.0])
    est = PrimitiveEstimates(PropertyEstimate(rho, rho_std), PropertyEstimate(s, s_std), PropertyEstimate(k, k_std))
    vec = derive_all(est, t).as_dict()
    for i in range(3):
        scalar = derive_all(_estimates((rho[i], rho_std[i]), (s[i], s_std[i]), (k[i], k_std[i])), t[i]).as_dict()
        for name, q in scalar.items():
            assert vec[name].value[i] == pytest.approx(q.value)
            np.testing.assert_allclose(
                [vec[name].interval.low[i], vec[name].interval.high[i]],
                [q.interval.low, q.interval.high],
                equal_nan=True,
            )
    assert vec["resistivity"].interval.suppressed.tolist() == [False, True, False]


def test_derive_sweep_frame(small_predictor):
    temps = np.linspace(250.0, 750.0, 7)
    sweep = small_predictor.predict_sweep(0.03, 0.0, temps)
    frame = derive_sweep(sweep)
    assert len(frame) == 7
    for name in ("resistivity", "electrical_conductivity", "power_factor", "figure_of_merit"):
        assert {name, f"{name}_low", f"{name}_high"} <= set(frame.columns)
    np.testing.assert_allclose(frame["temperature"], temps)
    np.testing.assert_allclose(frame["electrical_conductivity"], 1.0 / frame["resistivity"])
