import numpy as np
import pytest

from pbte_lann.data.measurements import add_derived_columns, load_measurements, measurement_labels
from pbte_lann.evaluation.metrics import (
    compare_with_measurements,
    interval_coverage,
    metrics_by_property,
    regression_metrics,
)


@pytest.fixture(scope="module")
def measurements():
    return add_derived_columns(load_measurements())


def test_load_measurements(measurements):
    labels = measurement_labels()
    assert "x=0.030, y=0.000" in labels
    assert set(measurements["label"]) == set(labels)
    assert len(measurements) == 10 * len(labels)
    row = measurements[(measurements["label"] == "x=0.030, y=0.000") & (measurements["temperature"] == 573.0)].iloc[0]
    assert row["a"] == 0.03
    assert row["resistivity"] == pytest.approx(1.26e-05)
    assert row["seebeck"] == pytest.approx(1.93e-04)
    assert row["thermal_conductivity"] == pytest.approx(1.885)


def test_derived_columns(measurements):
    row = measurements.iloc[0]
    assert row["electrical_conductivity"] == pytest.approx(1.0 / row["resistivity"])
    expected_zt = row["seebeck"] ** 2 / (row["resistivity"] * row["thermal_conductivity"]) * (row["temperature"] + 273.15)
    assert row["figure_of_merit"] == pytest.approx(expected_zt)


def test_regression_metrics_perfect_fit():
    metrics = regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 3.0], prefix="val_")
    assert metrics["val_n"] == 3
    assert metrics["val_mae"] == 0.0
    assert metrics["val_r2"] == 1.0
    assert metrics["val_pearson_r"] == pytest.approx(1.0)


def test_regression_metrics_empty():
    metrics = regression_metrics([], [])
    assert metrics["n"] == 0
    assert np.isnan(metrics["rmse"])


def test_interval_coverage_ignores_suppressed():
    cov = interval_coverage([1.0, 5.0, 2.0], [0.0, 0.0, np.nan], [2.0, 4.0, np.nan])
    assert cov == 0.5
    assert np.isnan(interval_coverage([1.0], [np.nan], [np.nan]))


def test_packaged_model_tracks_measurements(packaged_predictor, measurements):
    subset = measurements[measurements["label"].isin(["x=0.030, y=0.000", "x=0.040, y=0.010"])]
    comparison = compare_with_measurements(packaged_predictor, subset)
    assert len(comparison) == len(subset)
    assert comparison.index.equals(subset.index)
    metrics = metrics_by_property(comparison).set_index("property")
    assert metrics.loc["seebeck", "r2"] > 0.8
    assert metrics.loc["thermal_conductivity", "mape_pct"] < 25.0
