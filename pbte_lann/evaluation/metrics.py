"""Metrics comparing predictions against reference measurements."""

from __future__ import annotations

from typing import Dict, Iterable, List

import numpy as np
import pandas as pd
from scipy.stats import pearsonr
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from pbte_lann.evaluation.uncertainty import derive_all
from pbte_lann.lann.predictor import ThermoelectricPredictor

COMPARED_PROPERTIES = (
    "resistivity",
    "seebeck",
    "thermal_conductivity",
    "electrical_conductivity",
    "power_factor",
    "figure_of_merit",
)


def _safe_float(value, default=np.nan) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def regression_metrics(y_true: Iterable[float], y_pred: Iterable[float], prefix: str = "") -> Dict[str, float]:
    y_true = np.asarray(list(y_true), dtype=float)
    y_pred = np.asarray(list(y_pred), dtype=float)

    if len(y_true) == 0:
        return {
            f"{prefix}n": 0,
            f"{prefix}mae": np.nan,
            f"{prefix}rmse": np.nan,
            f"{prefix}r2": np.nan,
            f"{prefix}mape_pct": np.nan,
            f"{prefix}bias": np.nan,
            f"{prefix}pearson_r": np.nan,
        }

    error = y_pred - y_true
    abs_error = np.abs(error)

    mse = mean_squared_error(y_true, y_pred)
    mae = mean_absolute_error(y_true, y_pred)
    r2 = r2_score(y_true, y_pred) if len(y_true) > 1 else np.nan

    denom = np.maximum(np.abs(y_true), 1e-12)
    mape_pct = np.mean(abs_error / denom) * 100.0

    if len(y_true) > 1 and np.std(y_true) > 0 and np.std(y_pred) > 0:
        pearson = pearsonr(y_true, y_pred)[0]
    else:
        pearson = np.nan

    return {
        f"{prefix}n": int(len(y_true)),
        f"{prefix}mae": _safe_float(mae),
        f"{prefix}rmse": _safe_float(np.sqrt(mse)),
        f"{prefix}r2": _safe_float(r2),
        f"{prefix}mape_pct": _safe_float(mape_pct),
        f"{prefix}bias": _safe_float(np.mean(error)),
        f"{prefix}pearson_r": _safe_float(pearson),
    }


def interval_coverage(y_true: Iterable[float], low: Iterable[float], high: Iterable[float]) -> float:
    """Fraction of measurements inside their interval, over nodes whose interval is shown."""
    y_true = np.asarray(list(y_true), dtype=float)
    low = np.asarray(list(low), dtype=float)
    high = np.asarray(list(high), dtype=float)
    shown = ~(np.isnan(low) | np.isnan(high))
    if not np.any(shown):
        return np.nan
    inside = (y_true[shown] >= low[shown]) & (y_true[shown] <= high[shown])
    return float(np.mean(inside))


def compare_with_measurements(predictor: ThermoelectricPredictor, measurements: pd.DataFrame) -> pd.DataFrame:
    """
    Predict at every measured (a, b, temperature) row.

    Returns the measurement rows with ``<name>_pred``, ``<name>_low`` and
    ``<name>_high`` columns added for every compared property. Measured derived
    columns are expected to be present (see ``add_derived_columns``).
    """
    parts: List[pd.DataFrame] = []
    for (a, b), group in measurements.groupby(["a", "b"], sort=False):
        sweep = predictor.predict_sweep(a, b, group["temperature"].to_numpy())
        derived = derive_all(sweep.estimates, sweep.temperature).as_dict()
        out = group.copy()
        for name in COMPARED_PROPERTIES:
            out[f"{name}_pred"] = np.asarray(derived[name].value)
            out[f"{name}_low"] = np.asarray(derived[name].interval.low)
            out[f"{name}_high"] = np.asarray(derived[name].interval.high)
        parts.append(out)
    return pd.concat(parts).sort_index()


def metrics_by_property(comparison: pd.DataFrame) -> pd.DataFrame:
    """One row of regression metrics and interval coverage per compared property."""
    rows: List[Dict[str, float]] = []
    for name in COMPARED_PROPERTIES:
        if name not in comparison.columns:
            continue
        row = {"property": name}
        row.update(regression_metrics(comparison[name], comparison[f"{name}_pred"]))
        row["coverage_95"] = interval_coverage(
            comparison[name], comparison[f"{name}_low"], comparison[f"{name}_high"]
        )
        rows.append(row)
    return pd.DataFrame(rows)
