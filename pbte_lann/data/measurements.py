"""Reference thermoelectric measurements of doped PbTe shipped with the package."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from pbte_lann.evaluation.uncertainty import CELSIUS_TO_KELVIN

PACKAGED_MEASUREMENTS = "measurements.json"

INPUT_KEY = "input"
TEMPERATURE_KEY = "temperature [degC]"
PROPERTY_KEYS = {
    "resistivity": "electrical_resistivity [Ohm m]",
    "seebeck": "Seebeck_coefficient [V/K]",
    "thermal_conductivity": "thermal_conductivity [W/m/K]",
}


def _read_document(path: Optional[Union[str, Path]]):
    if path is None:
        text = resources.files("pbte_lann.resources").joinpath(PACKAGED_MEASUREMENTS).read_text(encoding="utf-8")
        return json.loads(text)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_measurements(path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """
    Load measurements as a long table, sorted by label and temperature.

    Columns: label, a, b, temperature [degC], resistivity [Ohm m],
    seebeck [V/K], thermal_conductivity [W/m/K].
    """
    document = _read_document(path)
    frames = []
    for label, record in document.items():
        a, b = record[INPUT_KEY]
        frame = pd.DataFrame({"temperature": np.asarray(record[TEMPERATURE_KEY], dtype=float)})
        for name, key in PROPERTY_KEYS.items():
            values = np.asarray(record[key], dtype=float)
            if values.size != len(frame):
                raise ValueError(f"{label}: '{key}' has {values.size} values, expected {len(frame)}")
            frame[name] = values
        frame.insert(0, "b", float(b))
        frame.insert(0, "a", float(a))
        frame.insert(0, "label", label)
        frames.append(frame)
    if not frames:
        raise ValueError("Measurement document is empty")
    df = pd.concat(frames, ignore_index=True)
    return df.sort_values(["label", "temperature"]).reset_index(drop=True)


def measurement_labels(path: Optional[Union[str, Path]] = None) -> List[str]:
    return sorted(_read_document(path).keys())


def add_derived_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Add electrical conductivity, power factor and zT computed from the measured columns."""
    out = df.copy()
    out["electrical_conductivity"] = 1.0 / out["resistivity"]
    out["power_factor"] = out["seebeck"] ** 2 / out["resistivity"]
    out["figure_of_merit"] = (
        out["seebeck"] ** 2 / (out["resistivity"] * out["thermal_conductivity"]) * (out["temperature"] + CELSIUS_TO_KELVIN)
    )
    return out
