"""Elementwise activation functions used by the feed-forward layers."""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from pbte_lann.exceptions import UnknownActivationError

ActivationFn = Callable[[np.ndarray], np.ndarray]


def identity(x):
    return np.asarray(x, dtype=np.float64)


def elu(x):
    """x for x > 0, exp(x) - 1 otherwise."""
    arr = np.asarray(x, dtype=np.float64)
    # expm1 only sees the non-positive part, so large x never overflows
    return np.where(arr > 0, arr, np.expm1(np.minimum(arr, 0.0)))


def softplus(x):
    """Numerically stable log(1 + exp(x)) via the max-trick in logaddexp."""
    return np.logaddexp(0.0, np.asarray(x, dtype=np.float64))


ACTIVATIONS: Dict[str, ActivationFn] = {
    "linear": identity,
    "identity": identity,
    "elu": elu,
    "softplus": softplus,
}


def get_activation(name: str) -> ActivationFn:
    """Look up an activation by name ("linear", "elu", "softplus")."""
    try:
        return ACTIVATIONS[str(name).lower()]
    except KeyError:
        raise UnknownActivationError(
            f"Unknown activation '{name}'. Expected one of {sorted(ACTIVATIONS)}"
        ) from None
