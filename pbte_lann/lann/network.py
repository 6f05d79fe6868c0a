"""
Feed-forward evaluator: a stack of (affine transform -> activation) layers.

Parameters are validated once at construction and stored as read-only
arrays, so a network can be shared between threads and evaluated
concurrently without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

import numpy as np

from pbte_lann.exceptions import DimensionMismatchError, ParameterFormatError
from pbte_lann.lann.activations import get_activation
from pbte_lann.lann.matrix import Matrix


@dataclass(frozen=True)
class NetworkParameters:
    """Immutable per-layer weights (out, in), biases (out,), and activation names."""

    weights: Tuple[np.ndarray, ...]
    biases: Tuple[np.ndarray, ...]
    activations: Tuple[str, ...]

    @property
    def num_layers(self) -> int:
        return len(self.weights)

    @property
    def num_parameters(self) -> int:
        return int(sum(w.size + b.size for w, b in zip(self.weights, self.biases)))


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.float64, copy=True)
    arr.flags.writeable = False
    return arr


def _to_array(values: Any, what: str, layer: int) -> np.ndarray:
    try:
        return np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError):
        raise DimensionMismatchError(f"Layer {layer}: {what} is ragged or not numeric") from None


def _as_bias(bias: Any, layer: int) -> np.ndarray:
    if isinstance(bias, Matrix):
        if bias.cols != 1:
            raise DimensionMismatchError(f"Layer {layer}: bias must be a column vector, got shape {bias.shape}")
        return bias.array.copy()
    arr = _to_array(bias, "bias", layer)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1 or arr.size == 0:
        raise DimensionMismatchError(f"Layer {layer}: bias must be a non-empty vector, got shape {arr.shape}")
    return arr


def _as_weight(weight: Any, rows: int, cols: int, layer: int) -> np.ndarray:
    """Coerce a Matrix, 2-D array/nested list, or flat row-major list to (rows, cols)."""
    if isinstance(weight, Matrix):
        arr = weight.to_numpy()
    else:
        arr = _to_array(weight, "weight", layer)
        if arr.ndim == 1:
            if arr.size != rows * cols:
                raise DimensionMismatchError(
                    f"Layer {layer}: flat weight has {arr.size} values, expected {rows} x {cols} = {rows * cols}"
                )
            arr = arr.reshape(rows, cols)
    if arr.shape != (rows, cols):
        raise DimensionMismatchError(f"Layer {layer}: weight shape {arr.shape} does not match expected ({rows}, {cols})")
    return arr


class FeedForwardNetwork:
    """
    Fully connected network evaluated as ``x -> act_i(W_i x + b_i)`` per layer.

    Args:
        input_dim: Declared input size of the first layer
        weights: One weight per layer (Matrix, 2-D array, nested list, or flat
            row-major list whose shape is inferred from the bias length)
        biases: One bias vector per layer
        activations: One activation name per layer

    Raises:
        DimensionMismatchError: If the weight/bias chain is inconsistent
        UnknownActivationError: If an activation name is not recognised
    """

    def __init__(
        self,
        input_dim: int,
        weights: Sequence[Any],
        biases: Sequence[Any],
        activations: Sequence[str],
    ):
        input_dim = int(input_dim)
        if input_dim < 1:
            raise DimensionMismatchError(f"input_dim must be positive, got {input_dim}")
        if not (len(weights) == len(biases) == len(activations)):
            raise DimensionMismatchError(
                f"Layer count mismatch: {len(weights)} weights, {len(biases)} biases, "
                f"{len(activations)} activations"
            )
        if len(weights) == 0:
            raise DimensionMismatchError("A network needs at least one layer")

        w_list: List[np.ndarray] = []
        b_list: List[np.ndarray] = []
        width = input_dim
        for i, (w, b) in enumerate(zip(weights, biases)):
            bias = _as_bias(b, i)
            weight = _as_weight(w, bias.size, width, i)
            w_list.append(_readonly(weight))
            b_list.append(_readonly(bias))
            width = bias.size

        self._input_dim = input_dim
        self._activation_fns = tuple(get_activation(name) for name in activations)
        self._params = NetworkParameters(
            weights=tuple(w_list),
            biases=tuple(b_list),
            activations=tuple(str(name).lower() for name in activations),
        )

    @classmethod
    def from_parameters(cls, input_dim: int, params: NetworkParameters) -> "FeedForwardNetwork":
        return cls(input_dim, params.weights, params.biases, params.activations)

    @classmethod
    def from_bundle(cls, bundle: Mapping[str, Any], input_dim: int) -> "FeedForwardNetwork":
        """Build from a ``{"weightsArray", "biasesArray", "activationArray"}`` mapping."""
        try:
            weights = bundle["weightsArray"]
            biases = bundle["biasesArray"]
            activations = bundle["activationArray"]
        except KeyError as exc:
            raise ParameterFormatError(f"Parameter bundle missing key {exc}") from None
        return cls(input_dim, weights, biases, activations)

    @property
    def input_dim(self) -> int:
        return self._input_dim

    @property
    def output_dim(self) -> int:
        return int(self._params.biases[-1].size)

    @property
    def num_layers(self) -> int:
        return self._params.num_layers

    @property
    def parameters(self) -> NetworkParameters:
        return self._params

    @property
    def num_parameters(self) -> int:
        return self._params.num_parameters

    def evaluate(self, x) -> np.ndarray:
        """
        Evaluate the network.

        Args:
            x: Vector of length ``input_dim`` (sequence, 1-D array, or n x 1
                Matrix), or a ``(batch, input_dim)`` array

        Returns:
            Output of shape ``(output_dim,)`` or ``(batch, output_dim)``
        """
        if isinstance(x, Matrix):
            if x.cols != 1:
                raise DimensionMismatchError(f"Expected a column vector, got matrix of shape {x.shape}")
            current = x.array
        else:
            current = np.asarray(x, dtype=np.float64)

        if current.ndim not in (1, 2) or current.shape[-1] != self._input_dim:
            raise DimensionMismatchError(
                f"Expected input with trailing dimension {self._input_dim}, got shape {current.shape}"
            )

        for weight, bias, act in zip(self._params.weights, self._params.biases, self._activation_fns):
            current = act(current @ weight.T + bias)
        return current

    __call__ = evaluate

    def __repr__(self) -> str:
        widths = [self._input_dim] + [int(b.size) for b in self._params.biases]
        return f"FeedForwardNetwork(widths={widths}, activations={list(self._params.activations)})"
