"""
Conversion between PyTorch ``nn.Sequential`` MLPs and parameter bundles.

Models are trained in PyTorch as ``Linear -> activation`` stacks; inference
runs on the numpy evaluator. ``torch.nn.Linear.weight`` is (out, in), so
flattening it gives the row-major layout the bundles use.
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
import torch
import torch.nn as nn

from pbte_lann.exceptions import DimensionMismatchError, UnknownActivationError
from pbte_lann.lann.network import FeedForwardNetwork

_TORCH_ACTIVATIONS = {
    nn.Identity: "linear",
    nn.ELU: "elu",
    nn.Softplus: "softplus",
}


def _activation_name(module: nn.Module) -> str:
    for cls, name in _TORCH_ACTIVATIONS.items():
        if type(module) is cls:
            if isinstance(module, nn.ELU) and module.alpha != 1.0:
                raise UnknownActivationError(f"Only ELU(alpha=1.0) is supported, got alpha={module.alpha}")
            if isinstance(module, nn.Softplus) and (module.beta != 1.0 or module.threshold < 20):
                raise UnknownActivationError(
                    f"Only Softplus(beta=1) is supported, got beta={module.beta}, threshold={module.threshold}"
                )
            return name
    raise UnknownActivationError(f"Unsupported module in MLP: {type(module).__name__}")


def network_from_torch(model: nn.Sequential) -> FeedForwardNetwork:
    """
    Build a FeedForwardNetwork from a ``Linear [-> activation]`` sequence.

    A Linear not followed by an activation gets a linear activation. Dropout
    layers are skipped (inference only).
    """
    weights: List[np.ndarray] = []
    biases: List[np.ndarray] = []
    activations: List[str] = []

    modules = [m for m in model if not isinstance(m, nn.Dropout)]
    if not modules or not isinstance(modules[0], nn.Linear):
        raise DimensionMismatchError("Sequential must start with nn.Linear")

    with torch.no_grad():
        for module in modules:
            if isinstance(module, nn.Linear):
                if len(activations) < len(weights):
                    activations.append("linear")
                weights.append(module.weight.detach().cpu().double().numpy().copy())
                if module.bias is not None:
                    biases.append(module.bias.detach().cpu().double().numpy().copy())
                else:
                    biases.append(np.zeros(module.out_features, dtype=np.float64))
            else:
                if len(activations) == len(weights):
                    raise UnknownActivationError(
                        f"Two activations in a row at {type(module).__name__}; expected Linear"
                    )
                activations.append(_activation_name(module))
        if len(activations) < len(weights):
            activations.append("linear")

    return FeedForwardNetwork(modules[0].in_features, weights, biases, activations)


def bundle_from_network(network: FeedForwardNetwork) -> Dict[str, Any]:
    """Serialise to the ``weightsArray``/``biasesArray``/``activationArray`` JSON layout."""
    params = network.parameters
    return {
        "weightsArray": [w.ravel().tolist() for w in params.weights],
        "biasesArray": [b.tolist() for b in params.biases],
        "activationArray": list(params.activations),
    }


def torch_from_network(network: FeedForwardNetwork) -> nn.Sequential:
    """Rebuild an equivalent float64 ``nn.Sequential`` (e.g. for fine-tuning elsewhere)."""
    layers: List[nn.Module] = []
    factories = {"linear": nn.Identity, "identity": nn.Identity, "elu": nn.ELU, "softplus": nn.Softplus}
    params = network.parameters
    for weight, bias, name in zip(params.weights, params.biases, params.activations):
        linear = nn.Linear(weight.shape[1], weight.shape[0]).double()
        with torch.no_grad():
            linear.weight.copy_(torch.from_numpy(np.array(weight)))
            linear.bias.copy_(torch.from_numpy(np.array(bias)))
        layers.append(linear)
        if name not in ("linear", "identity"):
            layers.append(factories[name]())
    return nn.Sequential(*layers)
