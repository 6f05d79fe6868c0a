import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the project root is importable when the package is not installed
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pbte_lann.lann.latent import LatentSpaceNetwork
from pbte_lann.lann.network import FeedForwardNetwork
from pbte_lann.lann.predictor import ThermoelectricPredictor


def _random_net(rng, input_dim, widths, activations):
    weights, biases = [], []
    prev = input_dim
    for w in widths:
        weights.append(rng.normal(scale=0.5, size=(w, prev)))
        biases.append(rng.normal(scale=0.1, size=w))
        prev = w
    return FeedForwardNetwork(input_dim, weights, biases, activations)


@pytest.fixture
def rng():
    return np.random.RandomState(0)


@pytest.fixture
def embedding_net(rng):
    # 2 -> 4 (elu) -> 3 (linear)
    return _random_net(rng, 2, [4, 3], ["elu", "linear"])


@pytest.fixture
def mean_dictionary_net(rng):
    # (3 latent + 1 context) -> 4 (elu) -> 3 (linear)
    return _random_net(rng, 4, [4, 3], ["elu", "linear"])


@pytest.fixture
def std_dictionary_net(rng):
    return _random_net(rng, 4, [4, 3], ["elu", "softplus"])


@pytest.fixture
def small_predictor(embedding_net, mean_dictionary_net, std_dictionary_net):
    return ThermoelectricPredictor(
        LatentSpaceNetwork(embedding_net, mean_dictionary_net),
        LatentSpaceNetwork(embedding_net, std_dictionary_net),
    )


@pytest.fixture(scope="session")
def packaged_predictor():
    from pbte_lann.data.parameters import load_predictor

    return load_predictor()
