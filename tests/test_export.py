import numpy as np
import pytest
import torch
import torch.nn as nn

from pbte_lann.exceptions import UnknownActivationError
from pbte_lann.lann.export import bundle_from_network, network_from_torch, torch_from_network
from pbte_lann.lann.network import FeedForwardNetwork


@pytest.fixture
def torch_mlp():
    torch.manual_seed(0)
    return nn.Sequential(
        nn.Linear(2, 8),
        nn.ELU(),
        nn.Dropout(0.1),
        nn.Linear(8, 8),
        nn.ELU(),
        nn.Linear(8, 3),
        nn.Softplus(),
    ).double().eval()


def test_numpy_evaluator_matches_torch(torch_mlp):
    net = network_from_torch(torch_mlp)
    assert net.input_dim == 2
    assert net.parameters.activations == ("elu", "elu", "softplus")

    x = np.random.RandomState(1).uniform(-1.0, 1.0, size=(16, 2))
    with torch.no_grad():
        expected = torch_mlp(torch.from_numpy(x)).numpy()
    np.testing.assert_allclose(net.evaluate(x), expected, rtol=1e-7, atol=1e-9)


def test_trailing_linear_gets_linear_activation():
    model = nn.Sequential(nn.Linear(3, 4), nn.ELU(), nn.Linear(4, 2))
    net = network_from_torch(model)
    assert net.parameters.activations == ("elu", "linear")


def test_unsupported_module():
    with pytest.raises(UnknownActivationError):
        network_from_torch(nn.Sequential(nn.Linear(2, 2), nn.ReLU()))


def test_bundle_and_torch_round_trip(torch_mlp):
    net = network_from_torch(torch_mlp)
    rebuilt = FeedForwardNetwork.from_bundle(bundle_from_network(net), net.input_dim)
    x = np.array([0.2, -0.4])
    np.testing.assert_array_equal(rebuilt.evaluate(x), net.evaluate(x))

    back = torch_from_network(net)
    with torch.no_grad():
        y = back(torch.from_numpy(x)).numpy()
    np.testing.assert_allclose(y, net.evaluate(x), rtol=1e-7, atol=1e-9)
