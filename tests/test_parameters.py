import json

import numpy as np
import pytest

from pbte_lann.data.parameters import load_bundle_file, load_predictor, predictor_from_bundles
from pbte_lann.exceptions import DimensionMismatchError, ParameterFormatError, UnknownActivationError
from pbte_lann.lann.export import bundle_from_network


def _document(embedding_net, mean_dictionary_net, std_dictionary_net):
    return {
        "embeddingNet": bundle_from_network(embedding_net),
        "meanDictionaryNet": bundle_from_network(mean_dictionary_net),
        "stdDictionaryNet": bundle_from_network(std_dictionary_net),
    }


def test_packaged_parameters_shapes():
    document = load_bundle_file()
    assert document["embeddingNet"]["activationArray"] == ["elu", "elu", "linear"]
    assert document["stdDictionaryNet"]["activationArray"] == ["elu", "elu", "softplus"]


def test_packaged_predictor_structure(packaged_predictor):
    mean_head = packaged_predictor.mean_head
    assert mean_head.descriptor_dim == 2
    assert mean_head.latent_dim == 3
    assert mean_head.dictionary_net.input_dim == 4
    assert packaged_predictor.std_head.embedding_net is mean_head.embedding_net


def test_round_trip_through_json(tmp_path, small_predictor, embedding_net, mean_dictionary_net, std_dictionary_net):
    path = tmp_path / "params.json"
    path.write_text(json.dumps(_document(embedding_net, mean_dictionary_net, std_dictionary_net)))
    predictor = load_predictor(path)
    np.testing.assert_array_equal(
        predictor.predict(0.02, 0.01, 350.0).means(), small_predictor.predict(0.02, 0.01, 350.0).means()
    )


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_predictor(tmp_path / "nope.json")


def test_missing_bundle(tmp_path, embedding_net, mean_dictionary_net, std_dictionary_net):
    document = _document(embedding_net, mean_dictionary_net, std_dictionary_net)
    del document["stdDictionaryNet"]
    path = tmp_path / "params.json"
    path.write_text(json.dumps(document))
    with pytest.raises(ParameterFormatError):
        load_predictor(path)


@pytest.mark.parametrize("key", ["embeddingNet", "meanDictionaryNet", "stdDictionaryNet"])
def test_missing_bundle_in_memory(key, embedding_net, mean_dictionary_net, std_dictionary_net):
    document = _document(embedding_net, mean_dictionary_net, std_dictionary_net)
    del document[key]
    with pytest.raises(ParameterFormatError, match=key):
        predictor_from_bundles(document)


def test_unknown_activation_fails_at_load(embedding_net, mean_dictionary_net, std_dictionary_net):
    document = _document(embedding_net, mean_dictionary_net, std_dictionary_net)
    document["meanDictionaryNet"]["activationArray"][0] = "gelu"
    with pytest.raises(UnknownActivationError):
        predictor_from_bundles(document)


def test_dimension_mismatch_fails_at_load(embedding_net, mean_dictionary_net, std_dictionary_net):
    document = _document(embedding_net, mean_dictionary_net, std_dictionary_net)
    document["stdDictionaryNet"]["weightsArray"][0] = document["stdDictionaryNet"]["weightsArray"][0][:-1]
    with pytest.raises(DimensionMismatchError):
        predictor_from_bundles(document)


def test_context_dim_must_match_dictionary(embedding_net, mean_dictionary_net, std_dictionary_net):
    document = _document(embedding_net, mean_dictionary_net, std_dictionary_net)
    with pytest.raises(DimensionMismatchError):
        predictor_from_bundles(document, context_dim=2)
