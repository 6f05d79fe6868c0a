"""Loading of pretrained network parameter bundles."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pbte_lann.exceptions import ParameterFormatError
from pbte_lann.lann.latent import LatentSpaceNetwork
from pbte_lann.lann.network import FeedForwardNetwork
from pbte_lann.lann.predictor import DEFAULT_SCALES, ModelScales, ThermoelectricPredictor
from pbte_lann.utils.logging_utils import get_logger

logger = get_logger("parameters")

PACKAGED_PARAMETERS = "pbte_lann_parameters.json"
BUNDLE_KEYS = ("embeddingNet", "meanDictionaryNet", "stdDictionaryNet")


def _read_json(path: Optional[Union[str, Path]], packaged_name: str) -> Dict[str, Any]:
    if path is None:
        text = resources.files("pbte_lann.resources").joinpath(packaged_name).read_text(encoding="utf-8")
        return json.loads(text)
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _check_document(document: Any) -> None:
    if not isinstance(document, Mapping):
        raise ParameterFormatError("Parameter document must be a JSON object")
    missing = [key for key in BUNDLE_KEYS if key not in document]
    if missing:
        raise ParameterFormatError(f"Parameter document missing bundles: {missing}")


def load_bundle_file(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Read a parameter document holding the embedding and both dictionary bundles.

    Args:
        path: JSON file; None reads the packaged pretrained parameters

    Raises:
        ParameterFormatError: If a bundle is missing
    """
    document = _read_json(path, PACKAGED_PARAMETERS)
    _check_document(document)
    return dict(document)


def predictor_from_bundles(
    document: Mapping[str, Any],
    embedding_input_dim: int = 2,
    context_dim: int = 1,
    scales: ModelScales = DEFAULT_SCALES,
) -> ThermoelectricPredictor:
    """
    Build a predictor from in-memory bundles.

    The embedding bundle is instantiated once and shared by both heads; its
    arrays are read-only so sharing is safe.

    Raises:
        ParameterFormatError: If a bundle or one of its keys is missing
    """
    _check_document(document)
    embedding = FeedForwardNetwork.from_bundle(document["embeddingNet"], embedding_input_dim)
    dictionary_dim = embedding.output_dim + context_dim
    mean_dictionary = FeedForwardNetwork.from_bundle(document["meanDictionaryNet"], dictionary_dim)
    std_dictionary = FeedForwardNetwork.from_bundle(document["stdDictionaryNet"], dictionary_dim)

    predictor = ThermoelectricPredictor(
        LatentSpaceNetwork(embedding, mean_dictionary, context_dim),
        LatentSpaceNetwork(embedding, std_dictionary, context_dim),
        scales=scales,
    )
    logger.debug(
        f"Built predictor: embedding {embedding!r}, mean dictionary {mean_dictionary!r}, "
        f"std dictionary {std_dictionary!r}"
    )
    return predictor


def load_predictor(
    path: Optional[Union[str, Path]] = None,
    embedding_input_dim: int = 2,
    context_dim: int = 1,
) -> ThermoelectricPredictor:
    """
    Load parameters from JSON and build a ThermoelectricPredictor.

    Args:
        path: Parameter file; None loads the packaged pretrained model
        embedding_input_dim: Number of composition descriptors
        context_dim: Number of context components (temperature)

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ParameterFormatError: If the document is malformed
        DimensionMismatchError: If layer shapes are inconsistent
        UnknownActivationError: If an activation name is not recognised
    """
    document = load_bundle_file(path)
    predictor = predictor_from_bundles(document, embedding_input_dim, context_dim)
    total = sum(
        net.num_parameters
        for net in (predictor.mean_head.embedding_net, predictor.mean_head.dictionary_net, predictor.std_head.dictionary_net)
    )
    logger.info(f"Loaded LANN parameters from {path or 'packaged model'} ({total} parameters)")
    return predictor
