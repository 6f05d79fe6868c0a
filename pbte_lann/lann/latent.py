"""
Latent-space composition: embedding network + conditioned dictionary network.

The conditioning vector is split into leading descriptor components
(composition) and trailing context components (temperature). The embedding
network maps the descriptor to a latent vector; the dictionary network maps
``[latent, context]`` to the property vector.
"""

from __future__ import annotations

import numpy as np

from pbte_lann.exceptions import DimensionMismatchError
from pbte_lann.lann.network import FeedForwardNetwork


class LatentSpaceNetwork:
    """
    Embedding + dictionary pair evaluated as one unit.

    Args:
        embedding_net: Network over the descriptor components
        dictionary_net: Network over ``[latent, context]``
        context_dim: Number of trailing context components (default: 1)

    Raises:
        DimensionMismatchError: If ``dictionary_net.input_dim`` differs from
            ``embedding_net.output_dim + context_dim``
    """

    def __init__(self, embedding_net: FeedForwardNetwork, dictionary_net: FeedForwardNetwork, context_dim: int = 1):
        context_dim = int(context_dim)
        if context_dim < 0:
            raise DimensionMismatchError(f"context_dim must be non-negative, got {context_dim}")
        expected = embedding_net.output_dim + context_dim
        if dictionary_net.input_dim != expected:
            raise DimensionMismatchError(
                f"Dictionary network expects {dictionary_net.input_dim} inputs, but embedding output "
                f"({embedding_net.output_dim}) + context ({context_dim}) = {expected}"
            )
        self.embedding_net = embedding_net
        self.dictionary_net = dictionary_net
        self._context_dim = context_dim

    @property
    def descriptor_dim(self) -> int:
        return self.embedding_net.input_dim

    @property
    def context_dim(self) -> int:
        return self._context_dim

    @property
    def latent_dim(self) -> int:
        return self.embedding_net.output_dim

    @property
    def input_dim(self) -> int:
        return self.descriptor_dim + self._context_dim

    @property
    def output_dim(self) -> int:
        return self.dictionary_net.output_dim

    def embed(self, descriptor) -> np.ndarray:
        """Latent vector(s) for the descriptor component(s)."""
        return self.embedding_net.evaluate(descriptor)

    def evaluate_context(self, latent, context) -> np.ndarray:
        """
        Evaluate the dictionary for one latent vector against one or many contexts.

        Args:
            latent: Latent vector of length ``latent_dim``
            context: Context vector ``(context_dim,)`` or rows ``(n, context_dim)``
        """
        latent = np.asarray(latent, dtype=np.float64)
        context = np.asarray(context, dtype=np.float64)
        if latent.shape != (self.latent_dim,):
            raise DimensionMismatchError(f"Expected latent of shape ({self.latent_dim},), got {latent.shape}")
        if context.ndim == 2:
            tiled = np.broadcast_to(latent, (context.shape[0], latent.size))
            return self.dictionary_net.evaluate(np.concatenate([tiled, context], axis=1))
        return self.dictionary_net.evaluate(np.concatenate([latent, context]))

    def evaluate(self, conditioning) -> np.ndarray:
        """
        Evaluate ``dictionary([embedding(descriptor), context])``.

        Args:
            conditioning: Vector of length ``input_dim`` or ``(batch, input_dim)``
        """
        x = np.asarray(conditioning, dtype=np.float64)
        if x.ndim not in (1, 2) or x.shape[-1] != self.input_dim:
            raise DimensionMismatchError(
                f"Expected conditioning with trailing dimension {self.input_dim}, got shape {x.shape}"
            )
        descriptor = x[..., : self.descriptor_dim]
        context = x[..., self.descriptor_dim :]
        latent = self.embed(descriptor)
        return self.dictionary_net.evaluate(np.concatenate([latent, context], axis=-1))

    __call__ = evaluate

    def __repr__(self) -> str:
        return (
            f"LatentSpaceNetwork(descriptor_dim={self.descriptor_dim}, latent_dim={self.latent_dim}, "
            f"context_dim={self.context_dim}, output_dim={self.output_dim})"
        )
