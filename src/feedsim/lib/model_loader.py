"""Production model loader backed by ``sentence-transformers``.

The library (and torch underneath it) is imported lazily inside
:meth:`SentenceTransformerLoader.load` so importing feedsim, and running its
tests, never pulls in the model stack.
"""

import asyncio
import logging

from .embedder import EmbedFn, ModelLoader, ProgressCallback
from ..settings import get_embedding_model

logger = logging.getLogger(__name__)


class SentenceTransformerLoader(ModelLoader):
    """Loads a MiniLM-style sentence-transformers model in a worker thread."""

    def __init__(self, model_name: str | None = None, device: str | None = None):
        self.model_name = model_name or get_embedding_model()
        self.device = device

    async def load(self, on_progress: ProgressCallback) -> EmbedFn:
        on_progress(0, "Loading sentence-transformers...")
        from sentence_transformers import SentenceTransformer

        on_progress(10, "Downloading model...")
        model = await asyncio.to_thread(
            SentenceTransformer, self.model_name, device=self.device
        )
        logger.info(
            "Loaded %s (native dimension %s)",
            self.model_name,
            model.get_sentence_embedding_dimension(),
        )

        on_progress(95, "Initializing...")

        def _encode(text: str, pooling: str, normalize: bool) -> list[float]:
            if pooling == "mean":
                # The model's own pooling layer is mean pooling for MiniLM.
                vec = model.encode(
                    text, convert_to_numpy=True, normalize_embeddings=normalize
                )
                return vec.tolist()

            tokens = model.encode(text, output_value="token_embeddings")
            if hasattr(tokens, "cpu"):
                tokens = tokens.cpu().numpy()
            if pooling == "cls":
                vec = tokens[0]
            else:
                vec = tokens.reshape(-1)
            if normalize:
                norm = float((vec * vec).sum()) ** 0.5
                if norm > 0:
                    vec = vec / norm
            return vec.tolist()

        async def embed(text: str, pooling: str, normalize: bool) -> list[float]:
            return await asyncio.to_thread(_encode, text, pooling, normalize)

        return embed
