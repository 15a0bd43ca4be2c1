"""Embedder: owns the text-embedding model and its one-time load.

The embedder moves through a small state machine::

    UNINITIALIZED -> INITIALIZING -> READY
                          |
                          v
                        FAILED   (a later ``initialize()`` retries)

Concurrent ``initialize`` calls made while a load is in flight await the same
task instead of starting a second load, and all of them succeed or fail
together.

The model itself is an injected capability: a :class:`ModelLoader` produces
an embed function in production, and tests inject a deterministic stand-in
with :meth:`Embedder.use_embed_fn`.
"""

import asyncio
import enum
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

# on_progress(percent, status_message)
ProgressCallback = Callable[[float, str], None]

# embed_fn(text, pooling, normalize) -> raw vector (optionally awaitable)
EmbedFn = Callable[[str, str, bool], Union[Any, Awaitable[Any]]]

POOLING_TYPES = ("none", "mean", "cls")


class EmbedderNotInitializedError(RuntimeError):
    """An embedding was requested before the embedder finished loading."""

    def __init__(self, message: str = "Embedder not initialized"):
        super().__init__(message)


class EmbedderLoadError(RuntimeError):
    """The underlying embedding model failed to load."""


class EmbedderState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class ModelLoader(ABC):
    """Loads a pretrained model and returns an embed function for it."""

    @abstractmethod
    async def load(self, on_progress: ProgressCallback) -> EmbedFn:
        """Load the model, reporting progress as ``(percent, status)``."""
        ...


class MonotonicProgress:
    """Wraps a progress callback so reported percents never go backwards."""

    def __init__(self, callback: ProgressCallback | None):
        self._callback = callback
        self._last = 0.0

    def __call__(self, percent: float, status: str) -> None:
        value = max(self._last, min(100.0, float(percent)))
        self._last = value
        if self._callback is not None:
            self._callback(value, status)


def _as_floats(result: Any) -> list[float]:
    # Accept a bare sequence or a ``{"data": ...}`` / ``.data`` wrapper.
    if isinstance(result, dict):
        result = result.get("data", [])
    elif not isinstance(result, (list, tuple)) and not hasattr(result, "tolist"):
        result = getattr(result, "data", result)
    if hasattr(result, "tolist"):
        result = result.tolist()
    return [float(v) for v in result]


class Embedder:
    """Lazily-initialized wrapper around a sentence-embedding model."""

    def __init__(
        self,
        loader: ModelLoader | None = None,
        embed_fn: EmbedFn | None = None,
    ):
        self._loader = loader
        self._embed_fn: EmbedFn | None = None
        self._state = EmbedderState.UNINITIALIZED
        self._load_task: asyncio.Task | None = None
        self._test_mode = False
        # Bumped on reset so a load started before the reset cannot
        # resurrect the old model afterwards.
        self._generation = 0
        if embed_fn is not None:
            self.use_embed_fn(embed_fn)

    @property
    def state(self) -> EmbedderState:
        return self._state

    def is_initialized(self) -> bool:
        return self._state is EmbedderState.READY

    def use_embed_fn(self, fn: EmbedFn | None) -> None:
        """Inject a stand-in embed function, or pass ``None`` to reset."""
        self._generation += 1
        self._load_task = None
        self._embed_fn = fn
        self._test_mode = fn is not None
        self._state = EmbedderState.READY if fn is not None else EmbedderState.UNINITIALIZED

    def reset(self) -> None:
        """Return to the uninitialized state, dropping any loaded model."""
        self.use_embed_fn(None)

    async def initialize(self, on_progress: ProgressCallback | None = None) -> None:
        """Load the model once.  Safe to call repeatedly and concurrently.

        Raises :class:`EmbedderLoadError` if the model cannot be loaded, or
        if :meth:`reset` was called while it was loading; the embedder is
        then left uninitialized and a later call may retry.
        """
        if self._state is EmbedderState.READY:
            if on_progress is not None:
                on_progress(100.0, "Ready (test mode)" if self._test_mode else "Ready")
            return

        task = self._load_task
        joined = task is not None
        if task is None:
            self._state = EmbedderState.INITIALIZING
            task = asyncio.ensure_future(self._load(self._generation, on_progress))
            self._load_task = task

        # Shield so one cancelled waiter does not abort the shared load.
        await asyncio.shield(task)

        if joined and on_progress is not None:
            on_progress(100.0, "Ready")

    async def _load(self, generation: int, on_progress: ProgressCallback | None) -> None:
        progress = MonotonicProgress(on_progress)

        try:
            if self._loader is None:
                raise RuntimeError("no model loader configured")
            logger.info("Loading embedding model via %s", type(self._loader).__name__)
            embed_fn = await self._loader.load(progress)
        except Exception as exc:
            if generation == self._generation:
                self._state = EmbedderState.FAILED
                self._load_task = None
            logger.exception("Embedding model failed to load")
            raise EmbedderLoadError(f"Failed to load embedding model: {exc}") from exc

        if generation != self._generation:
            logger.info("Discarding model load superseded by a reset")
            raise EmbedderLoadError("Model load superseded by reset")

        self._embed_fn = embed_fn
        self._state = EmbedderState.READY
        self._load_task = None
        logger.info("Embedding model ready")
        progress(100.0, "Ready")

    async def embed(
        self,
        text: str,
        pooling: str = "mean",
        normalize: bool = False,
    ) -> list[float]:
        """Return the model's raw output vector for ``text``.

        Only the embedding cache should call this; everything else goes
        through :class:`~feedsim.lib.embeddings.EmbeddingService`.
        """
        if self._state is not EmbedderState.READY or self._embed_fn is None:
            raise EmbedderNotInitializedError()
        if pooling not in POOLING_TYPES:
            raise ValueError(f"Unknown pooling type: {pooling!r}")

        result = self._embed_fn(text, pooling, normalize)
        if inspect.isawaitable(result):
            result = await result
        return _as_floats(result)
