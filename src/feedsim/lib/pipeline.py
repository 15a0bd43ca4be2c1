"""The semantic pipeline service.

:class:`SemanticPipeline` owns one embedder, its embedding cache, and every
component built on top of them.  Consumers receive the pipeline instance
(the FastAPI app keeps it on ``app.state.pipeline``) rather than importing
shared module state.

Lifecycle::

    pipeline = SemanticPipeline.create()      # nothing loaded yet
    await pipeline.initialize(on_progress)    # model + concept/audience tables
    pipeline.reset()                          # back to idle, caches emptied
"""

import asyncio
import logging

from ..models import MLStatus
from ..settings import get_embedding_dim, get_muted_keyword_threshold
from .audience_match import AudienceMatcher
from .classifier import ContentClassifier
from .embedder import (
    EmbedFn,
    Embedder,
    EmbedderLoadError,
    ModelLoader,
    MonotonicProgress,
    ProgressCallback,
)
from .embeddings import EmbeddingService
from .engagement import EngagementPredictor
from .filters import MutedKeywordFilter
from .reach import ReachEstimator

logger = logging.getLogger(__name__)

# Share of the overall progress bar spent loading the model itself.
MODEL_PROGRESS_SHARE = 0.9


class SemanticPipeline:
    def __init__(self, embedder: Embedder, dimension: int | None = None):
        self.embedder = embedder
        self.embeddings = EmbeddingService(embedder, dimension or get_embedding_dim())
        self.classifier = ContentClassifier(self.embeddings)
        self.engagement = EngagementPredictor(self.classifier)
        self.reach = ReachEstimator(self.embeddings)
        self.audience_matcher = AudienceMatcher(self.embeddings)
        self._status = MLStatus()
        self._init_task: asyncio.Task | None = None
        # Bumped on reset so an initialization started before the reset
        # cannot overwrite the idle status afterwards.
        self._generation = 0

    @classmethod
    def create(
        cls,
        loader: ModelLoader | None = None,
        embed_fn: EmbedFn | None = None,
        dimension: int | None = None,
    ) -> "SemanticPipeline":
        """Build a pipeline.  Without a loader or embed fn, use sentence-transformers."""
        if loader is None and embed_fn is None:
            from .model_loader import SentenceTransformerLoader

            loader = SentenceTransformerLoader()
        return cls(Embedder(loader=loader, embed_fn=embed_fn), dimension)

    @property
    def status(self) -> MLStatus:
        return self._status.model_copy()

    @property
    def is_ready(self) -> bool:
        return self._status.status == "ready" and self.embedder.is_initialized()

    async def initialize(self, on_progress: ProgressCallback | None = None) -> None:
        """Load the model and precompute concept and audience embeddings.

        Concurrent calls share one initialization.  Failures propagate to
        every caller and leave the status as ``error``; calling again retries.
        A :meth:`reset` while loading fails the pending callers with
        :class:`EmbedderLoadError` and leaves the status idle.
        """
        if self.is_ready:
            if on_progress is not None:
                on_progress(100.0, "Ready")
            return

        task = self._init_task
        joined = task is not None
        if task is None:
            task = asyncio.ensure_future(self._initialize(self._generation, on_progress))
            self._init_task = task

        await asyncio.shield(task)

        if joined and on_progress is not None:
            on_progress(100.0, "Ready")

    async def _initialize(self, generation: int, on_progress: ProgressCallback | None) -> None:
        progress = MonotonicProgress(on_progress)

        def current() -> bool:
            return generation == self._generation

        def report(percent: float, step: str) -> None:
            if not current():
                return
            progress(percent, step)
            self._status = MLStatus(
                status="loading",
                progress=max(0.0, min(1.0, percent / 100)),
                current_step=step,
            )

        def model_progress(percent: float, step: str) -> None:
            report(percent * MODEL_PROGRESS_SHARE, step)

        report(0, "Loading model...")
        try:
            await self.embedder.initialize(model_progress)
            report(92, "Embedding content categories...")
            await self.classifier.precompute_concept_embeddings()
            report(96, "Embedding audience interests...")
            await self.reach.init_audience_embeddings()
        except Exception as exc:
            if not current():
                raise EmbedderLoadError("Pipeline initialization superseded by reset") from exc
            self._status = MLStatus(
                status="error",
                progress=self._status.progress,
                current_step=self._status.current_step,
                error=str(exc),
            )
            self._init_task = None
            raise

        if not current():
            logger.info("Discarding pipeline initialization superseded by a reset")
            raise EmbedderLoadError("Pipeline initialization superseded by reset")

        self._init_task = None
        progress(100.0, "Ready")
        self._status = MLStatus(status="ready", progress=1.0, current_step="Ready")
        logger.info("Semantic pipeline ready")

    def reset(self) -> None:
        """Drop the model and all derived tables; the pipeline becomes idle."""
        self._generation += 1
        self.embedder.reset()
        self.embeddings.clear_cache()
        self.classifier.clear_concept_embeddings()
        self.reach.clear_audience_embeddings()
        self.audience_matcher.clear_audience_cache()
        self._status = MLStatus()
        self._init_task = None

    def muted_keyword_filter(
        self,
        keywords: list[str],
        semantic_threshold: float | None = None,
    ) -> MutedKeywordFilter:
        """A keyword filter bound to this pipeline's embedding cache."""
        if semantic_threshold is None:
            semantic_threshold = get_muted_keyword_threshold()
        return MutedKeywordFilter(keywords, self.embeddings, semantic_threshold)
