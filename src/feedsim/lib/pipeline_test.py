"""Tests for the semantic pipeline service."""

import asyncio

import pytest

from .embedder import EmbedderLoadError, ModelLoader
from .pipeline import SemanticPipeline


async def stub_embed(text, pooling, normalize):
    return [float(len(text) % 5) + 1.0, 1.0, 0.5]


class GatedLoader(ModelLoader):
    """Loader that waits on an event and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.gate = asyncio.Event()
        self.fail = fail
        self.calls = 0

    async def load(self, on_progress):
        self.calls += 1
        on_progress(0, "Loading sentence-transformers...")
        on_progress(50, "Downloading model...")
        await self.gate.wait()
        if self.fail:
            raise OSError("download failed")
        return stub_embed


class TestInitialize:
    @pytest.mark.asyncio
    async def test_idle_before_initialize(self):
        pipeline = SemanticPipeline.create(loader=GatedLoader())
        assert pipeline.status.status == "idle"
        assert pipeline.status.progress == 0.0
        assert not pipeline.is_ready

    @pytest.mark.asyncio
    async def test_ready_with_all_tables(self):
        loader = GatedLoader()
        loader.gate.set()
        pipeline = SemanticPipeline.create(loader=loader)

        await pipeline.initialize()

        assert pipeline.is_ready
        assert pipeline.status.status == "ready"
        assert pipeline.status.progress == 1.0
        assert pipeline.classifier.has_concept_embeddings
        assert pipeline.reach.are_audience_embeddings_ready()

    @pytest.mark.asyncio
    async def test_progress_monotonic_and_scaled(self):
        loader = GatedLoader()
        loader.gate.set()
        pipeline = SemanticPipeline.create(loader=loader)
        seen = []

        await pipeline.initialize(lambda pct, step: seen.append((pct, step)))

        percents = [pct for pct, _ in seen]
        assert percents == sorted(percents)
        assert (45.0, "Downloading model...") in seen
        assert (92, "Embedding content categories...") in seen
        assert seen[-1] == (100.0, "Ready")

    @pytest.mark.asyncio
    async def test_status_while_loading(self):
        loader = GatedLoader()
        pipeline = SemanticPipeline.create(loader=loader)

        task = asyncio.ensure_future(pipeline.initialize())
        # Let the nested init and load tasks reach the loader gate.
        for _ in range(5):
            await asyncio.sleep(0)

        status = pipeline.status
        assert status.status == "loading"
        assert status.progress == pytest.approx(0.45)
        assert status.current_step == "Downloading model..."

        loader.gate.set()
        await task
        assert pipeline.status.status == "ready"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        loader = GatedLoader()
        pipeline = SemanticPipeline.create(loader=loader)

        tasks = [asyncio.ensure_future(pipeline.initialize()) for _ in range(3)]
        await asyncio.sleep(0)
        loader.gate.set()
        await asyncio.gather(*tasks)

        assert loader.calls == 1
        assert pipeline.is_ready

    @pytest.mark.asyncio
    async def test_failure_sets_error_then_retry_succeeds(self):
        loader = GatedLoader(fail=True)
        loader.gate.set()
        pipeline = SemanticPipeline.create(loader=loader)

        with pytest.raises(Exception, match="download failed"):
            await pipeline.initialize()

        status = pipeline.status
        assert status.status == "error"
        assert "download failed" in status.error
        assert not pipeline.is_ready

        loader.fail = False
        await pipeline.initialize()

        assert pipeline.is_ready
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_stub_embed_fn_initializes_without_loader(self):
        pipeline = SemanticPipeline.create(embed_fn=stub_embed)
        await pipeline.initialize()
        assert pipeline.is_ready


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_returns_to_idle(self):
        loader = GatedLoader()
        loader.gate.set()
        pipeline = SemanticPipeline.create(loader=loader)
        await pipeline.initialize()
        await pipeline.embeddings.get_embedding("cached")

        pipeline.reset()

        assert pipeline.status.status == "idle"
        assert not pipeline.is_ready
        assert not pipeline.embedder.is_initialized()
        assert pipeline.embeddings.cache_size == 0
        assert not pipeline.classifier.has_concept_embeddings
        assert not pipeline.reach.are_audience_embeddings_ready()

    @pytest.mark.asyncio
    async def test_reset_during_load_stays_idle(self):
        loader = GatedLoader()
        pipeline = SemanticPipeline.create(loader=loader)

        task = asyncio.ensure_future(pipeline.initialize())
        for _ in range(5):
            await asyncio.sleep(0)
        assert pipeline.status.status == "loading"

        pipeline.reset()
        assert pipeline.status.status == "idle"
        loader.gate.set()

        with pytest.raises(EmbedderLoadError, match="superseded by reset"):
            await task

        status = pipeline.status
        assert status.status == "idle"
        assert status.error is None
        assert not pipeline.is_ready
        assert not pipeline.classifier.has_concept_embeddings

    @pytest.mark.asyncio
    async def test_stale_load_does_not_disturb_newer_initialize(self):
        stale_loader = GatedLoader()
        pipeline = SemanticPipeline.create(loader=stale_loader)

        stale = asyncio.ensure_future(pipeline.initialize())
        for _ in range(5):
            await asyncio.sleep(0)
        pipeline.reset()

        fresh = asyncio.ensure_future(pipeline.initialize())
        for _ in range(5):
            await asyncio.sleep(0)
        stale_loader.gate.set()

        with pytest.raises(EmbedderLoadError):
            await stale
        await fresh

        assert pipeline.is_ready
        assert pipeline.status.status == "ready"
        assert stale_loader.calls == 2

    @pytest.mark.asyncio
    async def test_reinitialize_after_reset(self):
        loader = GatedLoader()
        loader.gate.set()
        pipeline = SemanticPipeline.create(loader=loader)
        await pipeline.initialize()
        pipeline.reset()

        await pipeline.initialize()

        assert pipeline.is_ready
        assert loader.calls == 2


class TestMutedKeywordFilter:
    def test_threshold_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("FEEDSIM_MUTED_KEYWORD_THRESHOLD", "0.7")
        pipeline = SemanticPipeline.create(embed_fn=stub_embed)

        assert pipeline.muted_keyword_filter(["spam"]).semantic_threshold == 0.7

    def test_explicit_threshold_wins(self, monkeypatch):
        monkeypatch.setenv("FEEDSIM_MUTED_KEYWORD_THRESHOLD", "0.7")
        pipeline = SemanticPipeline.create(embed_fn=stub_embed)

        flt = pipeline.muted_keyword_filter(["spam"], semantic_threshold=0.9)

        assert flt.semantic_threshold == 0.9
        assert flt.embeddings is pipeline.embeddings
