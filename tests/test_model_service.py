# =============================================================================
# File: test_model_service.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import threading
from typing import List

import pytest

from embedrank.config.registry import ModelRegistry, RerankModelRegistry
from embedrank.exceptions import UnknownModelError
from embedrank.services.embedder import Embedder
from embedrank.services.model_service import ModelService
from embedrank.services.reranker import Reranker, RerankResult
from embedrank.utils.simple_cache import SimpleCache


class FakeEmbedder(Embedder):
    def __init__(self, config):
        self.config = config
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def id(self):
        return "fake"

    def dim(self):
        return self.config.dimensions

    def model_name(self):
        return self.config.name

    def embed(self, texts) -> List[List[float]]:
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            return [[1.0] + [0.0] * (self.config.dimensions - 1) for _ in texts]
        finally:
            with self._guard:
                self.active -= 1


class FakeReranker(Reranker):
    def __init__(self, config):
        self.config = config

    def id(self):
        return "fake_reranker"

    def model_name(self):
        return self.config.name

    def rerank(self, query, documents):
        return [
            RerankResult(query=query, document=d, score=1.0 / (i + 1))
            for i, d in enumerate(documents)
        ]


@pytest.fixture
def service():
    created = []

    def embedder_factory(config):
        created.append(config.name)
        return FakeEmbedder(config)

    svc = ModelService(
        registry=ModelRegistry(),
        rerank_registry=RerankModelRegistry(),
        max_loaded_models=2,
        embedder_factory=embedder_factory,
        reranker_factory=FakeReranker,
    )
    svc.created = created
    return svc


def test_instances_are_cached_by_alias(service):
    alias, embedder, vectors = service.embed(["a", "b"], "bge-small")
    assert alias == "bge-small"
    assert len(vectors) == 2

    # canonical name resolves to the same cached instance
    _, again, _ = service.embed(["c"], "BAAI/bge-small-en-v1.5")
    assert again is embedder
    assert service.created == ["BAAI/bge-small-en-v1.5"]


def test_least_recently_used_model_evicted(service):
    service.embed(["a"], "bge-small")
    service.embed(["a"], "minilm")
    service.embed(["a"], "bge-small")
    service.embed(["a"], "jina-code")

    assert service.loaded_models()["embedding"] == ["bge-small", "jina-code"]


def test_rerank_uses_default(service):
    alias, reranker, results = service.rerank("q", ["x", "y"])
    assert alias == "jina"
    assert reranker.model_name() == "jina-reranker-v1-turbo-en"
    assert [r.document for r in results] == ["x", "y"]
    assert service.loaded_models()["rerank"] == ["jina"]


def test_unknown_model_propagates(service):
    with pytest.raises(UnknownModelError):
        service.embed(["a"], "nope")
    assert service.created == []


def test_calls_on_one_instance_are_serialized(service):
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        service.embed(["a"] * 10, "minilm")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    _, entry = service.get_embedder("minilm")
    assert entry.instance.max_active == 1
    assert service.created == ["sentence-transformers/all-MiniLM-L6-v2"]


def test_clear(service):
    service.embed(["a"], "minilm")
    service.clear()
    assert service.loaded_models() == {"embedding": [], "rerank": []}


def test_simple_cache_eviction_callback():
    evicted = []
    cache = SimpleCache(max_size=1, on_evict=lambda k, v: evicted.append(k))
    cache.put("a", 1)
    cache.put("b", 2)
    assert evicted == ["a"]
    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.size() == 1
