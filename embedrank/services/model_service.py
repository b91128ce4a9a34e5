# =============================================================================
# File: model_service.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Shared, lazily loaded embedders and rerankers for long-running callers.

Loaded instances live in a bounded LRU per kind. Each instance is paired with
its own lock so that concurrent requests for the same model run one at a time
while different models run in parallel.
"""

import threading
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from embedrank.app_init import APP_SETTINGS
from embedrank.config.registry import ModelRegistry, RerankModelRegistry
from embedrank.logger import get_logger
from embedrank.services.embedder import Embedder, OnnxEmbedder
from embedrank.services.reranker import OnnxReranker, Reranker, RerankResult
from embedrank.utils.log_sanitizer import sanitize_for_log
from embedrank.utils.simple_cache import SimpleCache

logger = get_logger("model_service")


class LoadedModel(NamedTuple):
    instance: Any
    lock: threading.Lock


def _log_eviction(alias: str, entry: LoadedModel) -> None:
    logger.info("Evicted model %s from cache", sanitize_for_log(alias))


class ModelService:
    def __init__(
        self,
        registry: Optional[ModelRegistry] = None,
        rerank_registry: Optional[RerankModelRegistry] = None,
        max_loaded_models: Optional[int] = None,
        embedder_factory: Optional[Callable[[Any], Embedder]] = None,
        reranker_factory: Optional[Callable[[Any], Reranker]] = None,
    ):
        self.registry = registry or ModelRegistry.load_default()
        self.rerank_registry = rerank_registry or RerankModelRegistry.load_default()
        size = max_loaded_models or APP_SETTINGS.cache.max_loaded_models
        self._embedders = SimpleCache(max_size=size, on_evict=_log_eviction)
        self._rerankers = SimpleCache(max_size=size, on_evict=_log_eviction)
        self._load_lock = threading.Lock()
        self._embedder_factory = embedder_factory or OnnxEmbedder.from_config
        self._reranker_factory = reranker_factory or OnnxReranker.from_config

    def _get_or_load(self, cache: SimpleCache, alias: str, factory: Callable[[], Any]) -> LoadedModel:
        entry = cache.get(alias)
        if entry is not None:
            return entry
        with self._load_lock:
            entry = cache.get(alias)
            if entry is None:
                logger.info("Loading model %s", sanitize_for_log(alias))
                entry = LoadedModel(factory(), threading.Lock())
                cache.put(alias, entry)
        return entry

    def get_embedder(self, model: Optional[str] = None) -> Tuple[str, LoadedModel]:
        alias, config = self.registry.resolve(model)
        return alias, self._get_or_load(
            self._embedders, alias, lambda: self._embedder_factory(config)
        )

    def get_reranker(self, model: Optional[str] = None) -> Tuple[str, LoadedModel]:
        alias, config = self.rerank_registry.resolve(model)
        return alias, self._get_or_load(
            self._rerankers, alias, lambda: self._reranker_factory(config)
        )

    def embed(
        self, texts: Sequence[str], model: Optional[str] = None
    ) -> Tuple[str, Embedder, List[List[float]]]:
        """Embed with a shared instance.

        Returns:
            Tuple of (alias, embedder, vectors)
        """
        alias, entry = self.get_embedder(model)
        with entry.lock:
            vectors = entry.instance.embed(texts)
        return alias, entry.instance, vectors

    def rerank(
        self, query: str, documents: Sequence[str], model: Optional[str] = None
    ) -> Tuple[str, Reranker, List[RerankResult]]:
        alias, entry = self.get_reranker(model)
        with entry.lock:
            results = entry.instance.rerank(query, documents)
        return alias, entry.instance, results

    def loaded_models(self) -> Dict[str, List[str]]:
        return {"embedding": self._embedders.keys(), "rerank": self._rerankers.keys()}

    def clear(self) -> None:
        self._embedders.clear()
        self._rerankers.clear()


_service: Optional[ModelService] = None
_service_lock = threading.Lock()


def get_model_service() -> ModelService:
    """Process-wide ModelService, created on first use."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = ModelService()
    return _service
