# =============================================================================
# File: reranker.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from embedrank.app_init import APP_SETTINGS
from embedrank.config.appsettings import AppSettings
from embedrank.config.model_config import RerankModelConfig
from embedrank.config.registry import RerankModelRegistry
from embedrank.exceptions import UnexpectedOutputShapeError
from embedrank.logger import get_logger
from embedrank.services.inference import InferenceInvoker
from embedrank.services.loading import ProgressCallback, load_model_assets
from embedrank.services.processing import logits_to_scores
from embedrank.services.tensor_batch import build_batch, encode_pairs
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("reranker")


class RerankResult(BaseModel):
    query: str = Field(..., description="The query the document was scored against.")
    document: str = Field(..., description="The scored document, unchanged.")
    score: float = Field(..., ge=0.0, le=1.0, description="Relevance probability.")


def sort_by_score(results: Iterable[RerankResult]) -> List[RerankResult]:
    """Most relevant first; ties keep their input order."""
    return sorted(results, key=lambda result: result.score, reverse=True)


class Reranker(ABC):
    """Scores (query, document) pairs with a cross-encoder."""

    @abstractmethod
    def id(self) -> str:
        pass

    @abstractmethod
    def model_name(self) -> str:
        pass

    @abstractmethod
    def rerank(self, query: str, documents: Sequence[str]) -> List[RerankResult]:
        """Score every document; results keep the input order."""


class OnnxReranker(Reranker):
    """Cross-encoder reranker backed by an ONNX graph. Not safe for concurrent use."""

    def __init__(
        self,
        invoker: InferenceInvoker,
        tokenizer,
        config: RerankModelConfig,
        backend_id: str,
        max_length: int,
    ):
        self._invoker = invoker
        self._tokenizer = tokenizer
        self._config = config
        self._backend_id = backend_id
        self._max_length = max_length

    @classmethod
    def from_config(
        cls,
        config: RerankModelConfig,
        progress_callback: Optional[ProgressCallback] = None,
        settings: Optional[AppSettings] = None,
    ) -> "OnnxReranker":
        settings = settings or APP_SETTINGS
        spec, invoker, tokenizer = load_model_assets(
            config.name, config.provider, "reranking", settings, progress_callback
        )
        return cls(invoker, tokenizer, config, spec.reranker_id, settings.reranker.max_length)

    def id(self) -> str:
        return self._backend_id

    def model_name(self) -> str:
        return self._config.name

    def rerank(self, query: str, documents: Sequence[str]) -> List[RerankResult]:
        if not documents:
            return []

        encodings = encode_pairs(self._tokenizer, query, documents)
        batch = build_batch(encodings, self._max_length, self._invoker.requires_token_types)
        outputs = self._invoker.run(batch)
        if not outputs:
            raise UnexpectedOutputShapeError("Reranking model produced no outputs")

        scores = logits_to_scores(outputs[0], len(documents))
        return [
            RerankResult(query=query, document=document, score=score)
            for document, score in zip(documents, scores)
        ]


def create_reranker(
    model_key: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
    registry: Optional[RerankModelRegistry] = None,
    settings: Optional[AppSettings] = None,
) -> Reranker:
    """Resolve ``model_key`` against the rerank registry and load the cross-encoder."""
    registry = registry or RerankModelRegistry.load_default()
    alias, config = registry.resolve(model_key)
    logger.info(
        "Creating reranker for %s (%s)", sanitize_for_log(alias), sanitize_for_log(config.name)
    )
    return OnnxReranker.from_config(config, progress_callback, settings)
