"""ONNX text embeddings and cross-encoder reranking."""

from embedrank.config import ModelConfig, ModelRegistry, RerankModelConfig, RerankModelRegistry
from embedrank.services import (
    Embedder,
    Reranker,
    RerankResult,
    create_embedder,
    create_reranker,
    sort_by_score,
)

__version__ = "0.1.0"

__all__ = [
    "ModelConfig",
    "ModelRegistry",
    "RerankModelConfig",
    "RerankModelRegistry",
    "Embedder",
    "Reranker",
    "RerankResult",
    "create_embedder",
    "create_reranker",
    "sort_by_score",
]
