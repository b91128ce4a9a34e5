from embedrank.services.embedder import Embedder, OnnxEmbedder, create_embedder
from embedrank.services.reranker import (
    OnnxReranker,
    Reranker,
    RerankResult,
    create_reranker,
    sort_by_score,
)

__all__ = [
    "Embedder",
    "OnnxEmbedder",
    "create_embedder",
    "Reranker",
    "OnnxReranker",
    "RerankResult",
    "create_reranker",
    "sort_by_score",
]
