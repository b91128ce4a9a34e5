# =============================================================================
# File: providers.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Provider tags and where each provider keeps its model assets."""

from typing import Dict, NamedTuple

from embedrank.exceptions import InvalidConfigError


class ProviderSpec(NamedTuple):
    """Backend identifiers and in-repository asset paths for one provider."""

    embedder_id: str
    reranker_id: str
    model_file: str
    tokenizer_file: str


PROVIDERS: Dict[str, ProviderSpec] = {
    "fastembed": ProviderSpec(
        embedder_id="fastembed",
        reranker_id="fastembed_reranker",
        model_file="onnx/model.onnx",
        tokenizer_file="tokenizer.json",
    ),
    "mixedbread": ProviderSpec(
        embedder_id="mixedbread",
        reranker_id="mixedbread_reranker",
        model_file="onnx/model_quantized.onnx",
        tokenizer_file="tokenizer.json",
    ),
}

# Catalog names that are not already "<org>/<repo>" hub identifiers
HUB_REPOSITORIES: Dict[str, str] = {
    "nomic-embed-text-v1.5": "nomic-ai/nomic-embed-text-v1.5",
    "jina-embeddings-v2-base-code": "jinaai/jina-embeddings-v2-base-code",
    "jina-reranker-v1-turbo-en": "jinaai/jina-reranker-v1-turbo-en",
}


def get_provider(provider: str) -> ProviderSpec:
    spec = PROVIDERS.get(provider)
    if spec is None:
        raise InvalidConfigError(
            f"Unsupported provider '{provider}'. Supported providers: "
            f"{', '.join(sorted(PROVIDERS))}"
        )
    return spec


def hub_repository(model_name: str) -> str:
    """Return the hub repository that hosts ``model_name``."""
    return HUB_REPOSITORIES.get(model_name, model_name)
