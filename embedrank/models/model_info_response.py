# =============================================================================
# File: model_info_response.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Dict, List

from pydantic import BaseModel, Field

from embedrank.config.model_config import ModelConfig, RerankModelConfig


class EmbeddingCatalog(BaseModel):
    default_model: str = Field(..., description="Alias used when a request names no model.")
    models: Dict[str, ModelConfig] = Field(default_factory=dict)


class RerankCatalog(BaseModel):
    default_model: str
    models: Dict[str, RerankModelConfig] = Field(default_factory=dict)


class ModelListResponse(BaseModel):
    """
    Configured embedding and reranking models and which of them are loaded.
    """

    embedding: EmbeddingCatalog
    rerank: RerankCatalog
    loaded_models: Dict[str, List[str]] = Field(
        default_factory=dict, description="Aliases currently held in memory, per kind."
    )
