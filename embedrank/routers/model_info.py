# =============================================================================
# File: model_info.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from fastapi import APIRouter, Depends

from embedrank.logger import get_logger
from embedrank.models.model_info_response import (
    EmbeddingCatalog,
    ModelListResponse,
    RerankCatalog,
)
from embedrank.services.model_service import ModelService, get_model_service

logger = get_logger("model_info")

router = APIRouter()


@router.get("/models", response_model=ModelListResponse)
def list_models(service: ModelService = Depends(get_model_service)) -> ModelListResponse:
    """List configured models of both kinds with their defaults."""
    registry = service.registry
    rerank_registry = service.rerank_registry
    return ModelListResponse(
        embedding=EmbeddingCatalog(
            default_model=registry.default_model,
            models={alias: registry.models[alias] for alias in registry.aliases()},
        ),
        rerank=RerankCatalog(
            default_model=rerank_registry.default_model,
            models={alias: rerank_registry.models[alias] for alias in rerank_registry.aliases()},
        ),
        loaded_models=service.loaded_models(),
    )
