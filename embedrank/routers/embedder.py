# =============================================================================
# File: embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import time

from fastapi import APIRouter, Depends, HTTPException

from embedrank.exceptions import EmbedRankBaseException
from embedrank.logger import get_logger
from embedrank.models.embedding_request import EmbeddingRequest
from embedrank.models.embedding_response import EmbeddingResponse
from embedrank.services.model_service import ModelService, get_model_service
from embedrank.utils.log_sanitizer import sanitize_for_log

router = APIRouter()
logger = get_logger("router")


@router.post("/embed", response_model=EmbeddingResponse)
def embed(
    request: EmbeddingRequest, service: ModelService = Depends(get_model_service)
) -> EmbeddingResponse:
    logger.debug(
        "Embedding request by model: %s, texts: %d",
        sanitize_for_log(str(request.model)),
        len(request.texts),
    )
    start = time.perf_counter()
    try:
        alias, embedder, vectors = service.embed(request.texts, request.model)
    except EmbedRankBaseException:
        raise
    except Exception:
        logger.exception("Unexpected error in embedding endpoint")
        raise HTTPException(status_code=500, detail="Internal server error")

    return EmbeddingResponse(
        success=True,
        message=f"Embedded {len(vectors)} text(s)",
        model=embedder.model_name(),
        alias=alias,
        dimension=embedder.dim(),
        results=vectors,
        time_taken=time.perf_counter() - start,
    )
