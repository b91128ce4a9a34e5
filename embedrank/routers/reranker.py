# =============================================================================
# File: reranker.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import time

from fastapi import APIRouter, Depends, HTTPException

from embedrank.exceptions import EmbedRankBaseException
from embedrank.logger import get_logger
from embedrank.models.rerank_request import RerankRequest, RerankResponse
from embedrank.services.model_service import ModelService, get_model_service
from embedrank.services.reranker import sort_by_score
from embedrank.utils.log_sanitizer import sanitize_for_log

router = APIRouter()
logger = get_logger("router")


@router.post("/rerank", response_model=RerankResponse)
def rerank(
    request: RerankRequest, service: ModelService = Depends(get_model_service)
) -> RerankResponse:
    logger.debug(
        "Rerank request by model: %s, documents: %d",
        sanitize_for_log(str(request.model)),
        len(request.documents),
    )
    start = time.perf_counter()
    try:
        alias, reranker, results = service.rerank(
            request.query, request.documents, request.model
        )
    except EmbedRankBaseException:
        raise
    except Exception:
        logger.exception("Unexpected error in rerank endpoint")
        raise HTTPException(status_code=500, detail="Internal server error")

    if request.sort:
        results = sort_by_score(results)

    return RerankResponse(
        success=True,
        message=f"Scored {len(results)} document(s)",
        model=reranker.model_name(),
        alias=alias,
        results=results,
        time_taken=time.perf_counter() - start,
    )
