# =============================================================================
# File: rerank_request.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List, Optional

from pydantic import BaseModel, Field

from embedrank.models.base_response import BaseResponse
from embedrank.services.reranker import RerankResult


class RerankRequest(BaseModel):
    """
    Request model for cross-encoder reranking.
    """

    query: str = Field(..., description="The query every document is scored against.")
    documents: List[str] = Field(
        ..., description="Candidate documents. An empty list yields an empty result."
    )
    model: Optional[str] = Field(
        None,
        description="Rerank registry alias or canonical model identifier. Uses the default if omitted.",
    )
    sort: bool = Field(
        False, description="Return results most relevant first instead of in input order."
    )


class RerankResponse(BaseResponse):
    results: List[RerankResult] = Field(default_factory=list)
