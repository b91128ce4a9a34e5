# =============================================================================
# File: embedding_response.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List

from pydantic import Field

from embedrank.models.base_response import BaseResponse


class EmbeddingResponse(BaseResponse):
    """
    Response model for text embedding.
    """

    dimension: int = Field(0, description="Length of every returned vector.")
    results: List[List[float]] = Field(
        default_factory=list, description="One normalized vector per input text, in input order."
    )
