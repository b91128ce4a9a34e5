# =============================================================================
# File: embedding_request.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import List, Optional

from pydantic import BaseModel, Field


class EmbeddingRequest(BaseModel):
    """
    Request model for text embedding.
    """

    texts: List[str] = Field(
        ..., description="Texts to embed. An empty list yields an empty result."
    )
    model: Optional[str] = Field(
        None,
        description="Registry alias or canonical model identifier. Uses the default model if omitted.",
    )
