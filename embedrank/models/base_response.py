# =============================================================================
# File: base_response.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field


class BaseResponse(BaseModel):
    success: bool = Field(True, description="Whether the request was processed successfully.")
    message: str = Field("", description="Status or error message.")
    model: Optional[str] = Field(None, description="Canonical identifier of the model used.")
    alias: Optional[str] = Field(None, description="Registry alias the request resolved to.")
    time_taken: float = Field(0.0, description="Processing time in seconds.")
