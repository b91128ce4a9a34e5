# =============================================================================
# File: health.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from fastapi import APIRouter, Depends, HTTPException

from embedrank.logger import get_logger
from embedrank.services.model_service import ModelService, get_model_service

logger = get_logger("health")
router = APIRouter()


@router.get("/health")
def health_check(service: ModelService = Depends(get_model_service)):
    """Liveness plus the aliases currently loaded."""
    try:
        return {"status": "healthy", "loaded_models": service.loaded_models()}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unhealthy")
