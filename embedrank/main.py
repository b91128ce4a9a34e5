# =============================================================================
# File: main.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import signal
import sys
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from embedrank.app_init import APP_SETTINGS
from embedrank.exceptions import EmbedRankBaseException
from embedrank.logger import get_logger
from embedrank.routers import embedder, health, model_info, reranker
from embedrank.utils.error_handler import ErrorHandler
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("main")

app = FastAPI(
    title=APP_SETTINGS.app.name,
    description=APP_SETTINGS.app.description,
    version=APP_SETTINGS.app.version,
    openapi_url="/api/v1/openapi.json",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
)


@app.exception_handler(EmbedRankBaseException)
async def embedrank_exception_handler(request: Request, exc: EmbedRankBaseException):
    """Handle library exceptions."""
    status_code = ErrorHandler.get_http_status(exc)
    ErrorHandler.log_exception(exc, f"request to {sanitize_for_log(str(request.url))}")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": exc.message,
            "error_code": exc.error_code,
            "detail": exc.message,
        },
    )


@app.exception_handler(MemoryError)
async def memory_error_handler(request: Request, exc: MemoryError):
    """Handle out-of-memory errors without crashing the service."""
    logger.error(
        "Out of memory error in %s: %s",
        sanitize_for_log(str(request.url)),
        sanitize_for_log(str(exc)),
    )
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "message": "Out of memory: request too large or system resources exhausted",
            "error_code": "OUT_OF_MEMORY",
            "detail": "Please reduce input size or try again later",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    ErrorHandler.log_exception(exc, f"request to {sanitize_for_log(str(request.url))}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "detail": "An unexpected error occurred",
        },
    )


app.include_router(embedder.router, prefix="/api/v1/embedder", tags=["Text Embedding"])
app.include_router(reranker.router, prefix="/api/v1/reranker", tags=["Reranking"])
app.include_router(model_info.router, prefix="/api/v1", tags=["Model Information"])
app.include_router(health.router, prefix="/api/v1", tags=["Health & Monitoring"])


@app.get("/")
def root() -> dict:
    """Root endpoint for health check."""
    return {
        "message": "EmbedRank API is running",
        "version": "v1",
        "docs": "/api/v1/docs",
    }


@app.get("/favicon.ico")
def favicon():
    return Response(status_code=204)


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logger.info(f"Received signal {signum}, shutting down gracefully...")
    sys.exit(0)


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    signal.signal(signal.SIGTERM, signal_handler)

    host = host or APP_SETTINGS.server.host
    port = port or APP_SETTINGS.server.port
    logger.info(f"Starting uvicorn server on {host}:{port}")

    import uvicorn

    uvicorn.run(
        "embedrank.main:app",
        host=host,
        port=port,
        workers=None,
        log_level="debug" if APP_SETTINGS.app.debug else "info",
        access_log=True,
    )

    logger.info("EmbedRank server stopped")


if __name__ == "__main__":
    try:
        run_server()
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except Exception as e:
        logger.error("Fatal error:", exc_info=e)
        sys.exit(1)
