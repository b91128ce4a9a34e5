# =============================================================================
# File: error_handler.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Centralized error handling utilities."""

import traceback

from embedrank.exceptions import (
    AssetDownloadError,
    ConfigurationException,
    EmbedRankBaseException,
    ModelException,
    ResourceException,
    UnknownModelError,
    ValidationException,
)
from embedrank.logger import get_logger
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("error_handler")


class ErrorHandler:
    """Failure logging and HTTP status mapping for library errors."""

    @staticmethod
    def log_exception(exc: Exception, context: str = "operation") -> None:
        """Log a failure; library errors as warnings, anything else with its traceback."""

        if isinstance(exc, EmbedRankBaseException):
            logger.warning(
                "%s failed [%s]: %s", context, exc.error_code, sanitize_for_log(exc.message)
            )
            return
        logger.error("%s failed: %s", context, sanitize_for_log(f"{type(exc).__name__}: {exc}"))
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error("Traceback: %s", sanitize_for_log(trace))

    @staticmethod
    def get_http_status(exc: Exception) -> int:
        """Get appropriate HTTP status code for exception."""

        if isinstance(exc, UnknownModelError):
            return 404
        elif isinstance(exc, ValidationException):
            return 400
        elif isinstance(exc, AssetDownloadError):
            return 502
        elif isinstance(exc, (ModelException, ConfigurationException)):
            return 503
        elif isinstance(exc, ResourceException):
            return 507
        else:
            return 500
