# =============================================================================
# File: exceptions.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Custom exceptions for the EmbedRank library."""
from typing import Iterable, List, Optional


class EmbedRankBaseException(Exception):
    """Base exception for all EmbedRank errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)


class ModelException(EmbedRankBaseException):
    """Exceptions related to model resolution, loading and inference."""

    pass


class UnknownModelError(ModelException):
    """Requested alias or model identifier is not in the registry."""

    def __init__(
        self,
        requested: str,
        available: Iterable[str],
        kind: str = "model",
        error_code: Optional[str] = None,
    ):
        self.requested = requested
        self.available: List[str] = list(available)
        super().__init__(
            f"Unknown {kind} '{requested}'. Available models: {', '.join(self.available)}",
            error_code,
        )


class ModelLoadError(ModelException):
    """Failed to load the ONNX graph or create the session."""

    pass


class TokenizerError(ModelException):
    """Tokenizer loading or encoding failed."""

    pass


class InferenceError(ModelException):
    """The inference backend rejected the inputs or failed to execute."""

    pass


class UnexpectedOutputShapeError(ModelException):
    """Model output tensor has a rank or size the post-processor cannot handle."""

    pass


class TensorConstructionError(EmbedRankBaseException):
    """Input tensors could not be assembled into a rectangular batch.

    This signals a broken internal invariant rather than bad user input.
    """

    pass


class ConfigurationException(EmbedRankBaseException):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationException):
    """Invalid configuration parameters or file contents."""

    pass


class MissingConfigError(ConfigurationException):
    """Required configuration missing."""

    pass


class MissingDefaultModelError(ConfigurationException):
    """Registry default alias does not name any configured model."""

    pass


class ValidationException(EmbedRankBaseException):
    """Input validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Invalid input parameters."""

    pass


class ResourceException(EmbedRankBaseException):
    """Resource-related errors."""

    pass


class AssetDownloadError(ResourceException):
    """Model or tokenizer asset could not be downloaded or read from cache."""

    def __init__(
        self,
        model_id: str,
        asset: str,
        reason: str = "",
        error_code: Optional[str] = None,
    ):
        self.model_id = model_id
        self.asset = asset
        message = f"Failed to download {asset} for {model_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, error_code)
