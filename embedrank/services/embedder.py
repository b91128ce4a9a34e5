# =============================================================================
# File: embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from embedrank.app_init import APP_SETTINGS
from embedrank.config.appsettings import AppSettings
from embedrank.config.model_config import ModelConfig
from embedrank.config.registry import ModelRegistry
from embedrank.exceptions import UnexpectedOutputShapeError
from embedrank.logger import get_logger
from embedrank.services.inference import InferenceInvoker
from embedrank.services.loading import ProgressCallback, load_model_assets
from embedrank.services.processing import process_embedding_output
from embedrank.services.tensor_batch import build_batch, encode_texts
from embedrank.utils.log_sanitizer import sanitize_for_log, sanitize_texts_for_log

logger = get_logger("embedder")


class Embedder(ABC):
    """Turns texts into fixed-length, L2-normalized vectors."""

    @abstractmethod
    def id(self) -> str:
        """Backend identifier, e.g. "fastembed"."""

    @abstractmethod
    def dim(self) -> int:
        """Length of every returned vector."""

    @abstractmethod
    def model_name(self) -> str:
        """Canonical model identifier."""

    @abstractmethod
    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed ``texts``; result i corresponds to input i."""


class OnnxEmbedder(Embedder):
    """Embedder backed by an ONNX graph and a fast tokenizer.

    Not safe for concurrent use: callers sharing one instance across threads
    must serialize calls to :meth:`embed`.
    """

    def __init__(self, invoker: InferenceInvoker, tokenizer, config: ModelConfig, backend_id: str):
        self._invoker = invoker
        self._tokenizer = tokenizer
        self._config = config
        self._backend_id = backend_id

    @classmethod
    def from_config(
        cls,
        config: ModelConfig,
        progress_callback: Optional[ProgressCallback] = None,
        settings: Optional[AppSettings] = None,
    ) -> "OnnxEmbedder":
        settings = settings or APP_SETTINGS
        spec, invoker, tokenizer = load_model_assets(
            config.name, config.provider, "embedding", settings, progress_callback
        )
        return cls(invoker, tokenizer, config, spec.embedder_id)

    def id(self) -> str:
        return self._backend_id

    def dim(self) -> int:
        return self._config.dimensions

    def model_name(self) -> str:
        return self._config.name

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []

        logger.debug("Embedding %d text(s): %s", len(texts), sanitize_texts_for_log(texts))
        encodings = encode_texts(self._tokenizer, texts)
        batch = build_batch(
            encodings, self._config.max_tokens, self._invoker.requires_token_types
        )
        outputs = self._invoker.run(batch)
        if not outputs:
            raise UnexpectedOutputShapeError("Embedding model produced no outputs")
        return process_embedding_output(outputs[0], self._config.dimensions, len(texts))


def create_embedder(
    model_key: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
    registry: Optional[ModelRegistry] = None,
    settings: Optional[AppSettings] = None,
) -> Embedder:
    """Resolve ``model_key`` (alias, canonical name or None for the default) and load it."""
    registry = registry or ModelRegistry.load_default()
    alias, config = registry.resolve(model_key)
    logger.info(
        "Creating embedder for %s (%s)", sanitize_for_log(alias), sanitize_for_log(config.name)
    )
    return OnnxEmbedder.from_config(config, progress_callback, settings)
