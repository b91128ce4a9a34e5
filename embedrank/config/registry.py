# =============================================================================
# File: registry.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Alias registries for embedding and reranking models.

A registry maps short, case-sensitive aliases (``bge-small``) to model
configurations and names one alias as the default. Lookups accept either the
alias or the canonical model identifier (``BAAI/bge-small-en-v1.5``); both
indexes are built once so resolution never scans the catalog.

Registries persist as JSON with the layout::

    {"models": {"<alias>": {...config...}}, "default_model": "<alias>"}
"""

import os
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr, ValidationError

from embedrank.config.model_config import ModelConfig, RerankModelConfig
from embedrank.exceptions import (
    InvalidConfigError,
    MissingConfigError,
    MissingDefaultModelError,
    UnknownModelError,
)
from embedrank.logger import get_logger
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("registry")

DEFAULT_EMBEDDING_ALIAS = "bge-small"
DEFAULT_RERANK_ALIAS = "jina"


def _default_embedding_models() -> Dict[str, ModelConfig]:
    return {
        "bge-small": ModelConfig(
            name="BAAI/bge-small-en-v1.5",
            provider="fastembed",
            dimensions=384,
            max_tokens=512,
            description="Small, fast English embedding model",
        ),
        "minilm": ModelConfig(
            name="sentence-transformers/all-MiniLM-L6-v2",
            provider="fastembed",
            dimensions=384,
            max_tokens=256,
            description="Lightweight English embedding model",
        ),
        "nomic-v1.5": ModelConfig(
            name="nomic-embed-text-v1.5",
            provider="fastembed",
            dimensions=768,
            max_tokens=8192,
            description="High-quality English embedding model with large context window",
        ),
        "jina-code": ModelConfig(
            name="jina-embeddings-v2-base-code",
            provider="fastembed",
            dimensions=768,
            max_tokens=8192,
            description="Code-specific embedding model optimized for programming tasks",
        ),
        "mxbai-xsmall": ModelConfig(
            name="mixedbread-ai/mxbai-embed-xsmall-v1",
            provider="mixedbread",
            dimensions=384,
            max_tokens=4096,
            description=(
                "Mixedbread xsmall embedding model (4k context, 384 dims) "
                "optimized for local semantic search"
            ),
        ),
    }


def _default_rerank_models() -> Dict[str, RerankModelConfig]:
    return {
        "jina": RerankModelConfig(
            name="jina-reranker-v1-turbo-en",
            provider="fastembed",
            description="Jina Turbo reranker (default) tuned for English code + text relevance",
        ),
        "bge": RerankModelConfig(
            name="BAAI/bge-reranker-base",
            provider="fastembed",
            description="BGE reranker base model for multilingual use cases",
        ),
        "mxbai": RerankModelConfig(
            name="mixedbread-ai/mxbai-rerank-xsmall-v1",
            provider="mixedbread",
            description="Mixedbread xsmall reranker (quantized) optimized for local inference",
        ),
    }


class _AliasRegistry(BaseModel):
    """Resolution, listing and JSON persistence shared by both registries."""

    registry_kind: ClassVar[str] = "model"
    missing_default_message: ClassVar[str] = "No default model configured in registry"
    settings_file_attr: ClassVar[str] = "models_file"

    # canonical identifier -> alias
    _name_index: Dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._rebuild_index()

    def _rebuild_index(self) -> None:
        index: Dict[str, str] = {}
        # Sorted so that duplicate identifiers resolve to the same alias every run
        for alias in sorted(self.models):
            index.setdefault(self.models[alias].name, alias)
        self._name_index = index

    def resolve(self, requested: Optional[str] = None) -> Tuple[str, Any]:
        """Resolve an alias or canonical identifier to ``(alias, config)``.

        ``None`` selects the registry default.
        """
        if requested is None:
            config = self.get_default_model()
            if config is None:
                raise MissingDefaultModelError(self.missing_default_message)
            return self.default_model, config.model_copy()

        config = self.models.get(requested)
        if config is not None:
            return requested, config.model_copy()

        alias = self._name_index.get(requested)
        if alias is not None:
            return alias, self.models[alias].model_copy()

        logger.debug("Unknown %s requested: %s", self.registry_kind, sanitize_for_log(requested))
        raise UnknownModelError(requested, self.aliases(), kind=self.registry_kind)

    def aliases(self) -> List[str]:
        return sorted(self.models)

    def get_model(self, alias: str) -> Optional[Any]:
        return self.models.get(alias)

    def get_default_model(self) -> Optional[Any]:
        return self.models.get(self.default_model)

    def register(self, alias: str, config: Any) -> None:
        """Add or replace an entry and refresh the identifier index."""
        self.models[alias] = config
        self._rebuild_index()

    @classmethod
    def load(cls, path: str):
        """Load a registry from JSON; a missing file yields the built-in catalog."""
        if not os.path.exists(path):
            logger.debug("Registry file %s not found, using defaults", sanitize_for_log(path))
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except OSError as e:
            raise MissingConfigError(f"Cannot read registry file {path}: {e}")
        try:
            registry = cls.model_validate_json(data)
        except ValidationError as e:
            raise InvalidConfigError(f"Registry file {path} is invalid: {e}")
        if registry.default_model not in registry.models:
            logger.warning(
                "Registry %s names default '%s' which is not configured",
                sanitize_for_log(path),
                sanitize_for_log(registry.default_model),
            )
        return registry

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_default(cls):
        """Load the registry file named in application settings, if any."""
        from embedrank.app_init import APP_SETTINGS

        path = getattr(APP_SETTINGS.registry, cls.settings_file_attr, None)
        if not path:
            return cls()
        return cls.load(path)


class ModelRegistry(_AliasRegistry):
    """Embedding model registry."""

    models: Dict[str, ModelConfig] = Field(default_factory=_default_embedding_models)
    # Kept on the legacy small model for backward compatibility
    default_model: str = Field(default=DEFAULT_EMBEDDING_ALIAS)


class RerankModelRegistry(_AliasRegistry):
    """Cross-encoder reranking model registry."""

    registry_kind: ClassVar[str] = "rerank model"
    missing_default_message: ClassVar[str] = "No default reranking model configured"
    settings_file_attr: ClassVar[str] = "rerank_models_file"

    models: Dict[str, RerankModelConfig] = Field(default_factory=_default_rerank_models)
    default_model: str = Field(default=DEFAULT_RERANK_ALIAS)
