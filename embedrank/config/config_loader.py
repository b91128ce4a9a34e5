# =============================================================================
# File: config_loader.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from embedrank.config.appsettings import AppSettings
from embedrank.exceptions import InvalidConfigError, MissingConfigError
from embedrank.logger import get_logger
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("config_loader")


class ConfigLoader:
    CONFIG_DIR: str = os.path.dirname(os.path.abspath(__file__))
    __appsettings: Optional[AppSettings] = None

    @staticmethod
    def get_app_settings() -> AppSettings:
        """
        Loads AppSettings from appsettings.json and the environment-specific override
        in the same folder, then applies environment variable overrides.
        Performs a deep merge for nested config sections.
        """
        data = ConfigLoader._load_config_data("appsettings.json", True)
        try:
            settings = AppSettings(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid application settings: {e}")

        settings.cache.model_cache_dir = os.getenv(
            "EMBEDRANK_MODEL_CACHE", settings.cache.model_cache_dir
        )
        settings.cache.revision = os.getenv("EMBEDRANK_HUB_REVISION", settings.cache.revision)
        settings.cache.max_loaded_models = ConfigLoader._env_int(
            "EMBEDRANK_MAX_LOADED_MODELS", settings.cache.max_loaded_models
        )
        settings.inference.intra_op_threads = ConfigLoader._env_int(
            "EMBEDRANK_INTRA_OP_THREADS", settings.inference.intra_op_threads
        )
        settings.inference.session_provider = os.getenv(
            "EMBEDRANK_SESSION_PROVIDER", settings.inference.session_provider
        )
        settings.reranker.max_length = ConfigLoader._env_int(
            "EMBEDRANK_RERANK_MAX_LENGTH", settings.reranker.max_length
        )
        settings.registry.models_file = os.getenv(
            "EMBEDRANK_MODELS_FILE", settings.registry.models_file
        )
        settings.registry.rerank_models_file = os.getenv(
            "EMBEDRANK_RERANK_MODELS_FILE", settings.registry.rerank_models_file
        )
        settings.server.host = os.getenv("SERVER_HOST", settings.server.host)
        settings.server.port = ConfigLoader._env_int("SERVER_PORT", settings.server.port)
        settings.logging.folder = os.getenv("EMBEDRANK_LOG_DIR", settings.logging.folder)
        settings.logging.level = os.getenv("EMBEDRANK_LOG_LEVEL", settings.logging.level)
        settings.logging.app_log_file = os.getenv(
            "EMBEDRANK_LOG_FILE", settings.logging.app_log_file
        )
        settings.app.debug = (
            os.getenv("APP_DEBUG_MODE", "1" if settings.app.debug else "0") == "1"
        )

        ConfigLoader.__appsettings = settings
        logger.debug(
            "Loaded AppSettings, model cache: %s",
            sanitize_for_log(model_cache_root(settings)),
        )
        return settings

    @staticmethod
    def _env_int(name: str, current: Optional[int]) -> Optional[int]:
        raw = os.getenv(name)
        if raw is None or raw == "":
            return current
        try:
            return int(raw)
        except ValueError:
            raise InvalidConfigError(
                f"Environment variable {name} must be an integer, got '{sanitize_for_log(raw)}'"
            )

    @staticmethod
    def _load_config_data(config_file_name: str, check_env_file: bool = False) -> Dict[str, Any]:
        """
        Loads a config file and merges with environment-specific override if present.
        Performs a deep merge for nested config sections.
        """
        base_dir = ConfigLoader.CONFIG_DIR
        config_path = os.path.join(base_dir, config_file_name)

        logger.debug(f"Loading config from {config_file_name}")

        def deep_update(d, u):
            for k, v in u.items():
                if isinstance(v, dict) and isinstance(d.get(k), dict):
                    deep_update(d[k], v)
                else:
                    d[k] = v

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, FileNotFoundError) as e:
            raise MissingConfigError(f"Cannot access config file {config_file_name}: {e}")
        except (json.JSONDecodeError, ValueError) as e:
            raise InvalidConfigError(f"Config file format error in {config_file_name}: {e}")

        # Merge environment-specific config if requested and it exists (deep merge)
        env = os.getenv("EMBEDRANK_ENV")
        if check_env_file and env:
            name, ext = os.path.splitext(config_file_name)
            env_file = f"{name}.{env.lower()}{ext}"
            env_path = os.path.join(base_dir, env_file)
            logger.debug(f"Loading config from {env_file}")
            try:
                with open(env_path, "r", encoding="utf-8") as f:
                    env_data = json.load(f)
                deep_update(data, env_data)
            except (OSError, FileNotFoundError):
                logger.warning(
                    f"Environment-specific config file not found: {env_file}. Using base config."
                )
            except (json.JSONDecodeError, ValueError) as e:
                logger.error(
                    "Invalid environment config format in %s: %s",
                    sanitize_for_log(env_file),
                    sanitize_for_log(str(e)),
                )
                raise InvalidConfigError(f"Environment config format error: {e}")

        return data

    @staticmethod
    def get_cached_settings() -> Optional[AppSettings]:
        """Return the settings produced by the last get_app_settings() call."""
        return ConfigLoader.__appsettings


def model_cache_root(settings: Optional[AppSettings] = None) -> str:
    """Directory under which downloaded model assets are cached."""
    configured = settings.cache.model_cache_dir if settings is not None else None
    if configured:
        return os.path.abspath(os.path.expanduser(configured))
    return os.path.join(os.path.expanduser("~"), ".cache", "embedrank", "models")
