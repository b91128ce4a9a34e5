# =============================================================================
# File: assets.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Download-once retrieval of ONNX graphs and tokenizer files.

Assets are fetched from the Hugging Face Hub into a single process-wide cache
root and reused on every later load. Concurrent first downloads of the same
file are serialized by the hub client's own file locks.
"""

import os
from typing import Optional, Tuple

from huggingface_hub import hf_hub_download

from embedrank.config.appsettings import AppSettings
from embedrank.config.config_loader import model_cache_root
from embedrank.exceptions import AssetDownloadError
from embedrank.logger import get_logger
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("assets")


def fetch_asset(
    repo_id: str,
    relative_path: str,
    cache_dir: str,
    revision: Optional[str] = None,
) -> str:
    """Return the local path of one repository file, downloading it if needed."""
    try:
        local_path = hf_hub_download(
            repo_id=repo_id,
            filename=relative_path,
            cache_dir=cache_dir,
            revision=revision,
        )
    except Exception as e:
        logger.error(
            "Download of %s from %s failed: %s",
            sanitize_for_log(relative_path),
            sanitize_for_log(repo_id),
            sanitize_for_log(str(e)),
        )
        raise AssetDownloadError(repo_id, relative_path, str(e))

    logger.debug("Resolved %s/%s -> %s", repo_id, relative_path, sanitize_for_log(local_path))
    return local_path


def download_assets(
    repo_id: str,
    model_file: str,
    tokenizer_file: str,
    settings: Optional[AppSettings] = None,
) -> Tuple[str, str]:
    """Fetch the graph and tokenizer for a model.

    Returns:
        Tuple of (model_path, tokenizer_path)
    """
    cache_dir = model_cache_root(settings)
    os.makedirs(cache_dir, exist_ok=True)
    revision = settings.cache.revision if settings is not None else None

    tokenizer_path = fetch_asset(repo_id, tokenizer_file, cache_dir, revision)
    model_path = fetch_asset(repo_id, model_file, cache_dir, revision)
    return model_path, tokenizer_path
