# =============================================================================
# File: loading.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Callable, Optional, Tuple

from embedrank.config.appsettings import AppSettings
from embedrank.logger import get_logger
from embedrank.services.assets import download_assets
from embedrank.services.inference import InferenceInvoker
from embedrank.services.providers import ProviderSpec, get_provider, hub_repository
from embedrank.services.tokenization import HFTokenizer
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("loading")

ProgressCallback = Callable[[str], None]


def notify_progress(callback: Optional[ProgressCallback], message: str) -> None:
    """Report a loading step; a failing callback never interrupts loading."""
    if callback is None:
        return
    try:
        callback(message)
    except Exception as e:
        logger.warning("Progress callback failed: %s", sanitize_for_log(str(e)))


def load_model_assets(
    model_name: str,
    provider: str,
    kind: str,
    settings: AppSettings,
    progress_callback: Optional[ProgressCallback] = None,
) -> Tuple[ProviderSpec, InferenceInvoker, HFTokenizer]:
    """Download (if needed) and open the graph and tokenizer for one model.

    Args:
        model_name: Canonical model identifier from the registry
        provider: Provider tag from the registry entry
        kind: "embedding" or "reranking", used in progress messages
        settings: Application settings (cache root, threads, session provider)
        progress_callback: Optional receiver of human-readable progress messages

    Returns:
        Tuple of (provider spec, inference invoker, tokenizer)
    """
    spec = get_provider(provider)

    notify_progress(
        progress_callback, f"Downloading {provider} {kind} model ({model_name}) if needed..."
    )
    model_path, tokenizer_path = download_assets(
        hub_repository(model_name), spec.model_file, spec.tokenizer_file, settings
    )

    notify_progress(progress_callback, f"Loading {provider} {kind} session ({model_name})...")
    invoker = InferenceInvoker.from_file(
        model_path,
        intra_op_threads=settings.inference.intra_op_threads,
        provider=settings.inference.session_provider,
    )
    tokenizer = HFTokenizer.from_file(tokenizer_path)

    logger.info(
        "Loaded %s model %s via %s (%s inputs)",
        kind,
        sanitize_for_log(model_name),
        provider,
        invoker.signature.value,
    )
    return spec, invoker, tokenizer
