# =============================================================================
# File: log_sanitizer.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import re
from typing import Any, Iterable, List


def sanitize_for_log(value: Any) -> str:
    """
    Sanitize input for safe logging by removing/encoding dangerous characters.

    Args:
        value: Input value to sanitize

    Returns:
        str: Sanitized string safe for logging
    """
    if value is None:
        return "None"

    str_value = str(value)

    # Remove newlines, carriage returns, and other control characters
    sanitized = re.sub(r"[\r\n\t\x00-\x1f\x7f-\x9f]", "_", str_value)

    # Limit length to prevent log flooding
    if len(sanitized) > 200:
        sanitized = sanitized[:197] + "..."

    return sanitized


def sanitize_texts_for_log(texts: Iterable[Any], max_items: int = 3) -> List[str]:
    """Sanitize the first few items of a text batch for a debug line."""
    return [sanitize_for_log(text) for _, text in zip(range(max_items), texts)]
