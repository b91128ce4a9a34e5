# =============================================================================
# File: tokenization.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Tokenizer loading and per-example encoding."""

from typing import Any, List, NamedTuple, Optional

from transformers import PreTrainedTokenizerFast

from embedrank.exceptions import TokenizerError
from embedrank.logger import get_logger
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("tokenization")


class Encoding(NamedTuple):
    """Token ids, attention mask and segment ids for a single example."""

    ids: List[int]
    attention_mask: List[int]
    type_ids: List[int]

    @property
    def length(self) -> int:
        return len(self.ids)


class HFTokenizer:
    """Thin wrapper over a Hugging Face fast tokenizer loaded from tokenizer.json.

    Encodings are produced one example at a time with special tokens and
    without padding or truncation; batching and length capping happen in
    :mod:`embedrank.services.tensor_batch`.
    """

    def __init__(self, tokenizer: Any):
        self._tokenizer = tokenizer

    @classmethod
    def from_file(cls, tokenizer_path: str) -> "HFTokenizer":
        try:
            tokenizer = PreTrainedTokenizerFast(tokenizer_file=tokenizer_path)
        except Exception as e:
            logger.error(
                "Failed to load tokenizer from %s: %s",
                sanitize_for_log(tokenizer_path),
                sanitize_for_log(str(e)),
            )
            raise TokenizerError(f"Tokenizer error: cannot load {tokenizer_path}: {e}")
        return cls(tokenizer)

    def encode(self, text: str) -> Encoding:
        return self._encode(text)

    def encode_pair(self, text: str, text_pair: str) -> Encoding:
        return self._encode(text, text_pair)

    def _encode(self, text: str, text_pair: Optional[str] = None) -> Encoding:
        try:
            encoded = self._tokenizer(
                text,
                text_pair=text_pair,
                add_special_tokens=True,
                padding=False,
                truncation=False,
                return_attention_mask=True,
                return_token_type_ids=True,
                verbose=False,
            )
        except Exception as e:
            raise TokenizerError(f"Tokenizer encode failed: {e}")

        return Encoding(
            ids=list(encoded["input_ids"]),
            attention_mask=list(encoded.get("attention_mask") or []),
            type_ids=list(encoded.get("token_type_ids") or []),
        )
