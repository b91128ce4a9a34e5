# =============================================================================
# File: tensor_batch.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Assembly of ragged tokenizer output into rectangular int64 batches.

Every row is right-padded with zeros up to the longest encoding in the batch,
capped at the model's maximum length. Tokens past the cap are dropped
silently: an over-long text is truncated without an error or a warning, so
callers that care about information loss must chunk their inputs first.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from embedrank.exceptions import InvalidInputError, TensorConstructionError, TokenizerError
from embedrank.logger import get_logger
from embedrank.services.tokenization import Encoding
from embedrank.utils.constants import TOKEN_DTYPE

logger = get_logger("tensor_batch")


class TensorBatch(NamedTuple):
    input_ids: np.ndarray
    attention_mask: np.ndarray
    token_type_ids: Optional[np.ndarray]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.input_ids.shape


def _check_texts(texts: Sequence[str], what: str) -> None:
    if isinstance(texts, (str, bytes)):
        raise InvalidInputError(f"{what} must be a sequence of strings, not a single string")
    for index, text in enumerate(texts):
        if not isinstance(text, str):
            raise InvalidInputError(
                f"{what}[{index}] must be a string, got {type(text).__name__}"
            )


def encode_texts(tokenizer, texts: Sequence[str]) -> List[Encoding]:
    """Encode single sequences; any failure fails the whole batch."""
    _check_texts(texts, "texts")
    encodings = []
    for text in texts:
        try:
            encodings.append(tokenizer.encode(text))
        except TokenizerError:
            raise
        except Exception as e:
            raise TokenizerError(f"Tokenizer encode failed: {e}")
    return encodings


def encode_pairs(tokenizer, query: str, documents: Sequence[str]) -> List[Encoding]:
    """Encode (query, document) pairs with the query as the first segment."""
    if not isinstance(query, str):
        raise InvalidInputError(f"query must be a string, got {type(query).__name__}")
    _check_texts(documents, "documents")
    encodings = []
    for document in documents:
        try:
            encodings.append(tokenizer.encode_pair(query, document))
        except TokenizerError:
            raise
        except Exception as e:
            raise TokenizerError(f"Tokenizer encode failed: {e}")
    return encodings


def sequence_length(encodings: Sequence[Encoding], max_length: int) -> int:
    longest = max((encoding.length for encoding in encodings), default=1)
    return max(1, min(longest, max_length))


def build_batch(
    encodings: Sequence[Encoding], max_length: int, include_token_types: bool
) -> TensorBatch:
    """Build ids, mask and (optionally) token-type tensors for a batch.

    Args:
        encodings: Per-example tokenizer output
        max_length: Model sequence length cap
        include_token_types: Whether the graph declares a token_type_ids input

    Returns:
        TensorBatch whose arrays all have shape (len(encodings), seq_len)
    """
    seq_len = sequence_length(encodings, max_length)
    batch = len(encodings)

    input_ids = np.zeros((batch, seq_len), dtype=TOKEN_DTYPE)
    attention_mask = np.zeros((batch, seq_len), dtype=TOKEN_DTYPE)
    token_type_ids = np.zeros((batch, seq_len), dtype=TOKEN_DTYPE) if include_token_types else None

    for row, encoding in enumerate(encodings):
        if len(encoding.attention_mask) != encoding.length or (
            encoding.type_ids and len(encoding.type_ids) != encoding.length
        ):
            raise TensorConstructionError(
                f"Encoding for row {row} has mismatched ids, mask and type-id lengths"
            )
        take = min(encoding.length, seq_len)
        try:
            input_ids[row, :take] = encoding.ids[:take]
            attention_mask[row, :take] = encoding.attention_mask[:take]
            # Models needing segment ids get zeros when the tokenizer produced none
            if token_type_ids is not None and encoding.type_ids:
                token_type_ids[row, :take] = encoding.type_ids[:take]
        except ValueError as e:
            raise TensorConstructionError(
                f"Encoding for row {row} does not fit a ({batch}, {seq_len}) batch: {e}"
            )

    _validate_shapes(input_ids, attention_mask, token_type_ids, (batch, seq_len))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Built batch shape=%s token_types=%s", input_ids.shape, token_type_ids is not None
        )
    return TensorBatch(input_ids, attention_mask, token_type_ids)


def _validate_shapes(
    input_ids: np.ndarray,
    attention_mask: np.ndarray,
    token_type_ids: Optional[np.ndarray],
    expected: Tuple[int, int],
) -> None:
    arrays = [("input_ids", input_ids), ("attention_mask", attention_mask)]
    if token_type_ids is not None:
        arrays.append(("token_type_ids", token_type_ids))
    for name, array in arrays:
        if array.shape != expected:
            raise TensorConstructionError(
                f"{name} has shape {array.shape}, expected {expected}"
            )
