# =============================================================================
# File: processing.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Post-processing of raw model outputs into vectors and relevance scores."""

import logging
from enum import Enum
from typing import Any, List

import numpy as np
from numpy import ndarray

from embedrank.exceptions import UnexpectedOutputShapeError
from embedrank.logger import get_logger

logger = get_logger("processing")


class PoolingStrategy(Enum):
    """Vector extraction policy, selected by the rank of the output tensor.

    Rank 2 outputs are already pooled (one row per input). Rank 3 outputs are
    per-token hidden states and the first (CLS) token is taken. The policy is
    fixed and not configurable.
    """

    PRE_POOLED = 2
    CLS = 3

    @classmethod
    def from_rank(cls, rank: int) -> "PoolingStrategy":
        try:
            return cls(rank)
        except ValueError:
            raise UnexpectedOutputShapeError(f"Unexpected embedding tensor rank: {rank}")

    def extract(self, output: ndarray) -> ndarray:
        if self is PoolingStrategy.PRE_POOLED:
            return output
        if output.shape[1] == 0:
            raise UnexpectedOutputShapeError(
                f"Embedding tensor has no token positions: shape {output.shape}"
            )
        return output[:, 0, :]


def normalize_rows(rows: ndarray, dim: int) -> ndarray:
    """Fit each row to exactly ``dim`` values and L2-normalize it.

    Rows wider than ``dim`` are cut, narrower rows are zero-filled. The norm is
    taken over the copied values; all-zero rows stay all-zero.
    """
    take = min(rows.shape[-1], dim)
    values = np.zeros((rows.shape[0], dim), dtype=np.float32)
    values[:, :take] = rows[:, :take]

    norms = np.sqrt(np.sum(values * values, axis=1, keepdims=True))
    np.divide(values, norms, out=values, where=norms > 0)
    return values


def process_embedding_output(output: Any, dim: int, expected_rows: int) -> List[List[float]]:
    """Turn the first model output into one normalized vector per input.

    Args:
        output: Raw output tensor, rank 2 (pooled) or rank 3 (per token)
        dim: Target vector length
        expected_rows: Number of inputs in the batch

    Returns:
        List of ``expected_rows`` vectors, each exactly ``dim`` floats long
    """
    hidden = np.asarray(output, dtype=np.float32)
    strategy = PoolingStrategy.from_rank(hidden.ndim)
    if hidden.shape[0] != expected_rows:
        raise UnexpectedOutputShapeError(
            f"Model output batch size ({hidden.shape[0]}) doesn't match "
            f"input batch size ({expected_rows})"
        )

    rows = strategy.extract(hidden)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Pooling %s: %s -> %s", strategy.name, hidden.shape, rows.shape)
    return normalize_rows(rows, dim).tolist()


def sigmoid(values: ndarray) -> ndarray:
    # exp overflow for very negative logits saturates to a 0.0 score
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-values))


def logits_to_scores(output: Any, expected_rows: int) -> List[float]:
    """Convert cross-encoder logits to [0, 1] relevance scores, in row order.

    Only the first column of each row is used; a row without columns scores 0.5.
    """
    logits = np.asarray(output, dtype=np.float32)
    if logits.ndim != 2:
        raise UnexpectedOutputShapeError(f"Unexpected reranker logits rank: {logits.ndim}")
    if logits.shape[0] != expected_rows:
        raise UnexpectedOutputShapeError(
            f"Reranker output rows ({logits.shape[0]}) don't match "
            f"document count ({expected_rows})"
        )

    if logits.shape[1] == 0:
        first = np.zeros(logits.shape[0], dtype=np.float32)
    else:
        first = logits[:, 0]
    scores = sigmoid(first)
    if not np.all(np.isfinite(scores)):
        raise UnexpectedOutputShapeError("Reranker produced non-finite logits")
    return [float(score) for score in scores]
