# =============================================================================
# File: inference.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""ONNX Runtime session ownership and forward passes."""

import logging
import os
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import onnxruntime as ort

from embedrank.exceptions import InferenceError, ModelLoadError, TensorConstructionError
from embedrank.logger import get_logger
from embedrank.services.tensor_batch import TensorBatch
from embedrank.utils.constants import (
    ATTENTION_MASK_NAME,
    INPUT_IDS_NAME,
    TOKEN_TYPE_IDS_NAME,
)
from embedrank.utils.log_sanitizer import sanitize_for_log

logger = get_logger("inference")


class InputSignature(Enum):
    """How many token tensors the loaded graph expects on every call."""

    TWO_INPUT = 2
    THREE_INPUT = 3

    @classmethod
    def from_input_names(cls, input_names: Sequence[str]) -> "InputSignature":
        if _find_matching_input(TOKEN_TYPE_IDS_NAME, input_names) is not None:
            return cls.THREE_INPUT
        return cls.TWO_INPUT


def _find_matching_input(name: str, model_input_names: Sequence[str]) -> Optional[str]:
    """Find a declared input by exact name, then case-insensitively."""
    if name in model_input_names:
        return name

    name_lower = name.lower()
    for model_name in model_input_names:
        if model_name.lower() == name_lower:
            return model_name
    return None


def _bind_input_names(
    input_names: Sequence[str], signature: InputSignature
) -> Tuple[str, ...]:
    """Map ids/mask/token-type roles onto declared graph input names.

    Roles are matched by name first; each role left without a match takes
    the first declared input that no other role has claimed.
    """
    roles = [INPUT_IDS_NAME, ATTENTION_MASK_NAME]
    if signature is InputSignature.THREE_INPUT:
        roles.append(TOKEN_TYPE_IDS_NAME)

    bound: List[Optional[str]] = []
    for role in roles:
        name = _find_matching_input(role, input_names)
        bound.append(name if name not in bound else None)

    for index, role in enumerate(roles):
        if bound[index] is not None:
            continue
        free = [name for name in input_names if name not in bound]
        if not free:
            raise ModelLoadError(
                f"Graph declares inputs {list(input_names)}; cannot bind '{role}'"
            )
        bound[index] = free[0]

    if len(set(bound)) != len(bound):
        raise ModelLoadError(f"Graph inputs {list(input_names)} bound twice: {bound}")
    return tuple(bound)


def available_parallelism() -> int:
    """Number of CPUs this process may run on."""
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return max(1, os.cpu_count() or 1)


class InferenceInvoker:
    """Owns one ONNX Runtime session and runs token batches through it.

    The graph's input signature is inspected once, at construction, and the
    resulting :class:`InputSignature` decides the shape of every later call.
    Instances are not safe for concurrent use; callers serialize access.
    """

    def __init__(self, session: Any):
        self._session = session
        self.input_names: List[str] = [inp.name for inp in session.get_inputs()]
        if len(self.input_names) < 2:
            raise ModelLoadError(
                f"Graph must declare at least ids and mask inputs, found {self.input_names}"
            )
        self.signature = InputSignature.from_input_names(self.input_names)
        self._feed_names = _bind_input_names(self.input_names, self.signature)
        logger.debug(
            "Bound graph inputs %s with signature %s", self._feed_names, self.signature.name
        )

    @classmethod
    def from_file(
        cls,
        model_path: str,
        intra_op_threads: Optional[int] = None,
        provider: str = "CPUExecutionProvider",
    ) -> "InferenceInvoker":
        """Load an ONNX graph with full graph optimization.

        Args:
            model_path: Local path of the .onnx file
            intra_op_threads: Intra-op thread count (None uses every available CPU)
            provider: ONNX Runtime execution provider

        Returns:
            InferenceInvoker wrapping the new session
        """
        available_providers = ort.get_available_providers()
        if provider not in available_providers:
            logger.warning(
                "Provider %s not available, using CPUExecutionProvider",
                sanitize_for_log(provider),
            )
            provider = "CPUExecutionProvider"

        options = ort.SessionOptions()
        options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        options.intra_op_num_threads = intra_op_threads or available_parallelism()

        try:
            session = ort.InferenceSession(
                model_path, sess_options=options, providers=[provider]
            )
        except Exception as e:
            logger.error(
                "Failed to create ONNX session for %s: %s",
                sanitize_for_log(model_path),
                sanitize_for_log(str(e)),
            )
            raise ModelLoadError(f"ONNX session creation failed for {model_path}: {e}")

        logger.info(
            "Loaded ONNX graph %s (%d intra-op threads, %s)",
            sanitize_for_log(model_path),
            options.intra_op_num_threads,
            provider,
        )
        return cls(session)

    @property
    def requires_token_types(self) -> bool:
        return self.signature is InputSignature.THREE_INPUT

    def run(self, batch: TensorBatch) -> List[np.ndarray]:
        """Execute one forward pass and return the raw output tensors."""
        tensors = [batch.input_ids, batch.attention_mask]
        if self.signature is InputSignature.THREE_INPUT:
            if batch.token_type_ids is None:
                raise TensorConstructionError("token_type_ids required by graph but not built")
            tensors.append(batch.token_type_ids)

        bound = dict(zip(self._feed_names, tensors))
        inputs = {name: bound[name] for name in self.input_names if name in bound}

        try:
            outputs = self._session.run(None, inputs)
        except Exception as e:
            raise InferenceError(f"Model inference failed: {e}")

        if logger.isEnabledFor(logging.DEBUG):
            for idx, output in enumerate(outputs):
                logger.debug(
                    "ONNX output %d: shape=%s dtype=%s",
                    idx,
                    getattr(output, "shape", None),
                    getattr(output, "dtype", None),
                )
        return outputs
