# =============================================================================
# File: conftest.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import logging
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pytest

from embedrank.services.tokenization import Encoding

CLS_ID = 101
SEP_ID = 102


class FakeInput:
    def __init__(self, name):
        self.name = name


class FakeSession:
    """Session-like object exposing get_inputs() and run().

    ``outputs_fn`` receives the feed dict and returns the list of outputs.
    Every feed is recorded in ``calls``.
    """

    def __init__(
        self,
        input_names: Sequence[str] = ("input_ids", "attention_mask"),
        outputs_fn: Optional[Callable[[Dict[str, np.ndarray]], List[np.ndarray]]] = None,
    ):
        self.input_names = list(input_names)
        self.outputs_fn = outputs_fn or cls_hidden_states(8)
        self.calls: List[Dict[str, np.ndarray]] = []

    def get_inputs(self):
        return [FakeInput(name) for name in self.input_names]

    def run(self, output_names, feed):
        self.calls.append(feed)
        return self.outputs_fn(feed)


def cls_hidden_states(hidden: int):
    """Rank-3 output whose CLS row is [1, 2, ..., hidden] scaled by the row index + 1."""

    def _outputs(feed):
        ids = feed["input_ids"]
        batch, seq_len = ids.shape
        out = np.zeros((batch, seq_len, hidden), dtype=np.float32)
        for row in range(batch):
            out[row, 0, :] = np.arange(1, hidden + 1, dtype=np.float32) * (row + 1)
            out[row, 1:, :] = 100.0
        return [out]

    return _outputs


def logits_from_lengths(feed):
    """Rank-2 logits: one column, value = number of attended tokens - 6."""
    mask = feed["attention_mask"]
    logits = mask.sum(axis=1, keepdims=True).astype(np.float32) - 6.0
    return [logits]


class StubTokenizer:
    """Word-level tokenizer: [CLS] w1 .. wn [SEP] with ids 1000 + word length."""

    def __init__(self, with_type_ids: bool = True):
        self.with_type_ids = with_type_ids
        self.encoded: List[tuple] = []

    def _words(self, text: str) -> List[int]:
        return [1000 + len(word) for word in text.split()]

    def encode(self, text: str) -> Encoding:
        self.encoded.append((text,))
        ids = [CLS_ID] + self._words(text) + [SEP_ID]
        return Encoding(
            ids=ids,
            attention_mask=[1] * len(ids),
            type_ids=[0] * len(ids) if self.with_type_ids else [],
        )

    def encode_pair(self, text: str, text_pair: str) -> Encoding:
        self.encoded.append((text, text_pair))
        first = [CLS_ID] + self._words(text) + [SEP_ID]
        second = self._words(text_pair) + [SEP_ID]
        ids = first + second
        return Encoding(
            ids=ids,
            attention_mask=[1] * len(ids),
            type_ids=([0] * len(first) + [1] * len(second)) if self.with_type_ids else [],
        )


@pytest.fixture
def stub_tokenizer():
    return StubTokenizer()


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_tokenizer():
    return StubTokenizer


@pytest.fixture
def cls_outputs():
    return cls_hidden_states


@pytest.fixture
def length_logits():
    return logits_from_lengths


@pytest.fixture(autouse=True)
def _patch_onnxruntime(monkeypatch):
    """Keep tests from loading real ONNX files through onnxruntime.InferenceSession."""
    import onnxruntime as _ort

    class _FakeOrtSession(FakeSession):
        def __init__(self, model_path, *args, **kwargs):
            super().__init__()
            self.model_path = model_path
            self.sess_options = kwargs.get("sess_options")
            self.providers = kwargs.get("providers")

    monkeypatch.setattr(_ort, "InferenceSession", _FakeOrtSession)
    yield


@pytest.fixture(autouse=True, scope="session")
def silence_noisy_loggers():
    """Raise log level for loggers that warn on expected conditions in tests."""
    noisy_loggers = ["registry", "config_loader", "error_handler", "main"]
    previous_levels = {}
    for name in noisy_loggers:
        logger = logging.getLogger(name)
        previous_levels[name] = logger.level
        logger.setLevel(logging.ERROR)

    yield

    for name, level in previous_levels.items():
        logging.getLogger(name).setLevel(level)
