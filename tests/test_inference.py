# =============================================================================
# File: test_inference.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import numpy as np
import onnxruntime as ort
import pytest

from embedrank.exceptions import InferenceError, ModelLoadError, TensorConstructionError
from embedrank.services.inference import (
    InferenceInvoker,
    InputSignature,
    _bind_input_names,
    available_parallelism,
)
from embedrank.services.tensor_batch import TensorBatch, build_batch, encode_texts


def _batch(tokenizer, texts, token_types):
    return build_batch(encode_texts(tokenizer, texts), 16, token_types)


class TestInputSignature:
    def test_two_input_graph(self, make_session):
        invoker = InferenceInvoker(make_session(("input_ids", "attention_mask")))
        assert invoker.signature is InputSignature.TWO_INPUT
        assert not invoker.requires_token_types

    def test_three_input_graph(self, make_session):
        invoker = InferenceInvoker(
            make_session(("input_ids", "attention_mask", "token_type_ids"))
        )
        assert invoker.signature is InputSignature.THREE_INPUT
        assert invoker.requires_token_types

    def test_signature_inspected_once(self, make_session):
        session = make_session()
        calls = []
        original = session.get_inputs

        def counting_get_inputs():
            calls.append(1)
            return original()

        session.get_inputs = counting_get_inputs
        invoker = InferenceInvoker(session)
        batch = TensorBatch(np.zeros((1, 2), np.int64), np.ones((1, 2), np.int64), None)
        invoker.run(batch)
        invoker.run(batch)
        assert len(calls) == 1

    def test_single_input_graph_rejected(self, make_session):
        with pytest.raises(ModelLoadError):
            InferenceInvoker(make_session(("input_ids",)))

    def test_names_bound_case_insensitively_then_by_position(self):
        assert _bind_input_names(
            ["Input_IDs", "mask", "TOKEN_TYPE_IDS"], InputSignature.THREE_INPUT
        ) == ("Input_IDs", "mask", "TOKEN_TYPE_IDS")
        assert _bind_input_names(["ids", "attention_mask"], InputSignature.TWO_INPUT) == (
            "ids",
            "attention_mask",
        )
        # A role without a name match must not reuse an input another role claimed
        assert _bind_input_names(["ids_x", "input_ids"], InputSignature.TWO_INPUT) == (
            "input_ids",
            "ids_x",
        )
        assert _bind_input_names(
            ["attention_mask", "tokens"], InputSignature.TWO_INPUT
        ) == ("tokens", "attention_mask")

    def test_binding_fails_when_inputs_run_out(self):
        with pytest.raises(ModelLoadError):
            _bind_input_names(["input_ids", "Input_IDs"], InputSignature.THREE_INPUT)


class TestRun:
    def test_two_input_feed(self, make_session, stub_tokenizer):
        session = make_session(("input_ids", "attention_mask"))
        invoker = InferenceInvoker(session)
        outputs = invoker.run(_batch(stub_tokenizer, ["hello world"], False))

        feed = session.calls[0]
        assert list(feed) == ["input_ids", "attention_mask"]
        assert all(v.dtype == np.int64 for v in feed.values())
        assert outputs[0].shape[0] == 1

    def test_three_input_feed_in_declared_order(self, make_session, stub_tokenizer):
        session = make_session(("token_type_ids", "input_ids", "attention_mask"))
        invoker = InferenceInvoker(session)
        batch = _batch(stub_tokenizer, ["a b", "c"], True)
        invoker.run(batch)

        feed = session.calls[0]
        assert list(feed) == ["token_type_ids", "input_ids", "attention_mask"]
        assert np.array_equal(feed["input_ids"], batch.input_ids)
        assert np.array_equal(feed["token_type_ids"], batch.token_type_ids)

    def test_unmatched_role_feeds_the_unclaimed_input(self, make_session, stub_tokenizer):
        session = make_session(("ids_x", "input_ids"))
        invoker = InferenceInvoker(session)
        batch = _batch(stub_tokenizer, ["a b c"], False)
        invoker.run(batch)

        feed = session.calls[0]
        assert list(feed) == ["ids_x", "input_ids"]
        assert np.array_equal(feed["input_ids"], batch.input_ids)
        assert np.array_equal(feed["ids_x"], batch.attention_mask)

    def test_three_input_graph_requires_token_types(self, make_session, stub_tokenizer):
        invoker = InferenceInvoker(
            make_session(("input_ids", "attention_mask", "token_type_ids"))
        )
        with pytest.raises(TensorConstructionError):
            invoker.run(_batch(stub_tokenizer, ["a"], False))

    def test_backend_failure_is_inference_error(self, make_session, stub_tokenizer):
        def failing(feed):
            raise RuntimeError("[ONNXRuntimeError] invalid input")

        invoker = InferenceInvoker(make_session(outputs_fn=failing))
        with pytest.raises(InferenceError) as exc_info:
            invoker.run(_batch(stub_tokenizer, ["a"], False))
        assert "invalid input" in exc_info.value.message


class TestFromFile:
    def test_session_options(self):
        invoker = InferenceInvoker.from_file("model.onnx", intra_op_threads=3)
        options = invoker._session.sess_options
        assert options.graph_optimization_level == ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        assert options.intra_op_num_threads == 3
        assert invoker._session.providers == ["CPUExecutionProvider"]

    def test_default_threads_use_available_cpus(self):
        invoker = InferenceInvoker.from_file("model.onnx")
        assert invoker._session.sess_options.intra_op_num_threads == available_parallelism()

    def test_unavailable_provider_falls_back_to_cpu(self):
        invoker = InferenceInvoker.from_file("model.onnx", provider="NoSuchExecutionProvider")
        assert invoker._session.providers == ["CPUExecutionProvider"]

    def test_load_failure_is_model_load_error(self, monkeypatch):
        def broken_session(*args, **kwargs):
            raise RuntimeError("protobuf parsing failed")

        monkeypatch.setattr(ort, "InferenceSession", broken_session)
        with pytest.raises(ModelLoadError) as exc_info:
            InferenceInvoker.from_file("broken.onnx")
        assert "broken.onnx" in exc_info.value.message
