# =============================================================================
# File: test_tensor_batch.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import numpy as np
import pytest

from embedrank.exceptions import InvalidInputError, TensorConstructionError, TokenizerError
from embedrank.services.tensor_batch import (
    build_batch,
    encode_pairs,
    encode_texts,
    sequence_length,
)
from embedrank.services.tokenization import Encoding


def test_rows_are_right_padded_to_longest(stub_tokenizer):
    encodings = encode_texts(stub_tokenizer, ["one two three", "x"])
    batch = build_batch(encodings, max_length=16, include_token_types=False)

    assert batch.shape == (2, 5)
    assert batch.input_ids.dtype == np.int64
    assert batch.attention_mask.dtype == np.int64
    assert batch.token_type_ids is None
    assert batch.input_ids[1].tolist() == [101, 1001, 102, 0, 0]
    assert batch.attention_mask[1].tolist() == [1, 1, 1, 0, 0]
    assert batch.attention_mask[0].tolist() == [1, 1, 1, 1, 1]


def test_over_long_input_is_truncated_silently(stub_tokenizer, caplog):
    text = " ".join(["word"] * 50)
    encodings = encode_texts(stub_tokenizer, [text])

    with caplog.at_level("WARNING"):
        batch = build_batch(encodings, max_length=8, include_token_types=True)

    assert batch.shape == (1, 8)
    assert batch.input_ids[0].tolist() == encodings[0].ids[:8]
    assert batch.attention_mask[0].sum() == 8
    assert not [r for r in caplog.records if r.levelname in ("WARNING", "ERROR")]


def test_token_types_built_only_when_requested(stub_tokenizer):
    encodings = encode_pairs(stub_tokenizer, "query", ["doc text"])
    batch = build_batch(encodings, max_length=16, include_token_types=True)

    assert batch.token_type_ids is not None
    assert batch.token_type_ids.shape == batch.input_ids.shape
    # [CLS] query [SEP] | doc text [SEP]
    assert batch.token_type_ids[0].tolist() == [0, 0, 0, 1, 1, 1]


def test_missing_token_types_leave_zero_row(make_tokenizer):
    tokenizer = make_tokenizer(with_type_ids=False)
    encodings = encode_pairs(tokenizer, "query", ["a", "b c"])
    batch = build_batch(encodings, max_length=16, include_token_types=True)

    assert batch.token_type_ids.shape == (2, 6)
    assert not batch.token_type_ids.any()


def test_pairs_put_query_first(stub_tokenizer):
    encode_pairs(stub_tokenizer, "the query", ["doc one", "doc two"])
    assert stub_tokenizer.encoded == [("the query", "doc one"), ("the query", "doc two")]


def test_sequence_length_is_clamped():
    short = Encoding(ids=[], attention_mask=[], type_ids=[])
    assert sequence_length([short], 512) == 1
    long = Encoding(ids=list(range(40)), attention_mask=[1] * 40, type_ids=[])
    assert sequence_length([short, long], 16) == 16
    assert sequence_length([short, long], 512) == 40


def test_empty_encoding_yields_single_padding_column():
    batch = build_batch([Encoding(ids=[], attention_mask=[], type_ids=[])], 8, False)
    assert batch.shape == (1, 1)
    assert batch.input_ids.tolist() == [[0]]


def test_inconsistent_mask_raises_construction_error():
    broken = Encoding(ids=[101, 5, 102], attention_mask=[1], type_ids=[])
    with pytest.raises(TensorConstructionError):
        build_batch([broken], 8, False)


def test_tokenizer_failure_fails_whole_batch():
    class ExplodingTokenizer:
        def encode(self, text):
            if text == "bad":
                raise RuntimeError("cannot tokenize")
            return Encoding(ids=[1], attention_mask=[1], type_ids=[0])

    with pytest.raises(TokenizerError) as exc_info:
        encode_texts(ExplodingTokenizer(), ["good", "bad", "good"])
    assert "cannot tokenize" in exc_info.value.message


def test_non_string_inputs_rejected(stub_tokenizer):
    with pytest.raises(InvalidInputError):
        encode_texts(stub_tokenizer, "hello world")
    with pytest.raises(InvalidInputError) as exc_info:
        encode_texts(stub_tokenizer, ["ok", None])
    assert "texts[1]" in exc_info.value.message
    with pytest.raises(InvalidInputError):
        encode_pairs(stub_tokenizer, None, ["doc"])
    with pytest.raises(InvalidInputError):
        encode_pairs(stub_tokenizer, "q", [b"doc"])
    assert stub_tokenizer.encoded == []
