#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import pytest

from viewremote.core.data import ByteSequenceResult, JSONBackend, ValueResult, render
from viewremote.core.utils.exceptions import DecodeError


def test_json_backend_decodes_extended_type_markers():
    document = (
        '{"tuple": {"__type__": "tuple", "data": [1, 2]},'
        ' "set": {"__type__": "set", "data": ["a", "b"]},'
        ' "complex": {"__type__": "complex", "real": 1.0, "imag": 2.0},'
        ' "bytes": {"__type__": "bytes", "data": "ab"}}'
    )

    decoded = JSONBackend().deserialize(document)

    assert decoded["tuple"] == (1, 2)
    assert decoded["set"] == {"a", "b"}
    assert decoded["complex"] == 1 + 2j
    assert decoded["bytes"] == b"ab"


def test_json_backend_decodes_plain_scalars():
    backend = JSONBackend()

    assert backend.deserialize("3") == 3
    assert backend.deserialize("null") is None
    assert backend.deserialize('["x", 1]') == ["x", 1]


def test_json_backend_invalid_document_raises_decode_error():
    with pytest.raises(DecodeError):
        JSONBackend().deserialize("{broken")


def test_json_backend_malformed_marker_raises_decode_error():
    with pytest.raises(DecodeError):
        JSONBackend().deserialize('{"__type__": "complex", "real": 1.0}')


def test_render_decodes_bytes_as_text():
    assert render(ByteSequenceResult(b"ok")) == "ok"
    assert render(ByteSequenceResult("héllo".encode("utf-8"))) == "héllo"


def test_render_replaces_undecodable_bytes():
    assert render(ByteSequenceResult(b"a\xffb")) == "a�b"


def test_render_uses_default_text_for_other_values():
    assert render(ValueResult(42)) == "42"
    assert render(ValueResult(None)) == "None"
    assert render(ValueResult({"k": [1, 2]})) == "{'k': [1, 2]}"


def test_render_rejects_unknown_variants():
    with pytest.raises(TypeError):
        render(b"bare bytes")  # type: ignore[arg-type]
