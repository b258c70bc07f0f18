#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for payload resolution precedence and parameter validation.
"""

import base64
import io

import pytest

from viewremote.core.inputs import resolve, validate_parameters
from viewremote.core.utils.exceptions import InputReadError, MissingParameter


class _BrokenStream(io.RawIOBase):
    def read(self, size=-1):
        raise OSError("device went away")


@pytest.mark.parametrize("raw", [b"hello", b"", b"\x00\xff\x10binary", "ünïcode".encode("utf-8")])
def test_valid_base64_literal_resolves_to_decoded_bytes(raw):
    literal = base64.b64encode(raw).decode("ascii")

    assert resolve(False, literal) == raw


@pytest.mark.parametrize("literal", ["not base64!", "aGVsbG8", "hello world", "ünïcode"])
def test_invalid_base64_literal_falls_back_to_raw_bytes(literal):
    assert resolve(False, literal) == literal.encode("utf-8")


def test_stdin_flag_reads_whole_stream_and_ignores_literal():
    stream = io.BytesIO(b"raw-bytes")

    assert resolve(True, "ignored", stdin=stream) == b"raw-bytes"
    assert stream.read() == b""


def test_stdin_flag_with_empty_stream_yields_empty_payload():
    assert resolve(True, None, stdin=io.BytesIO(b"")) == b""


def test_no_source_yields_absent_payload():
    assert resolve(False, None) is None


def test_stdin_read_failure_raises_input_read_error():
    with pytest.raises(InputReadError) as excinfo:
        resolve(True, "aGVsbG8=", stdin=_BrokenStream())

    assert "device went away" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, OSError)


def test_scenario_a_literal_payload():
    validate_parameters("node1:7051", "init")

    assert resolve(False, "aGVsbG8=") == b"hello"


@pytest.mark.parametrize("endpoint", ["", None])
def test_missing_endpoint_raises_missing_parameter(endpoint):
    with pytest.raises(MissingParameter) as excinfo:
        validate_parameters(endpoint, "init")

    assert excinfo.value.parameter == "endpoint"


@pytest.mark.parametrize("function_name", ["", None])
def test_missing_function_raises_missing_parameter(function_name):
    with pytest.raises(MissingParameter) as excinfo:
        validate_parameters("node1:7051", function_name)

    assert excinfo.value.parameter == "function name"


@pytest.mark.parametrize("literal", ["aGVs\nbG8=", "aGVs\r\nbG8=\n"])
def test_wrapped_base64_literal_skips_line_breaks(literal):
    assert resolve(False, literal) == b"hello"


def test_base64_with_spaces_still_falls_back_to_literal():
    assert resolve(False, "aGVs bG8=") == b"aGVs bG8="


def test_undecodable_command_line_bytes_are_sent_unchanged():
    # How CPython hands non-UTF-8 argv bytes to the program on POSIX.
    literal = b"\xffraw".decode("utf-8", "surrogateescape")

    assert resolve(False, literal) == b"\xffraw"
