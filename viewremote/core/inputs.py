#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invocation payload resolution.

Precedence, strictly in order:

1. ``stdin_flag`` set: the whole standard-input stream, literal input ignored.
2. No literal input: no payload (``None``).
3. Literal input that is valid standard base64: the decoded bytes. Line
   breaks (CR and LF) inside the text are skipped, so wrapped base64 decodes.
4. Anything else: the bytes of the literal itself. Characters that stood for
   undecodable command-line bytes (surrogate escapes) are turned back into
   those bytes.

A failed base64 decode is not an error, it only selects rule 4.
"""

import base64
import binascii
import sys
from typing import BinaryIO, Optional

from .utils.exceptions import InputReadError, MissingParameter


def validate_parameters(endpoint: Optional[str], function_name: Optional[str]) -> None:
    """
    Raise ``MissingParameter`` unless both an endpoint and a function are given.
    """
    if not endpoint:
        raise MissingParameter("endpoint")
    if not function_name:
        raise MissingParameter("function name")


def decode_literal(literal_input: str) -> bytes:
    unwrapped = literal_input.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(unwrapped, validate=True)
    except (binascii.Error, ValueError):
        return literal_input.encode("utf-8", "surrogateescape")


def read_stream(stream: BinaryIO) -> bytes:
    try:
        return stream.read()
    except (OSError, ValueError) as exc:
        raise InputReadError("failed reading input from stdin: {0}".format(exc), cause=exc) from exc


def resolve(
    stdin_flag: bool,
    literal_input: Optional[str],
    stdin: Optional[BinaryIO] = None,
) -> Optional[bytes]:
    """
    Resolve the payload for one invocation.

    Args:
        stdin_flag: Read the payload from ``stdin`` instead of ``literal_input``.
        literal_input: Base64 text or opaque literal text, may be ``None``.
        stdin: Binary stream to read when ``stdin_flag`` is set. Defaults to
            ``sys.stdin.buffer``.

    Raises:
        InputReadError: If reading the stream fails before end-of-stream.
    """
    if stdin_flag:
        return read_stream(stdin if stdin is not None else sys.stdin.buffer)

    if literal_input is None:
        return None

    return decode_literal(literal_input)
