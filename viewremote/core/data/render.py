#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Text rendering of invocation results.
"""

from .models import ByteSequenceResult, InvocationResult, ValueResult


def render(result: InvocationResult) -> str:
    """
    Bytes are decoded as UTF-8 (undecodable sequences replaced); any other
    value uses its default ``str`` form.
    """
    if isinstance(result, ByteSequenceResult):
        return result.data.decode("utf-8", errors="replace")
    if isinstance(result, ValueResult):
        return str(result.value)
    raise TypeError("Unsupported invocation result type: {0}".format(type(result).__name__))
