#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invocation data models, result backends and rendering.
"""

from .backends import JSONBackend, SerializationBackend
from .models import (
    ByteSequenceResult,
    InvocationAttempt,
    InvocationRequest,
    InvocationResult,
    InvocationState,
    ValueResult,
)
from .render import render

__all__ = [
    "ByteSequenceResult",
    "InvocationAttempt",
    "InvocationRequest",
    "InvocationResult",
    "InvocationState",
    "JSONBackend",
    "SerializationBackend",
    "ValueResult",
    "render",
]
