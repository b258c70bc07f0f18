#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Channel establishment and the view invocation client.
"""

from .client import ViewClient
from .connection import (
    DEFAULT_CONNECT_TIMEOUT,
    ChannelFactory,
    ConnectionConfig,
    SecureChannelFactory,
    load_trust_root,
)

InvocationClient = ViewClient

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "ChannelFactory",
    "ConnectionConfig",
    "InvocationClient",
    "SecureChannelFactory",
    "ViewClient",
    "load_trust_root",
]
