#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Hashing and signing capabilities for the invocation protocol.
"""

from .hashing import HashlibHashProvider, HashlibSink, HashProvider, HashSink, Sha256HashProvider
from .identity import SigningIdentity, X509SigningIdentity

__all__ = [
    "HashProvider",
    "HashSink",
    "HashlibHashProvider",
    "HashlibSink",
    "Sha256HashProvider",
    "SigningIdentity",
    "X509SigningIdentity",
]
