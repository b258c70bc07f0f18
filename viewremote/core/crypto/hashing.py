#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pluggable hashing capability used by the invocation protocol.

The client never names a digest algorithm itself: it asks the injected
``HashProvider`` for a digest. Swapping the provider changes the protocol's
hashing without touching invocation logic.
"""

import hashlib
from typing import Protocol, runtime_checkable


@runtime_checkable
class HashSink(Protocol):
    """Stateful hash object: repeated writes, finalized exactly once."""

    def write(self, data: bytes) -> None:
        ...

    def finalize(self) -> bytes:
        ...


@runtime_checkable
class HashProvider(Protocol):
    """Factory for incremental sinks plus a one-shot digest."""

    def new_incremental_sink(self) -> HashSink:
        ...

    def hash_once(self, data: bytes) -> bytes:
        ...


class HashlibSink:
    """``HashSink`` backed by a ``hashlib`` object."""

    def __init__(self, algorithm: str) -> None:
        self._hash = hashlib.new(algorithm)
        self._finalized = False

    def write(self, data: bytes) -> None:
        if self._finalized:
            raise RuntimeError("Cannot write to a finalized hash sink")
        self._hash.update(data)

    def finalize(self) -> bytes:
        if self._finalized:
            raise RuntimeError("Hash sink already finalized")
        self._finalized = True
        return self._hash.digest()


class HashlibHashProvider:
    """Stateless provider for any algorithm ``hashlib.new`` accepts."""

    def __init__(self, algorithm: str) -> None:
        # Fail fast on unknown names instead of at first use.
        hashlib.new(algorithm)
        self.algorithm = algorithm

    @property
    def digest_size(self) -> int:
        return hashlib.new(self.algorithm).digest_size

    def new_incremental_sink(self) -> HashlibSink:
        return HashlibSink(self.algorithm)

    def hash_once(self, data: bytes) -> bytes:
        sink = self.new_incremental_sink()
        sink.write(data)
        return sink.finalize()

    def __repr__(self) -> str:
        return "{0}({1!r})".format(type(self).__name__, self.algorithm)


class Sha256HashProvider(HashlibHashProvider):
    """Default provider: SHA-256, 32 byte digests."""

    def __init__(self) -> None:
        super().__init__("sha256")
