#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
viewremote public API with lazy imports.

Invoke named views on remote nodes over mutually-authenticated TLS. gRPC,
protobuf and cryptography are only imported when the corresponding API
objects are requested.
"""

from importlib import import_module
from typing import Any, Dict, Tuple

from ._version import __version__

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "ViewClient": ("viewremote.core.nodes", "ViewClient"),
    "InvocationClient": ("viewremote.core.nodes", "InvocationClient"),
    "ConnectionConfig": ("viewremote.core.nodes", "ConnectionConfig"),
    "SecureChannelFactory": ("viewremote.core.nodes", "SecureChannelFactory"),
    "X509SigningIdentity": ("viewremote.core.crypto", "X509SigningIdentity"),
    "HashProvider": ("viewremote.core.crypto", "HashProvider"),
    "Sha256HashProvider": ("viewremote.core.crypto", "Sha256HashProvider"),
    "ByteSequenceResult": ("viewremote.core.data", "ByteSequenceResult"),
    "ValueResult": ("viewremote.core.data", "ValueResult"),
    "render": ("viewremote.core.data", "render"),
    "resolve": ("viewremote.core.inputs", "resolve"),
    "load_config": ("viewremote.core.config", "load_config"),
    "ViewCommand": ("viewremote.cli", "ViewCommand"),
}

__all__ = ["__version__", *sorted(_EXPORT_MAP.keys())]


def __getattr__(name: str) -> Any:
    """
    Resolve public API symbols lazily.
    """
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'viewremote' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
