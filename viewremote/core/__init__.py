#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
viewremote core module exports (lazy-loaded).
"""

from importlib import import_module
from typing import Any, Dict, Tuple

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "ViewClient": ("viewremote.core.nodes", "ViewClient"),
    "ConnectionConfig": ("viewremote.core.nodes", "ConnectionConfig"),
    "SecureChannelFactory": ("viewremote.core.nodes", "SecureChannelFactory"),
    "X509SigningIdentity": ("viewremote.core.crypto", "X509SigningIdentity"),
    "Sha256HashProvider": ("viewremote.core.crypto", "Sha256HashProvider"),
    "HashlibHashProvider": ("viewremote.core.crypto", "HashlibHashProvider"),
    "ViewRemoteConfig": ("viewremote.core.config", "ViewRemoteConfig"),
    "load_config": ("viewremote.core.config", "load_config"),
    "resolve": ("viewremote.core.inputs", "resolve"),
    "validate_parameters": ("viewremote.core.inputs", "validate_parameters"),
    "render": ("viewremote.core.data", "render"),
}

__all__ = sorted(_EXPORT_MAP.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'viewremote.core' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
