#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Client configuration.

The trust root and the signing identity come from a TOML file:

    [tls]
    peer_ca_cert_path = "ca.pem"
    server_name_override = "node1"   # optional

    [signer]
    identity_path = "client.pem"
    key_path = "client.key"

    [client]
    connect_timeout = 10.0
    response_timeout = 30.0          # optional

The file is the ``path`` argument, else ``$VIEWREMOTE_CONFIG``. Relative paths
resolve against the file's directory. ``VIEWREMOTE_TLS_CA_CERT``,
``VIEWREMOTE_SIGNER_CERT`` and ``VIEWREMOTE_SIGNER_KEY`` override the file and
are enough on their own when no file is given.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .nodes.connection import DEFAULT_CONNECT_TIMEOUT
from .utils.exceptions import ConfigurationError

CONFIG_ENV = "VIEWREMOTE_CONFIG"
CA_CERT_ENV = "VIEWREMOTE_TLS_CA_CERT"
SIGNER_CERT_ENV = "VIEWREMOTE_SIGNER_CERT"
SIGNER_KEY_ENV = "VIEWREMOTE_SIGNER_KEY"


@dataclass(frozen=True)
class ViewRemoteConfig:
    peer_ca_cert_path: str
    identity_path: str
    key_path: str
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    response_timeout: Optional[float] = None
    server_name_override: Optional[str] = None


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigurationError("cannot read config file {0}: {1}".format(path, exc), cause=exc) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError("invalid config file {0}: {1}".format(path, exc), cause=exc) from exc


def _table(document: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    table = document.get(name, {})
    if not isinstance(table, Mapping):
        raise ConfigurationError("[{0}] must be a table".format(name))
    return table


def _resolve_path(value: str, base_dir: Optional[Path]) -> str:
    path = Path(value).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return str(path)


def _timeout(value: Any, key: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError("client.{0} must be a positive number, got {1!r}".format(key, value))
    return float(value)


def load_config(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ViewRemoteConfig:
    """
    Load the client configuration from file and environment.

    Raises:
        ConfigurationError: If the file cannot be parsed, or the trust root
            or signer paths are missing after applying overrides.
    """
    env = os.environ if environ is None else environ
    config_path = path or env.get(CONFIG_ENV)

    document: Mapping[str, Any] = {}
    base_dir: Optional[Path] = None
    if config_path:
        config_file = Path(config_path).expanduser()
        document = _read_toml(config_file)
        base_dir = config_file.resolve().parent

    tls = _table(document, "tls")
    signer = _table(document, "signer")
    client = _table(document, "client")

    values = {
        "peer_ca_cert_path": (env.get(CA_CERT_ENV), tls.get("peer_ca_cert_path"), "tls.peer_ca_cert_path"),
        "identity_path": (env.get(SIGNER_CERT_ENV), signer.get("identity_path"), "signer.identity_path"),
        "key_path": (env.get(SIGNER_KEY_ENV), signer.get("key_path"), "signer.key_path"),
    }
    resolved: Dict[str, str] = {}
    for field_name, (from_env, from_file, key) in values.items():
        if from_env:
            resolved[field_name] = str(Path(from_env).expanduser())
        elif from_file:
            resolved[field_name] = _resolve_path(str(from_file), base_dir)
        else:
            raise ConfigurationError("configuration value {0} is required".format(key))

    connect_timeout = _timeout(client.get("connect_timeout"), "connect_timeout")
    return ViewRemoteConfig(
        connect_timeout=DEFAULT_CONNECT_TIMEOUT if connect_timeout is None else connect_timeout,
        response_timeout=_timeout(client.get("response_timeout"), "response_timeout"),
        server_name_override=tls.get("server_name_override") or None,
        **resolved,
    )
