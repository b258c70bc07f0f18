#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Secure channel configuration and establishment.

``ConnectionConfig`` is pure assembly: it records where to connect and how to
verify the remote, and does no I/O. ``SecureChannelFactory`` turns a config
plus a signing identity into a ready, mutually-authenticated gRPC channel.
TLS is mandatory; this module offers no plaintext path.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Protocol, Tuple, Union

import grpc
from cryptography import x509

from ..crypto.identity import X509SigningIdentity
from ..utils.exceptions import ConnectionTimeout, TrustRootError
from ..utils.logger import ModernLogger

DEFAULT_CONNECT_TIMEOUT = 10.0
MAX_MESSAGE_LENGTH = 50 * 1024 * 1024


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Parameters of the secure channel to one node.

    Attributes:
        address: Target in ``host:port`` form
        trust_root_path: PEM file with the CA certificate(s) trusted for the node
        connect_timeout: Seconds allowed for channel establishment
        server_name_override: Name checked against the node's certificate
            instead of the host part of ``address``
        tls_enabled: Always ``True``
    """

    address: str
    trust_root_path: str
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    server_name_override: Optional[str] = None
    tls_enabled: bool = field(default=True, init=False)

    @classmethod
    def build(
        cls,
        address: str,
        trust_root_path: Union[str, Path],
        timeout: Optional[float] = None,
        server_name_override: Optional[str] = None,
    ) -> "ConnectionConfig":
        return cls(
            address=address,
            trust_root_path=str(trust_root_path),
            connect_timeout=DEFAULT_CONNECT_TIMEOUT if timeout is None else timeout,
            server_name_override=server_name_override,
        )

    def grpc_options(self) -> List[Tuple[str, Any]]:
        """
        gRPC channel options for this connection.
        """
        options: List[Tuple[str, Any]] = [
            # Message size limits (50MB)
            ('grpc.max_send_message_length', MAX_MESSAGE_LENGTH),
            ('grpc.max_receive_message_length', MAX_MESSAGE_LENGTH),

            # Keepalive settings for connection health
            ('grpc.keepalive_time_ms', 30000),
            ('grpc.keepalive_timeout_ms', 5000),
        ]
        if self.server_name_override:
            options.append(('grpc.ssl_target_name_override', self.server_name_override))
        return options


class ChannelFactory(Protocol):
    """Opens a ready channel or raises a classified error."""

    def open(self, config: ConnectionConfig, identity: X509SigningIdentity) -> grpc.Channel:
        ...


def load_trust_root(path: str) -> bytes:
    """
    Read the CA bundle and make sure it holds at least one certificate.

    Raises:
        TrustRootError: If the file is unreadable or not a PEM certificate.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise TrustRootError(path, "cannot read trust root {0}: {1}".format(path, exc), cause=exc) from exc
    try:
        certificates = x509.load_pem_x509_certificates(data)
    except ValueError as exc:
        raise TrustRootError(path, "trust root {0} is not a PEM certificate: {1}".format(path, exc), cause=exc) from exc
    if not certificates:
        raise TrustRootError(path, "trust root {0} contains no certificate".format(path))
    return data


class SecureChannelFactory(ModernLogger):
    """
    Opens mutual-TLS gRPC channels and waits until they are ready.
    """

    def __init__(self) -> None:
        super().__init__(name="channel")

    def open(self, config: ConnectionConfig, identity: X509SigningIdentity) -> grpc.Channel:
        """
        Raises:
            TrustRootError: If the trust root cannot be used.
            ConnectionTimeout: If the channel is not ready in time.
        """
        root_certificates = load_trust_root(config.trust_root_path)
        credentials = grpc.ssl_channel_credentials(
            root_certificates=root_certificates,
            private_key=identity.private_key_pem,
            certificate_chain=identity.certificate_pem,
        )

        self.debug("Opening secure channel to %s as %s", config.address, identity.name)
        channel = grpc.secure_channel(config.address, credentials, options=config.grpc_options())
        try:
            grpc.channel_ready_future(channel).result(timeout=config.connect_timeout)
        except grpc.FutureTimeoutError as exc:
            channel.close()
            raise ConnectionTimeout(config.address, config.connect_timeout, cause=exc) from exc
        except BaseException:
            channel.close()
            raise

        self.debug("Secure channel to %s is ready", config.address)
        return channel
