#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
X.509 signing identities.

A signing identity is a certificate plus the matching private key. The client
uses it twice: the certificate and key authenticate the TLS channel, and the
key signs every command envelope sent over it.
"""

from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

from ..utils.exceptions import ExceptionTranslator, IdentityLoadError
from ..utils.logger import ModernLogger

PathLike = Union[str, Path]
SupportedPrivateKey = Union[
    ec.EllipticCurvePrivateKey, rsa.RSAPrivateKey, ed25519.Ed25519PrivateKey
]

_PEM_MARKER = b"-----BEGIN"


@runtime_checkable
class SigningIdentity(Protocol):
    """Capability handed to the channel and protocol layers."""

    @property
    def name(self) -> str:
        ...

    def serialize(self) -> bytes:
        ...

    def sign(self, data: bytes) -> bytes:
        ...


def _read_credential_file(path: PathLike, kind: str) -> bytes:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ExceptionTranslator.as_identity_error(exc, str(path), f"cannot read {kind}") from exc
    if not data.strip():
        raise IdentityLoadError(f"{kind} file is empty ({path})", path=str(path))
    return data


def _public_key_der(key) -> bytes:
    return key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )


class X509SigningIdentity(ModernLogger):
    """
    Certificate/key pair loaded from the filesystem.

    Supports EC keys (ECDSA with SHA-256, DER encoded signatures), RSA keys
    (PKCS#1 v1.5 with SHA-256) and Ed25519 keys.
    """

    def __init__(self, certificate: x509.Certificate, private_key: SupportedPrivateKey) -> None:
        super().__init__(name="identity")
        self._certificate = certificate
        self._private_key = private_key

    @classmethod
    def load(
        cls,
        certificate_path: PathLike,
        key_path: PathLike,
        key_password: Optional[bytes] = None,
    ) -> "X509SigningIdentity":
        """
        Load and cross-check a certificate and private key (PEM or DER).

        Raises:
            IdentityLoadError: If a file is unreadable or empty, a file does not
                parse, the key type is unsupported, or the key does not belong
                to the certificate.
        """
        cert_bytes = _read_credential_file(certificate_path, "certificate")
        key_bytes = _read_credential_file(key_path, "private key")

        try:
            if _PEM_MARKER in cert_bytes:
                certificate = x509.load_pem_x509_certificate(cert_bytes)
            else:
                certificate = x509.load_der_x509_certificate(cert_bytes)
        except ValueError as exc:
            raise ExceptionTranslator.as_identity_error(
                exc, str(certificate_path), "invalid certificate"
            ) from exc

        try:
            if _PEM_MARKER in key_bytes:
                private_key = serialization.load_pem_private_key(key_bytes, password=key_password)
            else:
                private_key = serialization.load_der_private_key(key_bytes, password=key_password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise ExceptionTranslator.as_identity_error(
                exc, str(key_path), "invalid private key"
            ) from exc

        if not isinstance(
            private_key, (ec.EllipticCurvePrivateKey, rsa.RSAPrivateKey, ed25519.Ed25519PrivateKey)
        ):
            raise IdentityLoadError(
                f"unsupported private key type {type(private_key).__name__} ({key_path})",
                path=str(key_path),
            )

        if _public_key_der(private_key.public_key()) != _public_key_der(certificate.public_key()):
            raise IdentityLoadError(
                f"private key {key_path} does not match certificate {certificate_path}",
                path=str(key_path),
            )

        identity = cls(certificate, private_key)
        identity.debug("Loaded signing identity %s", identity.name)
        return identity

    @property
    def name(self) -> str:
        """RFC 4514 subject of the certificate."""
        return self._certificate.subject.rfc4514_string()

    @property
    def certificate(self) -> x509.Certificate:
        return self._certificate

    @property
    def certificate_pem(self) -> bytes:
        return self._certificate.public_bytes(serialization.Encoding.PEM)

    @property
    def certificate_der(self) -> bytes:
        return self._certificate.public_bytes(serialization.Encoding.DER)

    @property
    def private_key_pem(self) -> bytes:
        """Unencrypted PKCS#8 PEM, as gRPC's TLS credentials expect."""
        return self._private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

    def serialize(self) -> bytes:
        """Identity as presented to the remote node: the PEM certificate."""
        return self.certificate_pem

    def sign(self, data: bytes) -> bytes:
        key = self._private_key
        if isinstance(key, ec.EllipticCurvePrivateKey):
            return key.sign(data, ec.ECDSA(hashes.SHA256()))
        if isinstance(key, rsa.RSAPrivateKey):
            return key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        return key.sign(data)

    def verify(self, data: bytes, signature: bytes) -> bool:
        public_key = self._certificate.public_key()
        try:
            if isinstance(public_key, ec.EllipticCurvePublicKey):
                public_key.verify(signature, data, ec.ECDSA(hashes.SHA256()))
            elif isinstance(public_key, rsa.RSAPublicKey):
                public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
            else:
                public_key.verify(signature, data)
        except InvalidSignature:
            return False
        return True

    def __repr__(self) -> str:
        return "X509SigningIdentity(name={0!r})".format(self.name)
