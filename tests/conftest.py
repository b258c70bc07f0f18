#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pytest bootstrap for local package imports, plus throwaway PKI fixtures.
"""

import datetime
import ipaddress
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.x509.oid import NameOID


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def issue_certificate(common_name, public_key, issuer_name, issuer_key, is_ca=False, dns_names=()):
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(_name(common_name))
        .issuer_name(_name(issuer_name))
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
    )
    if dns_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName(name) for name in dns_names]
                + [x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
    algorithm = None if isinstance(issuer_key, ed25519.Ed25519PrivateKey) else hashes.SHA256()
    return builder.sign(issuer_key, algorithm)


def new_ca(common_name):
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_cert = issue_certificate(common_name, ca_key.public_key(), common_name, ca_key, is_ca=True)
    return ca_cert, ca_key


def key_pem(private_key) -> bytes:
    return private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture
def pki(tmp_path):
    """
    A CA plus a helper issuing identities signed by it.

    ``pki.cert_path``/``pki.key_path`` hold a default EC client identity.
    """
    ca_cert, ca_key = new_ca("test-ca")
    ca_path = tmp_path / "ca.pem"
    ca_path.write_bytes(ca_cert.public_bytes(serialization.Encoding.PEM))

    def write_identity(common_name="client", private_key=None, dns_names=()):
        private_key = private_key or ec.generate_private_key(ec.SECP256R1())
        cert = issue_certificate(
            common_name, private_key.public_key(), "test-ca", ca_key, dns_names=dns_names
        )
        cert_path = tmp_path / "{0}.pem".format(common_name)
        key_path = tmp_path / "{0}.key".format(common_name)
        cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        key_path.write_bytes(key_pem(private_key))
        return cert_path, key_path

    cert_path, key_path = write_identity()
    return SimpleNamespace(
        root=tmp_path,
        ca_path=ca_path,
        cert_path=cert_path,
        key_path=key_path,
        write_identity=write_identity,
    )


@pytest.fixture
def identity(pki):
    from viewremote.core.crypto import X509SigningIdentity

    return X509SigningIdentity.load(pki.cert_path, pki.key_path)
