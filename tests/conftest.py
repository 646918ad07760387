"""
Shared test fixtures and helpers for the trustroot-assembler test suite.

Certificates are generated on the fly with cryptography (self-signed EC
P-256) so no binary fixtures are checked in.
"""

from __future__ import annotations

import base64
import datetime
import json
from pathlib import Path
from typing import Any

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

TEMPLATE_YAML = """\
apiVersion: policy.sigstore.dev/v1alpha1
kind: TrustRoot
metadata:
  name: trust-root
spec:
  sigstoreKeys:
    certificateAuthorities: []
    timestampAuthorities: []
"""


def make_certificate_der(common_name: str = "sigstore-test") -> bytes:
    """Create a self-signed EC certificate and return its DER encoding."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "sigstore.dev"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.datetime.now(datetime.UTC)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return certificate.public_bytes(Encoding.DER)


def der_to_pem(der_bytes: bytes) -> str:
    """Reference PEM encoding of DER bytes, computed independently of the encoder under test."""
    return x509.load_der_x509_certificate(der_bytes).public_bytes(Encoding.PEM).decode("ascii")


def raw_bytes_entry(der_bytes: bytes) -> dict[str, str]:
    """A trusted_root.json certificate element for the given DER bytes."""
    return {"rawBytes": base64.b64encode(der_bytes).decode("ascii")}


def authority(*certificates: Any) -> dict[str, Any]:
    """A trusted_root.json authority element holding the given certificate elements."""
    return {
        "subject": {"organization": "sigstore.dev", "commonName": "sigstore"},
        "uri": "https://fulcio.sigstore.dev",
        "certChain": {"certificates": list(certificates)},
    }


@pytest.fixture(scope="session")
def root_der() -> bytes:
    return make_certificate_der("sigstore-root")


@pytest.fixture(scope="session")
def intermediate_der() -> bytes:
    return make_certificate_der("sigstore-intermediate")


@pytest.fixture()
def template_path(tmp_path: Path) -> Path:
    """A TrustRoot template with empty authority sequences."""
    path = tmp_path / "trustroot.template.yaml"
    path.write_text(TEMPLATE_YAML, encoding="utf-8")
    return path


@pytest.fixture()
def write_trusted_root(tmp_path: Path):
    """Return a writer that dumps a trusted-root document to tmp_path and returns its path."""

    def _write(document: Any, name: str = "trusted_root.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
