"""
PEM encoder adapter — DER X.509 → PEM CERTIFICATE block.

Adapter layer — implements the CertificateEncoder port with cryptography (PyCA):
  - x509.load_der_x509_certificate() checks the bytes are a structurally
    valid certificate (no chain or signature verification)
  - Certificate.public_bytes(Encoding.PEM) emits the original DER as a
    64-column base64 body between BEGIN/END CERTIFICATE lines
"""

from __future__ import annotations

import structlog
from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()


def _to_pem(certificate: x509.Certificate) -> str:
    log.debug(
        "encoder.certificate",
        subject=certificate.subject.rfc4514_string(),
        serial=hex(certificate.serial_number),
    )
    return certificate.public_bytes(Encoding.PEM).decode("ascii")


class X509PemEncoder:
    """
    Re-encode DER certificates as PEM.

    Implements the CertificateEncoder port. Parse errors are caught at this
    boundary and returned as CERTIFICATE_ERROR failures.
    """

    def encode(self, der_bytes: bytes) -> Result[str]:
        return Result.from_computation(
            lambda: x509.load_der_x509_certificate(der_bytes),
            ErrorCode.CERTIFICATE_ERROR,
            "Error converting to PEM: failed to parse certificate",
        ).map(_to_pem)
