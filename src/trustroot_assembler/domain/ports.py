"""
Ports — Protocol-based interfaces for infrastructure adapters.

The pipeline depends on these contracts only; concrete file and
cryptography adapters are created in main.py.

  TrustedRootSource    → trusted_root.json as a generic tree
  TemplateMaterializer → template copied over the output path
  DescriptorStore      → output descriptor loaded / saved as a tree
  CertificateEncoder   → DER certificate re-encoded as PEM
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from railway.result import Result


@runtime_checkable
class TrustedRootSource(Protocol):
    """
    Port: load the trusted-root manifest.

    Returns the decoded top-level JSON object. Any failure here is fatal
    to the run.
    """

    def load(self) -> Result[dict[str, Any]]: ...


@runtime_checkable
class TemplateMaterializer(Protocol):
    """
    Port: create or truncate the output file as a byte-identical copy of the template.

    Returns the output path.
    """

    def materialize(self) -> Result[Path]: ...


@runtime_checkable
class DescriptorStore(Protocol):
    """Port: read and write the output descriptor as a generic tree."""

    def load(self) -> Result[dict[str, Any]]: ...

    def save(self, tree: dict[str, Any]) -> Result[Path]: ...


@runtime_checkable
class CertificateEncoder(Protocol):
    """
    Port: validate DER bytes as an X.509 certificate and return its PEM block.

    The PEM text must end with a newline so blocks concatenate cleanly.
    """

    def encode(self, der_bytes: bytes) -> Result[str]: ...
