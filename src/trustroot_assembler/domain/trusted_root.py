"""
Trusted-root decoding — typed view over the trusted_root.json tree.

The manifest is decoded once per authority kind into AuthorityChain values.
Each level of the manifest can be malformed independently, and each level
fails independently:

  document[kind]                  → Failure  (whole kind skipped)
    [index] / certChain / certificates → Failure  (one entry skipped)
      [position] / rawBytes / base64     → Failure  (one certificate skipped)

Pure functions only: no I/O and no logging.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import Any

from railway import ErrorCode
from railway.result import Result

from trustroot_assembler.domain.models import AuthorityChain, AuthorityKind, authority_label
from trustroot_assembler.domain.nodes import require_node


def decode_authorities(
    document: Mapping[str, Any],
    kind: AuthorityKind,
) -> Result[list[Result[AuthorityChain]]]:
    """
    Decode every entry listed under `kind`.

    Fails (NOT_FOUND) when the key is absent or not a sequence. Otherwise
    succeeds with one Result per entry, indexed like the source sequence.
    """
    return require_node(
        document.get(kind.value),
        list,
        f"No {kind} found in trusted root",
        ErrorCode.NOT_FOUND,
    ).map(
        lambda entries: [decode_authority(entry, kind, index) for index, entry in enumerate(entries)]
    )


def decode_authority(entry: Any, kind: AuthorityKind, index: int) -> Result[AuthorityChain]:
    """Decode one authority entry: {"certChain": {"certificates": [...]}}."""
    label = authority_label(kind, index)
    return (
        require_node(entry, dict, f"Invalid data for {label}")
        .flat_map(lambda data: require_node(data.get("certChain"), dict, f"No certChain found for {label}"))
        .flat_map(lambda chain: require_node(chain.get("certificates"), list, f"No certificates found for {label}"))
        .map(
            lambda certificates: AuthorityChain(
                kind=kind,
                index=index,
                certificates=tuple(decode_certificate(certificate) for certificate in certificates),
            )
        )
    )


def decode_certificate(certificate: Any) -> Result[bytes]:
    """Decode one chain member: {"rawBytes": "<base64 DER>"} → DER bytes."""
    return (
        require_node(certificate, dict, "Invalid certificate data")
        .flat_map(lambda data: require_node(data.get("rawBytes"), str, "No rawBytes found"))
        .flat_map(decode_raw_bytes)
    )


def decode_raw_bytes(raw_bytes: str) -> Result[bytes]:
    """
    Strict standard-alphabet base64 decode (padding required).

    Line breaks are ignored so wrapped values decode; any other character
    outside the alphabet is an error.
    """
    unwrapped = raw_bytes.replace("\r", "").replace("\n", "")
    return Result.from_computation(
        lambda: base64.b64decode(unwrapped, validate=True),
        ErrorCode.DECODE_ERROR,
        "Error decoding base64",
    )
