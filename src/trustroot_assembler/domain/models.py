"""
Domain models — immutable value objects for authorities and certificate chains.

The trusted-root manifest arrives as an untyped JSON tree. These types are
what the decoding layer turns it into, and what the patcher writes back out
into the TrustRoot descriptor.

All models are frozen dataclasses.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import Any

from railway.result import Result


@unique
class AuthorityKind(StrEnum):
    """
    The two authority sequences shared by the manifest and the descriptor.

    Values are the literal keys used in both documents; iteration order is
    the processing order.
    """

    CERTIFICATE_AUTHORITIES = "certificateAuthorities"
    TIMESTAMP_AUTHORITIES = "timestampAuthorities"


def authority_label(kind: AuthorityKind, index: int) -> str:
    """Position of an entry in log lines and messages, e.g. `certificateAuthorities[0]`."""
    return f"{kind}[{index}]"


@dataclass(frozen=True, slots=True)
class AuthorityChain:
    """
    One authority entry decoded from the trusted-root manifest.

    `certificates` keeps one Result per chain member, in chain order:
    the DER bytes when `rawBytes` decoded cleanly, otherwise the failure
    that excludes that member.
    """

    kind: AuthorityKind
    index: int
    certificates: tuple[Result[bytes], ...] = ()

    @property
    def label(self) -> str:
        return authority_label(self.kind, self.index)


@dataclass(frozen=True, slots=True)
class Subject:
    """Subject block of a descriptor entry."""

    organization: str
    common_name: str

    def as_mapping(self) -> dict[str, str]:
        return {"organization": self.organization, "commonName": self.common_name}


@dataclass(frozen=True, slots=True)
class AuthorityIdentity:
    """Subject and URI stamped onto every authority entry written in a run."""

    subject: Subject
    uri: str


@dataclass(frozen=True, slots=True)
class TranscodedChain:
    """
    PEM blocks produced for one chain, in original chain order.

    `skipped` counts chain members that were excluded (bad base64, not a
    certificate, wrong shape).
    """

    pem_blocks: tuple[str, ...] = ()
    skipped: int = 0

    @property
    def pem_text(self) -> str:
        return "".join(self.pem_blocks)

    @property
    def cert_chain(self) -> str:
        """Base64 of the concatenated PEM text, used as the descriptor's certChain."""
        return base64.b64encode(self.pem_text.encode("ascii")).decode("ascii")


@dataclass(frozen=True, slots=True)
class AuthorityEntry:
    """A fully derived descriptor entry, ready to be patched into the tree."""

    subject: Subject
    uri: str
    cert_chain: str = field(repr=False)

    @staticmethod
    def create(identity: AuthorityIdentity, chain: TranscodedChain) -> AuthorityEntry:
        return AuthorityEntry(subject=identity.subject, uri=identity.uri, cert_chain=chain.cert_chain)

    def as_mapping(self) -> dict[str, Any]:
        return {
            "subject": self.subject.as_mapping(),
            "uri": self.uri,
            "certChain": self.cert_chain,
        }


@dataclass(frozen=True, slots=True)
class AssemblyReport:
    """Outcome counters for one assembly run."""

    entries_written: int = 0
    entries_skipped: int = 0
    entries_failed: int = 0
    certificates_encoded: int = 0
    certificates_skipped: int = 0
    kinds_missing: tuple[AuthorityKind, ...] = ()
    output_written: bool = False
