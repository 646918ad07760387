"""
Pipeline — the trust-root assembly workflow.

All I/O is injected via ports (Protocol interfaces). The fatal stages are
chained with flat_map, so the first failure ends the run:

  source.load()                      (fatal)
    → materializer.materialize()     (fatal)
      → store.load()                 (failure here only fails each entry's patch)
        → for each kind, for each entry:
            decode → transcode → patch   (failures logged, entry skipped)
          → store.save(tree)         (fatal; only when an entry was patched)

The descriptor is loaded once, patched in memory, and saved once.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog
from railway.result import Result

from trustroot_assembler.domain.descriptor import patch_authority
from trustroot_assembler.domain.models import (
    AssemblyReport,
    AuthorityChain,
    AuthorityEntry,
    AuthorityIdentity,
    AuthorityKind,
    TranscodedChain,
    authority_label,
)
from trustroot_assembler.domain.ports import (
    CertificateEncoder,
    DescriptorStore,
    TemplateMaterializer,
    TrustedRootSource,
)
from trustroot_assembler.domain.trusted_root import decode_authorities

log = structlog.get_logger()


@dataclass(slots=True)
class _Tally:
    """Mutable counters accumulated while a run is in progress."""

    entries_written: int = 0
    entries_skipped: int = 0
    entries_failed: int = 0
    certificates_encoded: int = 0
    certificates_skipped: int = 0
    kinds_missing: list[AuthorityKind] = field(default_factory=list)

    def report(self, output_written: bool) -> AssemblyReport:
        return AssemblyReport(
            entries_written=self.entries_written,
            entries_skipped=self.entries_skipped,
            entries_failed=self.entries_failed,
            certificates_encoded=self.certificates_encoded,
            certificates_skipped=self.certificates_skipped,
            kinds_missing=tuple(self.kinds_missing),
            output_written=output_written,
        )


def transcode_chain(chain: AuthorityChain, encoder: CertificateEncoder) -> TranscodedChain:
    """
    PEM-encode every chain member that decodes and parses, in chain order.

    Members that fail are logged with their position and left out.
    """
    encoded = [
        certificate.flat_map(encoder.encode).peek_failure(
            lambda err, position=position: log.warning(
                "transcoder.certificate_skipped",
                entry=chain.label,
                certificate=position,
                error=err.detail(),
            )
        )
        for position, certificate in enumerate(chain.certificates)
    ]
    pem_blocks, failures = Result.partition(encoded)
    return TranscodedChain(pem_blocks=tuple(pem_blocks), skipped=len(failures))


def _patch_kind(
    document: Mapping[str, Any],
    kind: AuthorityKind,
    tree: Result[dict[str, Any]],
    identity: AuthorityIdentity,
    encoder: CertificateEncoder,
    tally: _Tally,
) -> None:
    decoded = decode_authorities(document, kind)
    if decoded.is_failure():
        log.warning("transcoder.authority_missing", authority=str(kind), error=decoded.error().message)
        tally.kinds_missing.append(kind)
        return

    chains = decoded.value()
    log.info("transcoder.authorities_found", authority=str(kind), count=len(chains))

    for index, chain_result in enumerate(chains):
        if chain_result.is_failure():
            log.warning(
                "transcoder.entry_skipped",
                entry=authority_label(kind, index),
                error=chain_result.error().message,
            )
            tally.entries_skipped += 1
            continue

        chain = chain_result.value()
        transcoded = transcode_chain(chain, encoder)
        tally.certificates_encoded += len(transcoded.pem_blocks)
        tally.certificates_skipped += transcoded.skipped

        entry = AuthorityEntry.create(identity, transcoded)
        patched = tree.flat_map(lambda root: patch_authority(root, kind, index, entry))
        if patched.is_success():
            tally.entries_written += 1
            log.info(
                "patcher.entry_written",
                entry=chain.label,
                certificates=len(transcoded.pem_blocks),
                skipped=transcoded.skipped,
            )
        else:
            tally.entries_failed += 1
            log.error(
                "patcher.entry_failed",
                entry=chain.label,
                error=patched.error().detail(),
            )


def _assemble(
    document: Mapping[str, Any],
    identity: AuthorityIdentity,
    store: DescriptorStore,
    encoder: CertificateEncoder,
) -> Result[AssemblyReport]:
    tree = store.load().peek_failure(
        lambda err: log.error("patcher.descriptor_unreadable", error=err.detail())
    )
    tally = _Tally()
    for kind in AuthorityKind:
        _patch_kind(document, kind, tree, identity, encoder, tally)

    if tally.entries_written == 0:
        # Nothing patched: the output stays a byte-identical template copy.
        return Result.success(tally.report(output_written=False))

    return tree.flat_map(store.save).map(lambda _: tally.report(output_written=True))


def run_assembly(
    identity: AuthorityIdentity,
    source: TrustedRootSource,
    materializer: TemplateMaterializer,
    store: DescriptorStore,
    encoder: CertificateEncoder,
) -> Result[AssemblyReport]:
    """
    Execute one trust-root assembly.

    Returns Result[AssemblyReport] when the run completes, even if
    individual entries or certificates were skipped. Returns a failure only
    for fatal conditions: unreadable/invalid trusted root, template that
    cannot be copied, or a descriptor that cannot be written.
    """
    return (
        source.load()
        .flat_map(lambda document: materializer.materialize().map(lambda _: document))
        .flat_map(lambda document: _assemble(document, identity, store, encoder))
    )
