"""
Descriptor patching — writes authority entries into the TrustRoot tree.

Operates on the in-memory tree loaded from the output document:

  spec:
    sigstoreKeys:
      certificateAuthorities: [ {subject, uri, certChain}, ... ]
      timestampAuthorities:   [ {subject, uri, certChain}, ... ]

The tree is mutated in place; serializing it is the store's job.
"""

from __future__ import annotations

from typing import Any

from railway import ErrorCode
from railway.result import Result

from trustroot_assembler.domain.models import AuthorityEntry, AuthorityKind
from trustroot_assembler.domain.nodes import require_node

SPEC_KEY = "spec"
SIGSTORE_KEYS_KEY = "sigstoreKeys"


def locate_sigstore_keys(tree: Any) -> Result[dict[str, Any]]:
    """Return the `spec.sigstoreKeys` mapping, or NOT_FOUND if either level is missing."""
    return (
        require_node(tree, dict, f"missing '{SPEC_KEY}' section in descriptor", ErrorCode.NOT_FOUND)
        .flat_map(
            lambda root: require_node(
                root.get(SPEC_KEY), dict, f"missing '{SPEC_KEY}' section in descriptor", ErrorCode.NOT_FOUND
            )
        )
        .flat_map(
            lambda spec: require_node(
                spec.get(SIGSTORE_KEYS_KEY),
                dict,
                f"missing '{SIGSTORE_KEYS_KEY}' section in descriptor",
                ErrorCode.NOT_FOUND,
            )
        )
    )


def grow_sequence(sequence: list[Any], length: int) -> list[Any]:
    """Append empty mappings until `sequence` holds at least `length` elements."""
    while len(sequence) < length:
        sequence.append({})
    return sequence


def patch_authority(
    tree: Any,
    kind: AuthorityKind,
    index: int,
    entry: AuthorityEntry,
) -> Result[dict[str, Any]]:
    """
    Write `entry` at `spec.sigstoreKeys[kind][index]`.

    - A missing or non-sequence `kind` value is replaced by a new sequence.
    - The sequence is grown with empty mappings up to `index + 1`;
      elements already present are left alone.
    - A non-mapping element at `index` is replaced by an empty mapping.
    - subject, uri and certChain are overwritten; other keys on the
      element survive.

    Returns the patched element mapping.
    """
    if index < 0:
        return Result.failure(ErrorCode.VALIDATION_ERROR, f"Negative index {index} for {kind}")
    return locate_sigstore_keys(tree).map(lambda keys: _write_entry(keys, kind, index, entry))


def _write_entry(
    keys: dict[str, Any],
    kind: AuthorityKind,
    index: int,
    entry: AuthorityEntry,
) -> dict[str, Any]:
    sequence = keys.get(kind.value)
    if not isinstance(sequence, list):
        sequence = []
        keys[kind.value] = sequence
    grow_sequence(sequence, index + 1)

    element = sequence[index]
    if not isinstance(element, dict):
        element = {}
        sequence[index] = element

    element.update(entry.as_mapping())
    return element
