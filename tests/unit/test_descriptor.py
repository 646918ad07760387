"""
Unit tests for the descriptor patcher — in-memory TrustRoot tree mutation.

Test categories:
  - Navigation: missing / wrong-typed spec or sigstoreKeys → NOT_FOUND
  - Growth: sequences are extended with empty mappings up to index + 1
  - Replacement: non-mapping elements and non-sequence kinds are replaced
  - Overwrite: the three entry keys are replaced, other keys survive
  - Idempotence: patching twice yields the same tree
"""

from __future__ import annotations

import copy
from typing import Any

import pytest
from railway import ErrorCode, ResultAssertions

from trustroot_assembler.domain.descriptor import grow_sequence, locate_sigstore_keys, patch_authority
from trustroot_assembler.domain.models import AuthorityEntry, AuthorityKind, Subject

CA = AuthorityKind.CERTIFICATE_AUTHORITIES
TSA = AuthorityKind.TIMESTAMP_AUTHORITIES

ENTRY = AuthorityEntry(
    subject=Subject(organization="GitHub, Inc.", common_name="Internal Services Root"),
    uri="https://fulcio.githubapp.com",
    cert_chain="LS0tLS1CRUdJTg==",
)


def _tree(**sigstore_keys: Any) -> dict[str, Any]:
    return {"kind": "TrustRoot", "spec": {"sigstoreKeys": dict(sigstore_keys)}}


class TestLocateSigstoreKeys:
    @pytest.mark.parametrize(
        "tree",
        [None, [], {}, {"spec": None}, {"spec": []}, {"spec": {}}, {"spec": {"sigstoreKeys": "x"}}],
    )
    def test_missing_sections_are_not_found(self, tree: Any) -> None:
        ResultAssertions.assert_failure(locate_sigstore_keys(tree), ErrorCode.NOT_FOUND)

    def test_names_the_missing_section(self) -> None:
        ResultAssertions.assert_failure_message_contains(locate_sigstore_keys({}), "'spec'")
        ResultAssertions.assert_failure_message_contains(
            locate_sigstore_keys({"spec": {}}), "'sigstoreKeys'"
        )

    def test_returns_the_mapping_itself(self) -> None:
        tree = _tree(certificateAuthorities=[])
        keys = ResultAssertions.assert_success(locate_sigstore_keys(tree))
        assert keys is tree["spec"]["sigstoreKeys"]


class TestGrowSequence:
    def test_appends_empty_mappings(self) -> None:
        assert grow_sequence(["a"], 3) == ["a", {}, {}]

    def test_never_shrinks(self) -> None:
        assert grow_sequence([1, 2, 3], 1) == [1, 2, 3]

    def test_appended_mappings_are_distinct_objects(self) -> None:
        sequence = grow_sequence([], 2)
        assert sequence[0] is not sequence[1]


class TestPatchAuthority:
    def test_writes_the_three_fields(self) -> None:
        tree = _tree(certificateAuthorities=[])
        ResultAssertions.assert_success(patch_authority(tree, CA, 0, ENTRY))

        assert tree["spec"]["sigstoreKeys"]["certificateAuthorities"] == [
            {
                "subject": {"organization": "GitHub, Inc.", "commonName": "Internal Services Root"},
                "uri": "https://fulcio.githubapp.com",
                "certChain": "LS0tLS1CRUdJTg==",
            }
        ]

    def test_growing_preserves_prefix_and_fills_gap(self) -> None:
        """
        GIVEN a sequence of length m=2
        WHEN index k=4 is patched
        THEN the length is exactly k+1, [0, m-1] are unchanged and [m, k-1] are empty mappings.
        """
        existing = [{"uri": "first"}, {"uri": "second"}]
        tree = _tree(timestampAuthorities=copy.deepcopy(existing))

        ResultAssertions.assert_success(patch_authority(tree, TSA, 4, ENTRY))

        sequence = tree["spec"]["sigstoreKeys"]["timestampAuthorities"]
        assert len(sequence) == 5
        assert sequence[:2] == existing
        assert sequence[2:4] == [{}, {}]
        assert sequence[4] == ENTRY.as_mapping()

    def test_absent_kind_gets_fresh_sequence(self) -> None:
        tree = _tree()
        ResultAssertions.assert_success(patch_authority(tree, CA, 2, ENTRY))

        sequence = tree["spec"]["sigstoreKeys"]["certificateAuthorities"]
        assert sequence == [{}, {}, ENTRY.as_mapping()]

    def test_non_sequence_kind_is_replaced(self) -> None:
        tree = _tree(certificateAuthorities="not a list")
        ResultAssertions.assert_success(patch_authority(tree, CA, 0, ENTRY))
        assert tree["spec"]["sigstoreKeys"]["certificateAuthorities"] == [ENTRY.as_mapping()]

    def test_non_mapping_element_is_replaced(self) -> None:
        tree = _tree(certificateAuthorities=["junk", None])
        ResultAssertions.assert_success(patch_authority(tree, CA, 1, ENTRY))

        sequence = tree["spec"]["sigstoreKeys"]["certificateAuthorities"]
        assert sequence == ["junk", ENTRY.as_mapping()]

    def test_overwrites_entry_fields_and_keeps_others(self) -> None:
        """
        GIVEN an element with stale subject/uri/certChain and an extra key
        WHEN patched
        THEN the three fields are overwritten and the extra key survives.
        """
        stale = {
            "subject": {"organization": "old", "commonName": "old", "extra": "dropped"},
            "uri": "https://old",
            "certChain": "b2xk",
            "validFor": {"start": "2023-01-01T00:00:00Z"},
        }
        tree = _tree(certificateAuthorities=[stale])

        element = ResultAssertions.assert_success(patch_authority(tree, CA, 0, ENTRY))

        assert element["subject"] == {"organization": "GitHub, Inc.", "commonName": "Internal Services Root"}
        assert element["uri"] == "https://fulcio.githubapp.com"
        assert element["certChain"] == "LS0tLS1CRUdJTg=="
        assert element["validFor"] == {"start": "2023-01-01T00:00:00Z"}

    def test_does_not_touch_the_other_kind(self) -> None:
        tree = _tree(certificateAuthorities=[], timestampAuthorities=[{"uri": "keep"}])
        ResultAssertions.assert_success(patch_authority(tree, CA, 0, ENTRY))
        assert tree["spec"]["sigstoreKeys"]["timestampAuthorities"] == [{"uri": "keep"}]

    def test_patching_twice_is_idempotent(self) -> None:
        tree = _tree(certificateAuthorities=[{"uri": "x"}])
        ResultAssertions.assert_success(patch_authority(tree, CA, 3, ENTRY))
        once = copy.deepcopy(tree)

        ResultAssertions.assert_success(patch_authority(tree, CA, 3, ENTRY))

        assert tree == once

    def test_missing_spec_leaves_tree_untouched(self) -> None:
        tree: dict[str, Any] = {"kind": "TrustRoot"}
        result = patch_authority(tree, CA, 0, ENTRY)

        ResultAssertions.assert_failure(result, ErrorCode.NOT_FOUND)
        assert tree == {"kind": "TrustRoot"}

    def test_negative_index_is_rejected(self) -> None:
        tree = _tree(certificateAuthorities=[])
        ResultAssertions.assert_failure(patch_authority(tree, CA, -1, ENTRY), ErrorCode.VALIDATION_ERROR)
