"""
Proof Transport Unit Tests
Tests for core/schemas/transport.py
"""
import json

import pytest
from pydantic import ValidationError

from core.crypto.hashing import to_hex
from core.merkle.merkle_proofs import verify_proof
from core.schemas.errors import ErrorCodes, ProofDecodeException
from core.schemas.transport import ProofDocument


class TestProofDocument:
    """Conversion between MerkleProof and its JSON form."""

    def test_from_proof(self, foo_bar_baz_tree):
        """Proofs convert to documents and back."""
        proof = foo_bar_baz_tree.generate_proof(b"Baz")
        document = ProofDocument.from_proof(proof, algorithm="sha256", root=foo_bar_baz_tree.root)

        assert document.index == 2
        assert document.siblings == [to_hex(s) for s in proof.siblings]
        assert document.root == to_hex(foo_bar_baz_tree.root)
        assert document.to_proof() == proof
        assert document.root_bytes() == foo_bar_baz_tree.root

    def test_json_field_order(self, foo_bar_baz_tree):
        """Siblings are serialised before the index."""
        proof = foo_bar_baz_tree.generate_proof(b"Foo")
        text = ProofDocument.from_proof(proof).to_json(indent=None)

        assert text.index('"siblings"') < text.index('"index"')
        assert "root" not in json.loads(text)

    def test_decoded_proof_verifies(self, foo_bar_baz_tree, hasher):
        """A decoded proof still verifies."""
        proof = foo_bar_baz_tree.generate_proof(b"Bar")
        text = ProofDocument.from_proof(proof).to_json()

        decoded = ProofDocument.from_json(text).to_proof()

        assert verify_proof(b"Bar", decoded, foo_bar_baz_tree.root, hasher)

    def test_empty_proof(self, hasher):
        """Single-leaf proofs have no siblings."""
        document = ProofDocument(siblings=[], index=0)

        assert document.to_proof().siblings == ()

    def test_frozen(self):
        """Documents are immutable."""
        document = ProofDocument(siblings=[], index=0)

        with pytest.raises(ValidationError):
            document.index = 1


class TestProofDecodeErrors:
    """Malformed documents raise ProofDecodeException."""

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"siblings": []}',
            '{"siblings": [], "index": -1}',
            '{"siblings": ["abcd"], "index": 0}',
            '{"siblings": ["0xabc"], "index": 0}',
            '{"siblings": ["0xaaaa", "0xbbbbbb"], "index": 0}',
            '{"siblings": ["0xaaaa"], "index": 0, "root": "0xbbbbbb"}',
            '{"siblings": [], "index": 0, "extra": true}',
        ],
    )
    def test_invalid(self, text):
        """Malformed documents raise ProofDecodeException."""
        with pytest.raises(ProofDecodeException) as exc_info:
            ProofDocument.from_json(text)

        assert exc_info.value.code == ErrorCodes.PROOF_DECODE_ERROR
        assert exc_info.value.details["errors"]
