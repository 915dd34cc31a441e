"""
Schemas - Proof Transport
File: transport.py

Purpose: JSON-serialisable form of a Merkle proof for storage or transfer.

Serialization contract:
- siblings: fixed-length digests as 0x-prefixed hex, leaf level first
- index: the leaf's ordinal index, stored after the siblings
- order is preserved exactly; verification derives left/right placement
  from the index and each sibling's position in the list
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.crypto.hashing import from_hex, to_hex
from core.merkle.merkle_proofs import MerkleProof

from .errors import ProofDecodeException


class ProofDocument(BaseModel):
    """
    Transport form of a MerkleProof.

    algorithm and root are optional annotations for the reader; they are
    not needed to rebuild the MerkleProof and verification always takes
    the root from the caller.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    siblings: list[str] = Field(
        default_factory=list,
        description="Sibling digests as 0x-prefixed hex, leaf level first",
    )
    index: int = Field(
        ...,
        description="0-based ordinal index of the proven leaf",
        ge=0,
    )
    algorithm: str | None = Field(
        default=None,
        description="Name of the hash algorithm the tree was built with",
    )
    root: str | None = Field(
        default=None,
        description="Root digest at proof generation time, 0x-prefixed hex",
    )

    @field_validator("siblings")
    @classmethod
    def _check_siblings(cls, value: list[str]) -> list[str]:
        lengths = set()
        for i, sibling in enumerate(value):
            try:
                lengths.add(len(from_hex(sibling)))
            except ValueError as e:
                raise ValueError(f"siblings[{i}]: {e}") from e
        if len(lengths) > 1:
            raise ValueError(f"siblings must share one digest length, got {sorted(lengths)}")
        return value

    @field_validator("root")
    @classmethod
    def _check_root(cls, value: str | None) -> str | None:
        if value is not None:
            from_hex(value)
        return value

    @model_validator(mode="after")
    def _check_root_length(self) -> "ProofDocument":
        if self.root is not None and self.siblings:
            if len(from_hex(self.root)) != len(from_hex(self.siblings[0])):
                raise ValueError("root and siblings must share one digest length")
        return self

    @classmethod
    def from_proof(
        cls,
        proof: MerkleProof,
        *,
        algorithm: str | None = None,
        root: bytes | None = None,
    ) -> "ProofDocument":
        """Build the transport form of a proof."""
        return cls(
            siblings=[to_hex(s) for s in proof.siblings],
            index=proof.index,
            algorithm=algorithm,
            root=to_hex(root) if root is not None else None,
        )

    def to_proof(self) -> MerkleProof:
        """Decode back into a MerkleProof."""
        return MerkleProof(
            siblings=tuple(from_hex(s) for s in self.siblings),
            index=self.index,
        )

    def root_bytes(self) -> bytes | None:
        """Decoded root annotation, if present."""
        return from_hex(self.root) if self.root is not None else None

    def to_json(self, indent: int | None = 2) -> str:
        """Serialise with siblings first and index after, as stored."""
        return self.model_dump_json(indent=indent, exclude_none=True)

    @classmethod
    def from_json(cls, text: str | bytes) -> "ProofDocument":
        """
        Parse a serialised proof.

        Raises:
            ProofDecodeException: If text is not a valid proof document
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise ProofDecodeException(
                f"Invalid proof document: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e


__all__ = ["ProofDocument"]
