"""
Merkle Proofs
Self-contained inclusion proofs and the witness fold shared by every
verification path.

This module provides:
- fold_witness: recompute a root from a leaf hash and a witness
- MerkleProof: immutable {leaf, root, witness} bundle, serializable to
  canonical JSON and verifiable without the tree that produced it
- MerkleVerifier: thin wrappers used by the CLI and API

Wire Format (canonical JSON, sorted keys, no whitespace):
    {"leaf":"0x..","root":"0x..","witness":[{"side":"left","sibling":"0x.."}, ...]}

Determinism Notes:
- is_valid() depends only on leaf, root, witness and the bound scheme's
  compose_hash; no hidden state, no randomness
- A proof never records its leaf index: parity is replayed from the tags
"""
from __future__ import annotations

from typing import Any, Iterable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_serializer,
    field_validator,
)

from core.crypto.hashing import to_hex
from core.merkle.hashable import ComposeFn, Hashable, Witness, coerce_hash
from core.schemas.canonical import dumps_canonical, loads_canonical
from core.schemas.errors import HashSchemeException, ProofDecodeException


def fold_witness(
    leaf: bytes,
    witness: Iterable[Witness],
    compose_hash: ComposeFn,
) -> bytes:
    """
    Recompute a candidate root by folding the witness over a leaf hash.

    Algorithm:
    1. Start with the leaf hash
    2. For each witness element (leaf level upward):
       - LEFT(sibling):  current = compose_hash(current, sibling)
       - RIGHT(sibling): current = compose_hash(sibling, current)
    3. The final value is the candidate root

    Both MerkleTree.verify and MerkleProof.is_valid go through here.
    """
    current = leaf
    for element in witness:
        current = element.apply(current, compose_hash)
    return current


class MerkleProof(BaseModel):
    """
    A Merkle inclusion proof for a single leaf.

    The proof is independent of the tree: it carries the leaf hash, the
    claimed root and the ordered witness. The hash scheme is bound
    separately (``bind``) because it is code, not data; a proof built by
    MerkleTree.get_merkle_proof comes back already bound.

    Attributes:
        leaf: Hash of the proven leaf
        root: Root the proof claims membership in
        witness: Sibling hashes with orientation, leaf level first
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf: bytes = Field(..., description="Hash of the proven leaf")
    root: bytes = Field(..., description="Claimed Merkle root")
    witness: tuple[Witness, ...] = Field(
        default=(),
        description="Sibling hashes from leaf level up to (excluding) the root",
    )

    _hashable: type[Hashable] | None = PrivateAttr(default=None)

    @field_validator("leaf", "root", mode="before")
    @classmethod
    def _decode_hash(cls, value: Any) -> Any:
        return coerce_hash(value)

    @field_serializer("leaf", "root", when_used="json")
    def _encode_hash(self, value: bytes) -> str:
        return to_hex(value)

    # -------------------------------------------------------------------------
    # Scheme binding
    # -------------------------------------------------------------------------

    def bind(self, hashable: type[Hashable]) -> "MerkleProof":
        """Attach the leaf capability whose compose_hash validates this proof."""
        self._hashable = hashable
        return self

    @property
    def hashable(self) -> type[Hashable] | None:
        return self._hashable

    @property
    def scheme(self) -> str | None:
        return self._hashable.scheme if self._hashable is not None else None

    def _require_hashable(self) -> type[Hashable]:
        if self._hashable is None:
            raise HashSchemeException(
                "MerkleProof has no hash scheme bound; call bind() or decode "
                "with from_json(raw, hashable)"
            )
        return self._hashable

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def compute_root(self) -> bytes:
        """Fold the witness over the leaf using the bound scheme."""
        hashable = self._require_hashable()
        return fold_witness(self.leaf, self.witness, hashable.compose_hash)

    def is_valid(self) -> bool:
        """
        Check that the witness folds the leaf up to the claimed root.

        Returns False for any mismatch. Invalid proofs are an expected
        outcome and never raise.
        """
        return self.compute_root() == self.root

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Canonical JSON form (sorted keys, no whitespace, 0x-hex hashes)."""
        return dumps_canonical(self)

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    @classmethod
    def from_dict(
        cls,
        data: Any,
        hashable: type[Hashable] | None = None,
    ) -> "MerkleProof":
        """
        Build a proof from already-parsed JSON data.

        Raises:
            ProofDecodeException: If the data does not describe a proof
        """
        try:
            proof = cls.model_validate(data)
        except ValidationError as e:
            raise ProofDecodeException(
                f"Invalid merkle proof: {e.error_count()} validation error(s)",
                details={
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            ) from e
        if hashable is not None:
            proof.bind(hashable)
        return proof

    @classmethod
    def from_json(
        cls,
        raw: str | bytes,
        hashable: type[Hashable] | None = None,
    ) -> "MerkleProof":
        """
        Decode a proof produced by to_json/to_bytes and bind its scheme.

        Raises:
            ProofDecodeException: If raw is not valid JSON or not a proof
        """
        try:
            data = loads_canonical(raw)
        except (ValueError, UnicodeDecodeError) as e:
            raise ProofDecodeException(f"Proof is not valid JSON: {e}") from e
        return cls.from_dict(data, hashable)

    @classmethod
    def from_bytes(
        cls,
        raw: bytes,
        hashable: type[Hashable] | None = None,
    ) -> "MerkleProof":
        return cls.from_json(raw, hashable)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = tree.get_merkle_proof(3)
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a proof against the root it carries."""
        return proof.is_valid()

    @staticmethod
    def verify_against_root(proof: MerkleProof, expected_root: bytes) -> bool:
        """
        Verify a proof and that its root is the one the caller trusts.

        A proof that is internally consistent but attests to a different
        (e.g. older) root fails here.
        """
        return proof.root == expected_root and proof.is_valid()

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        witness: list[Witness],
        root: bytes,
        hashable: type[Hashable],
    ) -> bool:
        """Verify raw components without building a MerkleProof."""
        return fold_witness(leaf, witness, hashable.compose_hash) == root


__all__ = [
    "fold_witness",
    "MerkleProof",
    "MerkleVerifier",
]
