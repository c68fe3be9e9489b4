"""
Verifier Program

The constrained verifying context: it receives an opaque proof blob, has no
access to the tree, validates the proof and commits the boolean result.

The output is a pure function of (blob, scheme). Running it twice on the
same input yields byte-identical commitments, which is what lets the
result be replayed and checked independently.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from core.merkle import Hashable, MerkleProof
from core.schemas.canonical import dumps_canonical
from orchestrator.artifacts.io import compute_sha256


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifierOutput:
    """Public values committed by the verifier program."""
    valid: bool
    proof_sha256: str
    scheme: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "proof_sha256": self.proof_sha256,
            "scheme": self.scheme,
        }

    def commitment(self) -> bytes:
        """Canonical encoding of the committed values."""
        return dumps_canonical(self.to_dict()).encode("utf-8")


def run_verifier(blob: bytes, hashable: type[Hashable]) -> VerifierOutput:
    """
    Decode a serialized MerkleProof and commit whether it is valid.

    Raises:
        ProofDecodeException: If blob is not a serialized proof
    """
    proof = MerkleProof.from_bytes(blob, hashable)
    valid = proof.is_valid()
    logger.debug(f"Verifier program committed valid={valid}")
    return VerifierOutput(
        valid=valid,
        proof_sha256=compute_sha256(blob),
        scheme=hashable.scheme,
    )
