"""
Verify Route

Verify a serialized MerkleProof without access to the tree.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.errors import InvalidRequestError
from api.models.requests import VerifyRequest
from api.models.responses import VerifyResponse
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import from_hex, to_hex
from core.merkle import MerkleProof, MerkleVerifier, get_hash_scheme
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
async def verify_proof(
    request: VerifyRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> VerifyResponse:
    """
    Verify a proof.

    Performs:
    1. Witness fold: the leaf folds to the root carried in the proof
    2. Root match: the proof root equals expected_root (optional)

    An invalid proof is a normal 200 response with ``valid=false``;
    a malformed one is a 400.
    """
    scheme = request.scheme or config.tree.scheme
    hashable = get_hash_scheme(scheme)
    proof = MerkleProof.from_dict(request.proof, hashable)

    result = VerificationResult(ok=True)
    valid = proof.is_valid()
    result.add_check(CheckResult.from_outcome(
        "proof_valid",
        valid,
        "Witness folds the leaf to the proof root",
        "Witness does not fold the leaf to the proof root",
    ))

    root_ok = None
    if request.expected_root is not None:
        try:
            expected = from_hex(request.expected_root)
        except ValueError as e:
            raise InvalidRequestError(f"Invalid expected_root: {e}")
        root_ok = MerkleVerifier.verify_against_root(proof, expected)
        result.add_check(CheckResult.from_outcome(
            "root_match",
            root_ok,
            "Proof root matches expected root",
            "Proof root does not match expected root",
            {"expected": request.expected_root, "actual": to_hex(proof.root)},
        ))

    logger.info(f"Verified proof (scheme={scheme}, valid={valid}, root_ok={root_ok})")

    return VerifyResponse(
        ok=result.ok,
        valid=valid,
        root_ok=root_ok,
        scheme=scheme,
        root=to_hex(proof.root),
        checks=[
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ] if request.include_checks else [],
        errors=[c.message for c in result.get_failed_checks()],
    )
