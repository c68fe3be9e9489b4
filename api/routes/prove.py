"""
Prove Route

Build a sparse Merkle tree from request leaves and return the inclusion
proof for one index.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.errors import InvalidRequestError
from api.models.requests import ProveRequest
from api.models.responses import ProveResponse
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_hex
from core.merkle import CanonicalLeaf, Hashable, MerkleTree, get_hash_scheme


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


def build_leaf(hashable: type[Hashable], value: Any) -> Hashable:
    """
    Wrap a JSON value as a leaf of the given scheme.

    Canonical leaves accept any JSON value; other schemes take the value
    as their constructor argument and must be strings or integers.
    """
    if issubclass(hashable, CanonicalLeaf):
        return hashable(value)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidRequestError(
            f"Scheme '{hashable.scheme}' only accepts string or integer leaves",
            details={"type": type(value).__name__},
        )
    return hashable(value)


@router.post("/prove", response_model=ProveResponse)
async def prove(
    request: ProveRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> ProveResponse:
    """
    Build a tree and extract a MerkleProof.

    Tree and scheme errors (bad height, out-of-range index, unknown scheme)
    are returned as 400 responses with their error code.
    """
    height = request.height if request.height is not None else config.tree.height
    scheme = request.scheme or config.tree.scheme

    hashable = get_hash_scheme(scheme)
    tree = MerkleTree(height, hashable)

    tree.set_leaves([build_leaf(hashable, v) for v in request.leaves])
    for index, value in sorted(request.sparse_leaves.items()):
        tree.set_leaf(index, build_leaf(hashable, value))

    # indices present in both leaves and sparse_leaves count once
    leaves_set = len(set(range(len(request.leaves))) | set(request.sparse_leaves))

    proof = tree.get_merkle_proof(request.index)
    logger.info(f"Proved leaf {request.index} of {leaves_set} set leaves")

    return ProveResponse(
        ok=True,
        scheme=scheme,
        height=tree.height,
        index=request.index,
        leaves_set=leaves_set,
        root=to_hex(tree.get_root()),
        proof=proof.model_dump(mode="json"),
    )
