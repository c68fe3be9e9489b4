"""
Sparse Merkle Tree and Proofs
Fixed-height sparse Merkle tree with pluggable leaf hashing, incremental
updates, inclusion witnesses and standalone proof validation.

This package provides:
- Hashable: leaf capability (zero / hash / compose_hash)
- Witness, WitnessSide: orientation-tagged sibling hashes
- MerkleTree: sparse tree of height 8..128
- MerkleProof: self-contained {leaf, root, witness}, canonical JSON transport
- HashableString, CanonicalLeaf: built-in sha256 schemes + registry

Usage:
    from core.merkle import MerkleTree, HashableString, MerkleProof

    tree = MerkleTree(128, HashableString)
    for i in range(10):
        tree.set_leaf(i, HashableString(i))

    proof = tree.get_merkle_proof(0)
    blob = proof.to_bytes()

    # elsewhere, without the tree
    assert MerkleProof.from_bytes(blob, HashableString).is_valid()
"""
from .hashable import (
    Hashable,
    Witness,
    WitnessSide,
)

from .merkle_proofs import (
    MerkleProof,
    MerkleVerifier,
    fold_witness,
)

from .merkle_tree import (
    MIN_HEIGHT,
    MAX_HEIGHT,
    MerkleTree,
    SparseNodeStore,
    build_zero_hashes,
)

from .schemes import (
    CanonicalLeaf,
    HashableString,
    get_hash_scheme,
    list_hash_schemes,
    register_hash_scheme,
)


__all__ = [
    # Capability
    "Hashable",
    "Witness",
    "WitnessSide",
    # Tree
    "MIN_HEIGHT",
    "MAX_HEIGHT",
    "MerkleTree",
    "SparseNodeStore",
    "build_zero_hashes",
    # Proofs
    "MerkleProof",
    "MerkleVerifier",
    "fold_witness",
    # Schemes
    "HashableString",
    "CanonicalLeaf",
    "get_hash_scheme",
    "list_hash_schemes",
    "register_hash_scheme",
]
