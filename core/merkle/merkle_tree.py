"""
Sparse Merkle Tree Implementation
Fixed-height sparse Merkle tree with incremental leaf updates and
inclusion witnesses.

This module provides:
- SparseNodeStore: per-level storage of explicitly written nodes only
- build_zero_hashes: per-level hashes of an all-empty subtree
- MerkleTree: construction, leaf updates, lookups, witnesses and proofs

Tree Layout (Hard Contracts):
1. height in [MIN_HEIGHT, MAX_HEIGHT]; level 0 holds leaves, level
   height-1 holds the single root node
2. leaf_count = 2 ** (height - 1)
3. An unwritten node at (level, index) equals zeroes[level], where
   zeroes[0] = hash(zero leaf) and zeroes[i] = compose(zeroes[i-1], zeroes[i-1])
4. Every stored node equals compose(left child, right child), children
   resolved stored-or-zero. set_leaf keeps this true along one root path.

Concurrency:
- A tree is owned by a single caller. Concurrent writers must serialize
  access externally; interleaved set_leaf calls share ancestor nodes.
"""
from __future__ import annotations

import logging
from typing import Generic, Iterator, Sequence, TypeVar

from core.merkle.hashable import Hashable, Witness
from core.merkle.merkle_proofs import MerkleProof, fold_witness
from core.schemas.errors import LeafIndexException, TreeHeightException


logger = logging.getLogger(__name__)

MIN_HEIGHT = 8
MAX_HEIGHT = 128

V = TypeVar("V", bound=Hashable)


class SparseNodeStore:
    """
    Sparse (level, index) -> hash mapping.

    Only written nodes are kept. Lookups of absent nodes return the
    caller-supplied default, which lets a tree of 2**127 leaves cost
    memory proportional to the leaves actually set.
    """

    def __init__(self) -> None:
        self._levels: dict[int, dict[int, bytes]] = {}

    def get(self, level: int, index: int, default: bytes) -> bytes:
        level_nodes = self._levels.get(level)
        if level_nodes is None:
            return default
        return level_nodes.get(index, default)

    def set(self, level: int, index: int, value: bytes) -> None:
        self._levels.setdefault(level, {})[index] = value

    def contains(self, level: int, index: int) -> bool:
        level_nodes = self._levels.get(level)
        return level_nodes is not None and index in level_nodes

    def level_size(self, level: int) -> int:
        return len(self._levels.get(level, {}))

    def items(self) -> Iterator[tuple[int, int, bytes]]:
        """Iterate stored nodes as (level, index, hash), lowest level first."""
        for level in sorted(self._levels):
            for index, value in sorted(self._levels[level].items()):
                yield level, index, value

    def __len__(self) -> int:
        return sum(len(nodes) for nodes in self._levels.values())


def build_zero_hashes(hashable: type[Hashable], height: int) -> list[bytes]:
    """
    Compute the hash of an all-empty subtree rooted at each level.

    Uses exactly height - 1 compose_hash calls.
    """
    zeroes = [hashable.zero().hash()]
    for _ in range(1, height):
        previous = zeroes[-1]
        zeroes.append(hashable.compose_hash(previous, previous))
    return zeroes


class MerkleTree(Generic[V]):
    """
    Fixed-height sparse Merkle tree over a pluggable leaf type.

    Example:
        >>> tree = MerkleTree(8, HashableString)
        >>> tree.set_leaf(0, HashableString("0"))
        >>> proof = tree.get_merkle_proof(0)
        >>> len(proof.witness)
        7
        >>> proof.is_valid()
        True

    Raises:
        TreeHeightException: If height is outside [MIN_HEIGHT, MAX_HEIGHT]
    """

    def __init__(self, height: int, hashable: type[V]) -> None:
        if not MIN_HEIGHT <= height <= MAX_HEIGHT:
            raise TreeHeightException(height, MIN_HEIGHT, MAX_HEIGHT)

        self._height = height
        self._hashable = hashable
        self._zeroes = build_zero_hashes(hashable, height)
        self._nodes = SparseNodeStore()

        logger.debug(
            "Created merkle tree height=%d scheme=%s", height, hashable.scheme or hashable.__name__
        )

    @property
    def height(self) -> int:
        return self._height

    @property
    def hashable(self) -> type[V]:
        return self._hashable

    @property
    def zeroes(self) -> tuple[bytes, ...]:
        return tuple(self._zeroes)

    @property
    def stored_node_count(self) -> int:
        return len(self._nodes)

    def leaf_count(self) -> int:
        """Maximum number of leaves: 2 ** (height - 1)."""
        return 1 << (self._height - 1)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_node(self, level: int, index: int) -> bytes:
        """
        Return the node at (level, index), or zeroes[level] if never written.

        Any index resolves; level must be below height.
        """
        return self._nodes.get(level, index, self._zeroes[level])

    def get_leaf(self, index: int) -> bytes:
        return self.get_node(0, index)

    def get_root(self) -> bytes:
        return self.get_node(self._height - 1, 0)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_leaf(self, index: int, leaf: V) -> None:
        """
        Hash ``leaf`` into position ``index`` and recompute its root path.

        The index is checked before anything is written, so a failed call
        leaves the tree untouched.

        Raises:
            LeafIndexException: If index is outside [0, leaf_count)
        """
        self._check_index(index, "set_leaf")

        compose = self._hashable.compose_hash
        current_index = index
        self._nodes.set(0, index, leaf.hash())
        for level in range(1, self._height):
            current_index //= 2
            left = self.get_node(level - 1, current_index * 2)
            right = self.get_node(level - 1, current_index * 2 + 1)
            self._nodes.set(level, current_index, compose(left, right))

        logger.debug("Set leaf %d, root=%s", index, self.get_root().hex())

    def set_leaves(self, leaves: Sequence[V], start: int = 0) -> None:
        """
        Write consecutive leaves starting at ``start``.

        The whole range is checked up front; nothing is written if any
        position would fall outside the tree.
        """
        if leaves:
            self._check_index(start, "set_leaves")
            self._check_index(start + len(leaves) - 1, "set_leaves")
        for offset, leaf in enumerate(leaves):
            self.set_leaf(start + offset, leaf)

    # -------------------------------------------------------------------------
    # Witnesses & proofs
    # -------------------------------------------------------------------------

    def get_witness(self, index: int) -> list[Witness]:
        """
        Collect the sibling path for the leaf at ``index``.

        At each level an even index takes its right neighbour as a LEFT
        witness (running hash on the left); an odd index takes its left
        neighbour as a RIGHT witness. Returns height - 1 elements, leaf
        level first.

        Raises:
            LeafIndexException: If index is outside [0, leaf_count)
        """
        self._check_index(index, "get_witness")

        witness: list[Witness] = []
        current_index = index
        for level in range(self._height - 1):
            if current_index % 2 == 0:
                witness.append(Witness.left(self.get_node(level, current_index + 1)))
            else:
                witness.append(Witness.right(self.get_node(level, current_index - 1)))
            current_index //= 2
        return witness

    def get_merkle_proof(self, index: int) -> MerkleProof:
        """
        Snapshot leaf, root and witness for ``index`` into a MerkleProof.

        The returned proof is bound to this tree's hash scheme and stays
        valid against this root even after later writes to the tree.

        Raises:
            LeafIndexException: If index is outside [0, leaf_count)
        """
        witness = self.get_witness(index)
        proof = MerkleProof(
            leaf=self.get_leaf(index),
            root=self.get_root(),
            witness=tuple(witness),
        )
        return proof.bind(self._hashable)

    def verify(self, index: int, witness: Sequence[Witness]) -> bool:
        """
        Check a witness for the leaf at ``index`` against the current root.

        Raises:
            LeafIndexException: If index is outside [0, leaf_count)
        """
        self._check_index(index, "verify")
        computed = fold_witness(self.get_leaf(index), witness, self._hashable.compose_hash)
        return computed == self.get_root()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_index(self, index: int, operation: str) -> None:
        leaf_count = self.leaf_count()
        if index < 0 or index >= leaf_count:
            raise LeafIndexException(index, leaf_count, operation=operation)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(height={self._height}, "
            f"hashable={self._hashable.__name__}, "
            f"stored_nodes={len(self._nodes)})"
        )


__all__ = [
    "MIN_HEIGHT",
    "MAX_HEIGHT",
    "SparseNodeStore",
    "build_zero_hashes",
    "MerkleTree",
]
