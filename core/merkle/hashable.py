"""
Merkle Capability Contracts
Pluggable leaf hashing and witness elements for the sparse Merkle tree.

This module provides:
- Hashable: the capability a leaf type implements so the tree can reduce it
  to a hash value and compose two hash values into a parent
- WitnessSide / Witness: a sibling hash tagged with the side the running
  hash takes when composing with it

Composition Rules (Hard Contracts):
1. zero() returns the canonical empty leaf; zero().hash() seeds the
   per-level defaults of an empty tree
2. hash() is deterministic and side-effect free
3. compose_hash(left, right) is deterministic and ordered: swapping the
   operands must change the result, otherwise witness tags carry no meaning
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from core.crypto.hashing import from_hex, to_hex


ComposeFn = Callable[[bytes, bytes], bytes]


class Hashable(ABC):
    """
    Capability implemented by any leaf value stored in a MerkleTree.

    Subclasses set ``scheme`` to a stable name so that proofs decoded in a
    verifying context can be bound back to the same composition rule.

    Example:
        >>> class Tagged(Hashable):
        ...     scheme = "tagged-sha256"
        ...     def __init__(self, tag: str) -> None:
        ...         self.tag = tag
        ...     @classmethod
        ...     def zero(cls) -> "Tagged":
        ...         return cls("")
        ...     def hash(self) -> bytes:
        ...         return sha256(self.tag.encode("utf-8"))
        ...     @staticmethod
        ...     def compose_hash(left: bytes, right: bytes) -> bytes:
        ...         return sha256(left + right)
    """

    scheme: ClassVar[str] = ""

    @classmethod
    @abstractmethod
    def zero(cls) -> "Hashable":
        """Return the canonical empty leaf."""

    @abstractmethod
    def hash(self) -> bytes:
        """Reduce this leaf value to its hash."""

    @staticmethod
    @abstractmethod
    def compose_hash(left: bytes, right: bytes) -> bytes:
        """Combine two child hashes into their parent hash."""


class WitnessSide(str, Enum):
    """Side the running hash takes when composed with the sibling."""

    LEFT = "left"
    RIGHT = "right"


def coerce_hash(value: Any) -> Any:
    """Accept 0x-prefixed hex strings wherever a hash value is expected."""
    if isinstance(value, str):
        return from_hex(value)
    return value


class Witness(BaseModel):
    """
    A single witness element: a sibling hash plus its orientation.

    LEFT(sibling)  -> parent = compose_hash(current, sibling)
    RIGHT(sibling) -> parent = compose_hash(sibling, current)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    side: WitnessSide = Field(..., description="Side of the running hash")
    sibling: bytes = Field(..., description="Sibling node hash")

    @field_validator("sibling", mode="before")
    @classmethod
    def _decode_sibling(cls, value: Any) -> Any:
        return coerce_hash(value)

    @field_serializer("sibling", when_used="json")
    def _encode_sibling(self, value: bytes) -> str:
        return to_hex(value)

    @classmethod
    def left(cls, sibling: bytes) -> "Witness":
        return cls(side=WitnessSide.LEFT, sibling=sibling)

    @classmethod
    def right(cls, sibling: bytes) -> "Witness":
        return cls(side=WitnessSide.RIGHT, sibling=sibling)

    @property
    def is_left(self) -> bool:
        return self.side is WitnessSide.LEFT

    def apply(self, current: bytes, compose_hash: ComposeFn) -> bytes:
        """Compose the running hash with this sibling, honoring the side."""
        if self.side is WitnessSide.LEFT:
            return compose_hash(current, self.sibling)
        return compose_hash(self.sibling, current)

    def flipped(self) -> "Witness":
        """Same sibling with the opposite orientation."""
        side = WitnessSide.RIGHT if self.is_left else WitnessSide.LEFT
        return Witness(side=side, sibling=self.sibling)


__all__ = [
    "ComposeFn",
    "Hashable",
    "WitnessSide",
    "Witness",
    "coerce_hash",
]
