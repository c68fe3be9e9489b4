"""
Hash Schemes
Concrete Hashable leaf types and the registry that names them.

A serialized MerkleProof carries only hash values. The verifying side picks
the composition rule by scheme name, the same way the proving side chose
the leaf type when it built the tree.

Registered schemes:
- "string-sha256":    HashableString, leaf = sha256(utf8(value))
- "canonical-sha256": CanonicalLeaf,  leaf = sha256(dumps_canonical(obj))

Both compose parents as sha256(left + right).
"""
from __future__ import annotations

from typing import Any, TypeVar

from core.crypto.hashing import hash_canonical, hash_concat, sha256
from core.merkle.hashable import Hashable
from core.schemas.errors import HashSchemeException


H = TypeVar("H", bound=type[Hashable])

_HASH_SCHEMES: dict[str, type[Hashable]] = {}


def register_hash_scheme(hashable: H) -> H:
    """Register a Hashable class under its ``scheme`` name (decorator)."""
    name = hashable.scheme
    if not name:
        raise HashSchemeException(
            f"{hashable.__name__} does not declare a scheme name"
        )
    existing = _HASH_SCHEMES.get(name)
    if existing is not None and existing is not hashable:
        raise HashSchemeException(
            f"Hash scheme '{name}' is already registered to {existing.__name__}",
            scheme=name,
        )
    _HASH_SCHEMES[name] = hashable
    return hashable


def get_hash_scheme(name: str) -> type[Hashable]:
    """
    Look up a registered Hashable class by scheme name.

    Raises:
        HashSchemeException: If no scheme is registered under ``name``
    """
    if not isinstance(name, str):
        raise HashSchemeException(
            f"Hash scheme name must be a string, got {type(name).__name__}",
            details={"available": sorted(_HASH_SCHEMES)},
        )
    try:
        return _HASH_SCHEMES[name]
    except KeyError:
        raise HashSchemeException(
            f"Unknown hash scheme '{name}'",
            scheme=name,
            details={"available": sorted(_HASH_SCHEMES)},
        ) from None


def list_hash_schemes() -> list[str]:
    return sorted(_HASH_SCHEMES)


@register_hash_scheme
class HashableString(Hashable):
    """
    UTF-8 string leaf.

    Integers are accepted and stored as their decimal string, so
    ``HashableString(7)`` and ``HashableString("7")`` hash identically.
    """

    scheme = "string-sha256"

    __slots__ = ("value",)

    def __init__(self, value: str | int = "") -> None:
        self.value = str(value)

    @classmethod
    def zero(cls) -> "HashableString":
        return cls("")

    def hash(self) -> bytes:
        return sha256(self.value.encode("utf-8"))

    @staticmethod
    def compose_hash(left: bytes, right: bytes) -> bytes:
        return hash_concat(left, right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashableString):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((HashableString, self.value))

    def __repr__(self) -> str:
        return f"HashableString({self.value!r})"


@register_hash_scheme
class CanonicalLeaf(Hashable):
    """
    Structured leaf: any dict, list, primitive or Pydantic model.

    The leaf hash is taken over canonical JSON, so key order and
    whitespace never affect it. The zero leaf wraps ``None`` (JSON null).
    """

    scheme = "canonical-sha256"

    __slots__ = ("obj",)

    def __init__(self, obj: Any = None) -> None:
        self.obj = obj

    @classmethod
    def zero(cls) -> "CanonicalLeaf":
        return cls(None)

    def hash(self) -> bytes:
        return hash_canonical(self.obj)

    @staticmethod
    def compose_hash(left: bytes, right: bytes) -> bytes:
        return hash_concat(left, right)

    def __repr__(self) -> str:
        return f"CanonicalLeaf({self.obj!r})"


__all__ = [
    "register_hash_scheme",
    "get_hash_scheme",
    "list_hash_schemes",
    "HashableString",
    "CanonicalLeaf",
]
