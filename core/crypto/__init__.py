"""
Core cryptographic utilities.

Hash primitives used by the leaf capabilities and proof transport.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    hash_canonical,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_canonical",
    "hash_concat",
    "to_hex",
    "from_hex",
]
