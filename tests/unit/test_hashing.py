"""
Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- sha256 digest size and known values
- hash_canonical stability across dict key orderings
- hash_concat order sensitivity (parent composition)
- 0x hex encoding used by proofs on the wire
"""
import hashlib

import pytest

from core.crypto.hashing import (
    DIGEST_SIZE,
    from_hex,
    hash_canonical,
    hash_concat,
    sha256,
    to_hex,
)


class TestSha256:
    """Tests for sha256()."""

    def test_known_value(self):
        assert sha256(b"hello").hex() == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_digest_size(self):
        assert len(sha256(b"")) == DIGEST_SIZE == 32

    def test_empty_input_matches_hashlib(self):
        """The string scheme's zero leaf is sha256(b"")."""
        assert sha256(b"") == hashlib.sha256(b"").digest()


class TestHashCanonical:
    """Tests for hash_canonical()."""

    def test_key_order_ignored(self):
        assert hash_canonical({"z": 1, "a": 2}) == hash_canonical({"a": 2, "z": 1})

    def test_list_order_kept(self):
        assert hash_canonical([1, 2, 3]) != hash_canonical([3, 2, 1])

    def test_matches_manual_encoding(self):
        """leaf = sha256(dumps_canonical(obj).encode("utf-8"))."""
        assert hash_canonical({"b": [1, 2], "a": None}) == sha256(b'{"a":null,"b":[1,2]}')

    def test_bytes_hashed_as_hex(self):
        assert hash_canonical(b"\x01\x02") == sha256(b'"0x0102"')


class TestHashConcat:
    """Tests for hash_concat() parent composition."""

    def test_is_sha256_of_concatenation(self):
        left, right = sha256(b"left"), sha256(b"right")
        assert hash_concat(left, right) == sha256(left + right)

    def test_order_matters(self):
        a, b = sha256(b"a"), sha256(b"b")
        assert hash_concat(a, b) != hash_concat(b, a)

    def test_equal_children(self):
        """Zero-subtree hashes compose a node with itself."""
        z = sha256(b"")
        assert hash_concat(z, z) == sha256(z * 2)


class TestHexConversion:
    """Tests for to_hex() and from_hex()."""

    def test_to_hex_format(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_to_hex_lowercase(self):
        assert to_hex(b"\xab\xcd") == "0xabcd"

    def test_from_hex_empty(self):
        assert from_hex("0x") == b""

    def test_from_hex_accepts_uppercase_digits(self):
        assert from_hex("0xABCD") == b"\xab\xcd"

    def test_from_hex_missing_prefix(self):
        with pytest.raises(ValueError, match="must start with '0x'"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xgg")

    def test_digest_hex_length(self):
        """A 32-byte hash is 0x plus 64 hex characters."""
        hex_str = to_hex(sha256(b"leaf"))

        assert len(hex_str) == 2 + 64
        assert from_hex(hex_str) == sha256(b"leaf")
