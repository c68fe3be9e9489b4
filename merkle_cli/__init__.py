"""
Merkle CLI

Command-line interface for the sparse Merkle tree.

Usage:
    python -m merkle_cli prove --count 10 --index 3 --out proof.json
    python -m merkle_cli verify proof.json --root 0x...
    python -m merkle_cli run --height 16 --leaf-count 100
    python -m merkle_cli schemes
"""

__version__ = "0.1.0"
