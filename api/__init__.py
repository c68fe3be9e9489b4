"""
Sparse Merkle Tree API (FastAPI)

HTTP API for building inclusion proofs and verifying them offline:
- POST /prove - Build a tree from leaves and return a proof
- POST /verify - Verify a serialized proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
