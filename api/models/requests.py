"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class ProveRequest(BaseModel):
    """Request body for POST /prove endpoint."""

    height: int | None = Field(
        default=None,
        description="Tree height (8-128). Defaults to the server configuration",
    )
    scheme: str | None = Field(
        default=None,
        description="Hash scheme name. Defaults to the server configuration",
    )
    leaves: list[Any] = Field(
        default_factory=list,
        max_length=100_000,
        description="Leaf values placed at indices 0..N-1",
    )
    sparse_leaves: dict[int, Any] = Field(
        default_factory=dict,
        description="Leaf values keyed by explicit index; applied after `leaves`",
    )
    index: int = Field(
        default=0,
        ge=0,
        description="Leaf index to prove",
    )


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    proof: dict[str, Any] = Field(
        ...,
        description="Serialized MerkleProof: {leaf, root, witness}",
    )
    scheme: str | None = Field(
        default=None,
        description="Hash scheme the proof was built with",
    )
    expected_root: str | None = Field(
        default=None,
        description="Optional root (0x hex) the proof must commit to",
    )
    include_checks: bool = Field(
        default=False,
        description="Include detailed verification checks in response",
    )
