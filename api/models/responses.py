"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "sparse-merkle-api"
    version: str = "v1"
    schemes: list[str] = Field(default_factory=list)


class ProveResponse(BaseModel):
    """Response for POST /prove endpoint."""

    ok: bool = Field(..., description="Whether the proof was produced")
    scheme: str = Field(..., description="Hash scheme used")
    height: int = Field(..., description="Tree height")
    index: int = Field(..., description="Proven leaf index")
    leaves_set: int = Field(..., description="Number of distinct leaf indices written")
    root: str = Field(..., description="Tree root (0x hex)")
    proof: dict[str, Any] = Field(..., description="Serialized MerkleProof")


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(..., description="Overall verification status")
    valid: bool = Field(..., description="Whether the witness folds the leaf to the root")
    root_ok: bool | None = Field(
        default=None,
        description="Whether the proof root matches expected_root (if given)",
    )
    scheme: str = Field(..., description="Hash scheme used for verification")
    root: str = Field(..., description="Root the proof commits to (0x hex)")
    checks: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
