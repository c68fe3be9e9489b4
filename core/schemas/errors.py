"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the sparse Merkle tree and its proof
transport. Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Proof validation failure is NOT an error: MerkleProof.is_valid() returns
False. The exceptions here cover programming-contract violations only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Schema & Serialization Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    PROOF_DECODE_ERROR = "PROOF_DECODE_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Tree Contract Errors
    INVALID_TREE_HEIGHT = "INVALID_TREE_HEIGHT"
    LEAF_INDEX_OUT_OF_RANGE = "LEAF_INDEX_OUT_OF_RANGE"
    UNKNOWN_HASH_SCHEME = "UNKNOWN_HASH_SCHEME"

    # Artifact Persistence
    ARTIFACT_IO_ERROR = "ARTIFACT_IO_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the CLI JSON output and the HTTP API to report failures
    without leaking exception objects.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.LEAF_INDEX_OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle tree errors.

    Carries structured error information and can be converted to
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TreeHeightException(MerkleException, ValueError):
    """Raised when a tree is constructed with an unsupported height."""

    def __init__(
        self,
        height: int,
        min_height: int,
        max_height: int,
    ) -> None:
        super().__init__(
            message=(
                f"Invalid height {height} for merkle tree, "
                f"supported range is {min_height}-{max_height}"
            ),
            code=ErrorCodes.INVALID_TREE_HEIGHT,
            details={"height": height, "min": min_height, "max": max_height},
        )
        self.height = height


class LeafIndexException(MerkleException, IndexError):
    """Raised when a leaf index falls outside [0, leaf_count)."""

    def __init__(
        self,
        index: int,
        leaf_count: int,
        operation: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"index": index, "leaf_count": leaf_count}
        if operation:
            details["operation"] = operation
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.LEAF_INDEX_OUT_OF_RANGE,
            details=details,
        )
        self.index = index
        self.leaf_count = leaf_count


class HashSchemeException(MerkleException):
    """Raised when a hash scheme is unknown or a proof has none bound."""

    def __init__(
        self,
        message: str,
        scheme: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if scheme:
            full_details["scheme"] = scheme
        super().__init__(
            message=message,
            code=ErrorCodes.UNKNOWN_HASH_SCHEME,
            details=full_details,
        )


class ProofDecodeException(MerkleException):
    """Raised when a serialized proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_DECODE_ERROR,
            details=details,
        )


class CanonicalizationException(MerkleException):
    """Raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )
