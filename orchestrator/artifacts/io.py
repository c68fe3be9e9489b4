"""
Proof Artifact IO
File: io.py

Purpose: Save and load proof artifacts to/from disk.

An artifact wraps a serialized MerkleProof with the metadata a verifying
context needs to bind it: the hash scheme name, the tree height and the
proven index. The file body is canonical JSON, so saving a loaded
artifact reproduces the original bytes.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.merkle import MerkleProof, get_hash_scheme
from core.schemas.canonical import dumps_canonical, loads_canonical
from core.schemas.errors import ErrorCodes, MerkleException
from core.schemas.versioning import (
    SCHEMA_VERSION,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)


logger = logging.getLogger(__name__)

REQUIRED_KEYS = frozenset({"schema_version", "scheme", "height", "index", "proof"})


class ArtifactIOError(MerkleException):
    """Error during proof artifact IO."""

    default_code = ErrorCodes.ARTIFACT_IO_ERROR

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        code: str | None = None,
    ) -> None:
        details = {"path": str(path)} if path is not None else {}
        super().__init__(message, code=code or self.default_code, details=details)


class ArtifactFormatError(ArtifactIOError):
    """Artifact file exists but does not describe a proof artifact."""

    default_code = ErrorCodes.SCHEMA_VALIDATION_ERROR


def _require_int(data: dict[str, Any], key: str, path: str | Path | None) -> int:
    value = data[key]
    # bool is an int subclass but never a valid height or index
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArtifactFormatError(
            f"Proof artifact field '{key}' must be an integer, got {type(value).__name__}",
            path,
        )
    return value


@dataclass
class ProofArtifact:
    """Persisted proof plus the metadata needed to re-bind it."""
    scheme: str
    height: int
    index: int
    proof: MerkleProof
    schema_version: str = SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "scheme": self.scheme,
            "height": self.height,
            "index": self.index,
            "proof": self.proof,
        }

    def to_bytes(self) -> bytes:
        return dumps_canonical(self.to_dict()).encode("utf-8")

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        path: str | Path | None = None,
    ) -> "ProofArtifact":
        """
        Rebuild an artifact, binding its proof to the named hash scheme.

        Raises:
            ArtifactFormatError: If keys are missing, a field has the wrong
                type or the version is unsupported
            HashSchemeException: If the scheme is not registered
            ProofDecodeException: If the embedded proof is malformed
        """
        if not isinstance(data, dict):
            raise ArtifactFormatError("Proof artifact must be a JSON object", path)
        missing = REQUIRED_KEYS - set(data)
        if missing:
            raise ArtifactFormatError(f"Proof artifact missing keys: {sorted(missing)}", path)

        version = data["schema_version"]
        try:
            assert_supported_schema_version(version)
        except (UnsupportedSchemaVersionError, TypeError) as e:
            raise ArtifactFormatError(
                f"Unsupported proof artifact version: {version!r}",
                path,
                code=ErrorCodes.UNSUPPORTED_VERSION,
            ) from e

        scheme = data["scheme"]
        if not isinstance(scheme, str):
            raise ArtifactFormatError(
                f"Proof artifact field 'scheme' must be a string, got {type(scheme).__name__}",
                path,
            )
        height = _require_int(data, "height", path)
        index = _require_int(data, "index", path)

        hashable = get_hash_scheme(scheme)
        proof = MerkleProof.from_dict(data["proof"], hashable)
        return cls(
            scheme=scheme,
            height=height,
            index=index,
            proof=proof,
            schema_version=version,
        )


def compute_sha256(data: bytes) -> str:
    """Compute SHA-256 hex digest of data."""
    return hashlib.sha256(data).hexdigest()


def save_proof_artifact(artifact: ProofArtifact, path: str | Path) -> tuple[Path, str]:
    """
    Write an artifact as canonical JSON.

    Returns:
        (path, sha256 hex of the written bytes)
    """
    path = Path(path)
    data = artifact.to_bytes()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ArtifactIOError(f"Failed to write proof artifact: {e}", path) from e

    digest = compute_sha256(data)
    logger.info(f"Saved proof artifact to {path} (sha256={digest}, {len(data)} bytes)")
    return path, digest


def load_proof_artifact(path: str | Path) -> tuple[ProofArtifact, str]:
    """
    Read an artifact written by save_proof_artifact.

    Returns:
        (artifact with bound proof, sha256 hex of the file bytes)

    Raises:
        ArtifactIOError: If the file is missing or unreadable
        ArtifactFormatError: If the file is not a proof artifact
    """
    path = Path(path)
    if not path.exists():
        raise ArtifactIOError(f"Proof artifact not found: {path}", path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ArtifactIOError(f"Failed to read proof artifact: {e}", path) from e

    try:
        parsed = loads_canonical(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise ArtifactFormatError(f"Proof artifact is not valid JSON: {e}", path) from e

    artifact = ProofArtifact.from_dict(parsed, path)
    return artifact, compute_sha256(data)
