"""
Proof Artifact IO

Provides functionality for saving and loading proof artifacts.
"""

from orchestrator.artifacts.io import (
    ArtifactFormatError,
    ArtifactIOError,
    ProofArtifact,
    compute_sha256,
    load_proof_artifact,
    save_proof_artifact,
)

__all__ = [
    "ArtifactFormatError",
    "ArtifactIOError",
    "ProofArtifact",
    "compute_sha256",
    "load_proof_artifact",
    "save_proof_artifact",
]
