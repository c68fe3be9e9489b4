"""
Proof Pipeline

Deterministic, in-process driver around the sparse Merkle tree:

1. Build a tree of the configured height and hash scheme
2. Load leaves (default: leaf i is the scheme's leaf type built from i)
3. Extract a MerkleProof for the configured index
4. Serialize it and run the verifier program on the opaque blob
5. Persist the proof artifact, reload it and re-run the verifier
6. Compare the committed result with the expected outcome

Every step records a CheckResult; the run is ok only if all checks pass.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_hex
from core.merkle import Hashable, MerkleProof, MerkleTree, get_hash_scheme
from core.schemas.errors import MerkleException
from core.schemas.verification import CheckResult, VerificationResult

from orchestrator.artifacts.io import (
    ProofArtifact,
    load_proof_artifact,
    save_proof_artifact,
)
from orchestrator.verifier_program import VerifierOutput, run_verifier


logger = logging.getLogger(__name__)


# =============================================================================
# Run Result
# =============================================================================

@dataclass
class PipelineResult:
    """Complete result of a pipeline run."""
    ok: bool = False
    root: Optional[bytes] = None
    proof: Optional[MerkleProof] = None
    verifier_output: Optional[VerifierOutput] = None
    artifact_path: Optional[Path] = None
    artifact_sha256: Optional[str] = None
    verification: VerificationResult = field(
        default_factory=lambda: VerificationResult(ok=True)
    )
    timings_ms: dict[str, float] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def checks(self) -> list[CheckResult]:
        return self.verification.checks

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "root": to_hex(self.root) if self.root is not None else None,
            "valid": self.verifier_output.valid if self.verifier_output else None,
            "artifact_path": str(self.artifact_path) if self.artifact_path else None,
            "artifact_sha256": self.artifact_sha256,
            "timings_ms": self.timings_ms,
            "checks": [
                {"check_id": c.check_id, "ok": c.ok, "message": c.message}
                for c in self.checks
            ],
            "errors": self.errors,
        }


# =============================================================================
# Pipeline Class
# =============================================================================

class ProofPipeline:
    """
    Runs the build -> prove -> verify -> persist -> re-verify flow.

    Example:
        >>> result = ProofPipeline(RuntimeConfig()).run()
        >>> result.verifier_output.valid
        True
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        persist: bool = True,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.persist = persist

    def build_tree(self, leaves: Optional[Sequence[Hashable]] = None) -> MerkleTree:
        """Create the tree and load leaves starting at index 0."""
        hashable = get_hash_scheme(self.config.tree.scheme)
        tree = MerkleTree(self.config.tree.height, hashable)

        if leaves is None:
            leaves = [hashable(i) for i in range(self.config.driver.leaf_count)]

        tree.set_leaves(leaves)
        logger.info(
            f"Loaded {len(leaves)} leaves into tree of height {tree.height} "
            f"(root={to_hex(tree.get_root())})"
        )
        return tree

    def run(self, leaves: Optional[Sequence[Hashable]] = None) -> PipelineResult:
        """
        Execute the pipeline.

        Contract violations (bad height, out-of-range index, unknown scheme)
        are reported as errors on the result instead of propagating.
        """
        result = PipelineResult()
        driver = self.config.driver

        try:
            started = time.perf_counter()
            tree = self.build_tree(leaves)
            result.timings_ms["build"] = _elapsed_ms(started)

            started = time.perf_counter()
            proof = tree.get_merkle_proof(driver.proof_index)
            result.timings_ms["prove"] = _elapsed_ms(started)
            result.proof = proof
            result.root = tree.get_root()

            result.verification.add_check(CheckResult.from_outcome(
                "tree_verify",
                tree.verify(driver.proof_index, proof.witness),
                "Witness folds to the tree root",
                "Witness does not fold to the tree root",
                {"index": driver.proof_index},
            ))

            blob = proof.to_bytes()
            started = time.perf_counter()
            output = run_verifier(blob, tree.hashable)
            result.timings_ms["verify"] = _elapsed_ms(started)
            result.verifier_output = output
            logger.info(f"Verifier program took {result.timings_ms['verify']:.3f} ms")

            result.verification.add_check(CheckResult.from_outcome(
                "proof_valid",
                output.valid,
                "Verifier program accepted the proof",
                "Verifier program rejected the proof",
                output.to_dict(),
            ))

            if self.persist:
                self._persist_and_replay(tree, proof, output, result)

            result.verification.add_check(CheckResult.from_outcome(
                "expected_result",
                output.valid == driver.expected_valid,
                f"Committed result matches expected ({driver.expected_valid})",
                f"Committed result {output.valid} != expected {driver.expected_valid}",
            ))
        except MerkleException as e:
            logger.error(f"Proof pipeline failed: {e}")
            result.errors.append(str(e))
            result.verification.ok = False
            result.verification.error = e.to_error_model()

        result.ok = result.verification.ok and not result.errors
        if result.ok:
            logger.info("Successfully generated and verified proof")
        else:
            logger.warning("Proof pipeline finished with failures")
        return result

    def _persist_and_replay(
        self,
        tree: MerkleTree,
        proof: MerkleProof,
        output: VerifierOutput,
        result: PipelineResult,
    ) -> None:
        """Save the artifact, load it back and check the verifier replays identically."""
        driver = self.config.driver
        artifact = ProofArtifact(
            scheme=self.config.tree.scheme,
            height=tree.height,
            index=driver.proof_index,
            proof=proof,
        )
        path, digest = save_proof_artifact(artifact, driver.proof_path)
        result.artifact_path = path
        result.artifact_sha256 = digest

        loaded, loaded_digest = load_proof_artifact(path)
        replayed = run_verifier(loaded.proof.to_bytes(), loaded.proof.hashable)

        result.verification.add_check(CheckResult.from_outcome(
            "artifact_round_trip",
            loaded_digest == digest and replayed.commitment() == output.commitment(),
            "Reloaded artifact replays to the same commitment",
            "Reloaded artifact diverges from the original",
            {"sha256": digest, "reloaded_sha256": loaded_digest},
        ))


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def create_pipeline(
    height: int = 128,
    scheme: str = "string-sha256",
    leaf_count: int = 10,
    proof_index: int = 0,
    proof_path: str | Path = "merkle-proof.json",
    persist: bool = True,
) -> ProofPipeline:
    """Build a ProofPipeline from plain arguments."""
    config = RuntimeConfig.from_dict({
        "tree": {"height": height, "scheme": scheme},
        "driver": {
            "leaf_count": leaf_count,
            "proof_index": proof_index,
            "proof_path": str(proof_path),
        },
    })
    return ProofPipeline(config, persist=persist)
