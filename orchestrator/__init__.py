"""
Proof Driver (In-Process Orchestration)

Builds a tree, extracts a proof, runs the verifier program on the
serialized proof, persists the artifact and replays the verification.

Public API:
- ProofPipeline: Main driver class
- PipelineResult: Complete result of a driver run
- create_pipeline: Build a pipeline from plain arguments
- run_verifier / VerifierOutput: The verifying context
"""

from orchestrator.pipeline import (
    PipelineResult,
    ProofPipeline,
    create_pipeline,
)
from orchestrator.verifier_program import (
    VerifierOutput,
    run_verifier,
)


__all__ = [
    "PipelineResult",
    "ProofPipeline",
    "create_pipeline",
    "VerifierOutput",
    "run_verifier",
]
