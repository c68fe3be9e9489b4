"""
CLI Verify Command

Verify a saved proof artifact offline:
- Load the artifact and bind it to its hash scheme
- Run the verifier program on the serialized proof
- Optionally check the proof root against an expected root

Usage:
    merkle verify proof.json [--root 0x...] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, to_hex
from core.merkle import MerkleVerifier
from core.schemas.errors import MerkleException
from core.schemas.verification import CheckResult, VerificationResult
from orchestrator.artifacts.io import ArtifactIOError, ProofArtifact, load_proof_artifact
from orchestrator.verifier_program import run_verifier


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    scheme: str = ""
    height: int = 0
    index: int = 0
    root: str = ""
    sha256: str = ""
    valid: bool = False
    root_ok: bool | None = None
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.root_ok is None:
            del d["root_ok"]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def all_ok(self) -> bool:
        """Check if all verifications passed."""
        if not self.valid:
            return False
        if self.root_ok is not None and not self.root_ok:
            return False
        return True


def verify_artifact(
    artifact: ProofArtifact,
    expected_root: bytes | None = None,
) -> VerificationResult:
    """Run the verifier program and the optional root comparison."""
    result = VerificationResult(ok=True)

    output = run_verifier(artifact.proof.to_bytes(), artifact.proof.hashable)
    result.add_check(CheckResult.from_outcome(
        "proof_valid",
        output.valid,
        "Witness folds the leaf to the proof root",
        "Witness does not fold the leaf to the proof root",
        output.to_dict(),
    ))

    if expected_root is not None:
        result.add_check(CheckResult.from_outcome(
            "root_match",
            MerkleVerifier.verify_against_root(artifact.proof, expected_root),
            "Proof root matches expected root",
            f"Proof root does not match expected root {to_hex(expected_root)}",
            {"expected": to_hex(expected_root), "actual": to_hex(artifact.proof.root)},
        ))

    return result


def build_summary(
    proof_path: str,
    artifact: ProofArtifact,
    digest: str,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from verification results."""
    summary = VerifySummary(
        proof_path=proof_path,
        scheme=artifact.scheme,
        height=artifact.height,
        index=artifact.index,
        root=to_hex(artifact.proof.root),
        sha256=digest,
    )

    proof_check = result.get_check("proof_valid")
    summary.valid = proof_check is not None and proof_check.ok

    root_check = result.get_check("root_match")
    if root_check is not None:
        summary.root_ok = root_check.ok

    for check in result.get_failed_checks():
        summary.errors.append(check.message)

    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ]

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"scheme: {summary.scheme}")
    print(f"height: {summary.height}")
    print(f"index: {summary.index}")
    print(f"root: {summary.root}")
    print(f"sha256: {summary.sha256}")
    print(f"valid: {str(summary.valid).lower()}")
    if summary.root_ok is not None:
        print(f"root_ok: {str(summary.root_ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof_path = Path(args.proof_path)
    debug = args.debug

    expected_root = None
    if args.root:
        try:
            expected_root = from_hex(args.root)
        except ValueError as e:
            print(f"Error: invalid --root: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    try:
        artifact, digest = load_proof_artifact(proof_path)
    except ArtifactIOError as e:
        print(f"Error loading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleException as e:
        if debug:
            raise
        print(f"Error decoding proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = verify_artifact(artifact, expected_root)
    summary = build_summary(str(proof_path), artifact, digest, result, debug=debug)

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
