"""
CLI Prove Command

Build a sparse Merkle tree from the given leaves, extract the inclusion
proof for one index and save it as a proof artifact.

Usage:
    merkle prove --count 10 --index 3 --out proof.json
    merkle prove --leaves alice bob carol --index 1
    merkle prove --leaf-file leaves.txt --scheme canonical-sha256
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_hex
from core.merkle import CanonicalLeaf, Hashable, MerkleTree, get_hash_scheme
from core.schemas.errors import MerkleException
from orchestrator.artifacts.io import ProofArtifact, save_proof_artifact
from merkle_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class ProveSummary:
    """Summary of a prove run for CLI output."""
    scheme: str = ""
    height: int = 0
    index: int = 0
    leaf_count: int = 0
    root: str = ""
    leaf: str = ""
    witness_length: int = 0
    saved_to: str = ""
    sha256: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_leaf(hashable: type[Hashable], raw: str) -> Hashable:
    """
    Build a leaf of the given scheme from a command-line string.

    Canonical leaves are parsed as JSON; text that is not JSON is kept
    as a plain string value.
    """
    if issubclass(hashable, CanonicalLeaf):
        try:
            return hashable(json.loads(raw))
        except json.JSONDecodeError:
            return hashable(raw)
    return hashable(raw)


def read_leaves(args: Namespace, hashable: type[Hashable]) -> list[Hashable]:
    """Collect leaves from --leaves, --leaf-file or --count (in that order)."""
    if args.leaves:
        return [parse_leaf(hashable, raw) for raw in args.leaves]

    if args.leaf_file:
        path = Path(args.leaf_file)
        lines = path.read_text(encoding="utf-8").splitlines()
        return [parse_leaf(hashable, line) for line in lines if line.strip()]

    return [hashable(i) for i in range(args.count)]


def print_summary_human(summary: ProveSummary) -> None:
    """Print summary in human-readable format."""
    print(f"scheme: {summary.scheme}")
    print(f"height: {summary.height}")
    print(f"leaves: {summary.leaf_count}")
    print(f"index: {summary.index}")
    print(f"leaf: {summary.leaf}")
    print(f"root: {summary.root}")
    print(f"witness: {summary.witness_length} entries")
    print(f"saved_to: {summary.saved_to}")
    print(f"sha256: {summary.sha256}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()

    height = args.height if args.height is not None else config.height
    scheme = args.scheme or config.scheme
    out = args.out or config.proof_path
    if args.count is None:
        args.count = config.leaf_count

    try:
        hashable = get_hash_scheme(scheme)
        leaves = read_leaves(args, hashable)

        tree = MerkleTree(height, hashable)
        tree.set_leaves(leaves)
        proof = tree.get_merkle_proof(args.index)

        artifact = ProofArtifact(
            scheme=scheme,
            height=tree.height,
            index=args.index,
            proof=proof,
        )
        path, digest = save_proof_artifact(artifact, out)
    except MerkleException as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except OSError as e:
        print(f"Error reading leaves: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = ProveSummary(
        scheme=scheme,
        height=tree.height,
        index=args.index,
        leaf_count=len(leaves),
        root=to_hex(proof.root),
        leaf=to_hex(proof.leaf),
        witness_length=len(proof.witness),
        saved_to=str(path),
        sha256=digest,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    logger.info(f"Proved leaf {args.index} against root {summary.root}")
    return EXIT_SUCCESS
