"""
CLI Run Command

Execute the full proof pipeline: build, prove, verify, persist, replay.

Usage:
    merkle run
    merkle run --height 16 --leaf-count 100 --index 42 --out proof.json
    merkle run --from-yaml merkle.yaml --json
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from core.config import RuntimeConfig
from merkle_cli.config import CLIConfig
from orchestrator.pipeline import PipelineResult, ProofPipeline


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class RunSummary:
    """Summary of a pipeline run for CLI output."""
    scheme: str = ""
    height: int = 0
    index: int = 0
    root: str = ""
    valid: bool | None = None
    saved_to: str | None = None
    sha256: str | None = None
    ok: bool = True
    timings_ms: dict[str, float] = field(default_factory=dict)
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["saved_to"]:
            del d["saved_to"]
            del d["sha256"]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def build_runtime_config(args: Namespace, config: CLIConfig) -> RuntimeConfig:
    """
    Merge CLI config and command-line flags into a RuntimeConfig.

    A YAML file given with --from-yaml replaces the CLI config defaults;
    explicit flags always win.
    """
    if args.from_yaml:
        runtime = RuntimeConfig.from_yaml(args.from_yaml).with_env_overrides()
    else:
        runtime = RuntimeConfig.from_dict({
            "tree": {"height": config.height, "scheme": config.scheme},
            "driver": {
                "leaf_count": config.leaf_count,
                "proof_index": config.proof_index,
                "proof_path": config.proof_path,
            },
            "log_level": config.log_level,
        })

    if args.height is not None:
        runtime.tree.height = args.height
    if args.scheme:
        runtime.tree.scheme = args.scheme
    if args.leaf_count is not None:
        runtime.driver.leaf_count = args.leaf_count
    if args.index is not None:
        runtime.driver.proof_index = args.index
    if args.out:
        runtime.driver.proof_path = args.out
    if args.expect_invalid:
        runtime.driver.expected_valid = False

    return runtime


def build_summary(runtime: RuntimeConfig, result: PipelineResult, debug: bool = False) -> RunSummary:
    data = result.to_dict()
    summary = RunSummary(
        scheme=runtime.tree.scheme,
        height=runtime.tree.height,
        index=runtime.driver.proof_index,
        root=data["root"] or "",
        valid=data["valid"],
        saved_to=data["artifact_path"],
        sha256=data["artifact_sha256"],
        ok=result.ok,
        timings_ms=result.timings_ms,
        errors=list(result.errors),
    )
    for check in result.verification.get_failed_checks():
        summary.errors.append(check.message)
    if debug:
        summary.checks = data["checks"]
    return summary


def print_summary_human(summary: RunSummary) -> None:
    """Print summary in human-readable format."""
    print(f"scheme: {summary.scheme}")
    print(f"height: {summary.height}")
    print(f"index: {summary.index}")
    print(f"root: {summary.root}")
    if summary.valid is not None:
        print(f"valid: {str(summary.valid).lower()}")
    if summary.saved_to:
        print(f"saved_to: {summary.saved_to}")
        print(f"sha256: {summary.sha256}")
    for step, ms in summary.timings_ms.items():
        print(f"{step}_ms: {ms:.3f}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")

    if summary.checks:
        print("\nchecks:")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def run_cmd(args: Namespace) -> int:
    """
    Execute the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the pipeline ran but a check failed)
    """
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()
    runtime = build_runtime_config(args, config)

    pipeline = ProofPipeline(runtime, persist=not args.no_persist)
    result = pipeline.run()
    summary = build_summary(runtime, result, debug=args.debug)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if result.ok:
        return EXIT_SUCCESS
    if result.verification.error is not None:
        return EXIT_RUNTIME_ERROR
    return EXIT_VERIFICATION_FAILED
