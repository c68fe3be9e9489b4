"""
Merkle CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli prove [--count N | --leaves V ... | --leaf-file PATH] [--index I] [--out PATH]
    python -m merkle_cli verify <proof_path> [--root 0x...] [--json] [--debug]
    python -m merkle_cli run [--height H] [--leaf-count N] [--index I] [--out PATH] [--json]
    python -m merkle_cli schemes
    python -m merkle_cli config --init

Environment Variables:
    MERKLE_TREE_HEIGHT      Tree height, 8..128 (default: 128)
    MERKLE_HASH_SCHEME      Hash scheme name (default: string-sha256)
    MERKLE_LEAF_COUNT       Leaves loaded by `run` and `prove --count` (default: 10)
    MERKLE_PROOF_INDEX      Leaf index proven by `run` (default: 0)
    MERKLE_PROOF_PATH       Proof artifact path (default: merkle-proof.json)
    MERKLE_LOG_LEVEL        Log level (default: INFO)
    MERKLE_LOG_FILE         Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.merkle import get_hash_scheme, list_hash_schemes
from merkle_cli.commands import prove, run, verify
from merkle_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Sparse Merkle tree CLI - Build trees, extract proofs and verify them offline.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Build a tree and save the inclusion proof for one leaf",
        description="Load leaves into a sparse Merkle tree and write a proof artifact.",
    )
    leaves_group = prove_parser.add_mutually_exclusive_group()
    leaves_group.add_argument(
        "--leaves",
        nargs="+",
        default=None,
        help="Leaf values, placed at indices 0..N-1",
    )
    leaves_group.add_argument(
        "--leaf-file",
        type=str,
        default=None,
        help="File with one leaf value per line",
    )
    leaves_group.add_argument(
        "--count",
        type=int,
        default=None,
        help="Use leaves 0..N-1 (default: from config)",
    )
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        default=0,
        help="Leaf index to prove (default: 0)",
    )
    prove_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Tree height, 8..128 (default: from config)",
    )
    prove_parser.add_argument(
        "--scheme",
        type=str,
        default=None,
        help="Hash scheme name (default: from config)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the proof artifact (default: from config)",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof artifact offline",
        description="Validate a saved proof without access to the tree.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to proof artifact (JSON)",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected root hash (0x-prefixed hex)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- run command ---
    run_parser = subparsers.add_parser(
        "run",
        help="Run the full proof pipeline",
        description="Build, prove, verify, persist and replay in one step.",
    )
    run_parser.add_argument(
        "--from-yaml",
        type=str,
        default=None,
        help="Load runtime configuration from a YAML file",
    )
    run_parser.add_argument("--height", type=int, default=None, help="Tree height, 8..128")
    run_parser.add_argument("--scheme", type=str, default=None, help="Hash scheme name")
    run_parser.add_argument("--leaf-count", type=int, default=None, help="Number of leaves to load")
    run_parser.add_argument("--index", "-i", type=int, default=None, help="Leaf index to prove")
    run_parser.add_argument("--out", "-o", type=str, default=None, help="Output path for the proof artifact")
    run_parser.add_argument(
        "--no-persist",
        action="store_true",
        default=False,
        help="Skip writing and replaying the proof artifact",
    )
    run_parser.add_argument(
        "--expect-invalid",
        action="store_true",
        default=False,
        help="Expect the verifier to reject the proof",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks in output",
    )
    run_parser.set_defaults(func=run.run_cmd)

    # --- schemes command ---
    schemes_parser = subparsers.add_parser(
        "schemes",
        help="List registered hash schemes",
        description="Show all registered hash schemes and their leaf types.",
    )
    schemes_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    schemes_parser.set_defaults(func=schemes_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = load_config(Path(args.path) if args.path else None)
        config_dict = {
            "height": config.height,
            "scheme": config.scheme,
            "leaf_count": config.leaf_count,
            "proof_index": config.proof_index,
            "proof_path": config.proof_path,
            "log_level": config.log_level,
            "log_file": config.log_file,
            "default_output_format": config.default_output_format,
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def schemes_cmd(args: argparse.Namespace) -> int:
    """Handle schemes command."""
    names = list_hash_schemes()

    if args.json:
        data = [
            {"scheme": name, "leaf_type": get_hash_scheme(name).__name__}
            for name in names
        ]
        print(json.dumps(data, indent=2))
        return EXIT_SUCCESS

    if not names:
        print("No hash schemes registered")
        return EXIT_SUCCESS

    for name in names:
        print(f"  - {name} ({get_hash_scheme(name).__name__})")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    # Commands without --json fall back to the configured output format
    if hasattr(args, "json") and not args.json:
        args.json = config.default_output_format == "json"

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if hasattr(args, "debug") and args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
