"""
CLI command modules.
"""

from merkle_cli.commands import prove, run, verify

__all__ = ["prove", "run", "verify"]
