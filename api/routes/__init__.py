"""API route handlers."""

from api.routes import health, prove, verify

__all__ = ["health", "prove", "verify"]
