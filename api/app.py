"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, prove, verify
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    merkle_error_handler,
)
from core.schemas.errors import MerkleException


# Configure logging: respects MERKLE_LOG_LEVEL env var and merkle.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or merkle.json, defaulting to INFO."""
    raw = os.getenv("MERKLE_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "merkle.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Sparse Merkle Tree API",
        description="""
HTTP API for fixed-height sparse Merkle trees.

## Endpoints

- **POST /prove** - Build a tree from leaves and return an inclusion proof
- **POST /verify** - Verify a serialized proof without the tree
- **GET /health** - Health check

## Hash Schemes

- `string-sha256` - UTF-8 string leaves (default)
- `canonical-sha256` - Any JSON value, hashed as canonical JSON

Hashes are 32-byte values encoded as `0x`-prefixed lowercase hex.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MerkleException, merkle_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(prove.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
