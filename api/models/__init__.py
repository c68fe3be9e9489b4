"""API request and response models."""

from api.models.requests import ProveRequest, VerifyRequest
from api.models.responses import (
    HealthResponse,
    ProveResponse,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "ProveRequest",
    "VerifyRequest",
    "HealthResponse",
    "ProveResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
