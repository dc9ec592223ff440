"""API request and response models."""

from api.models.requests import VerifyRequest
from api.models.responses import (
    CheckpointListResponse,
    CheckpointSummary,
    DiffResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ProofResponse,
    VerifyResponse,
)

__all__ = [
    "VerifyRequest",
    "CheckpointListResponse",
    "CheckpointSummary",
    "DiffResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ProofResponse",
    "VerifyResponse",
]
