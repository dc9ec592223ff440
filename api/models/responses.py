"""
Module 08 - API Response Models

Pydantic models for API response serialization.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from core.schemas.checkpoint import AnchorReference, CheckpointRecord, DiffResult


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "memory-anchor-api"
    version: str = "v1"


class CheckpointSummary(BaseModel):
    """One row of the checkpoint listing."""

    checkpoint_id: int
    root: str
    timestamp: datetime
    hash_algorithm: str
    leaf_count: int
    total_bytes: int
    anchor: Optional[AnchorReference] = None

    @classmethod
    def from_record(cls, record: CheckpointRecord) -> "CheckpointSummary":
        return cls(
            checkpoint_id=record.checkpoint_id,
            root=record.root,
            timestamp=record.timestamp,
            hash_algorithm=record.hash_algorithm,
            leaf_count=record.metadata.leaf_count,
            total_bytes=record.metadata.total_bytes,
            anchor=record.anchor,
        )


class CheckpointListResponse(BaseModel):
    """Response for GET /checkpoints endpoint."""

    count: int = Field(..., description="Number of stored checkpoints")
    checkpoints: list[CheckpointSummary] = Field(default_factory=list)


class ProofResponse(BaseModel):
    """Response for GET /checkpoints/{id}/proof endpoint."""

    checkpoint_id: int
    path: str = Field(..., description="Leaf path as stored in the checkpoint")
    index: int = Field(..., description="Leaf position")
    leaf: str = Field(..., description="Leaf digest")
    proof: list[str] = Field(default_factory=list, description="Sibling digests, bottom first")
    root: str
    valid: bool = Field(..., description="Whether the proof recomputes the root")


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    valid: bool = Field(..., description="Whether the proof recomputes the root")
    leaf: str
    root: str
    hash_algorithm: str


class DiffResponse(BaseModel):
    """Response for GET /diff endpoint."""

    a: int = Field(..., description="Checkpoint id of the older side")
    b: int = Field(..., description="Checkpoint id of the newer side")
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    unchanged_count: int = 0

    @classmethod
    def from_result(cls, a: int, b: int, result: DiffResult) -> "DiffResponse":
        return cls(
            a=a,
            b=b,
            added=list(result.added),
            removed=list(result.removed),
            modified=list(result.modified),
            unchanged_count=result.unchanged_count,
        )


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
