"""
Module 08 - API Request Models

Pydantic models for API request validation.
"""

from pydantic import BaseModel, Field, field_validator

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HASH_ALGORITHMS
from core.schemas.checkpoint import validate_hex_hash


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    leaf: str = Field(..., description="Leaf digest (0x-prefixed, 32 bytes)")
    siblings: list[str] = Field(
        default_factory=list,
        description="Sibling digests, bottom first",
    )
    root: str = Field(..., description="Expected root (0x-prefixed, 32 bytes)")
    hash_algorithm: str = Field(
        default=DEFAULT_HASH_ALGORITHM,
        description="keccak256 or sha256",
    )

    @field_validator("leaf", "root")
    @classmethod
    def _validate_digest(cls, v: str, info) -> str:
        return validate_hex_hash(v, info.field_name)

    @field_validator("siblings")
    @classmethod
    def _validate_siblings(cls, v: list[str]) -> list[str]:
        return [validate_hex_hash(s, f"siblings[{i}]") for i, s in enumerate(v)]

    @field_validator("hash_algorithm")
    @classmethod
    def _validate_algorithm(cls, v: str) -> str:
        if v not in HASH_ALGORITHMS:
            raise ValueError(f"Unknown hash algorithm: {v!r}")
        return v
