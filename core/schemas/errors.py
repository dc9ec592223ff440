"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for checkpoint building, anchoring and
verification. Defines both Pydantic models for structured error
communication and Python exceptions for control flow.

A failed inclusion check is NOT an error: verifiers return False.
Exceptions are reserved for faults (unreadable leaves, bad indices,
unreachable stores, corrupt local records).
"""

from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from core.schemas.checkpoint import CheckpointRecord


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Leaf Source Errors
    LEAF_READ_ERROR = "LEAF_READ_ERROR"
    DUPLICATE_LEAF_PATH = "DUPLICATE_LEAF_PATH"

    # Merkle & Commitment Errors
    PROOF_INDEX_OUT_OF_RANGE = "PROOF_INDEX_OUT_OF_RANGE"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Authoritative Store Errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_REJECTED = "STORE_REJECTED"
    ANCHOR_NOT_FOUND = "ANCHOR_NOT_FOUND"

    # Local Checkpoint Store Errors
    CHECKPOINT_STORE_ERROR = "CHECKPOINT_STORE_ERROR"
    CHECKPOINT_NOT_FOUND = "CHECKPOINT_NOT_FOUND"
    CHECKPOINT_HASH_MISMATCH = "CHECKPOINT_HASH_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AnchorError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the HTTP API and the CLI's JSON output so callers get a stable
    code instead of parsing messages.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.LEAF_READ_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AnchorException":
        """Convert this error model to a raised exception."""
        return AnchorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AnchorException(Exception):
    """
    Base exception for all memory-anchor errors.

    Carries structured error information and can be converted to an
    AnchorError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "ANCHOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AnchorError:
        """Convert this exception to an AnchorError model."""
        return AnchorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(AnchorException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class LeafReadException(AnchorException):
    """
    Raised when leaf content cannot be captured during a build.

    Fatal for the whole checkpoint: a silently omitted leaf would change
    the root with no visible signal.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path is not None:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_READ_ERROR,
            details=full_details,
            retryable=False,
        )
        self.path = path


class DuplicateLeafPathException(AnchorException):
    """Raised when two leaves in one build share a logical path."""

    def __init__(self, path: str) -> None:
        super().__init__(
            message=f"Duplicate leaf path in checkpoint: {path}",
            code=ErrorCodes.DUPLICATE_LEAF_PATH,
            details={"path": path},
            retryable=False,
        )
        self.path = path


class ProofIndexOutOfRangeException(AnchorException, IndexError):
    """Raised when a proof is requested for a leaf index outside the tree."""

    def __init__(self, index: int, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.PROOF_INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
            retryable=False,
        )
        self.index = index
        self.leaf_count = leaf_count


class StoreUnavailableException(AnchorException):
    """
    Raised when the authoritative store cannot be reached.

    Retryable. When raised out of a retry loop, `attempts` holds the number
    of submissions that were tried and `record` the unanchored record that
    was being published. Pass that record back to CheckpointPipeline.commit()
    to resubmit the same root and metadata.
    """

    def __init__(
        self,
        message: str,
        attempts: int = 1,
        details: dict[str, Any] | None = None,
        record: Optional["CheckpointRecord"] = None,
    ) -> None:
        full_details = details or {}
        full_details["attempts"] = attempts
        super().__init__(
            message=message,
            code=ErrorCodes.STORE_UNAVAILABLE,
            details=full_details,
            retryable=True,
        )
        self.attempts = attempts
        self.record = record


class StoreRejectedException(AnchorException):
    """Raised when the authoritative store answers but refuses the request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.STORE_REJECTED,
            details=full_details,
            retryable=False,
        )


class AnchorNotFoundException(AnchorException):
    """Raised when a sequence reference is unknown to the authoritative store."""

    def __init__(self, sequence: int) -> None:
        super().__init__(
            message=f"No anchored checkpoint with sequence {sequence}",
            code=ErrorCodes.ANCHOR_NOT_FOUND,
            details={"sequence": sequence},
            retryable=False,
        )
        self.sequence = sequence


class CheckpointStoreException(AnchorException):
    """Raised on local checkpoint store IO or integrity problems."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.CHECKPOINT_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class CheckpointNotFoundException(CheckpointStoreException):
    """Raised when a local checkpoint lookup finds nothing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CHECKPOINT_NOT_FOUND,
            details=details,
        )


__all__ = [
    "ErrorCodes",
    "AnchorError",
    "AnchorException",
    "CanonicalizationException",
    "LeafReadException",
    "DuplicateLeafPathException",
    "ProofIndexOutOfRangeException",
    "StoreUnavailableException",
    "StoreRejectedException",
    "AnchorNotFoundException",
    "CheckpointStoreException",
    "CheckpointNotFoundException",
]
