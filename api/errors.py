"""
Module 08 - API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import AnchorException, ErrorCodes


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class LeafNotFoundError(APIError):
    """Requested path is not a leaf of the checkpoint."""

    def __init__(self, path: str, checkpoint_id: int):
        super().__init__(
            code="LEAF_NOT_FOUND",
            message=f"Path {path!r} not found in checkpoint {checkpoint_id}",
            status_code=404,
            details={"path": path, "checkpoint_id": checkpoint_id},
        )


# HTTP status per domain error code; anything unlisted is a 500
_STATUS_BY_CODE = {
    ErrorCodes.CHECKPOINT_NOT_FOUND: 404,
    ErrorCodes.ANCHOR_NOT_FOUND: 404,
    ErrorCodes.PROOF_INDEX_OUT_OF_RANGE: 400,
    ErrorCodes.SCHEMA_VALIDATION_ERROR: 400,
    ErrorCodes.STORE_UNAVAILABLE: 503,
    ErrorCodes.STORE_REJECTED: 502,
}


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def anchor_error_handler(request: Request, exc: AnchorException) -> JSONResponse:
    """Handle domain exceptions raised below the route layer."""
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
