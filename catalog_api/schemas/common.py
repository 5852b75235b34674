"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel

from catalog_api.errors import CatalogError, StoreError


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail

    @classmethod
    def from_error(cls, exc: CatalogError, *, expose_details: bool = True) -> "ErrorResponse":
        """Build the response body for a catalog error.

        Store failures get a generic message; the underlying one is attached
        as `detail.reason` only when `expose_details` is set.
        """
        if isinstance(exc, StoreError):
            detail = {"reason": exc.message} if expose_details else None
            return cls(error=ErrorDetail(code=exc.code, message="Internal Server Error", detail=detail))
        return cls(error=ErrorDetail(code=exc.code, message=exc.message, detail=exc.detail))
