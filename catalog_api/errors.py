"""Error taxonomy shared by stores, services and routes.

- NotFoundError: entity absent from its authoritative store (-> 404)
- ValidationError: required field missing from a write request (-> 400)
- StoreError: any failure raised by a store client (-> 500)
- BootstrapError: stores unreachable after the startup retry budget (fatal)
"""

from typing import Any


class CatalogError(Exception):
    """Base class for errors raised by the catalog service."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFoundError(CatalogError):
    code = "CONTENT_NOT_FOUND"
    status_code = 404


class ValidationError(CatalogError):
    code = "VALIDATION_ERROR"
    status_code = 400


class StoreError(CatalogError):
    code = "INTERNAL_ERROR"
    status_code = 500


class BootstrapError(CatalogError):
    """Raised when the stores cannot be reached during startup."""
