# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response has the shape:
#   {"success": false, "error": "...", "code": "...", "suggestion": "..."}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DevCamperException(Exception):
    """
    Base exception for the DevCamper API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "DEVCAMPER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Lookup Exceptions
# =============================================================================

class ResourceNotFoundError(DevCamperException):
    """Raised when no document exists for an id."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} not found with id of {resource_id}",
            code="RESOURCE_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} id is correct",
            details={"resource": resource, "id": resource_id}
        )


class MalformedIdError(DevCamperException):
    """Raised when an id is not a valid ObjectId."""

    def __init__(self, resource_id: str):
        super().__init__(
            message=f"Resource not found with id of {resource_id}",
            code="MALFORMED_ID",
            status_code=404,
            suggestion="Ids are 24-character hexadecimal strings",
            details={"id": resource_id}
        )


# =============================================================================
# Write Exceptions
# =============================================================================

class DuplicateFieldError(DevCamperException):
    """Raised when a write violates a unique index."""

    def __init__(self, fields: dict[str, Any] | None = None):
        super().__init__(
            message="Duplicate field value entered",
            code="DUPLICATE_FIELD",
            status_code=400,
            suggestion="Choose a value that is not already in use",
            details={"fields": fields} if fields else None
        )


class ValidationFailedError(DevCamperException):
    """Raised when a write is rejected by a rule the request schema cannot express."""

    def __init__(self, messages: list[str]):
        super().__init__(
            message=", ".join(messages),
            code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": messages}
        )


class InvalidQueryError(DevCamperException):
    """Raised when a filter value cannot be converted to its field's type."""

    def __init__(self, field: str, value: str, expected: str):
        super().__init__(
            message=f"Invalid value '{value}' for filter '{field}'",
            code="INVALID_QUERY",
            status_code=400,
            suggestion=f"'{field}' expects a value of type {expected}",
            details={"field": field, "value": value, "expected": expected}
        )


# =============================================================================
# Geocoding Exceptions
# =============================================================================

class AddressNotFoundError(DevCamperException):
    """Raised when the geocoder has no match for an address or zipcode."""

    def __init__(self, address: str):
        super().__init__(
            message=f"Could not resolve location for '{address}'",
            code="ADDRESS_NOT_FOUND",
            status_code=400,
            suggestion="Provide a complete street address or a valid zipcode",
            details={"address": address}
        )


class GeocodingUnavailableError(DevCamperException):
    """Raised when the geocoding service cannot be reached."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Geocoding service unavailable: {error}",
            code="GEOCODER_UNAVAILABLE",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class NoFileUploadedError(DevCamperException):
    """Raised when a photo upload carries no file."""

    def __init__(self):
        super().__init__(
            message="Please upload a file",
            code="NO_FILE",
            status_code=400,
            suggestion="Send the photo as multipart form data in the 'file' field",
        )


class InvalidFileTypeError(DevCamperException):
    """Raised when uploaded file is not an image."""

    def __init__(self, filename: str, content_type: str | None):
        super().__init__(
            message="Please upload an image file",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion="Only image/* content types are accepted",
            details={"filename": filename, "content_type": content_type}
        )


class FileTooLargeError(DevCamperException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            message=f"Please upload an image less than {max_bytes} bytes",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload a file smaller than {max_bytes} bytes",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes}
        )


class StorageUploadError(DevCamperException):
    """Raised when an uploaded file cannot be written to disk."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to store uploaded file: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def devcamper_exception_handler(
    request: Request,
    exc: DevCamperException
) -> JSONResponse:
    """Convert DevCamperException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to one readable message per failing field.
    """
    messages = [_format_validation_error(error) for error in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": ", ".join(messages),
            "code": "VALIDATION_ERROR",
            "details": {"errors": messages},
        }
    )


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Server Error",
            "code": "INTERNAL_ERROR",
        }
    )
