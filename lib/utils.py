# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from slugify import slugify as make_slug

from app.exceptions import MalformedIdError


# =============================================================================
# ObjectId Utilities
# =============================================================================

def parse_object_id(value: str | ObjectId) -> ObjectId:
    """
    Convert a path/body id into an ObjectId.

    Args:
        value: 24-character hex string or ObjectId

    Returns:
        ObjectId

    Raises:
        MalformedIdError: If the value is not a valid ObjectId

    Example:
        bootcamp_id = parse_object_id("5d713995b721c3bb38c1f5d0")
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise MalformedIdError(str(value))


def serialize_document(value: Any) -> Any:
    """
    Make a MongoDB document JSON-friendly.

    Renames the top-level `_id` to `id` and converts every ObjectId to str.
    Datetimes are left for FastAPI's encoder.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            result["id" if key == "_id" else key] = serialize_document(item)
        return result
    return value


# =============================================================================
# Text Utilities
# =============================================================================

def slugify(text: str) -> str:
    """
    Build a URL slug from a display name.

    Example:
        slugify("Devworks Bootcamp")  # "devworks-bootcamp"
        slugify("UI/UX  Academy!")    # "ui-ux-academy"
        slugify("Escuela Código")     # "escuela-codigo"
    """
    return make_slug(text, lowercase=True)


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp for created_at fields."""
    return datetime.now(timezone.utc)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for errors raised outside the HTTP layer.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result
