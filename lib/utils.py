# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from fnmatch import fnmatchcase
from http import HTTPStatus
from typing import Any, Iterable


# =============================================================================
# HTTP Helpers
# =============================================================================

def canonical_header_name(name: str) -> str:
    """
    Render a header name in canonical capitalization.

    ASGI servers lowercase header names, so this restores the form
    clients usually send on the wire.

    Example:
        canonical_header_name("x-test")        # "X-Test"
        canonical_header_name("content-type")  # "Content-Type"
    """
    return "-".join(part.capitalize() for part in name.split("-"))


def reason_phrase(status_code: int) -> str:
    """
    Get the standard reason phrase for an HTTP status code.

    Returns an empty string for codes outside the IANA registry.
    """
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def path_matches(path: str, patterns: Iterable[str]) -> bool:
    """
    Check whether a URL path matches any glob pattern.

    Example:
        path_matches("/v2/api-docs", ["/v2/*"])  # True
    """
    return any(fnmatchcase(path, pattern) for pattern in patterns)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

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

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
