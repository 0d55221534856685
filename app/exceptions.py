# =============================================================================
# app/exceptions.py - Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Convert an unhandled exception to a 500 JSON response.

    The exception is logged with its traceback; clients only see a
    generic message and a machine-readable code.
    """
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
