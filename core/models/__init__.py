# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - item.py: The record served by the test endpoint
# - request_logging.py: Logging middleware and CORS configuration
#
# These models define the "contract" between API and clients.
# =============================================================================

from .item import Item
from .request_logging import (
    DEFAULT_MAX_PAYLOAD_LENGTH,
    CorsRule,
    RequestLoggingConfig,
)

__all__ = [
    "Item",
    "DEFAULT_MAX_PAYLOAD_LENGTH",
    "CorsRule",
    "RequestLoggingConfig",
]
