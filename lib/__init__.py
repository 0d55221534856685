# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - media_types.py: Content-Type parsing and the visible-type allow-list
# - content_caching.py: ASGI receive/send wrappers that capture bodies
# - utils.py: Shared utilities (error handling, HTTP helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.content_caching import (
    ContentCachingRequest,
    ContentCachingResponse,
    wrap_request,
    wrap_response,
)
from lib.media_types import (
    VISIBLE_TYPES,
    InvalidMediaTypeError,
    MediaType,
    is_visible,
)
from lib.utils import (
    ApplicationError,
    canonical_header_name,
    path_matches,
    reason_phrase,
)

__all__ = [
    # Content caching
    "ContentCachingRequest",
    "ContentCachingResponse",
    "wrap_request",
    "wrap_response",
    # Media types
    "VISIBLE_TYPES",
    "InvalidMediaTypeError",
    "MediaType",
    "is_visible",
    # Utils
    "ApplicationError",
    "canonical_header_name",
    "path_matches",
    "reason_phrase",
]
