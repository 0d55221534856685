# =============================================================================
# app/middleware/ - ASGI Middleware
# =============================================================================
# - request_logging.py: DEBUG logging of requests and responses with bodies
# - cors.py: CORS policies scoped to individual paths
# =============================================================================

from .cors import UrlBasedCorsMiddleware, build_cors_policy
from .request_logging import RequestResponseLoggingMiddleware

__all__ = [
    "UrlBasedCorsMiddleware",
    "build_cors_policy",
    "RequestResponseLoggingMiddleware",
]
