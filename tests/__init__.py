# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Learning Demo API:
# - test_media_types.py: Content-Type parsing and visibility
# - test_content_caching.py: Body-caching ASGI wrappers
# - test_request_logging.py: Request/response logging middleware
# - test_api.py: Endpoints, CORS and exception handlers
# - test_config.py: Settings and derived configuration
#
# Run tests with: pytest
# =============================================================================
