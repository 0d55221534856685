# =============================================================================
# core/ - Domain Package
# =============================================================================
# This package contains framework-agnostic definitions:
# - models/: Pydantic schemas for the API and for middleware configuration
#
# Code in this package should NOT import from FastAPI.
# This keeps the models testable and reusable.
# =============================================================================
