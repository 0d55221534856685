# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - middleware/: Request/response logging and path-scoped CORS
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and uses models
# from the core/ package and helpers from lib/.
# =============================================================================
