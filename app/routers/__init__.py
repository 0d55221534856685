# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoint
# - items.py: Static test item endpoint
#
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import items

__all__ = [
    "health",
    "items",
]
