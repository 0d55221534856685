# =============================================================================
# app/routers/items.py - Test Endpoint
# =============================================================================
# Serves a fixed item so the logging middleware has something to log.
# =============================================================================

from fastapi import APIRouter, status

from core.models import Item

router = APIRouter()


@router.get("/test", response_model=Item, status_code=status.HTTP_200_OK)
async def get_test_item():
    """
    Return the static test item.

    Example response:
        {"id": 1, "name": "book"}
    """
    return Item()
