# =============================================================================
# core/models/item.py - Item Schema
# =============================================================================
# The static record returned by the test endpoint.
# =============================================================================

from pydantic import BaseModel, Field


class Item(BaseModel):
    """
    A catalogue item.

    Example:
        {"id": 1, "name": "book"}
    """

    id: int = Field(default=1, description="Item identifier")
    name: str = Field(default="book", description="Item name")
