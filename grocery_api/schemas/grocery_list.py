from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from grocery_api.schemas.tag import TagCreate, TagResponse


class GroceryItemCreate(BaseModel):
    """Schema for adding an item to a grocery list by name."""
    name: str = Field(..., min_length=1, max_length=200, description="Item name")


class GroceryItemUpdate(BaseModel):
    """
    Name and tags are written through to the master item; completion
    stays on the list entry.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    completed: Optional[bool] = None
    tags: Optional[List[TagCreate]] = None


class GroceryItemResponse(BaseModel):
    """Schema for grocery list item response."""
    id: int
    list_id: int
    master_item_id: int
    name: str
    completed: bool
    tags: List[TagResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class GroceryListCreate(BaseModel):
    """Schema for creating a new grocery list."""
    name: str = Field(..., min_length=1, max_length=200, description="Grocery list name")


class GroceryListUpdate(BaseModel):
    """Schema for renaming a grocery list."""
    name: str = Field(..., min_length=1, max_length=200)


class GroceryListResponse(BaseModel):
    """Schema for grocery list response with full details."""
    id: int
    uuid: str
    name: str
    owner_id: int
    is_shared: bool
    shared_with_email: Optional[str] = None
    has_pending_share: bool = False
    created_at: datetime
    updated_at: Optional[datetime]

    # Computed fields
    total_items: int = 0
    completed_items_count: int = 0

    items: List[GroceryItemResponse] = []

    class Config:
        from_attributes = True
