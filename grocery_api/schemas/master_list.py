from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from grocery_api.schemas.tag import TagCreate, TagResponse


class MasterItemCreate(BaseModel):
    """Schema for adding an item to the caller's master list."""
    name: str = Field(..., min_length=1, max_length=200, description="Item name")
    tags: Optional[List[TagCreate]] = Field(None, description="Tags to attach")


class MasterItemUpdate(BaseModel):
    """
    Rename, retag, or set the completion flag. With neither name nor tags
    the call toggles completion (or sets it when ``completed`` is given).
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    tags: Optional[List[TagCreate]] = None
    completed: Optional[bool] = None


class MasterItemResponse(BaseModel):
    id: int
    name: str
    completed: bool
    master_list_id: int
    tags: List[TagResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class MasterListResponse(BaseModel):
    id: int
    items: List[MasterItemResponse] = []


class ItemUsageResponse(BaseModel):
    """A grocery list that references a master item."""
    list_id: int
    list_name: str
    owner_id: int
    grocery_item_id: int
