from pydantic import BaseModel, Field
from grocery_api.models.tag import TagColor


class TagBase(BaseModel):
    text: str = Field(..., min_length=1, max_length=8, description="Tag label (max 8 characters)")
    color: TagColor = Field(TagColor.GRAY, description="Display color")


class TagCreate(TagBase):
    """Tag as supplied alongside an item."""
    pass


class TagResponse(TagBase):
    class Config:
        from_attributes = True
