from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Literal
from datetime import datetime
from grocery_api.models.shared_list import ShareStatus
from grocery_api.schemas.grocery_list import GroceryItemResponse


class ShareCreate(BaseModel):
    """Invite a recipient, by email, to a list."""
    email: EmailStr = Field(..., description="Recipient email address")


class ShareResponseUpdate(BaseModel):
    """Recipient's answer to a pending share."""
    status: Literal["accepted", "rejected"]


class SharedListResponse(BaseModel):
    id: int
    list_id: int
    owner_id: int
    shared_with_email: str
    shared_with_id: Optional[int] = None
    status: ShareStatus
    created_at: datetime
    list_name: str
    owner_email: str
    owner_name: Optional[str] = None

    class Config:
        from_attributes = True


class AcceptedShareResponse(SharedListResponse):
    items: List[GroceryItemResponse] = []


class ShareDecisionResponse(BaseModel):
    message: str
    share: SharedListResponse
