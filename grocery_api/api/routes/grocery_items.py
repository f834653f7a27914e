from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...database import get_db
from ...dependencies import get_current_user
from ...models.user import User
from ...schemas.grocery_list import (
    GroceryItemCreate,
    GroceryItemUpdate,
    GroceryItemResponse,
)
from ...schemas.result import Result
from ...services.grocery_list_service import GroceryListService

router = APIRouter()


@router.get("/{list_id}/items", response_model=Result[List[GroceryItemResponse]])
async def get_items(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Items of a list the user owns or holds an accepted share on."""
    service = GroceryListService(db)
    return Result.successful(data=service.get_list_items(list_id, current_user))


@router.post("/{list_id}/items", response_model=Result[GroceryItemResponse], status_code=status.HTTP_201_CREATED)
async def add_item(
    list_id: int,
    item_data: GroceryItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an item to a grocery list by name."""
    service = GroceryListService(db)
    item = service.add_item(list_id, current_user, item_data)
    return Result.successful(data=item)


@router.put("/{list_id}/items/{item_id}", response_model=Result[GroceryItemResponse])
async def update_item(
    list_id: int,
    item_id: int,
    item_data: GroceryItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename, retag, or check off a grocery list item."""
    service = GroceryListService(db)
    item = service.update_item(list_id, item_id, current_user, item_data)
    return Result.successful(data=item)


@router.delete("/{list_id}/items/{item_id}", response_model=Result[dict])
async def delete_item(
    list_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove an item from a grocery list."""
    service = GroceryListService(db)
    return Result.successful(data=service.delete_item(list_id, item_id, current_user))
