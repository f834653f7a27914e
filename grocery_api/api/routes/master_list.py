from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from ...database import get_db
from ...dependencies import get_current_user
from ...models.user import User
from ...schemas.master_list import (
    MasterItemCreate,
    MasterItemUpdate,
    MasterItemResponse,
    MasterListResponse,
    ItemUsageResponse,
)
from ...schemas.result import Result
from ...services.master_list_service import MasterListService

router = APIRouter()


@router.get("", response_model=Result[MasterListResponse])
async def get_master_list(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's master list, created on first access."""
    service = MasterListService(db)
    master_list, items = service.get_master_list(current_user.id)
    return Result.successful(
        data=MasterListResponse(
            id=master_list.id,
            items=[MasterItemResponse.model_validate(item) for item in items],
        )
    )


@router.post("/items", response_model=Result[MasterItemResponse], status_code=status.HTTP_201_CREATED)
async def add_master_item(
    item_data: MasterItemCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Add an item to the master list.

    Answers 201 for a new item and 200 with the existing item when the
    name is already present (case-insensitively).
    """
    service = MasterListService(db)
    item, created = service.add_item(current_user.id, item_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return Result.successful(data=item)


@router.put("/items/{item_id}", response_model=Result[MasterItemResponse])
async def update_master_item(
    item_id: int,
    item_data: MasterItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename, retag, or toggle completion of a master item."""
    service = MasterListService(db)
    item = service.update_item(current_user.id, item_id, item_data)
    return Result.successful(data=item)


@router.get("/items/{item_id}/usage", response_model=Result[List[ItemUsageResponse]])
async def get_master_item_usage(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Grocery lists that would lose this item if it were deleted."""
    service = MasterListService(db)
    return Result.successful(data=service.get_item_usage(current_user.id, item_id))


@router.delete("/items/{item_id}", response_model=Result[dict])
async def delete_master_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a master item; it disappears from every list that used it."""
    service = MasterListService(db)
    return Result.successful(data=service.delete_item(current_user.id, item_id))
