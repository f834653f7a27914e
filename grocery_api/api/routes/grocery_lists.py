from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from ...database import get_db
from ...dependencies import get_current_user
from ...models.user import User
from ...schemas.grocery_list import (
    GroceryListCreate,
    GroceryListUpdate,
    GroceryListResponse,
)
from ...schemas.sharing import (
    ShareCreate,
    ShareResponseUpdate,
    SharedListResponse,
    AcceptedShareResponse,
    ShareDecisionResponse,
)
from ...schemas.result import Result
from ...services.grocery_list_service import GroceryListService
from ...services.sharing_service import SharingService

router = APIRouter()


# Shared-list routes are declared before "/{list_id}" so "shared" is never
# parsed as a list id.

@router.get("/shared/pending", response_model=Result[List[SharedListResponse]])
async def get_pending_shares(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Shares addressed to the current user that await an answer."""
    service = SharingService(db)
    return Result.successful(data=service.list_pending_shares(current_user))


@router.get("/shared/accepted", response_model=Result[List[AcceptedShareResponse]])
async def get_accepted_shares(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Lists shared with the current user, with items.

    Reading also copies newly added shared items into the user's master list.
    """
    service = SharingService(db)
    return Result.successful(data=service.list_accepted_shares(current_user))


@router.put("/shared/{share_id}", response_model=Result[ShareDecisionResponse])
async def respond_to_share(
    share_id: int,
    decision: ShareResponseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept or reject a pending share."""
    service = SharingService(db)
    result = service.respond_to_share(share_id, current_user, decision.status)
    return Result.successful(data=result)


@router.post("", response_model=Result[GroceryListResponse], status_code=status.HTTP_201_CREATED)
async def create_list(
    list_data: GroceryListCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an empty grocery list."""
    service = GroceryListService(db)
    grocery_list = service.create_list(current_user, list_data)
    return Result.successful(data=grocery_list)


@router.get("", response_model=Result[List[GroceryListResponse]])
async def get_my_lists(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get all grocery lists owned by the current user, newest first."""
    service = GroceryListService(db)
    lists = service.get_user_lists(current_user, skip, limit)
    return Result.successful(data=lists)


@router.get("/{list_id}", response_model=Result[GroceryListResponse])
async def get_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get grocery list with all items."""
    service = GroceryListService(db)
    grocery_list = service.get_list(list_id, current_user)
    return Result.successful(data=grocery_list)


@router.put("/{list_id}", response_model=Result[GroceryListResponse])
async def update_list(
    list_id: int,
    list_data: GroceryListUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename a grocery list."""
    service = GroceryListService(db)
    grocery_list = service.update_list(list_id, current_user, list_data)
    return Result.successful(data=grocery_list)


@router.delete("/{list_id}", response_model=Result[dict])
async def delete_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a grocery list."""
    service = GroceryListService(db)
    result = service.delete_list(list_id, current_user)
    return Result.successful(data=result)


@router.post("/{list_id}/share", response_model=Result[SharedListResponse], status_code=status.HTTP_201_CREATED)
async def share_list(
    list_id: int,
    share_data: ShareCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Invite another user, by email, to this list."""
    service = SharingService(db)
    share = service.share_list(current_user, list_id, share_data.email)
    return Result.successful(data=share)
