from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...database import get_db
from ...dependencies import get_current_user
from ...models.user import User
from ...schemas.tag import TagResponse
from ...schemas.result import Result
from ...services.tag_service import TagService

router = APIRouter()


@router.get("", response_model=Result[List[TagResponse]])
async def get_tags(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Tags on the user's items and on items of lists shared with them."""
    service = TagService(db)
    return Result.successful(data=service.list_user_tags(current_user.id))


@router.delete("/{text}", response_model=Result[dict])
async def delete_tag(
    text: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a tag and remove it from every item."""
    service = TagService(db)
    return Result.successful(data=service.delete_tag(current_user.id, text))
