"""
Single answer to "may this caller touch this grocery list?".

Every list and item operation goes through :func:`resolve_list_access`
instead of repeating ownership and share joins per handler.
"""
import enum
from typing import List

from sqlalchemy.orm import Session

from grocery_api.models.grocery_list import GroceryList
from grocery_api.models.user import User
from grocery_api.repositories.grocery_list_repository import GroceryListRepository
from grocery_api.repositories.shared_list_repository import SharedListRepository
from grocery_api.core.exception import AuthorizationException, ResourceNotFoundException


class ListAccess(str, enum.Enum):
    OWNER = "owner"
    SHARED = "shared"
    NONE = "none"


def resolve_list_access(db: Session, grocery_list: GroceryList, user: User) -> ListAccess:
    if grocery_list.owner_id == user.id:
        return ListAccess.OWNER
    if SharedListRepository(db).has_accepted_access(grocery_list.id, user):
        return ListAccess.SHARED
    return ListAccess.NONE


def require_list_access(db: Session, list_id: int, user: User) -> tuple[GroceryList, ListAccess]:
    """
    Load a list the caller owns or holds an accepted share on.

    Raises:
        ResourceNotFoundException: If the list does not exist
        AuthorizationException: If the caller has no access
    """
    grocery_list = GroceryListRepository(db).get(list_id)
    if not grocery_list:
        raise ResourceNotFoundException("Grocery list", list_id)

    access = resolve_list_access(db, grocery_list, user)
    if access is ListAccess.NONE:
        raise AuthorizationException("You do not have access to this list")
    return grocery_list, access


def list_participant_ids(db: Session, grocery_list: GroceryList) -> List[int]:
    """Owner first, then every accepted recipient bound to an account."""
    participant_ids = [grocery_list.owner_id]
    for share in SharedListRepository(db).get_accepted_for_list(grocery_list.id):
        if share.shared_with_id is not None and share.shared_with_id not in participant_ids:
            participant_ids.append(share.shared_with_id)
    return participant_ids
