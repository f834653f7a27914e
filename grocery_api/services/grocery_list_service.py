from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Callable, List, Optional
import logging
from grocery_api.database import transaction
from grocery_api.models.grocery_list import GroceryList, GroceryItem
from grocery_api.models.master_list import MasterListItem
from grocery_api.models.user import User
from grocery_api.repositories.grocery_list_repository import GroceryListRepository
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.repositories.shared_list_repository import SharedListRepository
from grocery_api.schemas.grocery_list import (
    GroceryListCreate,
    GroceryListUpdate,
    GroceryListResponse,
    GroceryItemCreate,
    GroceryItemUpdate,
)
from grocery_api.schemas.tag import TagCreate
from grocery_api.services.list_access import list_participant_ids, require_list_access
from grocery_api.services.master_list_service import MasterListService
from grocery_api.core.exception import (
    AuthorizationException,
    ConflictException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class GroceryListService:
    """Service layer for grocery lists and their items."""

    def __init__(self, db: Session):
        self.db = db
        self.grocery_list_repo = GroceryListRepository(db)
        self.master_list_repo = MasterListRepository(db)
        self.shared_list_repo = SharedListRepository(db)
        self.master_list_service = MasterListService(db)

    # ----- Lists -----

    def _to_response(self, grocery_list: GroceryList, has_pending_share: bool = False) -> GroceryListResponse:
        response = GroceryListResponse.model_validate(grocery_list)
        return response.model_copy(update={"has_pending_share": has_pending_share})

    def get_user_lists(self, user: User, skip: int = 0, limit: int = 100) -> List[GroceryListResponse]:
        """Lists owned by the user, newest first, with items and share state."""
        lists = self.grocery_list_repo.get_by_owner(user.id, skip, limit)
        pending = self.shared_list_repo.list_ids_with_pending(user.id)
        return [self._to_response(gl, gl.id in pending) for gl in lists]

    def get_list(self, list_id: int, user: User) -> GroceryListResponse:
        """One list with items, for its owner or an accepted recipient."""
        grocery_list, _ = require_list_access(self.db, list_id, user)
        has_pending = self.shared_list_repo.count_pending_for_list(list_id) > 0
        return self._to_response(grocery_list, has_pending)

    def create_list(self, user: User, data: GroceryListCreate) -> GroceryList:
        """Create an empty grocery list."""
        name = data.name.strip()
        if not name:
            raise ValidationException("List name is required", "name")

        with transaction(self.db):
            grocery_list = self.grocery_list_repo.create(
                GroceryList(name=name, owner_id=user.id, is_shared=False)
            )
        return grocery_list

    def _get_owned_list(self, list_id: int, user: User) -> GroceryList:
        grocery_list = self.grocery_list_repo.get(list_id)
        if not grocery_list:
            raise ResourceNotFoundException("Grocery list", list_id)
        if grocery_list.owner_id != user.id:
            raise AuthorizationException("Only the list owner can change this list")
        return grocery_list

    def update_list(self, list_id: int, user: User, data: GroceryListUpdate) -> GroceryList:
        """Rename a list."""
        name = data.name.strip()
        if not name:
            raise ValidationException("List name is required", "name")

        grocery_list = self._get_owned_list(list_id, user)
        with transaction(self.db):
            grocery_list.name = name
            self.db.flush()
        return grocery_list

    def delete_list(self, list_id: int, user: User) -> dict:
        """Delete a list with its items and shares."""
        grocery_list = self._get_owned_list(list_id, user)
        with transaction(self.db):
            self.grocery_list_repo.delete(grocery_list.id)
        return {"message": "List deleted"}

    # ----- Items -----

    def get_list_items(self, list_id: int, user: User) -> List[GroceryItem]:
        """Items of a list; names and tags resolve through master items."""
        require_list_access(self.db, list_id, user)
        return self.grocery_list_repo.get_items(list_id)

    def _fan_out(self, grocery_list: GroceryList, skip_user_ids: set, apply: Callable[[int], None]) -> None:
        """
        Apply a master-list change for every participant of a shared list.

        Best effort: each participant runs in its own savepoint and a
        failure is logged without undoing the others.
        """
        for participant_id in list_participant_ids(self.db, grocery_list):
            if participant_id in skip_user_ids:
                continue
            try:
                with self.db.begin_nested():
                    apply(participant_id)
            except (SQLAlchemyError, ConflictException):
                logger.warning(
                    "Could not sync list %s to master list of user %s",
                    grocery_list.id,
                    participant_id,
                    exc_info=True,
                )

    def add_item(self, list_id: int, user: User, data: GroceryItemCreate) -> GroceryItem:
        """
        Add an item to a list by name.

        The name resolves to (or creates) an item in the caller's master
        list. On a shared list every other participant's master list gets
        the name too.

        Raises:
            DuplicateResourceException: If the list already has this name
        """
        name = data.name.strip()
        if not name:
            raise ValidationException("Item name is required", "name")

        grocery_list, _ = require_list_access(self.db, list_id, user)

        if self.grocery_list_repo.find_item_by_name(list_id, name):
            raise ConflictException("Duplicate item", "This item is already in your list")

        def add_to_master_list(participant_id: int) -> None:
            master_list = self.master_list_repo.get_or_create(participant_id)
            self.master_list_repo.get_or_create_item(master_list.id, name)

        try:
            with transaction(self.db):
                master_list = self.master_list_repo.get_or_create(user.id)
                master_item, _ = self.master_list_repo.get_or_create_item(master_list.id, name)
                item = self.grocery_list_repo.add_item(list_id, master_item.id)

                if grocery_list.is_shared:
                    self._fan_out(grocery_list, {user.id}, add_to_master_list)
        except IntegrityError:
            raise ConflictException("Duplicate item", "This item is already in your list")

        return item

    def _rename_and_retag(
        self,
        master_item: MasterListItem,
        owner_id: int,
        new_name: Optional[str],
        tags: Optional[List[TagCreate]],
    ) -> None:
        if new_name is not None and master_item.name != new_name:
            clash = self.master_list_repo.find_item_by_name(master_item.master_list_id, new_name)
            if clash and clash.id != master_item.id:
                raise DuplicateResourceException("Master list item", new_name)
            if self.grocery_list_repo.find_name_clash(master_item.id, new_name):
                raise ConflictException("Duplicate item", "This item is already in your list")
            master_item.name = new_name

        if tags is not None:
            self.master_list_repo.set_item_tags(
                master_item, self.master_list_service.resolve_tags(owner_id, tags)
            )
        self.db.flush()

    def update_item(self, list_id: int, item_id: int, user: User, data: GroceryItemUpdate) -> GroceryItem:
        """
        Update a list entry.

        Name and tags are written to the referenced master item; on a
        shared list they are also written to each participant's master
        item of the same (case-insensitive) name, which is created when
        missing. Completion is stored on the list entry only.
        """
        grocery_list, _ = require_list_access(self.db, list_id, user)

        item = self.grocery_list_repo.get_list_item(list_id, item_id)
        if not item:
            raise ResourceNotFoundException("Grocery list item", item_id)

        new_name = data.name.strip() if data.name is not None else None
        if new_name == "":
            raise ValidationException("Item name is required", "name")

        master_item = item.master_item
        current_name = master_item.name
        item_owner_id = master_item.owner_id

        if new_name is not None and new_name.lower() != current_name.lower():
            other = self.grocery_list_repo.find_item_by_name(list_id, new_name)
            if other and other.id != item.id:
                raise ConflictException("Duplicate item", "This item is already in your list")

        def sync_participant(participant_id: int) -> None:
            master_list = self.master_list_repo.get_or_create(participant_id)
            target = self.master_list_repo.find_item_by_name(master_list.id, current_name)
            if target is None and new_name is not None:
                target = self.master_list_repo.find_item_by_name(master_list.id, new_name)
            if target is None:
                target, _ = self.master_list_repo.get_or_create_item(
                    master_list.id, new_name or current_name
                )
            self._rename_and_retag(target, participant_id, new_name, data.tags)

        with transaction(self.db):
            if new_name is not None or data.tags is not None:
                self._rename_and_retag(master_item, item_owner_id, new_name, data.tags)

                if grocery_list.is_shared:
                    self._fan_out(grocery_list, {item_owner_id}, sync_participant)

            if data.completed is not None:
                item.completed = data.completed
                self.db.flush()

        return item

    def delete_item(self, list_id: int, item_id: int, user: User) -> dict:
        """Remove an entry from a list; the master item stays."""
        require_list_access(self.db, list_id, user)

        item = self.grocery_list_repo.get_list_item(list_id, item_id)
        if not item:
            raise ResourceNotFoundException("Grocery list item", item_id)

        with transaction(self.db):
            self.grocery_list_repo.remove_item(item)

        return {"message": "Item deleted"}
