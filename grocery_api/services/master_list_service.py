from sqlalchemy.orm import Session
from typing import List, Tuple
from grocery_api.database import transaction
from grocery_api.models.master_list import MasterList, MasterListItem
from grocery_api.models.tag import Tag
from grocery_api.repositories.grocery_list_repository import GroceryListRepository
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.repositories.tag_repository import TagRepository
from grocery_api.schemas.master_list import MasterItemCreate, MasterItemUpdate, ItemUsageResponse
from grocery_api.schemas.tag import TagCreate
from grocery_api.core.exception import (
    AuthorizationException,
    ConflictException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)


class MasterListService:
    """Service layer for a user's master list catalog."""

    def __init__(self, db: Session):
        self.db = db
        self.master_list_repo = MasterListRepository(db)
        self.tag_repo = TagRepository(db)
        self.grocery_list_repo = GroceryListRepository(db)

    def get_or_create_master_list(self, user_id: int) -> MasterList:
        """Return the user's master list, creating it on first access."""
        with transaction(self.db):
            master_list = self.master_list_repo.get_or_create(user_id)
        return master_list

    def get_master_list(self, user_id: int) -> Tuple[MasterList, List[MasterListItem]]:
        """Master list with its items in creation order."""
        master_list = self.get_or_create_master_list(user_id)
        return master_list, self.master_list_repo.get_items(master_list.id)

    def resolve_tags(self, user_id: int, tags: List[TagCreate]) -> List[Tag]:
        """Get-or-create each tag for the user, keeping the first of repeated texts."""
        resolved = {}
        for tag in tags:
            text = tag.text.strip()
            if text and text not in resolved:
                resolved[text] = self.tag_repo.get_or_create(user_id, text, tag.color)
        return list(resolved.values())

    def add_item(self, user_id: int, data: MasterItemCreate) -> Tuple[MasterListItem, bool]:
        """
        Add an item by name, or return the existing item of that name.

        Tags are only attached when the item is new.

        Returns:
            (item, created)
        """
        name = data.name.strip()
        if not name:
            raise ValidationException("Item name is required", "name")

        with transaction(self.db):
            master_list = self.master_list_repo.get_or_create(user_id)
            item, created = self.master_list_repo.get_or_create_item(master_list.id, name)
            if created and data.tags:
                self.master_list_repo.set_item_tags(item, self.resolve_tags(user_id, data.tags))
        return item, created

    def _get_owned_item(self, user_id: int, item_id: int) -> MasterListItem:
        item = self.master_list_repo.get_item(item_id)
        if not item:
            raise ResourceNotFoundException("Master list item", item_id)
        if item.owner_id != user_id:
            raise AuthorizationException("You do not have access to this item")
        return item

    def update_item(self, user_id: int, item_id: int, data: MasterItemUpdate) -> MasterListItem:
        """
        Rename and/or retag an item; with neither, change its completion flag.

        A rename shows up in every grocery list that references the item,
        so it is refused when one of those lists already holds another
        entry of the new name. Tags replace the item's full tag set.
        """
        item = self._get_owned_item(user_id, item_id)

        new_name = data.name.strip() if data.name is not None else None
        if new_name == "":
            raise ValidationException("Item name is required", "name")

        with transaction(self.db):
            if new_name is not None:
                clash = self.master_list_repo.find_item_by_name(item.master_list_id, new_name)
                if clash and clash.id != item.id:
                    raise DuplicateResourceException("Master list item", new_name)
                if self.grocery_list_repo.find_name_clash(item.id, new_name):
                    raise ConflictException(
                        "Duplicate item", "A list using this item already has one with that name"
                    )
                item.name = new_name

            if data.tags is not None:
                self.master_list_repo.set_item_tags(item, self.resolve_tags(user_id, data.tags))

            if data.name is None and data.tags is None:
                item.completed = (
                    data.completed if data.completed is not None else not item.completed
                )
            elif data.completed is not None:
                item.completed = data.completed

            self.db.flush()
        return item

    def delete_item(self, user_id: int, item_id: int) -> dict:
        """
        Delete an item from the caller's master list.

        Removes its tag links and every grocery list entry that references
        it, in all lists of all users.
        """
        item = self.master_list_repo.get_item(item_id)
        if not item or item.owner_id != user_id:
            raise AuthorizationException("You do not have access to this item")

        with transaction(self.db):
            self.master_list_repo.delete_item(item)

        return {"message": "Item deleted successfully"}

    def get_item_usage(self, user_id: int, item_id: int) -> List[ItemUsageResponse]:
        """Lists that would lose this item if it were deleted."""
        self._get_owned_item(user_id, item_id)
        return [
            ItemUsageResponse(
                list_id=grocery_list.id,
                list_name=grocery_list.name,
                owner_id=grocery_list.owner_id,
                grocery_item_id=grocery_item.id,
            )
            for grocery_list, grocery_item in self.master_list_repo.get_item_usage(item_id)
        ]
