from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from grocery_api.models.master_list import MasterList, MasterListItem
from grocery_api.models.grocery_list import GroceryItem, GroceryList
from grocery_api.models.tag import Tag
from grocery_api.repositories.repository import BaseRepository


class MasterListRepository(BaseRepository[MasterList]):
    """Repository for master lists and their items."""

    def __init__(self, db: Session):
        super().__init__(MasterList, db)

    def get_by_user(self, user_id: int) -> Optional[MasterList]:
        return self.db.query(MasterList).filter(MasterList.user_id == user_id).first()

    def get_or_create(self, user_id: int) -> MasterList:
        """
        Return the user's master list, creating it on first access.

        The insert runs in a savepoint; if a concurrent request created the
        list first, the unique constraint on user_id fires and the winner's
        row is read back instead.
        """
        master_list = self.get_by_user(user_id)
        if master_list:
            return master_list

        try:
            with self.db.begin_nested():
                master_list = MasterList(user_id=user_id)
                self.db.add(master_list)
        except IntegrityError:
            master_list = self.get_by_user(user_id)
            if master_list is None:
                raise
        return master_list

    def get_item(self, item_id: int) -> Optional[MasterListItem]:
        return self.db.query(MasterListItem).filter(MasterListItem.id == item_id).first()

    def get_items(self, master_list_id: int) -> List[MasterListItem]:
        return (
            self.db.query(MasterListItem)
            .filter(MasterListItem.master_list_id == master_list_id)
            .order_by(MasterListItem.created_at, MasterListItem.id)
            .all()
        )

    def find_item_by_name(self, master_list_id: int, name: str) -> Optional[MasterListItem]:
        """Case-insensitive name lookup within one master list."""
        return (
            self.db.query(MasterListItem)
            .filter(
                MasterListItem.master_list_id == master_list_id,
                func.lower(MasterListItem.name) == name.strip().lower(),
            )
            .first()
        )

    def find_user_item_by_name(self, user_id: int, name: str) -> Optional[MasterListItem]:
        """Case-insensitive name lookup in whichever master list the user owns."""
        return (
            self.db.query(MasterListItem)
            .join(MasterList, MasterList.id == MasterListItem.master_list_id)
            .filter(
                MasterList.user_id == user_id,
                func.lower(MasterListItem.name) == name.strip().lower(),
            )
            .first()
        )

    def get_item_names(self, master_list_id: int) -> set[str]:
        """Lower-cased names of every item in a master list."""
        rows = (
            self.db.query(func.lower(MasterListItem.name))
            .filter(MasterListItem.master_list_id == master_list_id)
            .all()
        )
        return {row[0] for row in rows}

    def get_or_create_item(self, master_list_id: int, name: str) -> Tuple[MasterListItem, bool]:
        """
        Find an item by case-insensitive name or insert it.

        Returns:
            (item, created)
        """
        name = name.strip()
        item = self.find_item_by_name(master_list_id, name)
        if item:
            return item, False

        try:
            with self.db.begin_nested():
                item = MasterListItem(master_list_id=master_list_id, name=name, completed=False)
                self.db.add(item)
        except IntegrityError:
            item = self.find_item_by_name(master_list_id, name)
            if item is None:
                raise
            return item, False
        return item, True

    def set_item_tags(self, item: MasterListItem, tags: List[Tag]) -> MasterListItem:
        """Replace the full tag set of an item."""
        item.tags = list(tags)
        self.db.flush()
        return item

    def delete_item(self, item: MasterListItem) -> None:
        """Delete an item together with its tag links and every grocery item using it."""
        self.db.delete(item)
        self.db.flush()

    def get_item_usage(self, item_id: int) -> List[Tuple[GroceryList, GroceryItem]]:
        """Every grocery list (of any user) that references the item."""
        return (
            self.db.query(GroceryList, GroceryItem)
            .join(GroceryItem, GroceryItem.list_id == GroceryList.id)
            .filter(GroceryItem.master_item_id == item_id)
            .order_by(GroceryList.id)
            .all()
        )
