from sqlalchemy.orm import Session
from sqlalchemy import func, select
from typing import List, Optional
from grocery_api.models.grocery_list import GroceryList, GroceryItem
from grocery_api.models.master_list import MasterListItem
from grocery_api.repositories.repository import BaseRepository


class GroceryListRepository(BaseRepository[GroceryList]):
    """Repository for grocery list operations."""

    def __init__(self, db: Session):
        super().__init__(GroceryList, db)

    def get_by_owner(self, owner_id: int, skip: int = 0, limit: int = 100) -> List[GroceryList]:
        """Get all grocery lists owned by a user, newest first."""
        return (
            self.db.query(GroceryList)
            .filter(GroceryList.owner_id == owner_id)
            .order_by(GroceryList.created_at.desc(), GroceryList.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_owned(self, list_id: int, owner_id: int) -> Optional[GroceryList]:
        return (
            self.db.query(GroceryList)
            .filter(GroceryList.id == list_id, GroceryList.owner_id == owner_id)
            .first()
        )

    def get_list_item(self, list_id: int, item_id: int) -> Optional[GroceryItem]:
        return (
            self.db.query(GroceryItem)
            .filter(GroceryItem.id == item_id, GroceryItem.list_id == list_id)
            .first()
        )

    def get_items(self, list_id: int) -> List[GroceryItem]:
        return (
            self.db.query(GroceryItem)
            .filter(GroceryItem.list_id == list_id)
            .order_by(GroceryItem.created_at.desc(), GroceryItem.id.desc())
            .all()
        )

    def find_item_by_name(self, list_id: int, name: str) -> Optional[GroceryItem]:
        """Case-insensitive lookup of a list entry through its master item name."""
        return (
            self.db.query(GroceryItem)
            .join(MasterListItem, MasterListItem.id == GroceryItem.master_item_id)
            .filter(
                GroceryItem.list_id == list_id,
                func.lower(MasterListItem.name) == name.strip().lower(),
            )
            .first()
        )

    def add_item(self, list_id: int, master_item_id: int) -> GroceryItem:
        """Add an item to a grocery list."""
        item = GroceryItem(list_id=list_id, master_item_id=master_item_id, completed=False)
        self.db.add(item)
        self.db.flush()
        return item

    def remove_item(self, item: GroceryItem) -> None:
        """Remove an item from a grocery list; the master item is untouched."""
        self.db.delete(item)
        self.db.flush()

    def find_name_clash(self, master_item_id: int, name: str) -> Optional[GroceryItem]:
        """
        An entry named ``name`` (case-insensitively) that sits in a list
        referencing ``master_item_id`` but points at a different master item.
        """
        referencing_lists = select(GroceryItem.list_id).where(
            GroceryItem.master_item_id == master_item_id
        )
        return (
            self.db.query(GroceryItem)
            .join(MasterListItem, MasterListItem.id == GroceryItem.master_item_id)
            .filter(
                GroceryItem.list_id.in_(referencing_lists),
                GroceryItem.master_item_id != master_item_id,
                func.lower(MasterListItem.name) == name.strip().lower(),
            )
            .first()
        )
