from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from grocery_api.models.tag import Tag, TagColor
from grocery_api.models.master_list import MasterList, MasterListItem
from grocery_api.models.grocery_list import GroceryItem
from grocery_api.models.shared_list import SharedList, ShareStatus
from grocery_api.models.associations import item_tags_master
from grocery_api.repositories.repository import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for tag operations."""

    def __init__(self, db: Session):
        super().__init__(Tag, db)

    def get_by_text(self, user_id: int, text: str) -> Optional[Tag]:
        return (
            self.db.query(Tag)
            .filter(Tag.user_id == user_id, Tag.text == text)
            .first()
        )

    def get_or_create(self, user_id: int, text: str, color: TagColor) -> Tag:
        """
        Get the user's tag with this text, creating it if needed.
        An existing tag takes the requested color.
        """
        tag = self.get_by_text(user_id, text)
        if tag is None:
            try:
                with self.db.begin_nested():
                    tag = Tag(user_id=user_id, text=text, color=color)
                    self.db.add(tag)
            except IntegrityError:
                tag = self.get_by_text(user_id, text)
                if tag is None:
                    raise

        if tag.color != color:
            tag.color = color
            self.db.flush()
        return tag

    def get_own_item_tags(self, user_id: int) -> List[Tag]:
        """Tags attached to items of the user's own master list."""
        return (
            self.db.query(Tag)
            .join(item_tags_master, item_tags_master.c.tag_id == Tag.id)
            .join(MasterListItem, MasterListItem.id == item_tags_master.c.item_id)
            .join(MasterList, MasterList.id == MasterListItem.master_list_id)
            .filter(MasterList.user_id == user_id)
            .order_by(Tag.text, Tag.created_at.desc())
            .all()
        )

    def get_shared_item_tags(self, user_id: int) -> List[Tag]:
        """Tags attached to master items used by lists shared with the user."""
        return (
            self.db.query(Tag)
            .join(item_tags_master, item_tags_master.c.tag_id == Tag.id)
            .join(MasterListItem, MasterListItem.id == item_tags_master.c.item_id)
            .join(GroceryItem, GroceryItem.master_item_id == MasterListItem.id)
            .join(SharedList, SharedList.list_id == GroceryItem.list_id)
            .filter(
                SharedList.shared_with_id == user_id,
                SharedList.status == ShareStatus.ACCEPTED,
            )
            .order_by(Tag.text, Tag.created_at.desc())
            .all()
        )
