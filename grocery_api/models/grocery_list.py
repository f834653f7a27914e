from sqlalchemy import String, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List, TYPE_CHECKING
from grocery_api.models.base import BaseModel
if TYPE_CHECKING:
    from grocery_api.models.user import User
    from grocery_api.models.master_list import MasterListItem
    from grocery_api.models.tag import Tag
    from grocery_api.models.shared_list import SharedList


class GroceryList(BaseModel):
    """
    Named list owned by one user. Items reference master list items; the
    list itself never stores item names.
    """

    __tablename__ = "grocery_lists"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Sharing state, mirrors the most recently accepted share
    is_shared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    shared_with_email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, default=None
    )

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User", back_populates="grocery_lists", lazy="selectin"
    )

    items: Mapped[List["GroceryItem"]] = relationship(
        "GroceryItem",
        back_populates="grocery_list",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="GroceryItem.id.desc()",
    )

    shares: Mapped[List["SharedList"]] = relationship(
        "SharedList",
        back_populates="grocery_list",
        cascade="all, delete-orphan",
    )

    @property
    def total_items(self) -> int:
        """Total number of items in list"""
        return len(self.items)

    @property
    def completed_items_count(self) -> int:
        """Number of completed items"""
        return sum(1 for item in self.items if item.completed)


class GroceryItem(BaseModel):
    """
    Entry of a grocery list. Name and tags are read through the referenced
    master item; only the completion flag belongs to the list entry.
    """

    __tablename__ = "grocery_items"
    __table_args__ = (
        UniqueConstraint("list_id", "master_item_id", name="uq_grocery_items_list_master_item"),
    )

    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Foreign keys
    list_id: Mapped[int] = mapped_column(
        ForeignKey("grocery_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )

    master_item_id: Mapped[int] = mapped_column(
        ForeignKey("master_list_items.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    grocery_list: Mapped["GroceryList"] = relationship(
        "GroceryList", back_populates="items"
    )

    master_item: Mapped["MasterListItem"] = relationship(
        "MasterListItem", back_populates="grocery_items", lazy="selectin"
    )

    @property
    def name(self) -> str:
        return self.master_item.name

    @property
    def tags(self) -> List["Tag"]:
        return self.master_item.tags
