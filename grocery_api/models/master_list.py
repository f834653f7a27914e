from sqlalchemy import String, Boolean, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from grocery_api.models.base import BaseModel
from grocery_api.models.associations import item_tags_master
if TYPE_CHECKING:
    from grocery_api.models.user import User
    from grocery_api.models.tag import Tag
    from grocery_api.models.grocery_list import GroceryItem


class MasterList(BaseModel):
    """
    A user's deduplicated catalog of every item name they have used.
    Exactly one per user, created lazily.
    """

    __tablename__ = "master_lists"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="master_list")

    items: Mapped[List["MasterListItem"]] = relationship(
        "MasterListItem",
        back_populates="master_list",
        cascade="all, delete-orphan",
        order_by="MasterListItem.id",
    )


class MasterListItem(BaseModel):
    """
    Canonical item of a master list. Grocery items display this name and
    these tags through their reference.
    """

    __tablename__ = "master_list_items"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Marks an item as selected for transfer into a list, not as bought
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    master_list_id: Mapped[int] = mapped_column(
        ForeignKey("master_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    master_list: Mapped["MasterList"] = relationship(
        "MasterList", back_populates="items"
    )

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=item_tags_master,
        back_populates="master_items",
        lazy="selectin",
        order_by="Tag.text",
    )

    grocery_items: Mapped[List["GroceryItem"]] = relationship(
        "GroceryItem",
        back_populates="master_item",
        cascade="all, delete-orphan",
    )

    @property
    def owner_id(self) -> int:
        return self.master_list.user_id


Index(
    "uq_master_list_items_list_lower_name",
    MasterListItem.master_list_id,
    func.lower(MasterListItem.name),
    unique=True,
)
