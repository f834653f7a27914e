import enum

from sqlalchemy import String, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from grocery_api.models.base import BaseModel
from grocery_api.models.associations import item_tags_master
if TYPE_CHECKING:
    from grocery_api.models.user import User
    from grocery_api.models.master_list import MasterListItem


class TagColor(str, enum.Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    PURPLE = "purple"
    PINK = "pink"
    INDIGO = "indigo"
    TEAL = "teal"
    GRAY = "gray"


class Tag(BaseModel):
    """
    Per-user label. Attached to master list items only; grocery items
    inherit the tags of the master item they reference.
    """

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("text", "user_id", name="uq_tags_text_user"),)

    text: Mapped[str] = mapped_column(String(8), nullable=False)
    color: Mapped[TagColor] = mapped_column(
        SQLEnum(TagColor, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TagColor.GRAY,
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="tags")

    master_items: Mapped[List["MasterListItem"]] = relationship(
        "MasterListItem",
        secondary=item_tags_master,
        back_populates="tags",
    )
