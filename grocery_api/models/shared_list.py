import enum

from sqlalchemy import String, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from grocery_api.models.base import BaseModel
if TYPE_CHECKING:
    from grocery_api.models.user import User
    from grocery_api.models.grocery_list import GroceryList


class ShareStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    # Never stored: rejecting a share deletes its row
    REJECTED = "rejected"


class SharedList(BaseModel):
    """
    Invitation from a list owner to one recipient, addressed by email and
    bound to the recipient's user id once known.
    """

    __tablename__ = "shared_lists"

    shared_with_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[ShareStatus] = mapped_column(
        SQLEnum(ShareStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ShareStatus.PENDING,
    )

    # Foreign keys
    list_id: Mapped[int] = mapped_column(
        ForeignKey("grocery_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    shared_with_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, default=None, index=True
    )

    # Relationships
    grocery_list: Mapped["GroceryList"] = relationship(
        "GroceryList", back_populates="shares", lazy="selectin"
    )
    owner: Mapped["User"] = relationship(
        "User", back_populates="owned_shares", foreign_keys=[owner_id], lazy="selectin"
    )
    shared_with: Mapped[Optional["User"]] = relationship(
        "User", back_populates="received_shares", foreign_keys=[shared_with_id]
    )

    @property
    def list_name(self) -> str:
        return self.grocery_list.name

    @property
    def owner_email(self) -> str:
        return self.owner.email

    @property
    def owner_name(self) -> Optional[str]:
        return self.owner.name
