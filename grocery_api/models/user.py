from sqlalchemy import String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from grocery_api.models.base import BaseModel
if TYPE_CHECKING:
    from grocery_api.models.grocery_list import GroceryList
    from grocery_api.models.master_list import MasterList
    from grocery_api.models.tag import Tag
    from grocery_api.models.shared_list import SharedList


class User(BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    # The demo tenant is shared by every anonymous visitor and reset on login
    is_demo: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    sessions: Mapped[List["UserSession"]] = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    grocery_lists: Mapped[List["GroceryList"]] = relationship(
        "GroceryList",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    master_list: Mapped[Optional["MasterList"]] = relationship(
        "MasterList",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    owned_shares: Mapped[List["SharedList"]] = relationship(
        "SharedList",
        back_populates="owner",
        foreign_keys="[SharedList.owner_id]",
        cascade="all, delete-orphan",
    )
    # No delete cascade; UserService.delete_user withdraws received shares first
    received_shares: Mapped[List["SharedList"]] = relationship(
        "SharedList",
        back_populates="shared_with",
        foreign_keys="[SharedList.shared_with_id]",
    )


class UserSession(BaseModel):
    """
    Bearer-token session. A user may hold any number of them at once;
    expiry is checked on lookup, never swept.
    """

    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(512), unique=True, index=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="sessions", lazy="selectin")
