from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from typing import List, Optional
from grocery_api.models.shared_list import SharedList, ShareStatus
from grocery_api.models.grocery_list import GroceryList
from grocery_api.models.user import User
from grocery_api.repositories.repository import BaseRepository

ACTIVE_STATUSES = (ShareStatus.PENDING, ShareStatus.ACCEPTED)


class SharedListRepository(BaseRepository[SharedList]):
    """Repository for list-sharing invitations."""

    def __init__(self, db: Session):
        super().__init__(SharedList, db)

    def _addressed_to(self, user: User):
        """Shares bound to the user's id or still addressed to their email."""
        return or_(
            SharedList.shared_with_id == user.id,
            func.lower(SharedList.shared_with_email) == user.email.lower(),
        )

    def get_active_for_list(self, list_id: int) -> Optional[SharedList]:
        """The pending or accepted share of a list, if any."""
        return (
            self.db.query(SharedList)
            .filter(
                SharedList.list_id == list_id,
                SharedList.status.in_(ACTIVE_STATUSES),
            )
            .first()
        )

    def get_accepted_for_list(self, list_id: int) -> List[SharedList]:
        return (
            self.db.query(SharedList)
            .filter(
                SharedList.list_id == list_id,
                SharedList.status == ShareStatus.ACCEPTED,
            )
            .order_by(SharedList.id)
            .all()
        )

    def count_pending_for_list(self, list_id: int) -> int:
        return (
            self.db.query(SharedList)
            .filter(
                SharedList.list_id == list_id,
                SharedList.status == ShareStatus.PENDING,
            )
            .count()
        )

    def get_addressed_to(self, share_id: int, user: User) -> Optional[SharedList]:
        """A share with this id whose recipient is the user."""
        return (
            self.db.query(SharedList)
            .filter(SharedList.id == share_id, self._addressed_to(user))
            .first()
        )

    def get_received(self, user: User, status: ShareStatus) -> List[SharedList]:
        """Shares received by the user in the given status, newest first."""
        return (
            self.db.query(SharedList)
            .filter(self._addressed_to(user), SharedList.status == status)
            .order_by(SharedList.created_at.desc(), SharedList.id.desc())
            .all()
        )

    def get_all_received(self, user: User) -> List[SharedList]:
        return self.db.query(SharedList).filter(self._addressed_to(user)).all()

    def has_accepted_access(self, list_id: int, user: User) -> bool:
        return (
            self.db.query(SharedList)
            .filter(
                SharedList.list_id == list_id,
                SharedList.status == ShareStatus.ACCEPTED,
                self._addressed_to(user),
            )
            .count()
            > 0
        )

    def list_ids_with_pending(self, owner_id: int) -> set[int]:
        rows = (
            self.db.query(SharedList.list_id)
            .join(GroceryList, GroceryList.id == SharedList.list_id)
            .filter(
                GroceryList.owner_id == owner_id,
                SharedList.status == ShareStatus.PENDING,
            )
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def delete_for_user(self, user_id: int) -> None:
        """Drop every share the user sent or received."""
        shares = (
            self.db.query(SharedList)
            .filter(or_(SharedList.owner_id == user_id, SharedList.shared_with_id == user_id))
            .all()
        )
        for share in shares:
            self.db.delete(share)
        self.db.flush()
