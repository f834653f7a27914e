from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
from grocery_api.database import transaction
from grocery_api.models.grocery_list import GroceryList
from grocery_api.models.shared_list import SharedList, ShareStatus
from grocery_api.models.user import User
from grocery_api.repositories.grocery_list_repository import GroceryListRepository
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.repositories.shared_list_repository import SharedListRepository
from grocery_api.repositories.userRepository import UserRepository
from grocery_api.schemas.grocery_list import GroceryItemResponse
from grocery_api.schemas.sharing import (
    AcceptedShareResponse,
    ShareDecisionResponse,
    SharedListResponse,
)
from grocery_api.core.exception import ConflictException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class SharingService:
    """
    Service layer for list sharing.

    A share moves from pending to accepted, or is deleted on rejection.
    Accepting copies the list's item names into the recipient's master
    list; reading accepted shares repeats that copy for items added since.
    """

    def __init__(self, db: Session):
        self.db = db
        self.shared_list_repo = SharedListRepository(db)
        self.grocery_list_repo = GroceryListRepository(db)
        self.master_list_repo = MasterListRepository(db)
        self.user_repo = UserRepository(db)

    def share_list(self, owner: User, list_id: int, email: str) -> SharedList:
        """
        Invite a recipient, by email, to one of the caller's lists.

        Raises:
            ResourceNotFoundException: If the caller owns no such list
            ConflictException: If the list already has an active share,
                or the caller invites themselves
        """
        grocery_list = self.grocery_list_repo.get_owned(list_id, owner.id)
        if not grocery_list:
            raise ResourceNotFoundException("Grocery list", list_id)

        email = email.strip().lower()
        if email == owner.email.lower():
            raise ConflictException("Cannot share list with yourself")

        if self.shared_list_repo.get_active_for_list(list_id):
            raise ConflictException("List is already shared", "This list already has a pending or accepted share")

        recipient = self.user_repo.get_by_email(email)

        with transaction(self.db):
            share = self.shared_list_repo.create(
                SharedList(
                    list_id=list_id,
                    owner_id=owner.id,
                    shared_with_email=email,
                    shared_with_id=recipient.id if recipient else None,
                    status=ShareStatus.PENDING,
                )
            )

        logger.info("List %s shared by user %s with %s", list_id, owner.id, email)
        return share

    def respond_to_share(self, share_id: int, user: User, status: str) -> ShareDecisionResponse:
        """
        Accept or reject a share addressed to the caller.

        Raises:
            ResourceNotFoundException: If no such share is addressed to the caller
            ConflictException: If the share was already answered
        """
        share = self.shared_list_repo.get_addressed_to(share_id, user)
        if not share:
            raise ResourceNotFoundException("Shared list", share_id)

        if share.status != ShareStatus.PENDING:
            raise ConflictException(f"This share has already been {share.status.value}")

        if status == ShareStatus.ACCEPTED.value:
            with transaction(self.db):
                self._accept(share, user)
            response = SharedListResponse.model_validate(share)
            message = "Share accepted"
        else:
            with transaction(self.db):
                response = SharedListResponse.model_validate(share).model_copy(
                    update={"status": ShareStatus.REJECTED}
                )
                self._reject(share)
            message = "Share rejected"

        logger.info("Share %s %s by user %s", share_id, status, user.id)
        return ShareDecisionResponse(message=message, share=response)

    def _accept(self, share: SharedList, user: User) -> None:
        share.status = ShareStatus.ACCEPTED
        share.shared_with_id = user.id

        grocery_list = share.grocery_list
        grocery_list.is_shared = True
        grocery_list.shared_with_email = user.email.lower()
        self.db.flush()

        added = self._copy_missing_items(grocery_list, user.id)
        logger.debug("Copied %d items from list %s to user %s", added, grocery_list.id, user.id)

    def _reject(self, share: SharedList) -> None:
        grocery_list = share.grocery_list
        self.shared_list_repo.delete(share.id)

        if self.shared_list_repo.count_pending_for_list(grocery_list.id) == 0:
            grocery_list.is_shared = False
            grocery_list.shared_with_email = None
            self.db.flush()

    def _copy_missing_items(self, grocery_list: GroceryList, user_id: int) -> int:
        """Insert list item names absent (case-insensitively) from the user's master list."""
        master_list = self.master_list_repo.get_or_create(user_id)
        existing = self.master_list_repo.get_item_names(master_list.id)

        added = 0
        for item in self.grocery_list_repo.get_items(grocery_list.id):
            name = item.name
            if name.lower() in existing:
                continue
            self.master_list_repo.get_or_create_item(master_list.id, name)
            existing.add(name.lower())
            added += 1
        return added

    def list_pending_shares(self, user: User) -> List[SharedList]:
        """Shares awaiting the caller's answer, newest first."""
        return self.shared_list_repo.get_received(user, ShareStatus.PENDING)

    def list_accepted_shares(self, user: User) -> List[AcceptedShareResponse]:
        """
        Lists shared with the caller, with their items.

        Also catches the caller's master list up with items added to each
        shared list since the last read. The catch-up is best effort and
        never fails the read.
        """
        shares = self.shared_list_repo.get_received(user, ShareStatus.ACCEPTED)

        for share in shares:
            try:
                with transaction(self.db):
                    self._copy_missing_items(share.grocery_list, user.id)
            except SQLAlchemyError:
                logger.warning(
                    "Could not sync shared list %s for user %s",
                    share.list_id,
                    user.id,
                    exc_info=True,
                )

        return [
            AcceptedShareResponse.model_validate(share).model_copy(
                update={
                    "items": [
                        GroceryItemResponse.model_validate(item)
                        for item in self.grocery_list_repo.get_items(share.list_id)
                    ]
                }
            )
            for share in shares
        ]
