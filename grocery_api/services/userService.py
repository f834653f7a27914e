from sqlalchemy.orm import Session
from typing import Optional
from grocery_api.models.user import User
from ..database import transaction
from ..repositories.userRepository import UserRepository
from ..repositories.shared_list_repository import SharedListRepository
from ..schemas.user import UserCreate, UserUpdate
from ..utils.security import get_password_hash, verify_password
from ..core.exception import (
    ResourceNotFoundException,
    DuplicateResourceException,
    BadRequestException,
)


class UserService:
    """Accounts: creation, credentials and profile edits."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.shared_list_repo = SharedListRepository(db)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.user_repo.get(user_id)

    def create_user(self, user_data: UserCreate) -> User:
        """
        Add an account with a lower-cased email and a hashed password.

        Runs inside the caller's transaction (registration opens a session
        in the same unit of work).

        Raises:
            DuplicateResourceException: If the email is taken, in any case
        """
        if self.user_repo.email_exists(user_data.email):
            raise DuplicateResourceException("User", user_data.email)

        return self.user_repo.create(
            User(
                email=user_data.email.strip().lower(),
                hashed_password=get_password_hash(user_data.password),
                name=user_data.name,
                is_demo=False,
            )
        )

    def update_user(self, user_id: int, user_data: UserUpdate) -> User:
        with transaction(self.db):
            user = self.user_repo.update(user_id, user_data.model_dump(exclude_unset=True))
            if user is None:
                raise ResourceNotFoundException("User", user_id)
        return user

    def delete_user(self, user_id: int) -> None:
        """
        Delete the account; owned rows go with it through ORM cascades.

        Shares the user received are withdrawn first, so a later account
        registered under the same email inherits no list access.
        """
        with transaction(self.db):
            user = self.user_repo.get(user_id)
            if user is None:
                raise ResourceNotFoundException("User", user_id)
            self._withdraw_received_shares(user)
            self.user_repo.delete(user_id)

    def _withdraw_received_shares(self, user: User) -> None:
        shares = self.shared_list_repo.get_all_received(user)
        grocery_lists = {share.grocery_list for share in shares}
        for share in shares:
            self.db.delete(share)
        self.db.flush()

        for grocery_list in grocery_lists:
            if self.shared_list_repo.get_active_for_list(grocery_list.id) is None:
                grocery_list.is_shared = False
                grocery_list.shared_with_email = None
        self.db.expire(user, ["received_shares"])
        self.db.flush()

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """The matching user, or None for an unknown email or a wrong password."""
        user = self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            return None
        return user

    def change_password(self, user_id: int, old_password: str, new_password: str) -> User:
        user = self.user_repo.get(user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)

        if not verify_password(old_password, user.hashed_password):
            raise BadRequestException("Old password is incorrect")

        with transaction(self.db):
            user = self.user_repo.update_password(user_id, get_password_hash(new_password))
        return user
