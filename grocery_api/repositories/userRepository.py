from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import datetime
from typing import Optional
from grocery_api.models.user import User, UserSession
from ..repositories.repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def email_exists(self, email: str) -> bool:
        """Check if email already exists."""
        return self.get_by_email(email) is not None

    def update_password(self, user_id: int, hashed_password: str) -> Optional[User]:
        """Update user password."""
        return self.update(user_id, {"hashed_password": hashed_password})


class SessionRepository(BaseRepository[UserSession]):
    """Repository for bearer-token sessions."""

    def __init__(self, db: Session):
        super().__init__(UserSession, db)

    def add(self, user_id: int, token: str, expires_at: datetime) -> UserSession:
        return self.create(UserSession(user_id=user_id, token=token, expires_at=expires_at))

    def get_active(self, token: str, now: datetime) -> Optional[UserSession]:
        """Session for this token, if it has not expired yet."""
        return (
            self.db.query(UserSession)
            .filter(UserSession.token == token, UserSession.expires_at > now)
            .first()
        )

    def delete_by_token(self, token: str) -> int:
        """Remove the session for a token. Returns the number of rows removed."""
        return (
            self.db.query(UserSession)
            .filter(UserSession.token == token)
            .delete(synchronize_session=False)
        )
