from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging
from typing import Optional
from ..models.user import User
from ..database import transaction
from ..services.userService import UserService
from ..services.demo_service import DemoService
from ..repositories.userRepository import SessionRepository
from ..schemas.user import UserCreate, UserResponse, AuthResponse
from ..utils.security import create_access_token, decode_access_token
from ..config import settings
from ..core.exception import AuthenticationException

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for authentication and session operations."""

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)
        self.session_repo = SessionRepository(db)

    def _issue_session(self, user: User) -> str:
        """Sign a token for the user and record it as a session row."""
        token, expires_at = create_access_token(
            data={"sub": str(user.id), "uuid": user.uuid},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        self.session_repo.add(user.id, token, expires_at)
        return token

    def _auth_response(self, token: str, user: User) -> AuthResponse:
        return AuthResponse(token=token, user=UserResponse.model_validate(user))

    def register(self, user_data: UserCreate) -> AuthResponse:
        """
        Register a new user and sign them in.

        Raises:
            DuplicateResourceException: If the email is already registered
        """
        with transaction(self.db):
            user = self.user_service.create_user(user_data)
            token = self._issue_session(user)
        logger.info("Registered user %s", user.id)
        return self._auth_response(token, user)

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Issue a new session. Earlier sessions of the user stay valid.

        Unknown email and wrong password fail identically so login never
        reveals whether an account exists.
        """
        user = self.user_service.authenticate_user(email, password)
        if not user:
            raise AuthenticationException("Invalid credentials")

        with transaction(self.db):
            token = self._issue_session(user)
        return self._auth_response(token, user)

    def demo_login(self) -> AuthResponse:
        """Reset the shared demo tenant and sign in as it."""
        with transaction(self.db):
            user = DemoService(self.db).reset_demo_tenant()
            token = self._issue_session(user)
        return self._auth_response(token, user)

    def logout(self, token: Optional[str]) -> None:
        """Delete the session for this token; a missing session is not an error."""
        if not token:
            return
        with transaction(self.db):
            self.session_repo.delete_by_token(token)

    def resolve_session(self, token: Optional[str]) -> User:
        """
        Return the user behind a bearer token.

        Checked against the session table on every call: the token must be
        well-signed, present, and not past its expiry.
        """
        if not token:
            raise AuthenticationException("No token provided")

        if decode_access_token(token) is None:
            raise AuthenticationException("Invalid token")

        session = self.session_repo.get_active(token, datetime.now(timezone.utc))
        if session is None:
            raise AuthenticationException("Invalid or expired token")

        user = self.user_service.get_user_by_id(session.user_id)
        if user is None:
            raise AuthenticationException("User not found")
        return user
