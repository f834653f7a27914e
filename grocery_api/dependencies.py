from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models.user import User
from .config import settings
from .services.authService import AuthService

# auto_error is off so a missing header reaches AuthService and gets the
# standard failure envelope instead of FastAPI's bare 401.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/swagger-login", auto_error=False
)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get current authenticated user.

    The token must match a live row in the sessions table, so logging out
    revokes it immediately.

    Example:
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    return AuthService(db).resolve_session(token)
