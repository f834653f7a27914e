from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ...database import get_db
from ...schemas.user import UserCreate, UserResponse, LoginRequest, AuthResponse, Token
from ...schemas.result import Result
from ...services.authService import AuthService
from ...dependencies import get_current_user, oauth2_scheme
from ...models.user import User

router = APIRouter()


@router.post(
    "/register",
    response_model=Result[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user and open a session.

    - **email**: Valid email address (unique, stored lower-cased)
    - **password**: Password (min 6 chars)
    - **name**: Optional display name

    Returns:
        Result[AuthResponse]: Session token and the created user
    """
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.register(user_data))


@router.post("/login", response_model=Result[AuthResponse])
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Login with email and password.

    Unknown email and wrong password both answer 401 "Invalid credentials".
    """
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.login(credentials.email, credentials.password))


@router.post("/swagger-login", response_model=Token)
async def swagger_login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    service = AuthService(db)
    auth = service.login(form_data.username, form_data.password)
    return Token(
        access_token=auth.token,
        token_type=auth.token_type
    )


@router.post("/demo", response_model=Result[AuthResponse])
async def demo_login(db: Session = Depends(get_db)):
    """Sign in as the shared demo account, resetting its data first."""
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.demo_login())


@router.post("/logout", response_model=Result[dict])
async def logout(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
):
    """
    Logout user.

    Deletes the session row of the presented token. Logging out twice, or
    with an unknown token, still succeeds.
    """
    AuthService(db).logout(token)
    return Result.successful(data={"message": "Logged out successfully"})


@router.get("/user", response_model=Result[UserResponse])
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's profile.

    Requires valid access token in Authorization header.
    """
    return Result.successful(data=current_user)
