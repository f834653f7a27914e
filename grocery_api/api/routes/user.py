from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...dependencies import get_current_user
from ...models.user import User
from ...schemas.user import UserResponse, UserUpdate, PasswordChange
from ...schemas.result import Result
from ...services.userService import UserService

router = APIRouter()


@router.get("/me", response_model=Result[UserResponse])
async def read_profile(current_user: User = Depends(get_current_user)):
    return Result.successful(data=current_user)


@router.put("/me", response_model=Result[UserResponse])
async def rename_profile(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the display name shown to people you share lists with."""
    user = UserService(db).update_user(current_user.id, user_update)
    return Result.successful(data=user)


@router.post("/me/change-password", response_model=Result[UserResponse])
async def change_password(
    password_data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace the password. The old one must verify; existing sessions
    stay signed in.
    """
    user = UserService(db).change_password(
        current_user.id, password_data.old_password, password_data.new_password
    )
    return Result.successful(data=user)


@router.delete("/me", response_model=Result[dict])
async def delete_account(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Permanently delete the account with its sessions, lists, master list,
    tags and sent shares. Shares received from others are withdrawn.
    """
    UserService(db).delete_user(current_user.id)
    return Result.successful(data={"message": "Account deleted"})
