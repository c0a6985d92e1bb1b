from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_user_directory
from app.modules.auth.schemas import CurrentUserResponse
from app.modules.users.service import UserDirectory
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Current authenticated user and super user status (for frontend UI)."""
    profile = directory.find_user(current_user["id"])
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        username=profile.username if profile else None,
        name=profile.name if profile else None,
        is_super_user=directory.is_super_user(current_user),
    )
