from __future__ import annotations

from fastapi import APIRouter

from visionmates.dependencies import CurrentUser
from visionmates.models.common import UserAccount
from visionmates.repositories.user_repository import user_to_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserAccount)
async def get_current_user_info(current_user: CurrentUser) -> UserAccount:
    """Get current authenticated user information."""
    return user_to_account(current_user)
