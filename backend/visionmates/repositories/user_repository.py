from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select

from visionmates.models.common import PublicUser, UserAccount, UserProfile
from visionmates.models.user import User
from visionmates.repositories.base import BaseRepository


def user_to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        display_name=user.display_name,
        bio=user.bio,
        skills=list(user.skills or []),
        github_url=user.github_url,
        portfolio_url=user.portfolio_url,
        avatar_url=user.avatar_url,
        profile_image_url=user.profile_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def user_to_account(user: User) -> UserAccount:
    return UserAccount(**user_to_profile(user).model_dump(), email=user.email)


def user_to_public(user: User) -> PublicUser:
    return PublicUser(
        id=user.id,
        first_name=user.first_name,
        profile_image_url=user.profile_image_url,
    )


class UserRepository(BaseRepository):
    """Repository for User lookups and profile edits."""

    async def get_user(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def user_exists(self, user_id: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def get_profile(self, user_id: str) -> UserProfile | None:
        user = await self.get_user(user_id)
        return user_to_profile(user) if user else None

    async def get_profiles(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user_to_profile(user) for user in result.scalars().all()}

    async def update_profile(self, user_id: str, updates: dict[str, Any]) -> UserAccount | None:
        user = await self.get_user(user_id)
        if user is None:
            return None
        for field, value in updates.items():
            setattr(user, field, value)
        user.updated_at = datetime.now(UTC)
        await self.session.commit()
        await self.session.refresh(user)
        return user_to_account(user)
