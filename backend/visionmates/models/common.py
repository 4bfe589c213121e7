from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PublicUser(ApiModel):
    """Minimal creator projection safe for unauthenticated feeds."""

    id: str
    first_name: str | None = None
    profile_image_url: str | None = None


class UserProfile(ApiModel):
    """Public profile; never carries the email address."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    bio: str | None = None
    skills: list[str] = []
    github_url: str | None = None
    portfolio_url: str | None = None
    avatar_url: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserAccount(UserProfile):
    """The caller's own record."""

    email: str | None = None
