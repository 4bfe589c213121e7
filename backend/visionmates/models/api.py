from __future__ import annotations

from pydantic import Field

from .common import ApiModel


class ProjectCreateRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class ProjectUpdateRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class ParticipationRequest(ApiModel):
    # Validated against ParticipationType by the service so that a bad value
    # is reported as InvalidArgument rather than a schema error.
    type: str


class ProgressUpdateCreateRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class CommentCreateRequest(ApiModel):
    content: str = Field(..., min_length=1)


class ReactionRequest(ApiModel):
    target_id: str = Field(..., min_length=1)
    target_type: str


class MessageCreateRequest(ApiModel):
    content: str
    recipient_id: str = Field(..., min_length=1)


class ProfileUpdateRequest(ApiModel):
    display_name: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    github_url: str | None = None
    portfolio_url: str | None = None


class UserSkillRequest(ApiModel):
    skill: str
    level: int = Field(default=1, ge=1, le=5)


class ProjectSkillRequest(ApiModel):
    skill: str
    priority: int = Field(default=1, ge=1, le=5)


class HealthResponse(ApiModel):
    status: str = "ok"
