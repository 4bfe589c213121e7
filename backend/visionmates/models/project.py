from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from .common import ApiModel, PublicUser, UserProfile


class ParticipationType(str, Enum):
    """Participation signals, from weakest to strongest."""

    WATCH = "watch"
    RAISE_HAND = "raise_hand"
    COMMIT = "commit"


class Project(ApiModel):
    id: str
    title: str
    description: str
    creator_id: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class Participation(ApiModel):
    id: str
    project_id: str
    user_id: str
    type: ParticipationType
    created_at: datetime


class ParticipationWithUser(Participation):
    user: UserProfile | None = None


class DiscoverParticipation(ApiModel):
    """Participation as exposed on the public feed."""

    type: ParticipationType
    user_id: str


class ParticipationSummary(ApiModel):
    counts: dict[str, int]
    user_participation: ParticipationType | None = None


class ProgressUpdate(ApiModel):
    id: str
    project_id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    user: UserProfile | None = None


class Comment(ApiModel):
    id: str
    project_id: str
    user_id: str
    content: str
    created_at: datetime
    user: UserProfile | None = None


class ProjectWithCreator(Project):
    """Feed entry: project, public creator projection and raw participations."""

    creator: PublicUser
    participations: list[DiscoverParticipation] = Field(default_factory=list)


class ProjectDetails(Project):
    creator: UserProfile | None = None
    participations: list[ParticipationWithUser] = Field(default_factory=list)
    progress_updates: list[ProgressUpdate] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


class DiscoverCursor(ApiModel):
    """Position of the last row served; the next page starts strictly after it."""

    last_created_at: datetime
    last_id: str


class DiscoverPage(ApiModel):
    projects: list[ProjectWithCreator] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: DiscoverCursor | None = None
