from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import ApiModel
from .project import ProjectWithCreator
from .reaction import ToggleAction


class PreferenceToggleResult(ApiModel):
    action: ToggleAction
    active: bool


class LikedProject(ApiModel):
    created_at: datetime
    project: ProjectWithCreator


class LikedProjectsPage(ApiModel):
    likes: list[LikedProject] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: datetime | None = None
