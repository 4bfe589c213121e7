from __future__ import annotations

from datetime import datetime

from .common import ApiModel


class UserSkill(ApiModel):
    user_id: str
    skill: str
    level: int
    created_at: datetime


class ProjectRequiredSkill(ApiModel):
    project_id: str
    skill: str
    priority: int
    created_at: datetime
