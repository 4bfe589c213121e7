from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from .common import ApiModel

CLAP = "clap"


class ReactionTargetType(str, Enum):
    """Entity kinds a reaction can point at."""

    PROJECT = "project"
    PROGRESS_UPDATE = "progress_update"
    COMMENT = "comment"
    MESSAGE = "message"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class ToggleAction(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


class Reaction(ApiModel):
    id: str
    target_id: str
    target_type: ReactionTargetType
    user_id: str
    type: str = CLAP
    created_at: datetime


class ReactionToggleResult(ApiModel):
    action: ToggleAction
    count: int
    user_reacted: bool


class ReactionStatus(ApiModel):
    count: int
    user_reacted: bool = False


class ReactionList(ApiModel):
    reactions: list[Reaction] = Field(default_factory=list)
    count: int = 0
