from __future__ import annotations

import logging
from datetime import datetime

from visionmates.exceptions import InvalidArgumentError, ProjectNotFoundError
from visionmates.models.preference import LikedProjectsPage, PreferenceToggleResult
from visionmates.models.reaction import ToggleAction
from visionmates.repositories.preference_repository import (
    PreferenceRepository,
    ProjectHideRepository,
    ProjectLikeRepository,
)
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.services.discovery_service import normalize_timestamp

logger = logging.getLogger(__name__)


class PreferenceService:
    """Swipe feedback on discovered projects: likes and hides."""

    def __init__(
        self,
        like_repository: ProjectLikeRepository,
        hide_repository: ProjectHideRepository,
        project_repository: ProjectRepository,
        page_size: int = 12,
        max_page_size: int = 100,
    ):
        self.like_repository = like_repository
        self.hide_repository = hide_repository
        self.project_repository = project_repository
        self.page_size = page_size
        self.max_page_size = max_page_size

    async def _toggle(
        self, repository: PreferenceRepository, user_id: str, project_id: str
    ) -> PreferenceToggleResult:
        if not await self.project_repository.project_exists(project_id):
            raise ProjectNotFoundError(project_id)

        if await repository.remove(user_id, project_id):
            action = ToggleAction.REMOVED
        else:
            await repository.add(user_id, project_id)
            action = ToggleAction.ADDED

        logger.info(
            "project preference toggled",
            extra={
                "table": repository.model.__tablename__,
                "project_id": project_id,
                "user_id": user_id,
                "action": action.value,
            },
        )
        return PreferenceToggleResult(action=action, active=action is ToggleAction.ADDED)

    async def toggle_like(self, user_id: str, project_id: str) -> PreferenceToggleResult:
        return await self._toggle(self.like_repository, user_id, project_id)

    async def toggle_hide(self, user_id: str, project_id: str) -> PreferenceToggleResult:
        return await self._toggle(self.hide_repository, user_id, project_id)

    async def is_liked(self, user_id: str, project_id: str) -> bool:
        return await self.like_repository.contains(user_id, project_id)

    async def is_hidden(self, user_id: str, project_id: str) -> bool:
        return await self.hide_repository.contains(user_id, project_id)

    async def list_liked_projects(
        self,
        user_id: str,
        limit: int | None = None,
        cursor_created_at: datetime | None = None,
    ) -> LikedProjectsPage:
        if limit is None:
            limit = self.page_size
        if limit < 1 or limit > self.max_page_size:
            raise InvalidArgumentError(f"limit must be between 1 and {self.max_page_size}")
        if cursor_created_at is not None:
            cursor_created_at = normalize_timestamp(cursor_created_at)

        likes = await self.like_repository.list_with_projects(user_id, limit, cursor_created_at)
        return LikedProjectsPage(
            likes=likes,
            has_more=len(likes) == limit,
            next_cursor=likes[-1].created_at if likes else None,
        )
