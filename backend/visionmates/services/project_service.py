from __future__ import annotations

import logging
from typing import Any

from visionmates.exceptions import ForbiddenError
from visionmates.models.project import (
    Comment,
    ParticipationWithUser,
    ProgressUpdate,
    Project,
    ProjectDetails,
)
from visionmates.repositories.participation_repository import ParticipationRepository
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ProjectService:
    """Project lifecycle plus the progress timeline and comments."""

    def __init__(
        self,
        repository: ProjectRepository,
        participation_repository: ParticipationRepository,
        user_repository: UserRepository,
    ):
        self.repository = repository
        self.participation_repository = participation_repository
        self.user_repository = user_repository

    async def _get_owned_project(self, project_id: str, caller_id: str, action: str) -> Project:
        project = await self.repository.get_project(project_id)
        if project.creator_id != caller_id:
            logger.warning(
                "project ownership check failed",
                extra={"project_id": project_id, "user_id": caller_id, "action": action},
            )
            raise ForbiddenError(f"Not authorized to {action} this project")
        return project

    async def create_project(self, creator_id: str, title: str, description: str) -> Project:
        project = await self.repository.create_project(
            creator_id=creator_id,
            title=title,
            description=description,
        )
        logger.info("project created", extra={"project_id": project.id, "user_id": creator_id})
        return project

    async def get_project(self, project_id: str) -> Project:
        return await self.repository.get_project(project_id)

    async def list_projects(self) -> list[Project]:
        return await self.repository.list_active_projects()

    async def get_project_details(self, project_id: str) -> ProjectDetails:
        project = await self.repository.get_project(project_id)
        participations = await self.participation_repository.list_for_project(project_id)
        progress_updates = await self.repository.list_progress_updates(project_id)
        comments = await self.repository.list_comments(project_id)

        user_ids = {project.creator_id}
        user_ids.update(p.user_id for p in participations)
        user_ids.update(u.user_id for u in progress_updates)
        user_ids.update(c.user_id for c in comments)
        profiles = await self.user_repository.get_profiles(user_ids)

        return ProjectDetails(
            **project.model_dump(),
            creator=profiles.get(project.creator_id),
            participations=[
                ParticipationWithUser(**p.model_dump(), user=profiles.get(p.user_id))
                for p in participations
            ],
            progress_updates=[
                u.model_copy(update={"user": profiles.get(u.user_id)}) for u in progress_updates
            ],
            comments=[c.model_copy(update={"user": profiles.get(c.user_id)}) for c in comments],
        )

    async def update_project(
        self, project_id: str, caller_id: str, updates: dict[str, Any]
    ) -> Project:
        """Creator-only edit of title, description and the active flag."""
        await self._get_owned_project(project_id, caller_id, "edit")
        allowed = {k: v for k, v in updates.items() if k in {"title", "description", "is_active"}}
        return await self.repository.update_project(project_id, allowed)

    async def delete_project(self, project_id: str, caller_id: str) -> None:
        await self._get_owned_project(project_id, caller_id, "delete")
        await self.repository.deactivate_project(project_id)
        logger.info("project deactivated", extra={"project_id": project_id, "user_id": caller_id})

    async def add_progress_update(
        self, project_id: str, caller_id: str, title: str, content: str
    ) -> ProgressUpdate:
        project = await self.repository.get_project(project_id)
        if project.creator_id != caller_id:
            raise ForbiddenError("Only the project creator can add progress updates")
        return await self.repository.create_progress_update(project_id, caller_id, title, content)

    async def add_comment(self, project_id: str, caller_id: str, content: str) -> Comment:
        await self.repository.get_project(project_id)
        return await self.repository.create_comment(project_id, caller_id, content)
