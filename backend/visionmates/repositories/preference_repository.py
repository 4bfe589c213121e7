from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from visionmates.models.preference import LikedProject
from visionmates.models.preference_db import ProjectHideDB, ProjectLikeDB
from visionmates.models.project import Project, ProjectWithCreator
from visionmates.models.project_db import ProjectDB
from visionmates.models.user import User
from visionmates.repositories.base import BaseRepository
from visionmates.repositories.user_repository import user_to_public

_PAIR_KEY = ("user_id", "project_id")


class PreferenceRepository(BaseRepository):
    """Boolean (user, project) membership; one instance per table."""

    def __init__(self, session, model: type[ProjectLikeDB] | type[ProjectHideDB]):
        super().__init__(session)
        self.model = model

    async def add(self, user_id: str, project_id: str) -> bool:
        inserted = await self.insert_ignore(
            self.model,
            {"user_id": user_id, "project_id": project_id},
            _PAIR_KEY,
        )
        await self.session.commit()
        return inserted

    async def remove(self, user_id: str, project_id: str) -> int:
        removed = await self.delete_where(
            self.model,
            self.model.user_id == user_id,
            self.model.project_id == project_id,
        )
        await self.session.commit()
        return removed

    async def contains(self, user_id: str, project_id: str) -> bool:
        result = await self.session.execute(
            select(self.model.project_id).where(
                self.model.user_id == user_id,
                self.model.project_id == project_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def list_with_projects(
        self,
        user_id: str,
        limit: int,
        before: datetime | None = None,
    ) -> list[LikedProject]:
        """Entries newest first, strictly older than ``before``, joined with active projects."""
        query = (
            select(self.model.created_at, ProjectDB, User)
            .join(ProjectDB, ProjectDB.id == self.model.project_id)
            .join(User, User.id == ProjectDB.creator_id)
            .where(self.model.user_id == user_id, ProjectDB.is_active.is_(True))
        )
        if before is not None:
            query = query.where(self.model.created_at < before)
        result = await self.session.execute(
            query.order_by(self.model.created_at.desc()).limit(limit)
        )
        return [
            LikedProject(
                created_at=created_at,
                project=ProjectWithCreator(
                    **Project.model_validate(project_db).model_dump(),
                    creator=user_to_public(creator),
                ),
            )
            for created_at, project_db, creator in result.all()
        ]


class ProjectLikeRepository(PreferenceRepository):
    def __init__(self, session):
        super().__init__(session, ProjectLikeDB)


class ProjectHideRepository(PreferenceRepository):
    def __init__(self, session):
        super().__init__(session, ProjectHideDB)
