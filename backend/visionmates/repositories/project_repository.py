from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import and_, or_, select

from visionmates.exceptions import ProjectNotFoundError
from visionmates.models.participation_db import ParticipationDB
from visionmates.models.project import (
    Comment,
    DiscoverCursor,
    DiscoverParticipation,
    ParticipationType,
    ProgressUpdate,
    Project,
    ProjectWithCreator,
)
from visionmates.models.project_db import CommentDB, ProgressUpdateDB, ProjectDB
from visionmates.models.user import User
from visionmates.repositories.base import BaseRepository
from visionmates.repositories.user_repository import user_to_public


class ProjectRepository(BaseRepository):
    """Repository for projects and the posts hanging off them."""

    def _project_db_to_model(self, project_db: ProjectDB) -> Project:
        """Convert database model to domain model."""
        return Project(
            id=project_db.id,
            title=project_db.title,
            description=project_db.description,
            creator_id=project_db.creator_id,
            is_active=project_db.is_active,
            created_at=project_db.created_at,
            updated_at=project_db.updated_at,
        )

    def _progress_db_to_model(self, update_db: ProgressUpdateDB) -> ProgressUpdate:
        return ProgressUpdate(
            id=update_db.id,
            project_id=update_db.project_id,
            user_id=update_db.user_id,
            title=update_db.title,
            content=update_db.content,
            created_at=update_db.created_at,
        )

    def _comment_db_to_model(self, comment_db: CommentDB) -> Comment:
        return Comment(
            id=comment_db.id,
            project_id=comment_db.project_id,
            user_id=comment_db.user_id,
            content=comment_db.content,
            created_at=comment_db.created_at,
        )

    async def _get_project_db(self, project_id: str) -> ProjectDB:
        result = await self.session.execute(select(ProjectDB).where(ProjectDB.id == project_id))
        project_db = result.scalar_one_or_none()
        if not project_db:
            raise ProjectNotFoundError(project_id)
        return project_db

    async def create_project(
        self,
        creator_id: str,
        title: str,
        description: str,
        created_at: datetime | None = None,
        project_id: str | None = None,
    ) -> Project:
        project_db = ProjectDB(
            id=project_id or uuid4().hex,
            creator_id=creator_id,
            title=title,
            description=description,
            is_active=True,
        )
        if created_at is not None:
            project_db.created_at = created_at
            project_db.updated_at = created_at
        self.session.add(project_db)
        await self.session.commit()
        await self.session.refresh(project_db)
        return self._project_db_to_model(project_db)

    async def get_project(self, project_id: str) -> Project:
        return self._project_db_to_model(await self._get_project_db(project_id))

    async def project_exists(self, project_id: str) -> bool:
        result = await self.session.execute(select(ProjectDB.id).where(ProjectDB.id == project_id))
        return result.scalar_one_or_none() is not None

    async def list_active_projects(self, limit: int = 100) -> list[Project]:
        result = await self.session.execute(
            select(ProjectDB)
            .where(ProjectDB.is_active.is_(True))
            .order_by(ProjectDB.created_at.desc(), ProjectDB.id.desc())
            .limit(limit)
        )
        return [self._project_db_to_model(p) for p in result.scalars().all()]

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> Project:
        project_db = await self._get_project_db(project_id)
        for field in ("title", "description", "is_active"):
            if field in updates:
                setattr(project_db, field, updates[field])
        project_db.updated_at = datetime.now(UTC)
        await self.session.commit()
        await self.session.refresh(project_db)
        return self._project_db_to_model(project_db)

    async def deactivate_project(self, project_id: str) -> Project:
        return await self.update_project(project_id, {"is_active": False})

    async def list_discover_page(
        self,
        limit: int,
        cursor: DiscoverCursor | None = None,
    ) -> list[ProjectWithCreator]:
        """Active projects newest first, strictly after ``cursor`` in (created_at, id) order."""
        query = (
            select(ProjectDB, User)
            .join(User, ProjectDB.creator_id == User.id)
            .where(ProjectDB.is_active.is_(True))
        )
        if cursor is not None:
            query = query.where(
                or_(
                    ProjectDB.created_at < cursor.last_created_at,
                    and_(
                        ProjectDB.created_at == cursor.last_created_at,
                        ProjectDB.id < cursor.last_id,
                    ),
                )
            )
        result = await self.session.execute(
            query.order_by(ProjectDB.created_at.desc(), ProjectDB.id.desc()).limit(limit)
        )
        rows = result.all()

        participations: dict[str, list[DiscoverParticipation]] = {}
        project_ids = [project_db.id for project_db, _ in rows]
        if project_ids:
            part_result = await self.session.execute(
                select(ParticipationDB)
                .where(ParticipationDB.project_id.in_(project_ids))
                .order_by(ParticipationDB.created_at.asc())
            )
            for part in part_result.scalars().all():
                participations.setdefault(part.project_id, []).append(
                    DiscoverParticipation(type=ParticipationType(part.type), user_id=part.user_id)
                )

        return [
            ProjectWithCreator(
                **self._project_db_to_model(project_db).model_dump(),
                creator=user_to_public(creator),
                participations=participations.get(project_db.id, []),
            )
            for project_db, creator in rows
        ]

    async def create_progress_update(
        self, project_id: str, user_id: str, title: str, content: str
    ) -> ProgressUpdate:
        update_db = ProgressUpdateDB(
            id=uuid4().hex,
            project_id=project_id,
            user_id=user_id,
            title=title,
            content=content,
        )
        self.session.add(update_db)
        await self.session.commit()
        await self.session.refresh(update_db)
        return self._progress_db_to_model(update_db)

    async def progress_update_exists(self, update_id: str) -> bool:
        result = await self.session.execute(
            select(ProgressUpdateDB.id).where(ProgressUpdateDB.id == update_id)
        )
        return result.scalar_one_or_none() is not None

    async def list_progress_updates(self, project_id: str) -> list[ProgressUpdate]:
        result = await self.session.execute(
            select(ProgressUpdateDB)
            .where(ProgressUpdateDB.project_id == project_id)
            .order_by(ProgressUpdateDB.created_at.desc())
        )
        return [self._progress_db_to_model(u) for u in result.scalars().all()]

    async def create_comment(self, project_id: str, user_id: str, content: str) -> Comment:
        comment_db = CommentDB(
            id=uuid4().hex,
            project_id=project_id,
            user_id=user_id,
            content=content,
        )
        self.session.add(comment_db)
        await self.session.commit()
        await self.session.refresh(comment_db)
        return self._comment_db_to_model(comment_db)

    async def comment_exists(self, comment_id: str) -> bool:
        result = await self.session.execute(select(CommentDB.id).where(CommentDB.id == comment_id))
        return result.scalar_one_or_none() is not None

    async def list_comments(self, project_id: str) -> list[Comment]:
        result = await self.session.execute(
            select(CommentDB)
            .where(CommentDB.project_id == project_id)
            .order_by(CommentDB.created_at.desc())
        )
        return [self._comment_db_to_model(c) for c in result.scalars().all()]
