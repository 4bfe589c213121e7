from __future__ import annotations

from uuid import uuid4

from sqlalchemy import func, select

from visionmates.models.participation_db import ParticipationDB
from visionmates.models.project import Participation, ParticipationType
from visionmates.repositories.base import BaseRepository

_UNIQUE_KEY = ("project_id", "user_id", "type")


class ParticipationRepository(BaseRepository):
    """Repository for participation signals."""

    def _participation_db_to_model(self, participation_db: ParticipationDB) -> Participation:
        return Participation(
            id=participation_db.id,
            project_id=participation_db.project_id,
            user_id=participation_db.user_id,
            type=ParticipationType(participation_db.type),
            created_at=participation_db.created_at,
        )

    async def _insert_participation(
        self, project_id: str, user_id: str, type_: ParticipationType
    ) -> bool:
        return await self.insert_ignore(
            ParticipationDB,
            {
                "id": uuid4().hex,
                "project_id": project_id,
                "user_id": user_id,
                "type": type_.value,
            },
            _UNIQUE_KEY,
        )

    async def replace_for_user(
        self, project_id: str, user_id: str, type_: ParticipationType
    ) -> Participation:
        """Drop every participation the user holds on the project, then add ``type_``."""
        await self.delete_where(
            ParticipationDB,
            ParticipationDB.project_id == project_id,
            ParticipationDB.user_id == user_id,
        )
        await self._insert_participation(project_id, user_id, type_)
        await self.session.commit()
        participation = await self.get_participation(project_id, user_id, type_)
        if participation is None:  # pragma: no cover - removed by a concurrent request
            raise RuntimeError("participation removed concurrently after insert")
        return participation

    async def add(
        self, project_id: str, user_id: str, type_: ParticipationType
    ) -> Participation | None:
        """Insert without touching other types. Returns None when the row already existed."""
        inserted = await self._insert_participation(project_id, user_id, type_)
        await self.session.commit()
        if not inserted:
            return None
        return await self.get_participation(project_id, user_id, type_)

    async def remove(self, project_id: str, user_id: str, type_: ParticipationType) -> int:
        removed = await self.delete_where(
            ParticipationDB,
            ParticipationDB.project_id == project_id,
            ParticipationDB.user_id == user_id,
            ParticipationDB.type == type_.value,
        )
        await self.session.commit()
        return removed

    async def get_participation(
        self, project_id: str, user_id: str, type_: ParticipationType
    ) -> Participation | None:
        result = await self.session.execute(
            select(ParticipationDB).where(
                ParticipationDB.project_id == project_id,
                ParticipationDB.user_id == user_id,
                ParticipationDB.type == type_.value,
            )
        )
        participation_db = result.scalar_one_or_none()
        return self._participation_db_to_model(participation_db) if participation_db else None

    async def list_for_user(self, project_id: str, user_id: str) -> list[Participation]:
        """Newest first; more than one row only appears through the strict add path."""
        result = await self.session.execute(
            select(ParticipationDB)
            .where(
                ParticipationDB.project_id == project_id,
                ParticipationDB.user_id == user_id,
            )
            .order_by(ParticipationDB.created_at.desc())
        )
        return [self._participation_db_to_model(p) for p in result.scalars().all()]

    async def list_for_project(self, project_id: str) -> list[Participation]:
        result = await self.session.execute(
            select(ParticipationDB)
            .where(ParticipationDB.project_id == project_id)
            .order_by(ParticipationDB.created_at.asc())
        )
        return [self._participation_db_to_model(p) for p in result.scalars().all()]

    async def count_by_type(self, project_id: str) -> dict[ParticipationType, int]:
        result = await self.session.execute(
            select(ParticipationDB.type, func.count())
            .where(ParticipationDB.project_id == project_id)
            .group_by(ParticipationDB.type)
        )
        counts = {type_: 0 for type_ in ParticipationType}
        for type_value, count in result.all():
            counts[ParticipationType(type_value)] = count
        return counts
