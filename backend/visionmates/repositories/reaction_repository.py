from __future__ import annotations

from uuid import uuid4

from sqlalchemy import func, select

from visionmates.models.reaction import CLAP, Reaction, ReactionTargetType
from visionmates.models.reaction_db import ReactionDB
from visionmates.repositories.base import BaseRepository

_UNIQUE_KEY = ("target_id", "target_type", "user_id", "type")


class ReactionRepository(BaseRepository):
    """Repository for polymorphic reactions."""

    def _reaction_db_to_model(self, reaction_db: ReactionDB) -> Reaction:
        return Reaction(
            id=reaction_db.id,
            target_id=reaction_db.target_id,
            target_type=ReactionTargetType(reaction_db.target_type),
            user_id=reaction_db.user_id,
            type=reaction_db.type,
            created_at=reaction_db.created_at,
        )

    async def add(
        self,
        target_id: str,
        target_type: ReactionTargetType,
        user_id: str,
        reaction_type: str = CLAP,
    ) -> bool:
        inserted = await self.insert_ignore(
            ReactionDB,
            {
                "id": uuid4().hex,
                "target_id": target_id,
                "target_type": target_type.value,
                "user_id": user_id,
                "type": reaction_type,
            },
            _UNIQUE_KEY,
        )
        await self.session.commit()
        return inserted

    async def remove(
        self,
        target_id: str,
        target_type: ReactionTargetType,
        user_id: str,
        reaction_type: str = CLAP,
    ) -> int:
        removed = await self.delete_where(
            ReactionDB,
            ReactionDB.target_id == target_id,
            ReactionDB.target_type == target_type.value,
            ReactionDB.user_id == user_id,
            ReactionDB.type == reaction_type,
        )
        await self.session.commit()
        return removed

    async def count(self, target_id: str, target_type: ReactionTargetType) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ReactionDB)
            .where(
                ReactionDB.target_id == target_id,
                ReactionDB.target_type == target_type.value,
            )
        )
        return result.scalar_one()

    async def has_reacted(
        self,
        target_id: str,
        target_type: ReactionTargetType,
        user_id: str,
        reaction_type: str = CLAP,
    ) -> bool:
        result = await self.session.execute(
            select(ReactionDB.id).where(
                ReactionDB.target_id == target_id,
                ReactionDB.target_type == target_type.value,
                ReactionDB.user_id == user_id,
                ReactionDB.type == reaction_type,
            )
        )
        return result.scalar_one_or_none() is not None

    async def list_reactions(self, target_id: str, target_type: ReactionTargetType) -> list[Reaction]:
        result = await self.session.execute(
            select(ReactionDB)
            .where(
                ReactionDB.target_id == target_id,
                ReactionDB.target_type == target_type.value,
            )
            .order_by(ReactionDB.created_at.asc())
        )
        return [self._reaction_db_to_model(r) for r in result.scalars().all()]
