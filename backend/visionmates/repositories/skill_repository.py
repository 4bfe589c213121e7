from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select

from visionmates.models.skill import ProjectRequiredSkill, UserSkill
from visionmates.models.skill_db import ProjectRequiredSkillDB, UserSkillDB
from visionmates.repositories.base import BaseRepository


class SkillRepository(BaseRepository):
    """Repository for user skills and project skill requirements.

    Re-adding an existing skill updates its level/priority in place.
    """

    async def upsert_user_skill(self, user_id: str, skill: str, level: int) -> UserSkill:
        await self.upsert(
            UserSkillDB,
            {
                "user_id": user_id,
                "skill": skill,
                "level": level,
                "created_at": datetime.now(UTC),
            },
            conflict_columns=("user_id", "skill"),
            update_columns=("level",),
        )
        await self.session.commit()
        result = await self.session.execute(
            select(UserSkillDB)
            .where(UserSkillDB.user_id == user_id, UserSkillDB.skill == skill)
            # Bypass the identity map so an updated level is reloaded
            .execution_options(populate_existing=True)
        )
        return UserSkill.model_validate(result.scalar_one())

    async def remove_user_skill(self, user_id: str, skill: str) -> int:
        removed = await self.delete_where(
            UserSkillDB, UserSkillDB.user_id == user_id, UserSkillDB.skill == skill
        )
        await self.session.commit()
        return removed

    async def list_user_skills(self, user_id: str) -> list[UserSkill]:
        result = await self.session.execute(
            select(UserSkillDB)
            .where(UserSkillDB.user_id == user_id)
            .order_by(UserSkillDB.level.desc(), UserSkillDB.skill.asc())
        )
        return [UserSkill.model_validate(row) for row in result.scalars().all()]

    async def upsert_project_skill(
        self, project_id: str, skill: str, priority: int
    ) -> ProjectRequiredSkill:
        await self.upsert(
            ProjectRequiredSkillDB,
            {
                "project_id": project_id,
                "skill": skill,
                "priority": priority,
                "created_at": datetime.now(UTC),
            },
            conflict_columns=("project_id", "skill"),
            update_columns=("priority",),
        )
        await self.session.commit()
        result = await self.session.execute(
            select(ProjectRequiredSkillDB)
            .where(
                ProjectRequiredSkillDB.project_id == project_id,
                ProjectRequiredSkillDB.skill == skill,
            )
            .execution_options(populate_existing=True)
        )
        return ProjectRequiredSkill.model_validate(result.scalar_one())

    async def remove_project_skill(self, project_id: str, skill: str) -> int:
        removed = await self.delete_where(
            ProjectRequiredSkillDB,
            ProjectRequiredSkillDB.project_id == project_id,
            ProjectRequiredSkillDB.skill == skill,
        )
        await self.session.commit()
        return removed

    async def list_project_skills(self, project_id: str) -> list[ProjectRequiredSkill]:
        result = await self.session.execute(
            select(ProjectRequiredSkillDB)
            .where(ProjectRequiredSkillDB.project_id == project_id)
            .order_by(ProjectRequiredSkillDB.priority.desc(), ProjectRequiredSkillDB.skill.asc())
        )
        return [ProjectRequiredSkill.model_validate(row) for row in result.scalars().all()]
