from __future__ import annotations

from visionmates.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from visionmates.models.common import UserAccount, UserProfile
from visionmates.models.skill import ProjectRequiredSkill, UserSkill
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.repositories.skill_repository import SkillRepository
from visionmates.repositories.user_repository import UserRepository

MAX_DISPLAY_NAME_LENGTH = 100
MAX_BIO_LENGTH = 500
MAX_PROFILE_SKILLS = 10
MAX_SKILL_NAME_LENGTH = 50


def normalize_skill(skill: str) -> str:
    name = skill.strip()
    if not name or len(name) > MAX_SKILL_NAME_LENGTH:
        raise InvalidArgumentError(f"Skill must be 1-{MAX_SKILL_NAME_LENGTH} characters")
    return name


class ProfileService:
    """Public profiles, profile edits and skill lists."""

    def __init__(
        self,
        user_repository: UserRepository,
        skill_repository: SkillRepository,
        project_repository: ProjectRepository,
    ):
        self.user_repository = user_repository
        self.skill_repository = skill_repository
        self.project_repository = project_repository

    async def get_public_profile(self, user_id: str) -> UserProfile:
        profile = await self.user_repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def update_profile(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        bio: str | None = None,
        skills: list[str] | None = None,
        github_url: str | None = None,
        portfolio_url: str | None = None,
    ) -> UserAccount:
        """Overwrite the editable profile fields; empty values clear them."""
        if display_name and len(display_name) > MAX_DISPLAY_NAME_LENGTH:
            raise InvalidArgumentError("Display name too long")
        if bio and len(bio) > MAX_BIO_LENGTH:
            raise InvalidArgumentError("Bio too long")
        if skills and len(skills) > MAX_PROFILE_SKILLS:
            raise InvalidArgumentError("Invalid skills format or too many skills")

        account = await self.user_repository.update_profile(
            user_id,
            {
                "display_name": display_name or None,
                "bio": bio or None,
                "skills": [s.strip() for s in skills or [] if s.strip()],
                "github_url": github_url or None,
                "portfolio_url": portfolio_url or None,
            },
        )
        if account is None:
            raise NotFoundError("Profile not found")
        return account

    async def list_user_skills(self, user_id: str) -> list[UserSkill]:
        return await self.skill_repository.list_user_skills(user_id)

    async def set_user_skill(self, user_id: str, skill: str, level: int) -> UserSkill:
        return await self.skill_repository.upsert_user_skill(user_id, normalize_skill(skill), level)

    async def remove_user_skill(self, user_id: str, skill: str) -> None:
        await self.skill_repository.remove_user_skill(user_id, skill.strip())

    async def _ensure_creator(self, project_id: str, caller_id: str) -> None:
        project = await self.project_repository.get_project(project_id)
        if project.creator_id != caller_id:
            raise ForbiddenError("Only the project creator can manage required skills")

    async def list_project_skills(self, project_id: str) -> list[ProjectRequiredSkill]:
        await self.project_repository.get_project(project_id)
        return await self.skill_repository.list_project_skills(project_id)

    async def set_project_skill(
        self, project_id: str, caller_id: str, skill: str, priority: int
    ) -> ProjectRequiredSkill:
        await self._ensure_creator(project_id, caller_id)
        return await self.skill_repository.upsert_project_skill(
            project_id, normalize_skill(skill), priority
        )

    async def remove_project_skill(self, project_id: str, caller_id: str, skill: str) -> None:
        await self._ensure_creator(project_id, caller_id)
        await self.skill_repository.remove_project_skill(project_id, skill.strip())
