from __future__ import annotations

from fastapi import APIRouter, Response, status

from visionmates.dependencies import CurrentUser, ProfileServiceDep
from visionmates.models.api import ProfileUpdateRequest, UserSkillRequest
from visionmates.models.common import UserAccount, UserProfile
from visionmates.models.skill import UserSkill

router = APIRouter(tags=["profiles"])


@router.get("/profile/{user_id}", response_model=UserProfile)
async def get_public_profile(user_id: str, service: ProfileServiceDep) -> UserProfile:
    return await service.get_public_profile(user_id)


@router.put("/profile", response_model=UserAccount)
async def update_profile(
    payload: ProfileUpdateRequest,
    service: ProfileServiceDep,
    current_user: CurrentUser,
) -> UserAccount:
    return await service.update_profile(
        current_user.id,
        display_name=payload.display_name,
        bio=payload.bio,
        skills=payload.skills,
        github_url=payload.github_url,
        portfolio_url=payload.portfolio_url,
    )


@router.get("/users/{user_id}/skills", response_model=list[UserSkill])
async def list_user_skills(user_id: str, service: ProfileServiceDep) -> list[UserSkill]:
    return await service.list_user_skills(user_id)


@router.put("/profile/skills", response_model=UserSkill)
async def set_user_skill(
    payload: UserSkillRequest,
    service: ProfileServiceDep,
    current_user: CurrentUser,
) -> UserSkill:
    return await service.set_user_skill(current_user.id, payload.skill, payload.level)


@router.delete("/profile/skills/{skill}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user_skill(
    skill: str,
    service: ProfileServiceDep,
    current_user: CurrentUser,
) -> Response:
    await service.remove_user_skill(current_user.id, skill)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
