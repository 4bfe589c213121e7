from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from visionmates.dependencies import (
    CurrentUser,
    DiscoveryServiceDep,
    OptionalUser,
    ParticipationServiceDep,
    PreferenceServiceDep,
    ProfileServiceDep,
    ProjectServiceDep,
)
from visionmates.models.api import (
    CommentCreateRequest,
    ParticipationRequest,
    ProgressUpdateCreateRequest,
    ProjectCreateRequest,
    ProjectSkillRequest,
    ProjectUpdateRequest,
)
from visionmates.models.preference import PreferenceToggleResult
from visionmates.models.project import (
    Comment,
    DiscoverPage,
    Participation,
    ParticipationSummary,
    ProgressUpdate,
    Project,
    ProjectDetails,
)
from visionmates.models.skill import ProjectRequiredSkill
from visionmates.services.discovery_service import build_cursor

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(service: ProjectServiceDep) -> list[Project]:
    """Active projects, newest first."""
    return await service.list_projects()


@router.get("/discover", response_model=DiscoverPage)
async def discover_projects(
    service: DiscoveryServiceDep,
    limit: int | None = None,
    last_created_at: Annotated[datetime | None, Query(alias="lastCreatedAt")] = None,
    last_id: Annotated[str | None, Query(alias="lastId")] = None,
) -> DiscoverPage:
    return await service.get_page(limit=limit, cursor=build_cursor(last_created_at, last_id))


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> Project:
    return await service.create_project(
        creator_id=current_user.id,
        title=payload.title.strip(),
        description=payload.description,
    )


@router.get("/{project_id}", response_model=ProjectDetails)
async def get_project(project_id: str, service: ProjectServiceDep) -> ProjectDetails:
    return await service.get_project_details(project_id)


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> Project:
    return await service.update_project(
        project_id, current_user.id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> Response:
    await service.delete_project(project_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{project_id}/participate",
    response_model=Participation,
    status_code=status.HTTP_201_CREATED,
)
async def participate(
    project_id: str,
    payload: ParticipationRequest,
    service: ParticipationServiceDep,
    current_user: CurrentUser,
    strict: bool = False,
) -> Participation:
    """Set the caller's participation type.

    By default any previous type is replaced. ``strict=true`` only inserts
    the given type and answers 409 when it is already held.
    """
    if strict:
        return await service.add_participation_strict(project_id, current_user.id, payload.type)
    return await service.set_participation(project_id, current_user.id, payload.type)


@router.delete("/{project_id}/participate", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_participation(
    project_id: str,
    payload: ParticipationRequest,
    service: ParticipationServiceDep,
    current_user: CurrentUser,
) -> Response:
    await service.remove_participation(project_id, current_user.id, payload.type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/participation", response_model=ParticipationSummary)
async def get_participation_summary(
    project_id: str,
    service: ParticipationServiceDep,
    current_user: OptionalUser,
) -> ParticipationSummary:
    return await service.get_summary(project_id, current_user.id if current_user else None)


@router.post(
    "/{project_id}/progress",
    response_model=ProgressUpdate,
    status_code=status.HTTP_201_CREATED,
)
async def add_progress_update(
    project_id: str,
    payload: ProgressUpdateCreateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProgressUpdate:
    return await service.add_progress_update(
        project_id, current_user.id, payload.title, payload.content
    )


@router.post(
    "/{project_id}/comments",
    response_model=Comment,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    project_id: str,
    payload: CommentCreateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> Comment:
    return await service.add_comment(project_id, current_user.id, payload.content)


@router.post("/{project_id}/like", response_model=PreferenceToggleResult)
async def toggle_like(
    project_id: str,
    service: PreferenceServiceDep,
    current_user: CurrentUser,
) -> PreferenceToggleResult:
    return await service.toggle_like(current_user.id, project_id)


@router.post("/{project_id}/hide", response_model=PreferenceToggleResult)
async def toggle_hide(
    project_id: str,
    service: PreferenceServiceDep,
    current_user: CurrentUser,
) -> PreferenceToggleResult:
    return await service.toggle_hide(current_user.id, project_id)


@router.get("/{project_id}/skills", response_model=list[ProjectRequiredSkill])
async def list_project_skills(
    project_id: str, service: ProfileServiceDep
) -> list[ProjectRequiredSkill]:
    return await service.list_project_skills(project_id)


@router.put("/{project_id}/skills", response_model=ProjectRequiredSkill)
async def set_project_skill(
    project_id: str,
    payload: ProjectSkillRequest,
    service: ProfileServiceDep,
    current_user: CurrentUser,
) -> ProjectRequiredSkill:
    return await service.set_project_skill(
        project_id, current_user.id, payload.skill, payload.priority
    )


@router.delete("/{project_id}/skills/{skill}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_project_skill(
    project_id: str,
    skill: str,
    service: ProfileServiceDep,
    current_user: CurrentUser,
) -> Response:
    await service.remove_project_skill(project_id, current_user.id, skill)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
