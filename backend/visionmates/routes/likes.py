from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query

from visionmates.dependencies import CurrentUser, PreferenceServiceDep
from visionmates.models.preference import LikedProjectsPage

router = APIRouter(prefix="/likes", tags=["likes"])


@router.get("", response_model=LikedProjectsPage)
async def list_liked_projects(
    service: PreferenceServiceDep,
    current_user: CurrentUser,
    limit: int | None = None,
    last_created_at: Annotated[datetime | None, Query(alias="lastCreatedAt")] = None,
) -> LikedProjectsPage:
    return await service.list_liked_projects(current_user.id, limit, last_created_at)
