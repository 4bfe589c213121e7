from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from visionmates.dependencies import CurrentUser, OptionalUser, ReactionServiceDep
from visionmates.models.api import ReactionRequest
from visionmates.models.reaction import ReactionList, ReactionStatus, ReactionToggleResult

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("", response_model=ReactionToggleResult)
async def toggle_reaction(
    payload: ReactionRequest,
    service: ReactionServiceDep,
    current_user: CurrentUser,
) -> ReactionToggleResult:
    return await service.toggle_reaction(payload.target_id, payload.target_type, current_user.id)


@router.get("", response_model=ReactionList)
async def list_reactions(
    service: ReactionServiceDep,
    target_id: Annotated[str, Query(alias="targetId", min_length=1)],
    target_type: Annotated[str, Query(alias="targetType")],
) -> ReactionList:
    return await service.list_reactions(target_id, target_type)


@router.get("/{target_type}/{target_id}", response_model=ReactionStatus)
async def get_reaction_status(
    target_type: str,
    target_id: str,
    service: ReactionServiceDep,
    current_user: OptionalUser,
) -> ReactionStatus:
    return await service.get_reaction_status(
        target_id, target_type, current_user.id if current_user else None
    )
