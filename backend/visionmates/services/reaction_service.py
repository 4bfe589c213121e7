from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from visionmates.exceptions import InvalidArgumentError, NotFoundError
from visionmates.models.reaction import (
    ReactionList,
    ReactionStatus,
    ReactionTargetType,
    ReactionToggleResult,
    ToggleAction,
)
from visionmates.repositories.conversation_repository import ConversationRepository
from visionmates.repositories.project_repository import ProjectRepository
from visionmates.repositories.reaction_repository import ReactionRepository

logger = logging.getLogger(__name__)

TargetCheck = Callable[[str], Awaitable[bool]]


def parse_target_type(value: str | ReactionTargetType) -> ReactionTargetType:
    try:
        return ReactionTargetType(value)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in ReactionTargetType)
        raise InvalidArgumentError(f"Target type must be one of: {allowed}") from exc


class ReactionService:
    """Clap toggling over projects, progress updates, comments and messages."""

    def __init__(
        self,
        repository: ReactionRepository,
        project_repository: ProjectRepository,
        conversation_repository: ConversationRepository,
    ):
        self.repository = repository
        self._target_checks: dict[ReactionTargetType, TargetCheck] = {
            # Inactive projects can still be clapped
            ReactionTargetType.PROJECT: project_repository.project_exists,
            ReactionTargetType.PROGRESS_UPDATE: project_repository.progress_update_exists,
            ReactionTargetType.COMMENT: project_repository.comment_exists,
            ReactionTargetType.MESSAGE: conversation_repository.message_exists,
        }
        missing = set(ReactionTargetType) - self._target_checks.keys()
        if missing:
            raise RuntimeError(f"No existence check for target types: {sorted(missing)}")

    async def target_exists(self, target_id: str, target_type: ReactionTargetType) -> bool:
        return await self._target_checks[target_type](target_id)

    async def toggle_reaction(
        self,
        target_id: str,
        target_type: str | ReactionTargetType,
        user_id: str,
    ) -> ReactionToggleResult:
        """Remove the caller's clap if present, otherwise add it.

        The delete runs first and its row count decides the branch, so two
        racing toggles never leave a duplicate behind: the insert is a no-op
        when the clap already exists.
        """
        kind = parse_target_type(target_type)
        if not await self.target_exists(target_id, kind):
            raise NotFoundError(f"{kind.label.capitalize()} not found")

        if await self.repository.remove(target_id, kind, user_id):
            action = ToggleAction.REMOVED
        else:
            await self.repository.add(target_id, kind, user_id)
            action = ToggleAction.ADDED

        count = await self.repository.count(target_id, kind)
        logger.info(
            "reaction toggled",
            extra={
                "target_id": target_id,
                "target_type": kind.value,
                "user_id": user_id,
                "action": action.value,
            },
        )
        return ReactionToggleResult(
            action=action,
            count=count,
            user_reacted=action is ToggleAction.ADDED,
        )

    async def get_reaction_status(
        self,
        target_id: str,
        target_type: str | ReactionTargetType,
        caller_id: str | None = None,
    ) -> ReactionStatus:
        kind = parse_target_type(target_type)
        count = await self.repository.count(target_id, kind)
        user_reacted = False
        if caller_id is not None:
            user_reacted = await self.repository.has_reacted(target_id, kind, caller_id)
        return ReactionStatus(count=count, user_reacted=user_reacted)

    async def list_reactions(
        self, target_id: str, target_type: str | ReactionTargetType
    ) -> ReactionList:
        kind = parse_target_type(target_type)
        reactions = await self.repository.list_reactions(target_id, kind)
        return ReactionList(reactions=reactions, count=len(reactions))
