from __future__ import annotations

import logging

from visionmates.exceptions import ConflictError, InvalidArgumentError, ProjectNotFoundError
from visionmates.models.project import Participation, ParticipationSummary, ParticipationType
from visionmates.repositories.participation_repository import ParticipationRepository
from visionmates.repositories.project_repository import ProjectRepository

logger = logging.getLogger(__name__)


def parse_participation_type(value: str | ParticipationType) -> ParticipationType:
    try:
        return ParticipationType(value)
    except ValueError as exc:
        raise InvalidArgumentError("Invalid participation type") from exc


class ParticipationService:
    """Watch / raise hand / commit signals, at most one active type per user and project."""

    def __init__(
        self,
        repository: ParticipationRepository,
        project_repository: ProjectRepository,
    ):
        self.repository = repository
        self.project_repository = project_repository

    async def _ensure_project(self, project_id: str) -> None:
        if not await self.project_repository.project_exists(project_id):
            raise ProjectNotFoundError(project_id)

    async def set_participation(
        self, project_id: str, user_id: str, type_: str | ParticipationType
    ) -> Participation:
        """Replace whatever the user held on the project with ``type_``."""
        participation_type = parse_participation_type(type_)
        await self._ensure_project(project_id)
        participation = await self.repository.replace_for_user(
            project_id, user_id, participation_type
        )
        logger.info(
            "participation set",
            extra={"project_id": project_id, "user_id": user_id, "type": participation_type.value},
        )
        return participation

    async def remove_participation(
        self, project_id: str, user_id: str, type_: str | ParticipationType
    ) -> None:
        participation_type = parse_participation_type(type_)
        removed = await self.repository.remove(project_id, user_id, participation_type)
        if removed:
            logger.info(
                "participation removed",
                extra={
                    "project_id": project_id,
                    "user_id": user_id,
                    "type": participation_type.value,
                },
            )

    async def add_participation_strict(
        self, project_id: str, user_id: str, type_: str | ParticipationType
    ) -> Participation:
        """Insert a single type without clearing the others; duplicates are a conflict."""
        participation_type = parse_participation_type(type_)
        await self._ensure_project(project_id)
        existing = await self.repository.get_participation(project_id, user_id, participation_type)
        if existing is not None:
            raise ConflictError("Participation already exists")
        participation = await self.repository.add(project_id, user_id, participation_type)
        if participation is None:
            # Lost the race against an identical insert
            raise ConflictError("Participation already exists")
        return participation

    async def get_participation_counts(self, project_id: str) -> dict[str, int]:
        counts = await self.repository.count_by_type(project_id)
        return {type_.value: count for type_, count in counts.items()}

    async def get_user_participation(
        self, project_id: str, user_id: str
    ) -> ParticipationType | None:
        participations = await self.repository.list_for_user(project_id, user_id)
        return participations[0].type if participations else None

    async def get_summary(self, project_id: str, caller_id: str | None = None) -> ParticipationSummary:
        await self._ensure_project(project_id)
        user_participation = None
        if caller_id is not None:
            user_participation = await self.get_user_participation(project_id, caller_id)
        return ParticipationSummary(
            counts=await self.get_participation_counts(project_id),
            user_participation=user_participation,
        )
