from __future__ import annotations

from datetime import UTC, datetime

from visionmates.exceptions import InvalidArgumentError
from visionmates.models.project import DiscoverCursor, DiscoverPage
from visionmates.repositories.project_repository import ProjectRepository


def normalize_timestamp(value: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def build_cursor(last_created_at: datetime | None, last_id: str | None) -> DiscoverCursor | None:
    """Both halves or neither: a half cursor cannot express a position."""
    if last_created_at is None and not last_id:
        return None
    if last_created_at is None or not last_id:
        raise InvalidArgumentError("lastCreatedAt and lastId must be supplied together")
    return DiscoverCursor(last_created_at=last_created_at, last_id=last_id)


class DiscoveryService:
    """Keyset-paginated feed of active projects, newest first."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        default_limit: int = 12,
        max_limit: int = 100,
    ):
        self.project_repository = project_repository
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def get_page(
        self,
        limit: int | None = None,
        cursor: DiscoverCursor | None = None,
    ) -> DiscoverPage:
        if limit is None:
            limit = self.default_limit
        if limit < 1 or limit > self.max_limit:
            raise InvalidArgumentError(f"limit must be between 1 and {self.max_limit}")

        if cursor is not None:
            cursor = DiscoverCursor(
                last_created_at=normalize_timestamp(cursor.last_created_at),
                last_id=cursor.last_id,
            )

        projects = await self.project_repository.list_discover_page(limit, cursor)
        next_cursor = None
        if projects:
            last = projects[-1]
            next_cursor = DiscoverCursor(last_created_at=last.created_at, last_id=last.id)

        # A short page means the feed is exhausted; a full one may be the last.
        return DiscoverPage(
            projects=projects,
            has_more=len(projects) == limit,
            next_cursor=next_cursor,
        )
